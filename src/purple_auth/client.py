"""Purple Auth client facade.

``PurpleAuthClient`` wires one ``ProviderIdentity`` to a gateway, a key cache
and the flow and verifier components, and exposes every operation as a
method returning a ``Result``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from .config import DEFAULT_ENV_PREFIX, ProviderIdentity
from .flows import AuthenticationFlows, Flow
from .gateway import HttpGateway
from .key_providers import PurpleAuthKeyProvider
from .remote import RemoteTokenVerifier
from .verifier import LocalTokenVerifier

if TYPE_CHECKING:
    from types import TracebackType

    import httpx

    from .codec import TokenPair
    from .errors import (
        KeyFailure,
        RefreshFailure,
        RemoteVerifyFailure,
        StartFailure,
        SubmitFailure,
        VerifyFailure,
    )
    from .protocols import CacheStore, Claims, PublicKey
    from .result import Result


class PurpleAuthClient:
    """Client for one Purple Auth application.

    Args:
        identity: Provider host, app id and API key.
        http_client: Optional ``httpx.Client`` to send requests with.
        cache: Store for the public key. Defaults to an in-memory cache owned
            by this client; pass a shared store (e.g. ``RedisCache``) to fetch
            the key once per deployment.

    Example:
        ```python
        with PurpleAuthClient(ProviderIdentity.from_env()) as auth:
            auth.start_authentication("user@example.com", Flow.OTP)
            ...
            match auth.submit_code("user@example.com", code):
                case Ok(tokens):
                    claims = auth.verify(tokens.id_token)
        ```
    """

    def __init__(
        self,
        identity: ProviderIdentity,
        *,
        http_client: httpx.Client | None = None,
        cache: CacheStore | None = None,
    ) -> None:
        self._identity = identity
        self._gateway = HttpGateway(identity, http_client)
        self._flows = AuthenticationFlows(self._gateway, identity.app_id)
        self._keys = PurpleAuthKeyProvider(self._gateway, identity.app_id, cache)
        self._remote = RemoteTokenVerifier(self._gateway, identity.app_id)
        self._local = LocalTokenVerifier(self._keys, identity.issuer)

    @classmethod
    def from_env(
        cls,
        prefix: str = DEFAULT_ENV_PREFIX,
        *,
        http_client: httpx.Client | None = None,
        cache: CacheStore | None = None,
    ) -> Self:
        """Build a client from ``{prefix}HOST``/``APP_ID``/``API_KEY``."""
        return cls(ProviderIdentity.from_env(prefix), http_client=http_client, cache=cache)

    @property
    def identity(self) -> ProviderIdentity:
        return self._identity

    @property
    def local_verifier(self) -> LocalTokenVerifier:
        return self._local

    @property
    def remote_verifier(self) -> RemoteTokenVerifier:
        return self._remote

    def start_authentication(self, email: str, flow: Flow) -> Result[None, StartFailure]:
        """Ask the provider to email a one-time code or magic link.

        Raises:
            ValueError: If ``email`` is empty or ``flow`` is not ``"otp"`` or
                ``"magic"``. These are caller errors, not provider outcomes.
        """
        return self._flows.start_authentication(email, flow)

    def submit_code(self, email: str, code: str) -> Result[TokenPair, SubmitFailure]:
        return self._flows.submit_code(email, code)

    def refresh(self, refresh_token: str) -> Result[str, RefreshFailure]:
        return self._flows.refresh(refresh_token)

    def verify_token_remote(self, id_token: str) -> Result[Claims, RemoteVerifyFailure]:
        return self._remote.verify(id_token)

    def get_public_key(self) -> Result[PublicKey, KeyFailure]:
        return self._keys.get_public_key()

    def verify(self, id_token: str) -> Result[Claims, VerifyFailure]:
        """Verify an identity token locally against the cached public key."""
        return self._local.verify(id_token)

    def close(self) -> None:
        self._gateway.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
