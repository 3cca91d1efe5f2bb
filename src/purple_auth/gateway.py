"""HTTP access to the Purple Auth API.

``HttpGateway`` performs exactly one request per call and hands back the raw
status and body. It knows the provider's base URL and API key but nothing
about individual endpoints' payloads; that is the codec's job. Timeouts,
connection pooling and TLS are left to the underlying ``httpx.Client``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Self

import httpx

from .errors import TransportFailure
from .result import Err, Ok, Result

if TYPE_CHECKING:
    from types import TracebackType

    from .config import ProviderIdentity

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Status code and undecoded body of a provider response."""

    status_code: int
    body: bytes


class HttpGateway:
    """Issues requests against the provider for one application.

    Args:
        identity: Provider host, app id and API key.
        client: Optional preconfigured ``httpx.Client`` (custom timeouts,
            proxies, or a mock transport in tests). If omitted, the gateway
            creates and owns one.

    Thread Safety:
        Safe to share between threads; ``httpx.Client`` is thread-safe.
    """

    def __init__(
        self,
        identity: ProviderIdentity,
        client: httpx.Client | None = None,
    ) -> None:
        self._identity = identity
        self._owns_client = client is None
        self._client = client or httpx.Client()

    def post(
        self, path: str, content: bytes, *, authorize: bool = False
    ) -> Result[RawResponse, TransportFailure]:
        """POST a JSON body to ``{host}{path}``."""
        headers = {"Content-Type": "application/json"}
        return self._send("POST", path, headers, content, authorize)

    def get(
        self, path: str, *, authorize: bool = False
    ) -> Result[RawResponse, TransportFailure]:
        """GET ``{host}{path}``."""
        return self._send("GET", path, {}, None, authorize)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _send(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        content: bytes | None,
        authorize: bool,
    ) -> Result[RawResponse, TransportFailure]:
        if authorize:
            headers["Authorization"] = f"Bearer {self._identity.api_key}"

        try:
            response = self._client.request(
                method,
                f"{self._identity.host}{path}",
                headers=headers,
                content=content,
            )
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, type(e).__name__)
            return Err(TransportFailure(reason=type(e).__name__, detail=str(e)))

        logger.debug("%s %s -> %d", method, path, response.status_code)
        return Ok(RawResponse(status_code=response.status_code, body=response.content))
