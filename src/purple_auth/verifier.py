"""Local identity token verification using PyJWT.

This module verifies Purple Auth identity tokens without calling the
provider for each token:
- Resolves the ES256 public key via an injected KeyProvider (cached)
- Verifies the signature and token structure with PyJWT
- Checks issuer and required claims, then expiry and not-before
- Maps every failure to exactly one ErrorKind

Check order is part of the contract: key resolution, then signature and
structure, then claim shape and issuer, then ``exp``, then ``nbf``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Final

import jwt

from .codec import KEY_ALGORITHM
from .errors import CacheCorrupted, ErrorKind, VerifyFailure
from .result import Err, Ok, Result

if TYPE_CHECKING:
    from .protocols import Claims, KeyProvider, PublicKey

logger = logging.getLogger(__name__)

_REQUIRED_CLAIMS: Final[tuple[str, ...]] = ("exp", "sub", "nbf", "iss")

# Temporal and issuer checks are done here, in a fixed order, instead of by
# PyJWT. Signature verification stays on.
_DECODE_OPTIONS: Final[dict[str, Any]] = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_iss": False,
    "verify_aud": False,
}


def _is_timestamp(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


class LocalTokenVerifier:
    """Verifies identity tokens against the provider's cached public key.

    The first call fetches the key (one network request); every later call
    is pure computation as long as the key stays cached.

    Thread Safety:
        Thread-safe assuming the KeyProvider's cache store is thread-safe.

    Example:
        ```python
        verifier = LocalTokenVerifier(key_provider, issuer=identity.issuer)

        match verifier.verify(raw_token):
            case Ok(claims):
                user = claims["sub"]
            case Err(ErrorKind.EXPIRED_TOKEN):
                ...  # client should refresh
            case Err(reason):
                ...  # reject
        ```

    Attributes:
        _keys: KeyProvider responsible for resolving the public key.
        _issuer: Exact expected ``iss`` claim, ``{host}/app/{app_id}``.
        _clock: Returns the current Unix time.
    """

    def __init__(
        self,
        key_provider: KeyProvider,
        issuer: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._keys = key_provider
        self._issuer = issuer
        self._clock = clock

    def verify(self, token: str) -> Result[Claims, VerifyFailure]:
        """Verify an identity token and return its claims.

        Returns:
            ``Ok(claims)`` for a valid token, otherwise ``Err`` with the key
            provider's failure or one of ``invalid_token``, ``signature_error``,
            ``expired_token``, ``token_not_yet_valid``.

        Raises:
            CacheCorrupted: If the cached key cannot be loaded as an ES256 key.
        """
        resolved = self._keys.get_public_key()
        if isinstance(resolved, Err):
            return resolved

        key = self._load_key(resolved.value)

        try:
            claims = jwt.decode(
                token,
                key.key,
                algorithms=[KEY_ALGORITHM],
                options=_DECODE_OPTIONS,
            )
        except jwt.InvalidSignatureError:
            return self._reject(ErrorKind.SIGNATURE_ERROR)
        except jwt.InvalidTokenError:
            # Malformed structure, disallowed algorithm, non-string sub, etc.
            return self._reject(ErrorKind.INVALID_TOKEN)

        if not self._has_valid_shape(claims):
            return self._reject(ErrorKind.INVALID_TOKEN)

        now = int(self._clock())
        if claims["exp"] < now:
            return self._reject(ErrorKind.EXPIRED_TOKEN)
        if claims["nbf"] > now:
            return self._reject(ErrorKind.TOKEN_NOT_YET_VALID)

        return Ok(claims)

    def _has_valid_shape(self, claims: dict[str, Any]) -> bool:
        if any(name not in claims for name in _REQUIRED_CLAIMS):
            return False
        if claims["iss"] != self._issuer:
            return False
        return _is_timestamp(claims["exp"]) and _is_timestamp(claims["nbf"])

    @staticmethod
    def _load_key(public_key: PublicKey) -> jwt.PyJWK:
        try:
            return jwt.PyJWK.from_dict(dict(public_key), algorithm=KEY_ALGORITHM)
        except (jwt.PyJWKError, jwt.InvalidKeyError, ValueError) as e:
            raise CacheCorrupted("Cached public key is not a usable ES256 key") from e

    @staticmethod
    def _reject(kind: ErrorKind) -> Err[Any]:
        logger.debug("Token rejected: %s", kind)
        return Err(kind)
