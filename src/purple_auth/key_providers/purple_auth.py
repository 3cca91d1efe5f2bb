"""
Purple Auth public key provider.

Resolves the application's ES256 verification key from the provider and
keeps it in a CacheStore for the lifetime of the store.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from ..cache_stores import InMemoryCache
from ..codec import MalformedResponse, decode_public_key
from ..errors import ErrorKind, KeyFailure
from ..result import Err, Ok, Result
from ..status import error_for_status

if TYPE_CHECKING:
    from ..gateway import HttpGateway
    from ..protocols import CacheStore, PublicKey

logger = logging.getLogger(__name__)

PUBLIC_KEY_SLOT: Final[str] = "public_key"
"""The single cache slot the provider reads and writes."""


class PurpleAuthKeyProvider:
    """
    Resolves the public key used to verify identity tokens locally.

    Resolution Strategy
    -------------------
    1) Cache lookup (fast path)
        - If the slot holds a key, return it. No network request is made.

    2) Fetch
        - GET ``/app/public_key/{app_id}`` with the API key as bearer token.
        - Non-200 statuses are mapped to error kinds; transport failures are
          passed through; an undecodable body is ``invalid_response``.

    3) Store
        - The fetched key is written with ``setdefault``. If another caller
          filled the slot first, its (identical) key is returned instead.
        - Nothing is written on failure, so the next call fetches again.

    The slot is never expired or refreshed. A key rotated by the provider is
    only picked up once the cache is cleared (in practice, on restart).

    Parameters
    ----------
    gateway : HttpGateway
        Gateway configured for the application.

    app_id : str
        Application whose key is fetched.

    cache : CacheStore
        Store holding the key. Defaults to a fresh InMemoryCache, i.e. one
        fetch per provider instance.
    """

    def __init__(
        self,
        gateway: HttpGateway,
        app_id: str,
        cache: CacheStore | None = None,
    ) -> None:
        self._gateway = gateway
        self._path = f"/app/public_key/{app_id}"
        self._cache = cache if cache is not None else InMemoryCache()

    def get_public_key(self) -> Result[PublicKey, KeyFailure]:
        cached = self._cache.get(PUBLIC_KEY_SLOT)
        if cached is not None:
            logger.debug("Public key served from cache")
            return Ok(cached)

        fetched = self._fetch()
        if isinstance(fetched, Err):
            logger.warning("Public key fetch failed: %s", fetched.error)
            return fetched

        logger.info("Fetched provider public key")
        return Ok(self._cache.setdefault(PUBLIC_KEY_SLOT, fetched.value))

    def _fetch(self) -> Result[PublicKey, KeyFailure]:
        match self._gateway.get(self._path, authorize=True):
            case Err(failure):
                return Err(failure)
            case Ok(response) if response.status_code != 200:
                return Err(error_for_status(response.status_code))
            case Ok(response):
                try:
                    return Ok(decode_public_key(response.body))
                except MalformedResponse:
                    return Err(ErrorKind.INVALID_RESPONSE)
