"""Cache store implementations for the provider's public key.

This module provides implementations of the CacheStore protocol. The key
provider keeps a single entry in the store, under a constant slot name, so
that only the first local verification pays for a network request.

Implementations:
- InMemoryCache: in-process dict guarded by a lock (one fetch per process)
- RedisCache: shared through Redis (one fetch per deployment)

Both implementations make creation atomic: when several callers race to fill
an empty slot, the first write wins and every caller gets the stored value.
Entries never expire.

Security Note:
    Public keys are not secret, but whoever can write to the store decides
    which tokens verify. Do not point RedisCache at a Redis instance that
    untrusted parties can write to.
"""

from __future__ import annotations

import json
import threading
from typing import TYPE_CHECKING, Any

from .errors import CacheCorrupted

if TYPE_CHECKING:
    from .protocols import PublicKey


class InMemoryCache:
    """In-process cache for the provider's public key.

    Example:
        ```python
        cache = InMemoryCache()

        stored = cache.setdefault("public_key", {"kty": "EC", ...})
        assert cache.get("public_key") is stored
        ```

    Attributes:
        _store: Internal dict mapping slot name -> key mapping.
        _lock: Serializes create-if-absent.
    """

    def __init__(self) -> None:
        """Initialize an empty in-memory cache."""
        self._store: dict[str, PublicKey] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> PublicKey | None:
        return self._store.get(key)

    def setdefault(self, key: str, value: PublicKey) -> PublicKey:
        with self._lock:
            return self._store.setdefault(key, value)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()


class RedisCache:
    """Redis-backed cache for the provider's public key.

    The key mapping is stored as JSON under ``"{namespace}:{key}"`` and
    written with ``SET ... NX`` so concurrent processes never overwrite each
    other.

    Dependencies:
        Requires redis package: pip install purple-auth-client[redis]

    Example:
        ```python
        import redis

        client = redis.Redis(host="localhost", port=6379)
        cache = RedisCache(redis_client=client)
        ```

    Attributes:
        _client: Redis client instance (from redis package).
        _namespace: Prefix applied to every key.
    """

    def __init__(self, redis_client: Any, namespace: str = "purple_auth") -> None:
        """Initialize Redis cache.

        Args:
            redis_client: Redis client instance. Must support ``get()``,
                ``set(..., nx=True)``, ``scan_iter()`` and ``delete()``.
            namespace: Key prefix, so one Redis database can serve several apps.

        Note:
            The type is Any to avoid hard dependency on redis package types.
            Users can pass any Redis-compatible client (redis-py, fakeredis, etc.).
        """
        self._client = redis_client
        self._namespace = namespace

    def _name(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get(self, key: str) -> PublicKey | None:
        """Return the stored key mapping, or None if absent.

        Raises:
            CacheCorrupted: If the stored data is not a JSON object.
        """
        data = self._client.get(self._name(key))
        if data is None:
            return None

        try:
            obj = json.loads(data)
        except (json.JSONDecodeError, ValueError) as e:
            raise CacheCorrupted(f"Cached value for '{key}' is not valid JSON") from e

        if not isinstance(obj, dict):
            raise CacheCorrupted(f"Cached value for '{key}' is not a key mapping")
        return obj

    def setdefault(self, key: str, value: PublicKey) -> PublicKey:
        """Store ``value`` unless present and return the stored value.

        Raises:
            CacheCorrupted: If the entry exists but cannot be decoded, or
                disappears between the write attempt and the read-back.
        """
        name = self._name(key)
        if self._client.set(name, json.dumps(dict(value)), nx=True):
            return value

        existing = self.get(key)
        if existing is None:
            raise CacheCorrupted(f"Cached value for '{key}' vanished during creation")
        return existing

    def clear(self) -> None:
        """Delete every key under this store's namespace."""
        names = list(self._client.scan_iter(match=f"{self._namespace}:*"))
        if names:
            self._client.delete(*names)
