"""Protocol definitions for the Purple Auth client.

This module defines structural interfaces using Protocol (PEP 544) for:
- Public key caching
- Public key resolution
- Token verification (local or remote)
- Token extraction from Flask requests

Using protocols allows for duck-typing and easier testing/mocking without
requiring explicit inheritance.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .errors import KeyFailure, RemoteVerifyFailure, VerifyFailure
    from .result import Result

# ============================================================================
# Type Aliases
# ============================================================================

type Claims = Mapping[str, Any]
"""Represents the decoded token payload as an immutable mapping."""

type PublicKey = Mapping[str, Any]
"""JSON Web Key mapping (``kty``, ``crv``, ``x``, ``y``) as served by the provider."""

type ViewFunc = Callable[..., Any]
"""Type alias for Flask view functions."""


# ============================================================================
# Core Protocols
# ============================================================================


class CacheStore(Protocol):
    """Protocol for storing the provider's public key.

    The store is shared by every caller of a client (and, for distributed
    stores, by every process). Writers may race on an empty slot, so the only
    write operation is an atomic create-if-absent.
    """

    def get(self, key: str) -> PublicKey | None:
        """Return the value stored under ``key``, or None if absent."""
        ...

    def setdefault(self, key: str, value: PublicKey) -> PublicKey:
        """Store ``value`` under ``key`` unless a value is already present.

        Returns:
            The value held by the store after the call: ``value`` if this call
            created the entry, otherwise the existing one.
        """
        ...

    def clear(self) -> None:
        """Remove every entry. Intended for tests and manual resets."""
        ...


class KeyProvider(Protocol):
    """Protocol for resolving the provider's verification key."""

    def get_public_key(self) -> Result[PublicKey, KeyFailure]:
        """Return the public key, fetching it on first use.

        Note:
            Implementations should cache the key so that steady-state
            verification performs no network requests.
        """
        ...


class TokenVerifier(Protocol):
    """Protocol for identity token verification.

    Implemented by both the local (cryptographic) and the remote
    (provider-delegated) verifier.
    """

    def verify(self, token: str) -> Result[Claims, VerifyFailure | RemoteVerifyFailure]:
        """Verify an identity token and return its claims."""
        ...


class Extractor(Protocol):
    """Protocol for extracting identity tokens from Flask requests."""

    def extract(self) -> str:
        """Extract the raw token from the current request.

        Raises:
            MissingToken: Token not found or improperly formatted.
        """
        ...
