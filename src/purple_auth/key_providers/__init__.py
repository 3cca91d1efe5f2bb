"""
Key provider implementations for resolving the token verification key.

This package contains implementations of the KeyProvider protocol.
"""

from .purple_auth import PUBLIC_KEY_SLOT, PurpleAuthKeyProvider

__all__ = ["PUBLIC_KEY_SLOT", "PurpleAuthKeyProvider"]
