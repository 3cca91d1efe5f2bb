"""
Client for the Purple Auth passwordless authentication service.

Purple Auth emails users a one-time code or a magic link and issues signed
identity tokens. This package lets a backend service drive those flows and
verify the resulting tokens, either remotely (one request per token) or
locally against the provider's cached ES256 public key.

High-level flow
---------------
1. `start_authentication(email, Flow.OTP)` asks the provider to email a code.
2. `submit_code(email, code)` exchanges the code for a `TokenPair`.
3. `verify(id_token)` checks signature, issuer, expiry and not-before locally.
   The public key is fetched once and kept in a `CacheStore`.
4. `refresh(refresh_token)` obtains a new identity token.

Every operation returns `Ok(value)` or `Err(kind)`; expected failures are
never raised.

Example usage
-------------

.. code-block:: python

    from purple_auth import Err, ErrorKind, Flow, Ok, ProviderIdentity, PurpleAuthClient

    client = PurpleAuthClient(
        ProviderIdentity(
            host="https://purpleauth.com",
            app_id="your-app-id",
            api_key="your-api-key",
        )
    )

    client.start_authentication("user@example.com", Flow.OTP)

    match client.submit_code("user@example.com", "773642"):
        case Ok(tokens):
            claims = client.verify(tokens.id_token)
        case Err(ErrorKind.AUTHENTICATION_FAILURE):
            ...  # wrong code
"""

# Cache stores
from .cache_stores import InMemoryCache, RedisCache

# Client
from .client import PurpleAuthClient

# Codec
from .codec import TokenPair

# Config
from .config import ProviderIdentity

# Errors
from .errors import (
    AuthError,
    CacheCorrupted,
    ErrorKind,
    InvalidToken,
    MissingToken,
    ProviderUnavailable,
    TransportFailure,
)

# Extractors
from .extractors import IdTokenExtractor

# Flask extension
from .flask_extension import AuthExtension, get_verified_id_claims

# Flows
from .flows import AuthenticationFlows, Flow

# Gateway
from .gateway import HttpGateway, RawResponse

# Key providers
from .key_providers import PurpleAuthKeyProvider

# Protocols
from .protocols import (
    CacheStore,
    Claims,
    Extractor,
    KeyProvider,
    PublicKey,
    TokenVerifier,
    ViewFunc,
)

# Remote verifier
from .remote import RemoteTokenVerifier

# Result
from .result import Err, Ok, Result

# Status mapping
from .status import error_for_status

# Local verifier
from .verifier import LocalTokenVerifier

__all__ = [
    # Client
    "PurpleAuthClient",
    "ProviderIdentity",
    # Result
    "Ok",
    "Err",
    "Result",
    # Errors
    "ErrorKind",
    "TransportFailure",
    "CacheCorrupted",
    "AuthError",
    "InvalidToken",
    "MissingToken",
    "ProviderUnavailable",
    "error_for_status",
    # Protocols
    "CacheStore",
    "Claims",
    "Extractor",
    "KeyProvider",
    "PublicKey",
    "TokenVerifier",
    "ViewFunc",
    # Components
    "AuthenticationFlows",
    "Flow",
    "TokenPair",
    "HttpGateway",
    "RawResponse",
    "PurpleAuthKeyProvider",
    "LocalTokenVerifier",
    "RemoteTokenVerifier",
    # Cache stores
    "InMemoryCache",
    "RedisCache",
    # Extractors
    "IdTokenExtractor",
    # Flask extension
    "AuthExtension",
    "get_verified_id_claims",
]
