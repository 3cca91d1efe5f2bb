"""Error taxonomy for Purple Auth client operations.

Every public operation reports expected failures as data: an ``Err`` wrapping
either an ``ErrorKind`` member or a ``TransportFailure``. The per-operation
aliases at the bottom of this module enumerate exactly which kinds each
operation can produce.

The exception hierarchy (``AuthError`` and subclasses) is only used by the
Flask integration, where a failure has to become an HTTP response.

Security Note:
    Error descriptions are intentionally generic. The provider's API key and
    raw token values are never included in any error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal


class ErrorKind(StrEnum):
    """Error kinds produced by client operations."""

    AUTHENTICATION_FAILURE = "authentication_failure"
    NOT_FOUND = "not_found"
    VALIDATION_ERROR = "validation_error"
    SERVER_ERROR = "server_error"
    UNKNOWN_ERROR = "unknown_error"
    INVALID_RESPONSE = "invalid_response"
    INVALID_TOKEN = "invalid_token"
    SIGNATURE_ERROR = "signature_error"
    EXPIRED_TOKEN = "expired_token"
    TOKEN_NOT_YET_VALID = "token_not_yet_valid"


@dataclass(frozen=True, slots=True)
class TransportFailure:
    """The request never produced a usable HTTP response.

    Covers connection, timeout and DNS failures as well as responses httpx
    could not read (bad content encoding, redirect loops).

    Attributes:
        reason: Name of the httpx error (e.g. ``"ConnectError"``,
            ``"ReadTimeout"``, ``"DecodingError"``).
        detail: Transport-supplied message, for logs only.
    """

    reason: str
    detail: str = ""


class CacheCorrupted(RuntimeError):
    """A cache store holds a value that cannot be used as a public key.

    This is not an expected failure path and is never turned into an ``Err``.
    """


# ============================================================================
# Per-operation failure sets
# ============================================================================

type StatusKind = Literal[
    ErrorKind.AUTHENTICATION_FAILURE,
    ErrorKind.NOT_FOUND,
    ErrorKind.VALIDATION_ERROR,
    ErrorKind.SERVER_ERROR,
    ErrorKind.UNKNOWN_ERROR,
]
"""Kinds the status mapper can return."""

type HttpFailure = StatusKind | TransportFailure

type StartFailure = HttpFailure

type SubmitFailure = HttpFailure | Literal[ErrorKind.INVALID_RESPONSE]

type RemoteVerifyFailure = HttpFailure | Literal[ErrorKind.INVALID_TOKEN]

type RefreshFailure = HttpFailure

type KeyFailure = HttpFailure | Literal[ErrorKind.INVALID_RESPONSE]

type VerifyFailure = (
    KeyFailure
    | Literal[
        ErrorKind.INVALID_TOKEN,
        ErrorKind.SIGNATURE_ERROR,
        ErrorKind.EXPIRED_TOKEN,
        ErrorKind.TOKEN_NOT_YET_VALID,
    ]
)


# ============================================================================
# Flask integration exceptions
# ============================================================================


class AuthError(Exception):
    """Base exception for request authentication failures.

    Attributes:
        error_code: HTTP status the Flask integration aborts with.
        description: Client-facing message.
    """

    error_code: int = 401
    description: str = "Authentication failed"

    def __init__(self, description: str | None = None) -> None:
        if description is not None:
            self.description = description
        super().__init__(self.description)


class MissingToken(AuthError):  # noqa: N818
    """No token was found in the request (header or cookie)."""

    description = "Missing token"


class InvalidToken(AuthError):  # noqa: N818
    """A token was present but was rejected by the verifier.

    Covers bad signatures, wrong issuer, expired and not-yet-valid tokens.
    All of them return 401; the precise ``ErrorKind`` is only logged.
    """

    description = "Invalid token"


class ProviderUnavailable(AuthError):  # noqa: N818
    """The provider could not be reached or answered unexpectedly."""

    error_code = 503
    description = "Authentication provider unavailable"
