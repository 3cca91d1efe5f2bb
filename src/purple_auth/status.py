"""Mapping of provider HTTP status codes to error kinds."""

from __future__ import annotations

from typing import Final

from .errors import ErrorKind, StatusKind

_STATUS_KINDS: Final[dict[int, StatusKind]] = {
    401: ErrorKind.AUTHENTICATION_FAILURE,
    403: ErrorKind.AUTHENTICATION_FAILURE,
    404: ErrorKind.NOT_FOUND,
    422: ErrorKind.VALIDATION_ERROR,
    500: ErrorKind.SERVER_ERROR,
}


def error_for_status(status_code: int) -> StatusKind:
    """Return the error kind for a non-success status.

    Unmapped codes (including other 4xx/5xx and unexpected 2xx/3xx) map to
    ``ErrorKind.UNKNOWN_ERROR``.
    """
    return _STATUS_KINDS.get(status_code, ErrorKind.UNKNOWN_ERROR)
