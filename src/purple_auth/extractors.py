"""Locating the Purple Auth identity token on a Flask request.

Purple Auth hands the application an ``idToken`` after ``submit_code`` or
``refresh``. API callers send it back as ``Authorization: Bearer <id_token>``;
browser apps usually keep it in an ``id_token`` cookie. ``IdTokenExtractor``
looks in those places in that order and returns the first token it finds.

Tokens are never read from query parameters (they end up in logs and history).
"""

from __future__ import annotations

from typing import Final

from flask import request

from .errors import MissingToken

DEFAULT_COOKIE: Final[str] = "id_token"
"""Cookie name matching the ``id_token`` field returned by ``submit_code``."""


def _bearer_token() -> str | None:
    scheme, _, token = request.headers.get("Authorization", "").strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


class IdTokenExtractor:
    """Finds the identity token in the Authorization header or a cookie.

    Args:
        cookie_name: Cookie to fall back to, or ``None`` to accept only the
            header.
        header: Whether to look at the Authorization header at all. Turning
            it off restricts extraction to the cookie (browser-only routes).

    Raises:
        ValueError: If both sources are disabled or ``cookie_name`` is blank.
    """

    def __init__(self, cookie_name: str | None = DEFAULT_COOKIE, *, header: bool = True) -> None:
        if cookie_name is not None and not cookie_name.strip():
            raise ValueError("cookie_name cannot be blank")
        if cookie_name is None and not header:
            raise ValueError("IdTokenExtractor needs the header or a cookie to read from")
        self._cookie_name = cookie_name
        self._header = header

    def extract(self) -> str:
        """Return the identity token from the current request.

        A header that is not a non-empty Bearer credential does not stop the
        cookie lookup; it is treated as absent.

        Raises:
            MissingToken: If no enabled source carries a token.
        """
        if self._header:
            token = _bearer_token()
            if token is not None:
                return token

        if self._cookie_name is not None:
            token = request.cookies.get(self._cookie_name, "").strip()
            if token:
                return token

        raise MissingToken(f"No identity token in {self._describe_sources()}")

    def _describe_sources(self) -> str:
        sources = []
        if self._header:
            sources.append("Authorization header")
        if self._cookie_name is not None:
            sources.append(f"'{self._cookie_name}' cookie")
        return " or ".join(sources)
