"""Flask extension protecting routes with Purple Auth identity tokens.

Key Components:
- AuthExtension: decorator class for protecting Flask routes
- get_verified_id_claims: verify the identity token cookie on demand

Security Model:
1. Extract the identity token (Bearer header, then id_token cookie)
2. Verify it with a TokenVerifier (local or remote)
3. Store verified claims in flask.g.jwt for route access
4. Convert failures to HTTP responses: 401 for rejected tokens, 503 when
   the provider cannot be consulted
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import TYPE_CHECKING, Any, Final

from flask import Flask, abort, g

from .errors import AuthError, ErrorKind, InvalidToken, ProviderUnavailable
from .extractors import IdTokenExtractor
from .result import Err

if TYPE_CHECKING:
    from .protocols import Claims, Extractor, TokenVerifier, ViewFunc

logger = logging.getLogger(__name__)

_EXT_KEY: Final[str] = "purple_auth"
"""Flask extensions registry key for AuthExtension."""

_TOKEN_REJECTIONS: Final[frozenset[ErrorKind]] = frozenset(
    {
        ErrorKind.AUTHENTICATION_FAILURE,
        ErrorKind.INVALID_TOKEN,
        ErrorKind.SIGNATURE_ERROR,
        ErrorKind.EXPIRED_TOKEN,
        ErrorKind.TOKEN_NOT_YET_VALID,
    }
)
"""Failures caused by the token itself. Everything else is the provider's."""


def _verify_or_raise(verifier: TokenVerifier, token: str) -> Claims:
    result = verifier.verify(token)
    if isinstance(result, Err):
        reason = result.error
        logger.info("Token verification failed: %s", reason)
        if reason in _TOKEN_REJECTIONS:
            raise InvalidToken()
        raise ProviderUnavailable()
    return result.value


class AuthExtension:
    """
    Flask decorator glue for identity token authentication.

    Responsibilities:
    - Extract token from request
    - Verify token (TokenVerifier)
    - Store verified claims in `flask.g.jwt`
    - Convert failures to HTTP responses (abort)

    Usage:
        auth = AuthExtension(client.local_verifier)

        @app.get("/me")
        @auth.require()
        def me(): return {"sub": g.jwt["sub"]}
    """

    def __init__(
        self,
        verifier: TokenVerifier,
        extractor: Extractor | None = None,
    ) -> None:
        self._verifier: TokenVerifier = verifier
        self._extractor: Extractor = extractor or IdTokenExtractor()

    def init_app(
        self,
        app: Flask,
        *,
        verifier: TokenVerifier | None = None,
        extractor: Extractor | None = None,
    ) -> None:
        """Register the extension on ``app``, optionally replacing its collaborators."""
        if verifier is not None:
            self._verifier = verifier
        if extractor is not None:
            self._extractor = extractor

        app.extensions[_EXT_KEY] = self

    def require(self):
        """Decorator requiring a verified identity token.

        Error mapping:
        - ``MissingToken``        -> HTTP 401
        - rejected token          -> HTTP 401
        - provider/transport error -> HTTP 503

        Side Effects:
            - Writes verified claims to ``flask.g.jwt`` before calling the view.
            - May terminate request handling early via ``flask.abort``.
        """

        def decorator(view: ViewFunc) -> ViewFunc:
            @wraps(view)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    token = self._extractor.extract()
                    g.jwt = _verify_or_raise(self._verifier, token)
                except AuthError as e:
                    abort(e.error_code, description=e.description)

                return view(*args, **kwargs)

            return wrapper

        return decorator


def get_verified_id_claims(
    verifier: TokenVerifier,
    *,
    cookie_name: str = "id_token",
) -> Claims:
    """
    Return verified identity token claims from the current Flask request.

    - Extracts the identity token from a cookie (default "id_token")
    - Verifies it with ``verifier``
    - Aborts with 401/503 on failure
    """
    try:
        token = IdTokenExtractor(cookie_name, header=False).extract()
        return _verify_or_raise(verifier, token)
    except AuthError as e:
        abort(e.error_code, description=e.description)
