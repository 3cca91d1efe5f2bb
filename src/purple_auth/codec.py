"""Request encoding and response decoding for the Purple Auth API.

The provider speaks camelCase JSON (``idToken``, ``refreshToken``). This
module is the only place that knows the wire field names: encoders build the
request bodies and decoders turn response bodies into domain values, raising
``MalformedResponse`` when a body does not have the expected shape. Each
operation decides which error kind a malformed body becomes.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final

import jwt

from .protocols import Claims, PublicKey

ID_TOKEN: Final[str] = "idToken"
REFRESH_TOKEN: Final[str] = "refreshToken"

KEY_ALGORITHM: Final[str] = "ES256"
"""Algorithm the provider signs identity tokens with."""

_TOKEN_FIELDS: Final[dict[str, str]] = {
    ID_TOKEN: "id_token",
    REFRESH_TOKEN: "refresh_token",
}
"""Wire name -> ``TokenPair`` field name."""


class MalformedResponse(ValueError):
    """A success response body could not be decoded into the expected shape."""


@dataclass(frozen=True, slots=True)
class TokenPair:
    """Tokens issued after a successful one-time-code confirmation.

    Attributes:
        id_token: Signed identity token.
        refresh_token: Refresh token, if the app has refresh enabled.
    """

    id_token: str
    refresh_token: str | None = None


# ============================================================================
# Encoders
# ============================================================================


def _encode(payload: Mapping[str, Any]) -> bytes:
    return json.dumps(payload).encode("utf-8")


def encode_start(email: str) -> bytes:
    return _encode({"email": email})


def encode_code(email: str, code: str) -> bytes:
    return _encode({"email": email, "code": code})


def encode_id_token(id_token: str) -> bytes:
    return _encode({ID_TOKEN: id_token})


def encode_refresh_token(refresh_token: str) -> bytes:
    return _encode({REFRESH_TOKEN: refresh_token})


# ============================================================================
# Decoders
# ============================================================================


def _decode_object(body: bytes) -> dict[str, Any]:
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedResponse("Response body is not valid JSON") from e

    if not isinstance(data, dict):
        raise MalformedResponse("Response body is not a JSON object")
    return data


def rename_token_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Map provider token field names to client field names.

    Fields other than the known token fields are dropped.
    """
    return {_TOKEN_FIELDS[k]: v for k, v in data.items() if k in _TOKEN_FIELDS}


def decode_token_pair(body: bytes) -> TokenPair:
    """Decode a ``/otp/confirm`` response.

    Raises:
        MalformedResponse: Body is not an object or has no identity token.
    """
    fields = rename_token_fields(_decode_object(body))
    if not isinstance(fields.get("id_token"), str):
        raise MalformedResponse(f"Response is missing '{ID_TOKEN}'")

    refresh_token = fields.get("refresh_token")
    if refresh_token is not None and not isinstance(refresh_token, str):
        raise MalformedResponse(f"'{REFRESH_TOKEN}' is not a string")

    return TokenPair(**fields)


def decode_verification(body: bytes) -> Claims:
    """Decode a ``/token/verify`` response and return its claims.

    Raises:
        MalformedResponse: Body is not ``{headers, claims}`` with object claims.
    """
    data = _decode_object(body)
    if "headers" not in data or "claims" not in data:
        raise MalformedResponse("Response is not shaped {headers, claims}")

    claims = data["claims"]
    if not isinstance(claims, dict):
        raise MalformedResponse("'claims' is not an object")
    return claims


def decode_refreshed(body: bytes) -> str:
    """Decode a ``/token/refresh`` response and return the new identity token.

    The rotated refresh token in the response is discarded.

    Raises:
        MalformedResponse: Body is missing either token.
    """
    data = _decode_object(body)
    if ID_TOKEN not in data or REFRESH_TOKEN not in data:
        raise MalformedResponse("Response is not shaped {idToken, refreshToken}")

    id_token = data[ID_TOKEN]
    if not isinstance(id_token, str):
        raise MalformedResponse(f"'{ID_TOKEN}' is not a string")
    return id_token


def decode_public_key(body: bytes) -> PublicKey:
    """Decode a ``/app/public_key`` response into a JWK mapping.

    The key is loaded once here so that a body that is not a usable ES256
    key is rejected before anything is cached.

    Raises:
        MalformedResponse: Body is not a JSON Web Key usable for ES256.
    """
    data = _decode_object(body)
    if "kty" not in data:
        raise MalformedResponse("Public key response is not a JSON Web Key")

    try:
        jwt.PyJWK.from_dict(data, algorithm=KEY_ALGORITHM)
    except (jwt.PyJWKError, jwt.InvalidKeyError, ValueError) as e:
        raise MalformedResponse("Public key is not a usable ES256 key") from e
    return data
