import fnmatch
import json
import time
from collections.abc import Callable
from typing import Any

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from flask import Flask
from jwt.algorithms import ECAlgorithm

from purple_auth import ProviderIdentity

HOST = "https://purpleauth.test"
APP_ID = "eb1c4225-c76f-4eee-acfd-bb078f834e7f"
API_KEY = "secret-api-key"
ISSUER = f"{HOST}/app/{APP_ID}"


@pytest.fixture()
def app():
    app = Flask(__name__)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def identity() -> ProviderIdentity:
    return ProviderIdentity(host=HOST, app_id=APP_ID, api_key=API_KEY)


class FakeProvider:
    """
    Routes requests of an httpx.MockTransport by (method, path).

    Unrouted requests get a 404, like the real provider for unknown apps.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def respond(
        self,
        method: str,
        path: str,
        status: int = 200,
        *,
        json_body: Any = None,
        content: bytes = b"",
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if json_body is not None:
                return httpx.Response(status, json=json_body)
            return httpx.Response(status, content=content)

        self.routes[(method, path)] = handler

    def fail(self, method: str, path: str, exc_type: type[httpx.TransportError]) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc_type("provider unreachable", request=request)

        self.routes[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404)
        return handler(request)

    def calls_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def http_client(provider: FakeProvider):
    client = httpx.Client(transport=httpx.MockTransport(provider))
    yield client
    client.close()


@pytest.fixture
def signing_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def public_jwk(signing_key: ec.EllipticCurvePrivateKey) -> dict[str, Any]:
    return json.loads(ECAlgorithm.to_jwk(signing_key.public_key()))


@pytest.fixture
def valid_claims() -> dict[str, Any]:
    now = int(time.time())
    return {
        "exp": now + 3600,
        "iat": now - 10,
        "iss": ISSUER,
        "jti": "eIDuCvzSMIaF8WG--eOgQw",
        "nbf": now - 10,
        "sub": "user@example.com",
    }


@pytest.fixture
def make_token(signing_key: ec.EllipticCurvePrivateKey):
    """
    Factory fixture that signs claims with ES256.

    Usage in tests:
        token = make_token({"sub": ...})
        token = make_token(claims, key=other_private_key)
    """

    def _make(claims: dict[str, Any], *, key: ec.EllipticCurvePrivateKey | None = None) -> str:
        return jwt.encode(claims, key or signing_key, algorithm="ES256")

    return _make


class FakeRedis:
    """
    Minimal redis stub for RedisCache tests.
    Supports get, set(nx=...), delete and scan_iter.
    """

    def __init__(self):
        self._store: dict[str, bytes] = {}

    def get(self, key: str):
        return self._store.get(key)

    def set(self, key: str, value: str | bytes, nx: bool = False):
        if nx and key in self._store:
            return None
        if isinstance(value, str):
            value = value.encode("utf-8")
        self._store[key] = value
        return True

    def delete(self, *keys: str) -> int:
        return sum(self._store.pop(k, None) is not None for k in keys)

    def scan_iter(self, match: str = "*"):
        return iter([k for k in list(self._store) if fnmatch.fnmatchcase(k, match)])


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()
