import httpx
import pytest

import purple_auth as m
from purple_auth.key_providers import PUBLIC_KEY_SLOT


@pytest.fixture
def key_path(identity):
    return f"/app/public_key/{identity.app_id}"


@pytest.fixture
def make_provider(identity, http_client):
    def _make(cache=None):
        return m.PurpleAuthKeyProvider(m.HttpGateway(identity, http_client), identity.app_id, cache)

    return _make


def test_fetches_with_api_key_and_caches(make_provider, provider, key_path, public_jwk, identity):
    provider.respond("GET", key_path, 200, json_body=public_jwk)
    cache = m.InMemoryCache()
    keys = make_provider(cache)

    assert keys.get_public_key() == m.Ok(public_jwk)
    assert cache.get(PUBLIC_KEY_SLOT) == public_jwk
    assert provider.requests[0].headers["Authorization"] == f"Bearer {identity.api_key}"


def test_cache_hit_makes_no_request(make_provider, provider, key_path, public_jwk):
    provider.respond("GET", key_path, 200, json_body=public_jwk)
    keys = make_provider()

    keys.get_public_key()
    keys.get_public_key()
    keys.get_public_key()

    assert len(provider.calls_to(key_path)) == 1


def test_prepopulated_cache_is_used(make_provider, provider, public_jwk):
    cache = m.InMemoryCache()
    cache.setdefault(PUBLIC_KEY_SLOT, public_jwk)

    assert make_provider(cache).get_public_key() == m.Ok(public_jwk)
    assert provider.requests == []


@pytest.mark.parametrize(
    ("status", "kind"),
    [(404, m.ErrorKind.NOT_FOUND), (401, m.ErrorKind.AUTHENTICATION_FAILURE), (500, m.ErrorKind.SERVER_ERROR)],
)
def test_failure_is_mapped_and_not_cached(make_provider, provider, key_path, status, kind):
    provider.respond("GET", key_path, status)
    cache = m.InMemoryCache()

    assert make_provider(cache).get_public_key() == m.Err(kind)
    assert cache.get(PUBLIC_KEY_SLOT) is None


def test_undecodable_key_is_invalid_response(make_provider, provider, key_path):
    provider.respond("GET", key_path, 200, content=b"<html>")

    assert make_provider().get_public_key() == m.Err(m.ErrorKind.INVALID_RESPONSE)


def test_transport_failure_then_recovery(make_provider, provider, key_path, public_jwk):
    provider.fail("GET", key_path, httpx.ConnectError)
    keys = make_provider()

    failed = keys.get_public_key()
    assert isinstance(failed, m.Err)
    assert failed.error.reason == "ConnectError"

    provider.respond("GET", key_path, 200, json_body=public_jwk)
    assert keys.get_public_key() == m.Ok(public_jwk)


def test_shared_redis_cache_between_providers(make_provider, provider, key_path, public_jwk, fake_redis):
    provider.respond("GET", key_path, 200, json_body=public_jwk)

    make_provider(m.RedisCache(fake_redis)).get_public_key()
    second = make_provider(m.RedisCache(fake_redis)).get_public_key()

    assert second == m.Ok(public_jwk)
    assert len(provider.calls_to(key_path)) == 1


@pytest.mark.parametrize(
    "body",
    [
        {"kty": "RSA", "n": "sXchDaQebHnPiGvyDOAT4saGEUetSyo9MKLOoWFsueri", "e": "AQAB"},
        {"kty": "EC", "crv": "P-256", "x": "A" * 43, "y": "A" * 43},
    ],
)
def test_unusable_key_is_invalid_response_and_not_cached(make_provider, provider, key_path, body):
    provider.respond("GET", key_path, 200, json_body=body)
    cache = m.InMemoryCache()

    assert make_provider(cache).get_public_key() == m.Err(m.ErrorKind.INVALID_RESPONSE)
    assert cache.get(PUBLIC_KEY_SLOT) is None


def test_verify_refetches_after_unusable_key(identity, http_client, provider, key_path, public_jwk, make_token, valid_claims):
    provider.respond("GET", key_path, 200, json_body={"kty": "RSA", "n": "AQAB", "e": "AQAB"})
    client = m.PurpleAuthClient(identity, http_client=http_client)
    token = make_token(valid_claims)

    assert client.verify(token) == m.Err(m.ErrorKind.INVALID_RESPONSE)
    assert client.verify(token) == m.Err(m.ErrorKind.INVALID_RESPONSE)

    provider.respond("GET", key_path, 200, json_body=public_jwk)
    assert client.verify(token).is_ok()
    assert len(provider.calls_to(key_path)) == 3
