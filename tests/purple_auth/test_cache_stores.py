import threading

import pytest

import purple_auth as m

KEY = {"kty": "EC", "crv": "P-256", "x": "x1", "y": "y1"}
OTHER = {"kty": "EC", "crv": "P-256", "x": "x2", "y": "y2"}


def test_inmemory_cache_setdefault_get():
    cache = m.InMemoryCache()

    assert cache.get("public_key") is None
    assert cache.setdefault("public_key", KEY) is KEY
    assert cache.get("public_key") is KEY


def test_inmemory_cache_first_write_wins():
    cache = m.InMemoryCache()
    cache.setdefault("public_key", KEY)

    assert cache.setdefault("public_key", OTHER) is KEY


def test_inmemory_cache_concurrent_first_access():
    cache = m.InMemoryCache()
    barrier = threading.Barrier(8)
    results = []

    def writer(value):
        barrier.wait()
        results.append(cache.setdefault("public_key", value))

    threads = [threading.Thread(target=writer, args=(dict(KEY),)) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    stored = cache.get("public_key")
    assert all(r is stored for r in results)


def test_inmemory_cache_clear():
    cache = m.InMemoryCache()
    cache.setdefault("public_key", KEY)
    cache.clear()
    assert cache.get("public_key") is None


def test_redis_cache_roundtrip(fake_redis):
    cache = m.RedisCache(fake_redis)

    assert cache.setdefault("public_key", KEY) == KEY
    assert cache.get("public_key") == KEY
    assert fake_redis.get("purple_auth:public_key") is not None


def test_redis_cache_keeps_existing_value(fake_redis):
    m.RedisCache(fake_redis).setdefault("public_key", KEY)

    assert m.RedisCache(fake_redis).setdefault("public_key", OTHER) == KEY


def test_redis_cache_invalid_json_raises(fake_redis):
    cache = m.RedisCache(fake_redis)

    fake_redis.set("purple_auth:bad", "not-json")
    with pytest.raises(m.CacheCorrupted):
        cache.get("bad")


def test_redis_cache_clear_only_touches_namespace(fake_redis):
    fake_redis.set("unrelated", "1")
    cache = m.RedisCache(fake_redis, namespace="app1")
    cache.setdefault("public_key", KEY)

    cache.clear()

    assert cache.get("public_key") is None
    assert fake_redis.get("unrelated") == b"1"
