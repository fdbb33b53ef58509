"""
Tests for cache strategies.
"""

import asyncio

from redirector_app.cache.factory import CacheBackend, CacheFactory
from redirector_app.cache.strategies import InMemoryCache, NullCache, RedisCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class BrokenRedis:
    """Redis client whose server has gone away"""

    def get(self, key):
        raise ConnectionError("connection refused")

    def setex(self, key, ttl, value):
        raise ConnectionError("connection refused")


class TestInMemoryCache:

    def test_get_after_set(self):
        cache = InMemoryCache()

        asyncio.run(cache.set("key", "value", ttl=60))

        assert asyncio.run(cache.get("key")) == "value"

    def test_entries_expire(self):
        clock = FakeClock()
        cache = InMemoryCache(clock=clock)
        asyncio.run(cache.set("key", "value", ttl=60))

        clock.now += 59
        assert asyncio.run(cache.get("key")) == "value"

        clock.now += 1
        assert asyncio.run(cache.get("key")) is None

    def test_missing_key(self):
        assert asyncio.run(InMemoryCache().get("missing")) is None


class TestDegradedCaches:

    def test_null_cache_always_misses(self):
        cache = NullCache()

        asyncio.run(cache.set("key", "value", ttl=60))

        assert asyncio.run(cache.get("key")) is None

    def test_unreachable_redis_is_a_miss(self):
        cache = RedisCache(BrokenRedis())

        assert asyncio.run(cache.set("key", "value", ttl=60)) is False
        assert asyncio.run(cache.get("key")) is None


class TestCacheFactory:

    def setup_method(self):
        CacheFactory.clear_instance()

    def teardown_method(self):
        CacheFactory.clear_instance()

    def test_singleton(self):
        first = CacheFactory.create(CacheBackend.MEMORY)

        assert CacheFactory.create(CacheBackend.NULL) is first

    def test_null_backend(self):
        assert isinstance(CacheFactory.create(CacheBackend.NULL), NullCache)
