"""
Tests for the Redis cache wrapper and its use by the USGS client.
"""

import httpx
from redis.exceptions import ConnectionError as RedisConnectionError

from fishlog.services.usgs import UsgsClient
from fishlog.utils.cache import RedisCache, make_cache_key

from tests.conftest import usgs_payload


class InMemoryRedis:
    """Just enough of the ``redis.asyncio`` client API for RedisCache."""

    def __init__(self):
        self.store = {}
        self.ttls = {}
        self.closed = False

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl

    async def delete(self, key):
        self.store.pop(key, None)

    async def ping(self):
        return True

    async def aclose(self):
        self.closed = True


class DownRedis(InMemoryRedis):
    async def get(self, key):
        raise RedisConnectionError("down")

    async def setex(self, key, ttl, value):
        raise RedisConnectionError("down")

    async def ping(self):
        raise RedisConnectionError("down")


def _cache(client):
    cache = RedisCache(enabled=False)
    cache.client = client
    return cache


def test_make_cache_key():
    assert make_cache_key("usgs", "dv", "05331000", "2024-07-04") == "usgs:dv:05331000:2024-07-04"


async def test_disabled_cache_is_a_no_op():
    cache = RedisCache(enabled=False)
    assert not cache.enabled
    assert await cache.set("k", [1]) is False
    assert await cache.get("k") is None
    assert await cache.status() == "disabled"
    assert await cache.connect() is False


async def test_values_round_trip_under_prefix():
    redis_client = InMemoryRedis()
    cache = _cache(redis_client)

    assert await cache.set("usgs:iv:x", [{"value": "1400"}], ttl=300)
    assert await cache.get("usgs:iv:x") == [{"value": "1400"}]
    assert redis_client.ttls["fishlog:usgs:iv:x"] == 300
    assert await cache.status() == "healthy"


async def test_unreadable_value_is_discarded():
    redis_client = InMemoryRedis()
    redis_client.store["fishlog:bad"] = "{not json"
    cache = _cache(redis_client)

    assert await cache.get("bad") is None
    assert "fishlog:bad" not in redis_client.store


async def test_redis_errors_are_misses():
    cache = _cache(DownRedis())
    assert await cache.get("k") is None
    assert await cache.set("k", [1]) is False
    assert await cache.status() == "unhealthy"


async def test_unreachable_redis_disables_cache_on_connect():
    redis_client = DownRedis()
    cache = _cache(redis_client)

    assert await cache.connect() is False
    assert not cache.enabled
    assert redis_client.closed
    assert await cache.get("k") is None


async def test_connect_keeps_reachable_redis():
    cache = _cache(InMemoryRedis())
    assert await cache.connect() is True
    assert cache.enabled


async def test_usgs_client_serves_repeat_requests_from_cache():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=usgs_payload([("2024-07-04T00:00:00.000-05:00", "1400")]))

    client = UsgsClient(
        httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        cache=_cache(InMemoryRedis()),
    )
    first = await client.fetch_instantaneous("05331000", "2024-07-04", "2024-07-04")
    second = await client.fetch_instantaneous("05331000", "2024-07-04", "2024-07-04")

    assert first == second
    assert len(requests) == 1
