"""
Redis cache for upstream USGS readings.

Repeated graph views and gauge refreshes hit the same site/date ranges, so
parsed readings are kept in Redis for a short while. The cache is
best-effort: if Redis is disabled in settings or cannot be reached, every
lookup is a miss and every write is dropped.

All calls go through ``redis.asyncio`` so a slow Redis never stalls the
event loop serving other requests.
"""

import json
from typing import Any, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from fishlog.config import settings
from fishlog.utils.logging_config import get_logger

logger = get_logger(__name__)

KEY_PREFIX = "fishlog"

# Seconds to keep upstream readings
CACHE_TTL = {
    "instantaneous": 300,    # today's readings keep arriving
    "daily_mean": 86400,     # daily values rarely change once published
}


def make_cache_key(*parts: Any) -> str:
    """
    Join key parts with colons.

    Example:
        >>> make_cache_key("usgs", "dv", "05331000", "2024-07-04")
        'usgs:dv:05331000:2024-07-04'
    """
    return ":".join(str(part) for part in parts)


class RedisCache:
    """
    JSON values in Redis under a ``fishlog:`` namespace.

    The client is created up front but opens no connection until first
    used; ``connect()`` at startup turns caching off if Redis is not there.

    Args:
        enabled: When False the cache is a no-op
        prefix: Namespace prepended to every key
    """

    def __init__(self, enabled: bool = True, prefix: str = KEY_PREFIX):
        self.prefix = prefix
        self.client: Optional[aioredis.Redis] = None
        if enabled:
            self.client = aioredis.Redis(
                host=settings.REDIS_HOST,
                port=settings.REDIS_PORT,
                password=settings.REDIS_PASSWORD or None,
                db=settings.REDIS_DB,
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def connect(self) -> bool:
        """Ping Redis; on failure caching is disabled for the process."""
        if self.client is None:
            return False
        try:
            await self.client.ping()
        except RedisError as e:
            logger.warning(f"Redis unavailable at {settings.REDIS_HOST}:{settings.REDIS_PORT}: {e}. Caching disabled.")
            await self.close()
            return False
        logger.info(f"Redis cache connected: {settings.REDIS_HOST}:{settings.REDIS_PORT}")
        return True

    async def close(self) -> None:
        if self.client is None:
            return
        client, self.client = self.client, None
        try:
            await client.aclose()
        except RedisError as e:
            logger.debug(f"Error closing Redis connection: {e}")

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        """Cached value, or None on a miss or when caching is off."""
        if self.client is None:
            return None
        try:
            raw = await self.client.get(self._key(key))
        except RedisError as e:
            logger.error(f"Cache GET error for '{key}': {e}")
            return None
        if raw is None:
            logger.debug(f"Cache MISS: {key}")
            return None
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Discarding unreadable cache value for '{key}'")
            await self.delete(key)
            return None
        logger.debug(f"Cache HIT: {key}")
        return value

    async def set(self, key: str, value: Any, ttl: int = CACHE_TTL["instantaneous"]) -> bool:
        """Store a JSON-serializable value for ``ttl`` seconds."""
        if self.client is None:
            return False
        try:
            await self.client.setex(self._key(key), ttl, json.dumps(value, default=str))
        except (RedisError, TypeError, ValueError) as e:
            logger.error(f"Cache SET error for '{key}': {e}")
            return False
        return True

    async def delete(self, key: str) -> bool:
        if self.client is None:
            return False
        try:
            await self.client.delete(self._key(key))
        except RedisError as e:
            logger.error(f"Cache DELETE error for '{key}': {e}")
            return False
        return True

    async def status(self) -> str:
        """``healthy``, ``unhealthy`` or ``disabled``; reported by /health."""
        if self.client is None:
            return "disabled"
        try:
            await self.client.ping()
        except RedisError as e:
            logger.warning(f"Redis health check failed: {e}")
            return "unhealthy"
        return "healthy"


cache = RedisCache(enabled=settings.CACHE_ENABLED)
