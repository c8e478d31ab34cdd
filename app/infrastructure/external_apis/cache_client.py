"""Caches for aggregated statistics.

Entries are stored as ``{"payload": ..., "computed_at": epoch_seconds}``;
whether an entry is still fresh is decided by the caller.
"""
import json
import logging
import time
from typing import Any, Callable, Dict, Optional
import redis.asyncio as redis
from app.application.ports.tour_api import CachedAggregate
from app.config import settings

logger = logging.getLogger(__name__)


class InMemoryAggregateCache:
    """Process-local cache; the default when Redis is disabled."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._entries: Dict[str, CachedAggregate] = {}
        self._clock = clock

    async def get(self, key: str) -> Optional[CachedAggregate]:
        return self._entries.get(key)

    async def set(self, key: str, payload: Any, ttl_seconds: int) -> None:
        self._entries[key] = CachedAggregate(payload=payload, computed_at=self._clock())

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def close(self):
        self._entries.clear()


class RedisAggregateCache:
    """Redis-backed cache shared between workers.

    Redis expires keys after ``ttl_seconds`` as well, so stale entries do not
    pile up. Redis errors are logged and treated as a miss.
    """

    def __init__(self, client: Optional[redis.Redis] = None, clock: Callable[[], float] = time.time):
        self._redis: Optional[redis.Redis] = client
        self._clock = clock

        if self._redis is None:
            try:
                self._redis = redis.from_url(
                    settings.get_redis_cache_url(),
                    encoding="utf-8",
                    decode_responses=True
                )
                logger.info(f"Redis cache initialized: {settings.REDIS_CACHE_HOST}:{settings.REDIS_CACHE_PORT}/{settings.REDIS_CACHE_DB}")
            except Exception as e:
                logger.error(f"Failed to initialize Redis cache: {e}")
                self._redis = None

    @staticmethod
    def _make_key(key: str) -> str:
        return f"cache:stats:{key}"

    async def get(self, key: str) -> Optional[CachedAggregate]:
        if not self._redis:
            return None

        try:
            value = await self._redis.get(self._make_key(key))
            if not value:
                return None
            data = json.loads(value)
            return CachedAggregate(payload=data["payload"], computed_at=float(data["computed_at"]))
        except Exception as e:
            logger.warning(f"Cache get error for {key}: {e}")
            return None

    async def set(self, key: str, payload: Any, ttl_seconds: int) -> None:
        if not self._redis:
            return

        try:
            serialized = json.dumps({"payload": payload, "computed_at": self._clock()}, ensure_ascii=False)
            await self._redis.setex(self._make_key(key), ttl_seconds, serialized)
        except Exception as e:
            logger.warning(f"Cache set error for {key}: {e}")

    async def delete(self, key: str) -> None:
        if not self._redis:
            return

        try:
            await self._redis.delete(self._make_key(key))
        except Exception as e:
            logger.warning(f"Cache delete error for {key}: {e}")

    async def ping(self) -> bool:
        if not self._redis:
            return False
        return bool(await self._redis.ping())

    async def close(self):
        """Close Redis connection."""
        if self._redis:
            await self._redis.aclose()
            logger.info("Redis cache connection closed")


# Global cache instance
_cache = None


def get_cache():
    """Get the global aggregate cache (Redis when enabled, else in-memory)."""
    global _cache
    if _cache is None:
        _cache = RedisAggregateCache() if settings.REDIS_CACHE_ENABLED else InMemoryAggregateCache()
    return _cache


async def close_cache():
    """Close the global cache instance."""
    global _cache
    if _cache:
        await _cache.close()
        _cache = None
