"""
Report Cache

Short-lived cache for aggregate reads (status counts, revenue, low stock).
Redis is used when configured; the in-memory cache covers the rest, including
any Redis failure at runtime. Mutations call `invalidate()` so a cached
report is never older than the TTL and never survives a write made by this
process.
"""

import json
import logging
from typing import Any, Awaitable, Callable

from redis.asyncio import Redis
from redis.exceptions import RedisError

from orderflow.config.settings import Settings, get_settings
from orderflow.core.shared.cache import MemoryCache

logger = logging.getLogger(__name__)

KEY_PREFIX = "orderflow:report:"


class ReportCache:
    """
    Read-through cache of JSON-serializable report payloads.

    Example:
        ```python
        cache = ReportCache(ttl_seconds=30)
        counts = await cache.get_or_load("status_counts", load_counts)
        await cache.invalidate()
        ```
    """

    def __init__(
        self,
        redis_client: Redis | None = None,
        ttl_seconds: int = 30,
        memory_cache: MemoryCache | None = None,
    ):
        self._redis = redis_client
        self.ttl_seconds = ttl_seconds
        self._memory = memory_cache or MemoryCache(max_size=1000, default_ttl=ttl_seconds)

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    @property
    def uses_redis(self) -> bool:
        return self._redis is not None

    def _key(self, key: str) -> str:
        return f"{KEY_PREFIX}{key}"

    async def get(self, key: str) -> Any | None:
        """Return the cached payload or None."""
        if not self.enabled:
            return None

        full_key = self._key(key)
        if self._redis is not None:
            try:
                raw = await self._redis.get(full_key)
                return json.loads(raw) if raw is not None else None
            except RedisError as e:
                logger.warning(f"Redis read failed for {full_key}, using memory cache: {e}")

        return await self._memory.async_get(full_key)

    async def set(self, key: str, value: Any) -> None:
        """Store a JSON-serializable payload for the configured TTL."""
        if not self.enabled:
            return

        full_key = self._key(key)
        if self._redis is not None:
            try:
                await self._redis.set(full_key, json.dumps(value, default=str), ex=self.ttl_seconds)
                return
            except RedisError as e:
                logger.warning(f"Redis write failed for {full_key}, using memory cache: {e}")

        await self._memory.async_set(full_key, value, ttl=self.ttl_seconds)

    async def get_or_load(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached payload, loading and storing it on a miss."""
        cached = await self.get(key)
        if cached is not None:
            logger.debug(f"Report cache hit: {key}")
            return cached

        value = await loader()
        await self.set(key, value)
        return value

    async def invalidate(self) -> None:
        """Drop every cached report."""
        removed = await self._memory.async_delete_prefix(KEY_PREFIX)

        if self._redis is not None:
            try:
                keys = [k async for k in self._redis.scan_iter(match=f"{KEY_PREFIX}*")]
                if keys:
                    await self._redis.delete(*keys)
                removed += len(keys)
            except RedisError as e:
                logger.warning(f"Redis invalidation failed: {e}")

        if removed:
            logger.debug(f"Report cache invalidated ({removed} entries)")


async def create_report_cache(settings: Settings | None = None) -> ReportCache:
    """
    Build the report cache from settings.

    Falls back to the in-memory cache when Redis is disabled or unreachable.
    """
    settings = settings or get_settings()
    redis_client = None

    if settings.REDIS_ENABLED:
        from orderflow.core.cache.redis_client import get_async_redis_client

        try:
            redis_client = await get_async_redis_client(settings)
        except (RedisError, OSError) as e:
            logger.warning(f"Redis unavailable, report cache stays in memory: {e}")

    return ReportCache(redis_client=redis_client, ttl_seconds=settings.REPORT_CACHE_TTL_SECONDS)
