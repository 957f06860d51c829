"""
Redis Integration

Async Redis client and connection management.
"""

import logging

import redis.asyncio as aioredis

from orderflow.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

_async_redis_client: aioredis.Redis | None = None


async def get_async_redis_client(settings: Settings | None = None) -> aioredis.Redis:
    """
    Get the async Redis client (singleton), verifying the connection once.

    Raises:
        redis.exceptions.RedisError: When Redis cannot be reached
    """
    global _async_redis_client

    if _async_redis_client is not None:
        return _async_redis_client

    settings = settings or get_settings()

    client = aioredis.Redis(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        db=settings.REDIS_DB,
        password=settings.REDIS_PASSWORD,
        decode_responses=True,
    )
    try:
        await client.ping()
    except Exception as e:
        logger.error(f"Async Redis connection failed: {e}")
        await client.aclose()
        raise

    logger.info(f"Async Redis connected: {settings.REDIS_HOST}:{settings.REDIS_PORT}")
    _async_redis_client = client
    return client


async def close_async_redis_client() -> None:
    """Close the async Redis client connection."""
    global _async_redis_client

    if _async_redis_client is not None:
        await _async_redis_client.aclose()
        _async_redis_client = None
        logger.info("Async Redis connection closed")
