"""
Redis Configuration

Async Redis client shared by the rate limiter. Redis is optional outside
production: when it cannot be reached the client stays None and callers
fall back to in-process behaviour.
"""

import logging

from redis.asyncio import Redis, from_url

from placement.core.config import settings

logger = logging.getLogger(__name__)

# Redis client instance
redis_client: Redis | None = None


async def init_redis() -> Redis:
    """
    Initialize Redis connection.

    Call this on application startup.

    Raises:
        redis.exceptions.RedisError: If the server cannot be reached
    """
    global redis_client
    client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    try:
        await client.ping()
    except Exception:
        await client.aclose()
        raise

    redis_client = client
    logger.info("Redis connected")
    return redis_client


async def get_redis() -> Redis | None:
    """
    Get Redis client instance.

    Returns None if Redis is not available.
    """
    return redis_client


async def close_redis() -> None:
    """Close Redis connection."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
