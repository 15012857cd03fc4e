"""
Rate Limiting

Sliding-window limits keyed by caller. Windows live in Redis sorted sets
when the shared client is connected, otherwise in process memory (one
window per key, lost on restart).

Keys in use:
- login:{client_ip}:{email}          credential guessing
- admin:{action}:{administrator_id}  administrator mutations
"""

import logging
import time
import uuid
from collections import deque

from fastapi import HTTPException, status
from redis.asyncio import Redis
from redis.exceptions import RedisError

from placement.core.redis import get_redis

logger = logging.getLogger(__name__)

REDIS_KEY_PREFIX = "rate_limit:"

# Fallback windows: key -> request timestamps, oldest first
_memory_windows: dict[str, deque[float]] = {}


class RateLimitExceeded(HTTPException):
    """429 response carrying the window length as Retry-After."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": f"Too many requests. Limit is {limit} per {window_seconds} seconds.",
                "retry_after_seconds": window_seconds,
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _redis_hit(client: Redis, key: str, limit: int, window_seconds: int) -> bool:
    """
    Record a hit in a Redis sorted set and report whether it fits the window.

    Members are unique per request so simultaneous hits are all counted.
    """
    now = time.time()
    redis_key = f"{REDIS_KEY_PREFIX}{key}"

    async with client.pipeline(transaction=True) as pipe:
        pipe.zremrangebyscore(redis_key, 0, now - window_seconds)
        pipe.zcard(redis_key)
        pipe.zadd(redis_key, {f"{now}:{uuid.uuid4().hex}": now})
        pipe.expire(redis_key, window_seconds)
        _, hits_before, _, _ = await pipe.execute()

    return hits_before < limit


def _memory_hit(key: str, limit: int, window_seconds: int) -> bool:
    now = time.time()
    window = _memory_windows.setdefault(key, deque())

    while window and window[0] <= now - window_seconds:
        window.popleft()

    if len(window) >= limit:
        return False

    window.append(now)
    return True


def reset_memory_store() -> None:
    """Forget all in-memory windows."""
    _memory_windows.clear()


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Count a request against its window.

    Args:
        key: Window key, e.g. "admin:approve_posting:1"
        limit: Requests allowed per window
        window_seconds: Window length

    Returns:
        True if the request is within the limit
    """
    client = await get_redis()

    if client is not None:
        try:
            return await _redis_hit(client, key, limit, window_seconds)
        except RedisError as e:
            logger.warning(f"Redis unavailable for rate limiting, using memory: {e}")

    return _memory_hit(key, limit, window_seconds)


async def enforce_rate_limit(key: str, limit: int, window_seconds: int) -> None:
    """
    Count a request and refuse it when the window is full.

    Raises:
        RateLimitExceeded: If the limit has been reached
    """
    if not await check_rate_limit(key, limit, window_seconds):
        logger.warning(f"Rate limit exceeded for {key}: {limit}/{window_seconds}s")
        raise RateLimitExceeded(limit, window_seconds)


__all__ = [
    "RateLimitExceeded",
    "check_rate_limit",
    "enforce_rate_limit",
    "reset_memory_store",
]
