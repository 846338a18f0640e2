# Author: Bradley R. Kinnard — cache money

"""
Async redis connection for the result cache. Single pooled client, created on first use,
closed from lifespan. Nothing here raises on a dead redis except get_redis callers' commands.
"""

import logging
from redis.asyncio import Redis

from src.backend.config import settings

log = logging.getLogger(__name__)

_redis: Redis | None = None


async def get_redis() -> Redis:
    """Lazy client. from_url doesn't connect, the first command does."""
    global _redis
    if _redis is None:
        log.info(f"connecting to redis at {settings.redis_url}")
        _redis = Redis.from_url(settings.redis_url, decode_responses=True)
    return _redis


async def close_redis() -> None:
    """Lifespan shutdown hook. Safe to call twice."""
    global _redis
    if _redis is None:
        return
    await _redis.aclose()
    _redis = None
    log.info("redis connection closed")


async def redis_status() -> str:
    """'ok' or 'error: ...' for the health endpoint."""
    try:
        r = await get_redis()
        await r.ping()
        return "ok"
    except Exception as e:
        log.warning(f"redis ping failed: {e}")
        return f"error: {e}"
