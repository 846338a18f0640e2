# Author: Bradley R. Kinnard — don't walk the same tree twice

"""
Redis cache for AnalysisResult, JSON, keyed by code hash.
A dead redis is a cache miss, never a failed request.
"""

import logging

from src.backend.adapters.metrics_client import cache_hit_total, cache_miss_total
from src.backend.adapters.redis_client import get_redis
from src.backend.config import settings
from src.backend.core.models import AnalysisResult

log = logging.getLogger(__name__)

CACHE_PREFIX = "waterfall:analysis:"


def _key(code_hash: str) -> str:
    return f"{CACHE_PREFIX}{code_hash}"


async def get_analysis(code_hash: str) -> AnalysisResult | None:
    """Cached result or None. Counts hits and misses."""
    try:
        r = await get_redis()
        raw = await r.get(_key(code_hash))
    except Exception as e:
        log.warning(f"cache get failed for {code_hash[:8]}: {e}")
        cache_miss_total.inc()
        return None

    if raw is None:
        cache_miss_total.inc()
        return None

    try:
        result = AnalysisResult.model_validate_json(raw)
    except ValueError as e:
        # stale shape from an older release, treat as miss
        log.warning(f"cached entry for {code_hash[:8]} unreadable: {e}")
        cache_miss_total.inc()
        return None

    cache_hit_total.inc()
    return result


async def set_analysis(code_hash: str, result: AnalysisResult, ttl: int | None = None) -> bool:
    """Store it. Returns False if redis said no."""
    try:
        r = await get_redis()
        await r.set(_key(code_hash), result.model_dump_json(), ex=ttl or settings.cache_ttl)
        return True
    except Exception as e:
        log.warning(f"cache set failed for {code_hash[:8]}: {e}")
        return False
