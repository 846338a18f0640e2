# Author: Bradley R. Kinnard — the app's pulse check

"""Health endpoint with a redis check. Also /metrics."""

import logging
import subprocess
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from src.backend.adapters.metrics_client import get_metrics
from src.backend.adapters.redis_client import redis_status
from src.backend.api.dependencies import get_request_id
from src.backend.api.schemas import HealthResponse

router = APIRouter(tags=["health"])
log = logging.getLogger(__name__)


def _git_sha() -> str | None:
    try:
        r = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True, text=True, timeout=1, check=False
        )
        return r.stdout.strip() or None
    except (OSError, subprocess.SubprocessError):
        return None


@router.get("/health", response_model=HealthResponse)
async def health_check(request_id: Annotated[str, Depends(get_request_id)]) -> HealthResponse:
    """redis is only a cache, so a dead one means degraded, not down"""
    redis = await redis_status()
    log.info(f"health | redis={redis}")
    return HealthResponse(
        status="ok" if redis == "ok" else "degraded",
        request_id=request_id,
        git_sha=_git_sha(),
        redis=redis
    )


@router.get("/metrics")
async def metrics() -> Response:
    """prometheus metrics endpoint"""
    return Response(content=get_metrics(), media_type="text/plain; charset=utf-8")
