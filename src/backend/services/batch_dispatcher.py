# Author: Bradley R. Kinnard — parallelism or bankruptcy

"""Analyze many files in parallel with strict timeouts. One bad file won't tank the batch."""

import asyncio
import logging
import time
import uuid

from src.backend.adapters.metrics_client import batch_file_error_total
from src.backend.config import settings
from src.backend.core.models import BatchResult, FileResult, SourceFile
from src.backend.services.analyzer_service import analyze

log = logging.getLogger(__name__)


async def _run_file(src: SourceFile, request_id: str) -> FileResult:
    """Single file with timeout. Never raises, returns error result instead."""
    start = time.perf_counter()
    try:
        result = await asyncio.wait_for(
            analyze(src.code, src.filename, request_id),
            timeout=settings.file_timeout
        )
        took = int((time.perf_counter() - start) * 1000)
        return FileResult(filename=src.filename, result=result, took_ms=took)
    except asyncio.TimeoutError:
        log.warning(f"{src.filename} timed out after {settings.file_timeout}s")
        batch_file_error_total.labels(reason="timeout").inc()
        return FileResult(filename=src.filename, error="timeout", took_ms=int(settings.file_timeout * 1000))
    except Exception as e:
        log.exception(f"{src.filename} crashed: {e}")
        batch_file_error_total.labels(reason="crash").inc()
        took = int((time.perf_counter() - start) * 1000)
        return FileResult(filename=src.filename, error=str(e), took_ms=took)


async def dispatch(files: list[SourceFile], request_id: str) -> BatchResult:
    """
    Fire every file in parallel, collect results in input order.
    Timeouts and crashes are logged, never fail the whole batch.
    """
    start = time.perf_counter()
    tasks = [_run_file(f, request_id) for f in files]

    try:
        results = await asyncio.wait_for(
            asyncio.gather(*tasks, return_exceptions=True),
            timeout=settings.batch_timeout
        )
    except asyncio.TimeoutError:
        log.error(f"batch hit total timeout of {settings.batch_timeout}s")
        results = [asyncio.TimeoutError()] * len(files)

    final: list[FileResult] = []
    for src, r in zip(files, results):
        if isinstance(r, FileResult):
            final.append(r)
        else:
            # gather with return_exceptions=True hands back the exception itself
            reason = "timeout" if isinstance(r, asyncio.TimeoutError) else str(r)
            log.error(f"no result for {src.filename}: {reason}")
            batch_file_error_total.labels(reason="timeout" if reason == "timeout" else "crash").inc()
            final.append(FileResult(filename=src.filename, error=reason, took_ms=0))

    total = sum(len(f.result.suggestions) for f in final if f.result is not None)
    elapsed = int((time.perf_counter() - start) * 1000)
    log.info(f"batch of {len(files)} finished in {elapsed}ms with {total} suggestions")

    return BatchResult(
        batch_id=f"ba-{uuid.uuid4().hex[:12]}",
        files=final,
        total_suggestions=total,
        request_id=request_id
    )
