# Author: Bradley R. Kinnard — the orchestrator

"""
Main analysis pipeline. Hash, cache check, analyze, merge, cache store.
The walk itself is sync CPU work, so it runs in a thread and the event loop stays free.
"""

import asyncio
import logging
import time
import uuid

from src.backend.adapters.metrics_client import analyze_latency, diagnostics_total, parse_error_total
from src.backend.analyzer.engine import AnalysisOutcome, analyze_source
from src.backend.analyzer.parser import ParseError
from src.backend.core.cache import get_analysis, set_analysis
from src.backend.core.code_hash import compute_code_hash
from src.backend.core.models import AnalysisResult, AsyncFunctionInfo, ParseErrorInfo, RuleId
from src.backend.rules.registry import build_suggestions
from src.backend.services.suggestion_merger import merge

log = logging.getLogger(__name__)


def _rules_applied(outcome: AnalysisOutcome) -> list[RuleId]:
    applied: list[RuleId] = []
    if outcome.eligibility.waterfall:
        applied.append("waterfall-chain")
    if outcome.eligibility.dependency_runs:
        applied.append("prefer-parallel-combinator")
    return applied


def build_result(
    outcome: AnalysisOutcome | ParseError,
    *,
    analysis_id: str,
    code_hash: str,
    filename: str | None,
    request_id: str
) -> AnalysisResult:
    """Analyzer output -> API shape. Parse errors come back as data, not exceptions."""
    if isinstance(outcome, ParseError):
        return AnalysisResult(
            analysis_id=analysis_id,
            code_hash=code_hash,
            from_cache=False,
            filename=filename,
            suggestions=[],
            parse_error=ParseErrorInfo(line=outcome.line, column=outcome.column, message=outcome.message),
            request_id=request_id
        )

    return AnalysisResult(
        analysis_id=analysis_id,
        code_hash=code_hash,
        from_cache=False,
        filename=filename,
        suggestions=merge(build_suggestions(outcome.diagnostics, filename)),
        rules_applied=_rules_applied(outcome),
        async_functions=[
            AsyncFunctionInfo(
                name=f.name,
                line=f.line,
                end_line=f.end_line,
                await_count=f.await_count,
                is_nested=f.is_nested
            )
            for f in outcome.async_functions
        ],
        request_id=request_id
    )


async def analyze(code: str, filename: str | None, request_id: str) -> AnalysisResult:
    """
    Full analysis pipeline:
    1. hash code + filename + rule config
    2. check cache, on hit return it with from_cache=True
    3. on miss: analyze in a thread, build suggestions, merge
    4. cache it unless it didn't parse
    """
    code_hash = compute_code_hash(code, filename)
    analysis_id = f"an-{uuid.uuid4().hex[:12]}"

    cached = await get_analysis(code_hash)
    if cached is not None:
        log.info(f"cache hit for {code_hash[:8]}, returning cached result")
        return cached.model_copy(update={
            "analysis_id": analysis_id,
            "from_cache": True,
            "request_id": request_id
        })

    start = time.perf_counter()
    outcome = await asyncio.to_thread(analyze_source, code, filename)
    analyze_latency.observe(time.perf_counter() - start)

    result = build_result(
        outcome,
        analysis_id=analysis_id,
        code_hash=code_hash,
        filename=filename,
        request_id=request_id
    )

    if result.parse_error is not None:
        parse_error_total.inc()
        return result

    for s in result.suggestions:
        diagnostics_total.labels(rule=s.rule).inc()

    await set_analysis(code_hash, result)
    log.info(f"cached {code_hash[:8]} with {len(result.suggestions)} suggestions")
    return result
