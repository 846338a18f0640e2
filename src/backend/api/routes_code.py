# Author: Bradley R. Kinnard — where code goes to be judged

"""POST /analyze and /analyze/batch. Validate, analyze, return."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from src.backend.api.dependencies import get_request_id
from src.backend.api.schemas import AnalysisResult, AnalyzeRequest, BatchAnalyzeRequest, BatchResult
from src.backend.services.analyzer_service import analyze
from src.backend.services.batch_dispatcher import dispatch
from src.backend.utils.validation import validate_analyze_request, validate_batch_size, validate_language

router = APIRouter(prefix="/analyze", tags=["analyze"])
log = logging.getLogger(__name__)


@router.post("", response_model=AnalysisResult)
async def analyze_code(
    body: AnalyzeRequest,
    request_id: Annotated[str, Depends(get_request_id)]
) -> AnalysisResult:
    """one source unit in, merged suggestions out"""
    validate_analyze_request(body.code, body.language, body.filename)

    log.info(f"analyze | file={body.filename or '<snippet>'} len={len(body.code)}")

    result = await analyze(code=body.code, filename=body.filename, request_id=request_id)

    log.info(f"analyze done | id={result.analysis_id} cache={result.from_cache} n={len(result.suggestions)}")
    return result


@router.post("/batch", response_model=BatchResult)
async def analyze_batch(
    body: BatchAnalyzeRequest,
    request_id: Annotated[str, Depends(get_request_id)]
) -> BatchResult:
    """many files, analyzed side by side. per-file failures show up as FileResult.error"""
    validate_language(body.language)
    validate_batch_size(len(body.files))
    for f in body.files:
        validate_analyze_request(f.code, body.language, f.filename)

    log.info(f"batch | files={len(body.files)}")
    return await dispatch(body.files, request_id)
