# Author: Bradley R. Kinnard — the contract between client and server

"""
API schemas. Re-exports from models.py plus any API-specific wrappers.
Keep request/response definitions in one place for OpenAPI docs.
"""

from pydantic import BaseModel

# re-export the core models for API use
from src.backend.core.models import (
    AnalyzeRequest,
    AnalysisResult,
    BatchAnalyzeRequest,
    BatchResult,
    HealthResponse,
    RuleInfo,
    Suggestion,
)

__all__ = [
    "AnalyzeRequest",
    "AnalysisResult",
    "BatchAnalyzeRequest",
    "BatchResult",
    "HealthResponse",
    "RuleInfo",
    "RulesResponse",
    "Suggestion",
]


class RulesResponse(BaseModel):
    """GET /rules. Rule catalogue plus the combinator names that silence the waterfall rule."""
    rules: list[RuleInfo]
    parallel_combinators: list[str]
    request_id: str
