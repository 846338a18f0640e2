# Author: Bradley R. Kinnard — where types go to be validated

"""
Pydantic models for the analysis pipeline and API responses.
Severity enum so we stop guessing what 3 means.
"""

from enum import IntEnum
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field

RuleId = Literal["waterfall-chain", "prefer-parallel-combinator"]


class Severity(IntEnum):
    """No magic numbers. Skip 4 because nothing is just 'error' without being critical."""
    HINT = 1
    INFO = 2
    WARNING = 3
    CRITICAL = 5  # intentionally skip 4, CRITICAL stands alone


class Suggestion(BaseModel):
    """One finding from one rule. Frozen so we don't accidentally mutate cached results."""
    model_config = ConfigDict(frozen=True)

    id: str
    rule: RuleId
    message: str
    severity: int = Field(default=Severity.INFO, ge=1, le=5)  # use Severity enum values
    confidence: float = Field(ge=0.0, le=1.0)
    score: float = Field(default=0.0)  # severity x confidence, for ordering
    filename: str | None = None
    line: int
    column: int
    end_line: int
    end_column: int


class AsyncFunctionInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    line: int
    end_line: int
    await_count: int
    is_nested: bool


class ParseErrorInfo(BaseModel):
    line: int
    column: int
    message: str


class AnalysisResult(BaseModel):
    """What /analyze returns. Suggestions already merged, scored, sorted by position."""
    analysis_id: str
    code_hash: str
    from_cache: bool
    filename: str | None = None
    suggestions: list[Suggestion]
    rules_applied: list[RuleId] = Field(default_factory=list)
    async_functions: list[AsyncFunctionInfo] = Field(default_factory=list)
    parse_error: ParseErrorInfo | None = None  # set = nothing else was looked at
    request_id: str


class FileResult(BaseModel):
    filename: str | None = None
    result: AnalysisResult | None = None
    error: str | None = None  # timeout, crash, whatever
    took_ms: int


class BatchResult(BaseModel):
    batch_id: str
    files: list[FileResult]
    total_suggestions: int
    request_id: str


class RuleInfo(BaseModel):
    id: RuleId
    severity: int
    confidence: float
    description: str


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded", "down"]
    request_id: str
    git_sha: str | None = None
    redis: str | None = None


# request models

class AnalyzeRequest(BaseModel):
    language: str = "python"
    code: str
    filename: str | None = None  # drives eligibility, None = run every rule


class SourceFile(BaseModel):
    filename: str | None = None
    code: str


class BatchAnalyzeRequest(BaseModel):
    language: str = "python"
    files: list[SourceFile]
