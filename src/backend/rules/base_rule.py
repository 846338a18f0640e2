# Author: Bradley R. Kinnard — all rules inherit from this or they don't exist

"""ABC for rules. The analyzer says where and what kind, the rule says how bad and why."""

import uuid
from abc import ABC, abstractmethod

from src.backend.analyzer.diagnostics import Diagnostic
from src.backend.core.models import RuleId, RuleInfo, Suggestion


class BaseRule(ABC):

    name: RuleId
    severity: int
    confidence: float
    description: str
    id_prefix: str

    def __init__(self, name: RuleId, severity: int, confidence: float, id_prefix: str):
        self.name = name
        self.severity = severity
        self.confidence = confidence
        self.id_prefix = id_prefix

    @abstractmethod
    def message(self, diagnostic: Diagnostic) -> str:
        """override this. full sentence, include the fix"""
        ...

    def build(self, diagnostic: Diagnostic, filename: str | None = None) -> Suggestion:
        return Suggestion(
            id=f"{self.id_prefix}-{uuid.uuid4().hex[:8]}",
            rule=self.name,
            message=self.message(diagnostic),
            severity=self.severity,
            confidence=self.confidence,
            score=0.0,
            filename=filename,
            line=diagnostic.line,
            column=diagnostic.column,
            end_line=diagnostic.end_line,
            end_column=diagnostic.end_column
        )

    def info(self) -> RuleInfo:
        return RuleInfo(
            id=self.name,
            severity=self.severity,
            confidence=self.confidence,
            description=self.description
        )
