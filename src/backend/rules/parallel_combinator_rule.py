# Author: Bradley R. Kinnard — max(a, b) beats a + b

"""Parallel combinator rule. Back-to-back awaits that never read each other's results."""

from src.backend.analyzer.diagnostics import Diagnostic
from src.backend.core.models import Severity
from src.backend.rules.base_rule import BaseRule


class ParallelCombinatorRule(BaseRule):

    description = (
        "Flags runs of top-level awaited statements in a handler whose awaited expressions "
        "reference nothing bound earlier in the run. They can run under one asyncio.gather()."
    )

    def __init__(self):
        super().__init__("prefer-parallel-combinator", Severity.INFO, 0.85, "ppc")

    def message(self, diagnostic: Diagnostic) -> str:
        return (
            f"Sequential awaits for independent work starting at line {diagnostic.line}. "
            "None of these awaits uses a result bound by the ones before it, "
            "so they run one after another for no reason. "
            "Fix: `a, b = await asyncio.gather(fetch_a(), fetch_b())`. "
            "Use `asyncio.gather(..., return_exceptions=True)` when each call may fail on its own. "
            "If one result feeds the next call, keep the order and ignore this."
        )
