# Author: Bradley R. Kinnard — one walk, two verdicts

"""
Entry point for a single source unit. Parse, decide eligibility, walk once with whichever
policies apply, drop noqa'd lines, sort. Synchronous and self-contained, safe to run
many of these side by side in threads.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from src.backend.analyzer.comments import apply_suppressions, read_directive, scan_comments
from src.backend.analyzer.dependency_runs import DependencyRunPolicy
from src.backend.analyzer.diagnostics import Diagnostic
from src.backend.analyzer.eligibility import Eligibility, resolve_eligibility
from src.backend.analyzer.parser import AsyncFunctionNode, ParseError, parse_python, summarize_async_functions
from src.backend.analyzer.scope import ScopePolicy, ScopeTracker
from src.backend.analyzer.waterfall import WaterfallPolicy
from src.backend.config import settings

log = logging.getLogger(__name__)


@dataclass
class AnalysisOutcome:
    diagnostics: list[Diagnostic]
    eligibility: Eligibility
    async_functions: list[AsyncFunctionNode] = field(default_factory=list)


def build_policies(eligibility: Eligibility) -> list[ScopePolicy]:
    policies: list[ScopePolicy] = []
    if eligibility.waterfall:
        policies.append(WaterfallPolicy())
    if eligibility.dependency_runs:
        policies.append(DependencyRunPolicy())
    return policies


def analyze_source(
    code: str,
    filename: str | None = None,
    *,
    eligibility: Eligibility | None = None,
    combinators: Iterable[str] | None = None
) -> AnalysisOutcome | ParseError:
    """
    Analyze one file or snippet.
    `eligibility` skips the path/directive check when the caller already knows.
    `combinators` overrides settings.parallel_combinators.
    """
    tree = parse_python(code, filename or "<snippet>")
    if isinstance(tree, ParseError):
        log.info(f"parse failed for {filename or '<snippet>'} at {tree.line}:{tree.column}: {tree.message}")
        return tree

    comments = scan_comments(code)
    if eligibility is None:
        eligibility = resolve_eligibility(
            filename,
            read_directive(comments),
            settings.handler_patterns,
            settings.service_patterns
        )

    diagnostics: list[Diagnostic] = []
    policies = build_policies(eligibility)
    if policies:
        tracker = ScopeTracker(policies, combinators if combinators is not None else settings.combinators)
        diagnostics = apply_suppressions(tracker.run(tree), comments)
        diagnostics.sort(key=lambda d: (d.line, d.column, d.kind.value))
    else:
        log.debug(f"{filename}: no rule eligible, skipping walk")

    if diagnostics:
        log.info(f"{filename or '<snippet>'}: {len(diagnostics)} diagnostic(s)")

    return AnalysisOutcome(
        diagnostics=diagnostics,
        eligibility=eligibility,
        async_functions=summarize_async_functions(tree)
    )
