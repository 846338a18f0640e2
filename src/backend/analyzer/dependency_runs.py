# Author: Bradley R. Kinnard — sum of latencies vs max of latencies

"""
Dependency-run classifier.

Only looks at direct body statements of an outermost async function (no if/for/with descent),
and only two shapes: `x = await f()` and bare `await f()`. Walks them left to right keeping
the names bound so far in the current run. A statement whose awaited expression reads one of
those names breaks the run; otherwise it joins it.

Each run of 2+ gets exactly one diagnostic, on the run's second statement.
The first one is paid for regardless, later ones would hide short runs.
"""

import logging
from typing import Sequence

from src.backend.analyzer.diagnostics import Diagnostic, DiagnosticKind
from src.backend.analyzer.scope import AwaitedOperation, Scope

log = logging.getLogger(__name__)


def find_independent_runs(operations: Sequence[AwaitedOperation]) -> list[list[AwaitedOperation]]:
    """Split into maximal runs. A dependency always starts a brand new run, never merges back."""
    if not operations:
        return []

    runs: list[list[AwaitedOperation]] = []
    current = [operations[0]]
    cumulative_bound = set(operations[0].bound_names)  # S[0] refs never computed

    for op in operations[1:]:
        if op.referenced_names & cumulative_bound:
            runs.append(current)
            current = [op]
            cumulative_bound.clear()
        else:
            current.append(op)
        # a later statement may still depend on this one
        cumulative_bound |= op.bound_names

    runs.append(current)
    return runs


class DependencyRunPolicy:

    def on_scope_exit(self, scope: Scope, outermost: bool) -> list[Diagnostic]:
        if not outermost:
            return []

        ops = scope.top_level_operations
        if len(ops) < 2:
            return []

        found = []
        for run in find_independent_runs(ops):
            if len(run) >= 2:
                found.append(Diagnostic.at(DiagnosticKind.PREFER_PARALLEL_COMBINATOR, run[1].statement))

        if found:
            log.debug(f"{scope.node.name}: {len(found)} independent await run(s)")
        return found
