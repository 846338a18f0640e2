# Author: Bradley R. Kinnard — two awaits is a pair, three is a habit

"""
Waterfall classifier. Counts every await in a scope, any nesting depth.
Three or more with no asyncio.gather/asyncio.wait anywhere in the function = one diagnostic,
anchored on the third await (not the def) so `# noqa` on that line does its job.

Any combinator call silences the whole scope, even if other awaits stay sequential.
Lenient on purpose, don't tighten it.
"""

from src.backend.analyzer.diagnostics import Diagnostic, DiagnosticKind
from src.backend.analyzer.scope import Scope

WATERFALL_THRESHOLD = 3


class WaterfallPolicy:

    threshold = WATERFALL_THRESHOLD

    def on_scope_exit(self, scope: Scope, outermost: bool) -> list[Diagnostic]:
        ops = scope.awaited_operations
        if scope.has_parallel_combinator or len(ops) < self.threshold:
            return []
        return [Diagnostic.at(DiagnosticKind.WATERFALL_CHAIN, ops[self.threshold - 1].node)]
