# Author: Bradley R. Kinnard — roll call

"""Rule lookup by diagnostic kind. Turns analyzer output into Suggestions."""

from src.backend.analyzer.diagnostics import Diagnostic, DiagnosticKind
from src.backend.core.models import Suggestion
from src.backend.rules.base_rule import BaseRule
from src.backend.rules.parallel_combinator_rule import ParallelCombinatorRule
from src.backend.rules.waterfall_rule import WaterfallRule

# stateless, fine to build at import
_RULES: dict[DiagnosticKind, BaseRule] = {
    DiagnosticKind.WATERFALL_CHAIN: WaterfallRule(),
    DiagnosticKind.PREFER_PARALLEL_COMBINATOR: ParallelCombinatorRule(),
}


def get_rule(kind: DiagnosticKind) -> BaseRule:
    return _RULES[kind]


def all_rules() -> list[BaseRule]:
    return list(_RULES.values())


def build_suggestions(diagnostics: list[Diagnostic], filename: str | None = None) -> list[Suggestion]:
    return [get_rule(d.kind).build(d, filename) for d in diagnostics]
