# Author: Bradley R. Kinnard — deduplicate and promote the truth

"""Score suggestions, drop exact repeats, sort by where they sit in the file."""

from src.backend.core.models import Suggestion

# tiebreak when two rules land on the same spot: the concrete fix wins
RULE_PRIORITY = {"prefer-parallel-combinator": 2, "waterfall-chain": 1}


def _score_suggestion(s: Suggestion) -> Suggestion:
    """
    Score = severity x confidence, severity normalized to 0.2-1.0.
    Warning (3) with conf 0.6 = 0.36
    Info (2) with conf 0.85 = 0.34
    """
    return s.model_copy(update={"score": round((s.severity / 5.0) * s.confidence, 4)})


def _dedup_key(s: Suggestion) -> tuple:
    return (s.filename, s.rule, s.line, s.column)


def _is_better(new: Suggestion, existing: Suggestion) -> bool:
    """Same rule, same spot. Highest severity wins, tie goes to highest confidence."""
    if new.severity != existing.severity:
        return new.severity > existing.severity
    return new.confidence > existing.confidence


def _deduplicate(suggestions: list[Suggestion]) -> list[Suggestion]:
    seen: dict[tuple, Suggestion] = {}
    for s in suggestions:
        key = _dedup_key(s)
        if key not in seen or _is_better(s, seen[key]):
            seen[key] = s
    return list(seen.values())


def merge(suggestions: list[Suggestion]) -> list[Suggestion]:
    """
    Score, dedupe, then order like a linter would: file, line, column.
    Same spot: higher score first.
    """
    deduped = _deduplicate([_score_suggestion(s) for s in suggestions])
    deduped.sort(key=lambda x: (x.filename or "", x.line, x.column, -x.score, -RULE_PRIORITY.get(x.rule, 0)))
    return deduped
