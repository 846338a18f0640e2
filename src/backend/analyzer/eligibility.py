# Author: Bradley R. Kinnard — not every file deserves a lecture

"""
Which rules run on which file. Path globs decide, a header directive overrides.
The waterfall rule gets the looser gate: handlers and services. The run rule only handlers.
No filename (pasted snippet) means the caller asked on purpose, so everything runs.
"""

from dataclasses import dataclass
from fnmatch import fnmatchcase

from src.backend.analyzer.comments import Directive
from src.backend.config import split_csv


@dataclass(frozen=True)
class Eligibility:
    waterfall: bool
    dependency_runs: bool

    @property
    def any(self) -> bool:
        return self.waterfall or self.dependency_runs


EVERYTHING = Eligibility(waterfall=True, dependency_runs=True)
NOTHING = Eligibility(waterfall=False, dependency_runs=False)


def normalize_path(filename: str) -> str:
    """Forward slashes, leading slash so `api/x.py` still hits `*/api/*`."""
    path = filename.replace("\\", "/")
    if not path.startswith("/"):
        path = "/" + path
    return path


def matches_any(filename: str, patterns: str) -> bool:
    path = normalize_path(filename)
    return any(fnmatchcase(path, pat) for pat in split_csv(patterns))


def resolve_eligibility(
    filename: str | None,
    directive: Directive | None,
    handler_patterns: str,
    service_patterns: str
) -> Eligibility:
    if directive == "skip":
        return NOTHING
    if directive == "check" or not filename:
        return EVERYTHING

    is_handler = matches_any(filename, handler_patterns)
    is_service = matches_any(filename, service_patterns)
    return Eligibility(waterfall=is_handler or is_service, dependency_runs=is_handler)
