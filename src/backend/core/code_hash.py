# Author: Bradley R. Kinnard — determinism is underrated

"""
Cache keys. Raw code, no normalization: line numbers and `# noqa` comments
change the answer, so a reformatted file is a different file.
"""

import hashlib

from src.backend.config import settings


def ruleset_fingerprint() -> str:
    """Everything in settings that can change a result for the same code."""
    return "|".join([
        ",".join(sorted(settings.combinators)),
        settings.handler_patterns,
        settings.service_patterns,
    ])


def compute_code_hash(code: str, filename: str | None = None, ruleset: str | None = None) -> str:
    """sha256 over code + filename + rule config. NUL separated so fields can't bleed together."""
    h = hashlib.sha256()
    for part in (code, filename or "", ruleset if ruleset is not None else ruleset_fingerprint()):
        h.update(part.encode("utf-8"))
        h.update(b"\x00")
    return h.hexdigest()
