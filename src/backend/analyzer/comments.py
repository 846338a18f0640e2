# Author: Bradley R. Kinnard — the comments are talking to us

"""
Comment scanning for the two markers the analyzer respects:
  # waterfall: check | skip   in the file header, flips eligibility
  # noqa  /  # noqa: waterfall-chain   on an anchor line, drops that diagnostic
One tokenize pass, so `#` inside strings never counts.
"""

import io
import logging
import re
import tokenize
from dataclasses import dataclass, field
from typing import Literal

from src.backend.analyzer.diagnostics import Diagnostic

log = logging.getLogger(__name__)

Directive = Literal["check", "skip"]

DIRECTIVE_RE = re.compile(r"#\s*waterfall:\s*(check|skip)\s*$", re.IGNORECASE)
NOQA_RE = re.compile(r"#\s*noqa\b(?::\s*(?P<codes>[\w\-]+(?:\s*,\s*[\w\-]+)*))?", re.IGNORECASE)

_HEADER_SKIP = {tokenize.NL, tokenize.NEWLINE, tokenize.ENCODING}


@dataclass
class Comments:
    by_line: dict[int, str] = field(default_factory=dict)
    header: list[str] = field(default_factory=list)  # comments before the first line of code


def scan_comments(code: str) -> Comments:
    """Collect comments by line. Call after ast.parse succeeded."""
    found = Comments()
    in_header = True
    try:
        for tok in tokenize.generate_tokens(io.StringIO(code).readline):
            if tok.type == tokenize.COMMENT:
                found.by_line[tok.start[0]] = tok.string
                if in_header:
                    found.header.append(tok.string)
            elif tok.type not in _HEADER_SKIP:
                in_header = False
    except (tokenize.TokenError, SyntaxError) as e:
        # ast accepted it, tokenize choked on the tail. keep what we have
        log.debug(f"tokenize stopped early: {e}")
    return found


def read_directive(comments: Comments) -> Directive | None:
    """First `# waterfall: ...` header comment wins."""
    for text in comments.header:
        m = DIRECTIVE_RE.match(text.strip())
        if m:
            return m.group(1).lower()  # type: ignore[return-value]
    return None


def noqa_codes(comment: str) -> frozenset[str] | None:
    """None = no noqa at all. Empty set = bare `# noqa`, everything goes."""
    m = NOQA_RE.search(comment)
    if m is None:
        return None
    codes = m.group("codes")
    if not codes:
        return frozenset()
    return frozenset(c.strip().lower() for c in codes.split(",") if c.strip())


def is_suppressed(diagnostic: Diagnostic, comments: Comments) -> bool:
    comment = comments.by_line.get(diagnostic.line)
    if comment is None:
        return False
    codes = noqa_codes(comment)
    if codes is None:
        return False
    return not codes or diagnostic.kind.value in codes


def apply_suppressions(diagnostics: list[Diagnostic], comments: Comments) -> list[Diagnostic]:
    kept = [d for d in diagnostics if not is_suppressed(d, comments)]
    if len(kept) != len(diagnostics):
        log.debug(f"noqa dropped {len(diagnostics) - len(kept)} diagnostic(s)")
    return kept
