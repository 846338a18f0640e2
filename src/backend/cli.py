# Author: Bradley R. Kinnard — same rules, no server required

"""
Lint files on disk with the same analyzer the API uses. No redis, no cache.
run it: python -m src.backend.cli src/ app/api/routes.py [--all] [--json]

exit 0 = clean, 1 = findings, 2 = something couldn't be read or parsed
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterator

from src.backend.analyzer.eligibility import EVERYTHING
from src.backend.analyzer.engine import analyze_source
from src.backend.analyzer.parser import ParseError
from src.backend.core.models import Suggestion
from src.backend.logging_config import setup_logging
from src.backend.rules.registry import build_suggestions
from src.backend.services.suggestion_merger import merge

log = logging.getLogger(__name__)

SKIP_DIRS = {"__pycache__", "node_modules", "venv", "env", "site-packages"}


def iter_python_files(paths: list[str]) -> Iterator[Path]:
    """Files as given, directories walked. Hidden dirs and virtualenvs skipped."""
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for py_file in sorted(path.rglob("*.py")):
                rel_parts = py_file.relative_to(path).parts[:-1]
                if any(p.startswith(".") or p in SKIP_DIRS for p in rel_parts):
                    continue
                yield py_file
        else:
            yield path


def lint_file(path: Path, force: bool = False) -> tuple[list[Suggestion], str | None]:
    """(suggestions, error). Error is set when the file can't be read or parsed."""
    try:
        code = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return [], f"cannot read: {e}"

    filename = path.as_posix()
    outcome = analyze_source(code, filename, eligibility=EVERYTHING if force else None)
    if isinstance(outcome, ParseError):
        return [], f"syntax error at {outcome.line}:{outcome.column}: {outcome.message}"

    return merge(build_suggestions(outcome.diagnostics, filename)), None


def format_suggestion(s: Suggestion) -> str:
    # flake8 style, 1-based column
    return f"{s.filename}:{s.line}:{s.column + 1}: {s.rule} {s.message}"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="waterfall-enforcer",
        description="Flag sequential awaits that could run under asyncio.gather()."
    )
    parser.add_argument("paths", nargs="+", help="files or directories to check")
    parser.add_argument(
        "--all",
        action="store_true",
        dest="force",
        help="run every rule on every file, ignore path patterns and directives"
    )
    parser.add_argument("--json", action="store_true", help="print findings as JSON")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    # logs go to stderr, findings own stdout
    setup_logging(level=args.log_level, stream=sys.stderr)

    findings: list[Suggestion] = []
    errors: dict[str, str] = {}
    checked = 0

    for path in iter_python_files(args.paths):
        checked += 1
        suggestions, error = lint_file(path, force=args.force)
        if error:
            errors[path.as_posix()] = error
        findings.extend(suggestions)

    if args.json:
        print(json.dumps({
            "checked": checked,
            "suggestions": [s.model_dump(mode="json") for s in findings],
            "errors": errors,
        }, indent=2))
    else:
        for s in findings:
            print(format_suggestion(s))
        for name, error in errors.items():
            print(f"{name}: {error}", file=sys.stderr)

    log.info(f"checked {checked} file(s): {len(findings)} finding(s), {len(errors)} error(s)")

    if errors:
        return 2
    return 1 if findings else 0


if __name__ == "__main__":
    sys.exit(main())
