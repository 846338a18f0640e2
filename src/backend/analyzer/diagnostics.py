# Author: Bradley R. Kinnard — where on the line the bad news goes

"""What the analyzer hands back. A kind and a place, nothing else. Messages live in rules/."""

import ast
from dataclasses import dataclass
from enum import Enum


class DiagnosticKind(str, Enum):
    WATERFALL_CHAIN = "waterfall-chain"
    PREFER_PARALLEL_COMBINATOR = "prefer-parallel-combinator"


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    line: int  # 1-based, like ast
    column: int  # 0-based, like ast
    end_line: int
    end_column: int

    @classmethod
    def at(cls, kind: DiagnosticKind, node: ast.AST) -> "Diagnostic":
        """Anchor on a node's exact span so `# noqa` on that line works."""
        return cls(
            kind=kind,
            line=node.lineno,
            column=node.col_offset,
            end_line=node.end_lineno or node.lineno,
            end_column=node.end_col_offset if node.end_col_offset is not None else node.col_offset,
        )

    @property
    def position(self) -> tuple[int, int]:
        return (self.line, self.column)
