# Author: Bradley R. Kinnard — parse first, ask questions later

"""
Python AST parser. If it won't parse, we report where and stop there.
Also summarizes every async def so the API can show what got looked at.
"""

import ast
from dataclasses import dataclass


@dataclass
class ParseError:
    """When code won't parse at all."""
    line: int
    column: int
    message: str


@dataclass
class AsyncFunctionNode:
    name: str
    line: int
    end_line: int
    await_count: int  # own awaits only, nested async defs count for themselves
    is_nested: bool  # inside another async def


def parse_python(code: str, filename: str = "<snippet>") -> ast.Module | ParseError:
    """Parse or explain why not. Never raises on bad input."""
    try:
        return ast.parse(code, filename=filename)
    except SyntaxError as e:
        return ParseError(
            line=e.lineno or 1,
            column=e.offset or 0,
            message=str(e.msg) if e.msg else "Syntax error"
        )
    except ValueError as e:
        # null bytes in source
        return ParseError(line=1, column=0, message=str(e))


def _own_awaits(func: ast.AsyncFunctionDef) -> int:
    count = 0
    pending: list[ast.AST] = list(func.body)
    while pending:
        node = pending.pop()
        if isinstance(node, ast.AsyncFunctionDef):
            # its decorators, defaults and annotations still run out here
            pending.extend(node.decorator_list)
            pending.append(node.args)
            if node.returns is not None:
                pending.append(node.returns)
            continue
        if isinstance(node, ast.Await):
            count += 1
        pending.extend(ast.iter_child_nodes(node))
    return count


def summarize_async_functions(tree: ast.AST) -> list[AsyncFunctionNode]:
    """Every async def in source order, flagged if it sits inside another one."""
    found: list[AsyncFunctionNode] = []

    def walk(node: ast.AST, async_depth: int) -> None:
        for child in ast.iter_child_nodes(node):
            if isinstance(child, ast.AsyncFunctionDef):
                found.append(AsyncFunctionNode(
                    name=child.name,
                    line=child.lineno,
                    end_line=child.end_lineno or child.lineno,
                    await_count=_own_awaits(child),
                    is_nested=async_depth > 0
                ))
                walk(child, async_depth + 1)
            else:
                walk(child, async_depth)

    walk(tree, 0)
    found.sort(key=lambda f: f.line)
    return found


def is_parseable(code: str) -> bool:
    """Quick check if code parses."""
    return not isinstance(parse_python(code), ParseError)
