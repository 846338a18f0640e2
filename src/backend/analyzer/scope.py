# Author: Bradley R. Kinnard — one stack per walk, no globals

"""
Scope tracker. One Scope per open `async def`, innermost on top of the stack.
Every await lands on whatever scope is on top when we reach it, so a nested
async function never pollutes the outer function's count.

The stack lives on the tracker instance. New tracker per source unit, always.
"""

import ast
import logging
from dataclasses import dataclass, field
from functools import cached_property
from typing import Iterable, Protocol

from src.backend.analyzer.diagnostics import Diagnostic
from src.backend.analyzer.references import collect_references, collect_written_names

log = logging.getLogger(__name__)

# asyncio.gather = wait for all to finish, asyncio.wait = wait for all to settle
DEFAULT_COMBINATORS = frozenset({"asyncio.gather", "asyncio.wait"})


class ScopeStackError(RuntimeError):
    """Scopes left open after the walk. A traversal bug, never a valid end state."""


@dataclass(eq=False)
class AwaitedOperation:
    """One await. `statement` is set only when it's the whole value of a direct body statement."""
    node: ast.Await
    statement: ast.stmt | None = None
    bound_names: frozenset[str] = frozenset()

    @cached_property
    def referenced_names(self) -> frozenset[str]:
        # lazy, only the run classifier ever asks
        return frozenset(collect_references(self.node))


@dataclass(eq=False)
class Scope:
    node: ast.AsyncFunctionDef
    awaited_operations: list[AwaitedOperation] = field(default_factory=list)
    has_parallel_combinator: bool = False
    # await node -> (direct body statement, names it binds)
    qualifying: dict[ast.Await, tuple[ast.stmt, frozenset[str]]] = field(default_factory=dict, repr=False)

    def record(self, node: ast.Await) -> AwaitedOperation:
        stmt, bound = self.qualifying.get(node, (None, frozenset()))
        op = AwaitedOperation(node=node, statement=stmt, bound_names=bound)
        self.awaited_operations.append(op)
        return op

    @property
    def top_level_operations(self) -> list[AwaitedOperation]:
        """Awaits that are a whole direct body statement, in source order."""
        return [op for op in self.awaited_operations if op.statement is not None]


class ScopePolicy(Protocol):
    def on_scope_exit(self, scope: Scope, outermost: bool) -> list[Diagnostic]:
        ...


def awaited_binding(stmt: ast.stmt) -> tuple[ast.Await, frozenset[str]] | None:
    """
    Statement shapes the run classifier cares about:
      x = await f()       -> binds x
      a = b = await f()   -> binds a and b, same value
      self.x = await f()  -> binds self, a later self.x.id depends on it
      x: T = await f()    -> binds x
      await f()           -> binds nothing
    """
    if isinstance(stmt, ast.Assign) and isinstance(stmt.value, ast.Await):
        bound: set[str] = set()
        for target in stmt.targets:
            bound |= collect_written_names(target)
        return stmt.value, frozenset(bound)
    if isinstance(stmt, ast.AnnAssign) and isinstance(stmt.value, ast.Await):
        return stmt.value, frozenset(collect_written_names(stmt.target))
    if isinstance(stmt, ast.Expr) and isinstance(stmt.value, ast.Await):
        return stmt.value, frozenset()
    return None


def is_combinator_call(node: ast.Call, combinators: frozenset[str]) -> bool:
    """`asyncio.gather(...)` style: attribute on a bare name. Name-based, no semantics."""
    func = node.func
    return (
        isinstance(func, ast.Attribute)
        and isinstance(func.value, ast.Name)
        and f"{func.value.id}.{func.attr}" in combinators
    )


class ScopeTracker(ast.NodeVisitor):
    """Single traversal. Feeds every await and combinator call to the top scope, runs policies on exit."""

    def __init__(self, policies: Iterable[ScopePolicy], combinators: Iterable[str] = DEFAULT_COMBINATORS):
        self.policies = list(policies)
        self.combinators = frozenset(combinators)
        self.diagnostics: list[Diagnostic] = []
        self._stack: list[Scope] = []

    @property
    def depth(self) -> int:
        return len(self._stack)

    def run(self, tree: ast.AST) -> list[Diagnostic]:
        if self._stack:
            raise ScopeStackError("tracker reused while scopes are still open")
        self.visit(tree)
        if self._stack:
            raise ScopeStackError(f"{len(self._stack)} scope(s) still open after traversal")
        return self.diagnostics

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> None:
        # decorators, defaults and annotations are evaluated by the enclosing scope
        for decorator in node.decorator_list:
            self.visit(decorator)
        self.visit(node.args)
        if node.returns is not None:
            self.visit(node.returns)

        self._enter(node)
        for stmt in node.body:
            self.visit(stmt)
        self._exit(node)

    def visit_Await(self, node: ast.Await) -> None:
        if self._stack:
            self._stack[-1].record(node)
        self.generic_visit(node)  # await f(await g()) counts both

    def visit_Call(self, node: ast.Call) -> None:
        if self._stack and is_combinator_call(node, self.combinators):
            self._stack[-1].has_parallel_combinator = True
        self.generic_visit(node)

    def _enter(self, node: ast.AsyncFunctionDef) -> None:
        scope = Scope(node=node)
        for stmt in node.body:
            found = awaited_binding(stmt)
            if found is not None:
                await_node, bound = found
                scope.qualifying[await_node] = (stmt, bound)
        self._stack.append(scope)

    def _exit(self, node: ast.AsyncFunctionDef) -> None:
        if not self._stack or self._stack[-1].node is not node:
            # can't happen with structured recursion, don't pop someone else's scope
            log.debug(f"scope exit mismatch for {node.name} on line {node.lineno}, ignoring")
            return

        scope = self._stack.pop()
        outermost = not self._stack
        for policy in self.policies:
            self.diagnostics.extend(policy.on_scope_exit(scope, outermost))
