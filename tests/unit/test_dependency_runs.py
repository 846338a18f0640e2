# Author: Bradley R. Kinnard — who actually needs whom

"""
Dependency-run policy: run splitting, anchor on the second statement, top-level only.
Run with: pytest tests/unit/test_dependency_runs.py -v
"""

import ast
import textwrap

from src.backend.analyzer.dependency_runs import DependencyRunPolicy, find_independent_runs
from src.backend.analyzer.diagnostics import DiagnosticKind
from src.backend.analyzer.eligibility import Eligibility
from src.backend.analyzer.engine import analyze_source
from src.backend.analyzer.scope import ScopeTracker

RUNS_ONLY = Eligibility(waterfall=False, dependency_runs=True)


def _run(code: str):
    code = textwrap.dedent(code)
    outcome = analyze_source(code, eligibility=RUNS_ONLY)
    return code, outcome.diagnostics


def _line_of(code: str, snippet: str) -> int:
    for i, line in enumerate(code.splitlines(), start=1):
        if snippet in line:
            return i
    raise AssertionError(f"{snippet!r} not in code")


class CapturePolicy:
    def __init__(self):
        self.scopes = []

    def on_scope_exit(self, scope, outermost):
        self.scopes.append(scope)
        return []


def _top_ops(code: str):
    capture = CapturePolicy()
    ScopeTracker([capture]).run(ast.parse(textwrap.dedent(code)))
    return capture.scopes[-1].top_level_operations


def test_three_independent_statements_report_once_at_second():
    code, diags = _run("""
        async def handler():
            a = await fetch_a()
            b = await fetch_b()
            c = await fetch_c()
            return a, b, c
    """)
    assert len(diags) == 1
    d = diags[0]
    assert d.kind == DiagnosticKind.PREFER_PARALLEL_COMBINATOR
    assert d.line == _line_of(code, "b = await")
    assert d.column == 4  # the statement, not the await


def test_dependency_break_starts_a_fresh_run():
    """A binds x, B reads x, C independent: [A] [B, C], one report at C"""
    code, diags = _run("""
        async def handler():
            x = await fetch_a()
            y = await fetch_b(x)
            z = await fetch_c()
    """)
    assert len(diags) == 1
    assert diags[0].line == _line_of(code, "z = await")


def test_runs_split_as_expected():
    ops = _top_ops("""
        async def handler():
            x = await fetch_a()
            y = await fetch_b(x)
            z = await fetch_c()
    """)
    runs = find_independent_runs(ops)
    assert [len(r) for r in runs] == [1, 2]


def test_two_runs_two_reports():
    code, diags = _run("""
        async def handler():
            a = await fetch_a()
            b = await fetch_b()
            c = await fetch_c(b)
            d = await fetch_d()
    """)
    assert [d.line for d in diags] == [_line_of(code, "b = await"), _line_of(code, "d = await")]


def test_reading_an_earlier_binding_breaks():
    _, diags = _run("""
        async def handler():
            a = await fetch_a()
            c = await fetch_c(a.id)
    """)
    assert diags == []


def test_dependency_on_first_member_of_a_longer_run_breaks():
    """C reads a, bound two statements back, not by the one right before it"""
    ops = _top_ops("""
        async def handler():
            a = await fetch_a()
            b = await fetch_b()
            c = await fetch_c(a)
    """)
    assert [len(r) for r in find_independent_runs(ops)] == [2, 1]


def test_later_member_bindings_still_count():
    """B is independent but binds b. C reads b, so C breaks the run"""
    ops = _top_ops("""
        async def handler():
            a = await fetch_a()
            b = await fetch_b()
            c = await fetch_c(b)
    """)
    assert [len(r) for r in find_independent_runs(ops)] == [2, 1]


def test_bare_await_statements_bind_nothing():
    code, diags = _run("""
        async def handler():
            await warm_cache()
            await prime_pool()
    """)
    assert len(diags) == 1
    assert diags[0].line == _line_of(code, "prime_pool")


def test_destructured_names_are_bindings():
    _, diags = _run("""
        async def handler():
            user, *roles = await load_user()
            await audit(roles)
    """)
    assert diags == []


def test_chained_assignment_binds_every_target():
    _, diags = _run("""
        async def handler():
            a = b = await get_user()
            posts = await get_posts(b.id)
    """)
    assert diags == []


def test_attribute_target_makes_later_reads_dependent():
    _, diags = _run("""
        class Handler:
            async def get(self):
                self.user = await get_user()
                posts = await get_posts(self.user.id)
    """)
    assert diags == []


def test_subscript_target_makes_later_reads_dependent():
    _, diags = _run("""
        async def handler(ctx):
            ctx["user"] = await get_user()
            posts = await get_posts(ctx["user"].id)
    """)
    assert diags == []


def test_attribute_target_inside_tuple():
    _, diags = _run("""
        async def handler(state):
            state.user, token = await login()
            profile = await get_profile(state.user)
    """)
    assert diags == []


def test_attribute_target_with_unrelated_follower_still_reports():
    code, diags = _run("""
        class Handler:
            async def get(self):
                self.user = await get_user()
                config = await load_config()
    """)
    assert len(diags) == 1
    assert diags[0].line == _line_of(code, "config = await")


def test_statements_inside_blocks_are_ignored():
    code, diags = _run("""
        async def handler():
            a = await fetch_a()
            if a:
                b = await fetch_b(a)
            c = await fetch_c()
    """)
    # only a and c qualify, and c doesn't read a
    assert len(diags) == 1
    assert diags[0].line == _line_of(code, "c = await")


def test_non_await_statements_between_are_ignored():
    _, diags = _run("""
        async def handler():
            user = await get_user()
            log.info("loaded")
            posts = await get_posts(user.id)
    """)
    assert diags == []


def test_single_qualifying_statement_is_fine():
    _, diags = _run("""
        async def handler():
            data = await fetch()
            return transform(data)
    """)
    assert diags == []


def test_nested_async_functions_are_skipped():
    _, diags = _run("""
        async def outer():
            async def inner():
                a = await fetch_a()
                b = await fetch_b()
            return inner
    """)
    assert diags == []


def test_async_method_at_top_level_is_checked():
    code, diags = _run("""
        class Handler:
            async def get(self):
                a = await self.fetch_a()
                b = await self.fetch_b()
    """)
    assert len(diags) == 1
    assert diags[0].line == _line_of(code, "b = await")


def test_first_statement_references_never_computed():
    capture = CapturePolicy()
    ScopeTracker([capture]).run(ast.parse(textwrap.dedent("""
        async def handler():
            a = await fetch_a(x)
            b = await fetch_b()
    """)))
    scope = capture.scopes[0]
    found = DependencyRunPolicy().on_scope_exit(scope, outermost=True)

    assert len(found) == 1
    first, second = scope.top_level_operations
    assert "referenced_names" not in first.__dict__
    assert "referenced_names" in second.__dict__


def test_policy_ignores_inner_scopes():
    capture = CapturePolicy()
    ScopeTracker([capture]).run(ast.parse(textwrap.dedent("""
        async def handler():
            a = await fetch_a()
            b = await fetch_b()
    """)))
    assert DependencyRunPolicy().on_scope_exit(capture.scopes[0], outermost=False) == []


def test_empty_input_has_no_runs():
    assert find_independent_runs([]) == []
