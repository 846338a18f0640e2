# Author: Bradley R. Kinnard — end to end, minus the network

"""
analyze_source: both policies together, eligibility from paths, noqa, parse errors.
Run with: pytest tests/unit/test_engine.py -v
"""

import ast
import textwrap

from src.backend.analyzer.diagnostics import DiagnosticKind
from src.backend.analyzer.eligibility import EVERYTHING, Eligibility
from src.backend.analyzer.engine import AnalysisOutcome, analyze_source, build_policies
from src.backend.analyzer.parser import ParseError
from src.backend.analyzer.scope import ScopeTracker
from src.backend.analyzer.waterfall import WaterfallPolicy

THREE_UNRELATED = textwrap.dedent("""
    async def handler():
        a = await fetch_a()
        b = await fetch_b()
        c = await fetch_c()
        return a, b, c
""")


def _kinds(outcome):
    return [(d.kind, d.line) for d in outcome.diagnostics]


def test_unrelated_awaits_trip_both_rules():
    outcome = analyze_source(THREE_UNRELATED)
    assert isinstance(outcome, AnalysisOutcome)
    assert _kinds(outcome) == [
        (DiagnosticKind.PREFER_PARALLEL_COMBINATOR, 4),
        (DiagnosticKind.WATERFALL_CHAIN, 5),
    ]


def test_real_dependency_is_left_alone():
    outcome = analyze_source(textwrap.dedent("""
        async def handler(user_id):
            user = await get_user(user_id)
            posts = await get_posts(user.id)
            return posts
    """))
    assert outcome.diagnostics == []


def test_single_gather_is_clean():
    outcome = analyze_source(textwrap.dedent("""
        async def handler():
            results = await asyncio.gather(f(), g())
            return results
    """))
    assert outcome.diagnostics == []


def test_repeat_runs_are_identical():
    first = analyze_source(THREE_UNRELATED)
    second = analyze_source(THREE_UNRELATED)
    assert first.diagnostics == second.diagnostics


def test_same_tree_twice_through_fresh_trackers():
    """nothing leaks between walks"""
    tree = ast.parse(THREE_UNRELATED)
    one = ScopeTracker(build_policies(EVERYTHING)).run(tree)
    two = ScopeTracker(build_policies(EVERYTHING)).run(tree)
    assert one == two
    assert len(one) == 2


def test_build_policies_follows_eligibility():
    assert [type(p) for p in build_policies(EVERYTHING)][0] is WaterfallPolicy
    assert len(build_policies(EVERYTHING)) == 2
    assert build_policies(Eligibility(waterfall=False, dependency_runs=False)) == []


def test_handler_path_gets_both_rules():
    outcome = analyze_source(THREE_UNRELATED, "app/api/users.py")
    assert outcome.eligibility == EVERYTHING
    assert len(outcome.diagnostics) == 2


def test_service_path_gets_waterfall_only():
    outcome = analyze_source(THREE_UNRELATED, "app/services/billing_service.py")
    assert outcome.eligibility.waterfall
    assert not outcome.eligibility.dependency_runs
    assert [d.kind for d in outcome.diagnostics] == [DiagnosticKind.WATERFALL_CHAIN]


def test_unmatched_path_is_skipped():
    outcome = analyze_source(THREE_UNRELATED, "app/utils/helpers.py")
    assert not outcome.eligibility.any
    assert outcome.diagnostics == []
    # still summarized so callers can see what was parsed
    assert [f.name for f in outcome.async_functions] == ["handler"]


def test_header_directive_opts_in():
    code = "# waterfall: check\n" + THREE_UNRELATED
    outcome = analyze_source(code, "app/utils/helpers.py")
    assert len(outcome.diagnostics) == 2


def test_header_directive_opts_out():
    code = "# waterfall: skip\n" + THREE_UNRELATED
    outcome = analyze_source(code, "app/api/users.py")
    assert outcome.diagnostics == []


def test_noqa_on_anchor_line():
    code = textwrap.dedent("""
        async def handler():
            a = await fetch_a()
            b = await fetch_b()  # noqa: prefer-parallel-combinator
            c = await fetch_c()
    """)
    outcome = analyze_source(code)
    assert [d.kind for d in outcome.diagnostics] == [DiagnosticKind.WATERFALL_CHAIN]


def test_bare_noqa_drops_everything_on_the_line():
    code = textwrap.dedent("""
        async def handler():
            a = await fetch_a()
            b = await fetch_b()  # noqa
            c = await fetch_c()  # noqa
    """)
    assert analyze_source(code).diagnostics == []


def test_custom_combinators_override_settings():
    code = textwrap.dedent("""
        async def handler():
            await one()
            await two()
            await trio_group.start_all(three(), four())
    """)
    outcome = analyze_source(code, combinators={"trio_group.start_all"})
    assert DiagnosticKind.WATERFALL_CHAIN not in [d.kind for d in outcome.diagnostics]


def test_syntax_error_comes_back_as_parse_error():
    result = analyze_source("async def broken(:\n    pass\n", "app/api/broken.py")
    assert isinstance(result, ParseError)
    assert result.line == 1
    assert result.message


def test_diagnostics_sorted_by_position():
    code = textwrap.dedent("""
        async def second():
            await x()
            await y()
            await z()

        async def first():
            await p()
            await q()
            await r()
    """)
    lines = [d.line for d in analyze_source(code).diagnostics]
    assert lines == sorted(lines)
