# Author: Bradley R. Kinnard — trust, but collect

"""
Name collectors. References over-approximate, bindings only count real names.
Run with: pytest tests/unit/test_references.py -v
"""

import ast

import pytest

from src.backend.analyzer.references import collect_bound_names, collect_references, collect_written_names


def _expr(src: str) -> ast.expr:
    """parse an expression inside an async def so `await` is legal"""
    tree = ast.parse(f"async def f():\n    return {src}\n")
    return tree.body[0].body[0].value


def _target(src: str) -> ast.expr:
    return ast.parse(src).body[0].targets[0]


def _pattern(src: str) -> ast.pattern:
    tree = ast.parse(f"match subject:\n    case {src}:\n        pass\n")
    return tree.body[0].cases[0].pattern


@pytest.mark.parametrize("src, expected", [
    ("x", {"x"}),
    ("f(a, b=c)", {"f", "a", "c"}),
    ("f(*args, **kwargs)", {"f", "args", "kwargs"}),
    ("x.value", {"x"}),
    ("obj.method(arg).attr", {"obj", "arg"}),
    ("x[key]", {"x", "key"}),
    ("x[lo:hi:step]", {"x", "lo", "hi", "step"}),
    ("a + b * c", {"a", "b", "c"}),
    ("a and not b", {"a", "b"}),
    ("a < b <= c", {"a", "b", "c"}),
    ("a if cond else b", {"a", "cond", "b"}),
    ("-n", {"n"}),
    ("[a, *rest]", {"a", "rest"}),
    ("(a, b)", {"a", "b"}),
    ("{a, b}", {"a", "b"}),
    ("{k: v, **extra}", {"k", "v", "extra"}),
    ("{'literal': v}", {"v"}),
    ("f'{user.name}-{suffix!r:>{width}}'", {"user", "suffix", "width"}),
    ("await fetch(await token())", {"fetch", "token"}),
])
def test_collects_references(src, expected):
    assert collect_references(_expr(src)) == expected


@pytest.mark.parametrize("src", [
    "42",
    "'text'",
    "None",
    "lambda y: y + z",
    "[i for i in items]",
    "{k: v for k, v in pairs}",
])
def test_wildcard_kinds_contribute_nothing(src):
    """literals, lambdas, comprehensions: under-collect rather than invent a dependency"""
    assert collect_references(_expr(src)) == set()


def test_attribute_name_is_not_a_reference():
    """`user.id` depends on user, never on something called id"""
    refs = collect_references(_expr("get_posts(user.id)"))
    assert "id" not in refs
    assert refs == {"get_posts", "user"}


def test_duplicates_collapse():
    assert collect_references(_expr("f(x, x, x.y, x[x])")) == {"f", "x"}


@pytest.mark.parametrize("src, expected", [
    ("x = v", {"x"}),
    ("a, b = v", {"a", "b"}),
    ("[a, [b, c]] = v", {"a", "b", "c"}),
    ("first, *rest = v", {"first", "rest"}),
    ("(a, (b, *c)) = v", {"a", "b", "c"}),
    ("self.x = v", set()),
    ("d[k] = v", set()),
])
def test_bound_names_from_targets(src, expected):
    assert collect_bound_names(_target(src)) == expected


@pytest.mark.parametrize("src, expected", [
    ("x = v", {"x"}),
    ("a, *rest = v", {"a", "rest"}),
    ("self.x = v", {"self"}),
    ("a.b.c = v", {"a"}),
    ("d[k] = v", {"d"}),  # k is only read
    ("get_obj().x = v", {"get_obj"}),
    ("self.user, token = v", {"self", "token"}),
])
def test_written_names_from_targets(src, expected):
    assert collect_written_names(_target(src)) == expected


@pytest.mark.parametrize("src, expected", [
    ("{'id': uid, 'tags': [first, *others], **rest}", {"uid", "first", "others", "rest"}),
    ("Point(x, y=py)", {"x", "py"}),
    ("[a, 1 | 2 as n]", {"a", "n"}),
    ("User(name=n) | Admin(name=n)", {"n"}),
    ("[*_]", set()),
    ("_", set()),
    ("None", set()),
    ("42", set()),
])
def test_bound_names_from_match_patterns(src, expected):
    """mapping keys and keyword names are lookups, not bindings"""
    assert collect_bound_names(_pattern(src)) == expected


def test_unknown_node_binds_nothing():
    assert collect_bound_names(ast.Constant(value=1)) == set()
