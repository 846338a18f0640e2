# Author: Bradley R. Kinnard — who reads what, who binds what

"""
Name collectors. The whole dependency story rides on these.

collect_references: every identifier an expression reads. Over-approximates on purpose,
a mentioned name counts as a dependency even if it isn't really needed.
collect_bound_names: every name a binding target or match pattern introduces.
collect_written_names: bound names plus the objects an attribute or subscript target mutates.

All total. Anything not listed falls through and contributes nothing.
"""

import ast


def collect_references(node: ast.AST) -> set[str]:
    """Free names read by an expression. `x.value` gives {"x"}, `x[key]` gives {"x", "key"}."""
    names: set[str] = set()
    _visit_expr(node, names)
    return names


def _visit_expr(node: ast.AST | None, out: set[str]) -> None:
    if node is None:
        return

    if isinstance(node, ast.Name):
        out.add(node.id)

    elif isinstance(node, ast.Call):
        _visit_expr(node.func, out)
        for arg in node.args:
            _visit_expr(arg, out)
        for kw in node.keywords:
            _visit_expr(kw.value, out)  # kw.arg is a parameter name, not a read

    elif isinstance(node, ast.Attribute):
        # non-computed access, the attribute name is never a reference
        _visit_expr(node.value, out)

    elif isinstance(node, ast.Subscript):
        # computed access, both sides are read
        _visit_expr(node.value, out)
        _visit_expr(node.slice, out)

    elif isinstance(node, ast.Slice):
        _visit_expr(node.lower, out)
        _visit_expr(node.upper, out)
        _visit_expr(node.step, out)

    elif isinstance(node, ast.BinOp):
        _visit_expr(node.left, out)
        _visit_expr(node.right, out)

    elif isinstance(node, ast.BoolOp):
        for value in node.values:
            _visit_expr(value, out)

    elif isinstance(node, ast.Compare):
        _visit_expr(node.left, out)
        for comparator in node.comparators:
            _visit_expr(comparator, out)

    elif isinstance(node, ast.IfExp):
        _visit_expr(node.test, out)
        _visit_expr(node.body, out)
        _visit_expr(node.orelse, out)

    elif isinstance(node, ast.UnaryOp):
        _visit_expr(node.operand, out)

    elif isinstance(node, (ast.Await, ast.Starred)):
        # nested await operand, or a *spread
        _visit_expr(node.value, out)

    elif isinstance(node, (ast.List, ast.Tuple, ast.Set)):
        for elt in node.elts:
            _visit_expr(elt, out)

    elif isinstance(node, ast.Dict):
        for key, value in zip(node.keys, node.values):
            # key is None for a **spread entry, the value carries the mapping
            _visit_expr(key, out)
            _visit_expr(value, out)

    elif isinstance(node, ast.JoinedStr):
        for part in node.values:
            _visit_expr(part, out)

    elif isinstance(node, ast.FormattedValue):
        _visit_expr(node.value, out)
        _visit_expr(node.format_spec, out)

    else:
        # constants, lambdas, comprehensions, yields, walrus: nothing
        return


def collect_written_names(target: ast.AST) -> set[str]:
    """
    Names an assignment target writes through. Plain names as bound, plus the object
    behind `self.user = ...` or `d[k] = ...`, so a later `self.user.id` reads as a dependency.
    """
    names: set[str] = set()
    _visit_written(target, names)
    return names


def _visit_written(node: ast.AST, out: set[str]) -> None:
    if isinstance(node, (ast.Tuple, ast.List)):
        for elt in node.elts:
            _visit_written(elt, out)
    elif isinstance(node, ast.Starred):
        _visit_written(node.value, out)
    elif isinstance(node, (ast.Attribute, ast.Subscript)):
        # the key in d[k] is only read
        _visit_expr(node.value, out)
    else:
        _visit_pattern(node, out)


def collect_bound_names(pattern: ast.AST) -> set[str]:
    """Names introduced by an assignment target or a match pattern."""
    names: set[str] = set()
    _visit_pattern(pattern, names)
    return names


def _visit_pattern(node: ast.AST | None, out: set[str]) -> None:
    if node is None:
        return

    if isinstance(node, ast.Name):
        out.add(node.id)

    elif isinstance(node, (ast.Tuple, ast.List)):
        for elt in node.elts:
            _visit_pattern(elt, out)

    elif isinstance(node, ast.Starred):
        _visit_pattern(node.value, out)

    elif isinstance(node, ast.MatchAs):
        # `case _:` has neither name nor pattern
        if node.name:
            out.add(node.name)
        _visit_pattern(node.pattern, out)

    elif isinstance(node, ast.MatchStar):
        if node.name:
            out.add(node.name)

    elif isinstance(node, ast.MatchSequence):
        for sub in node.patterns:
            _visit_pattern(sub, out)

    elif isinstance(node, ast.MatchMapping):
        # keys are lookups, never bindings
        for sub in node.patterns:
            _visit_pattern(sub, out)
        if node.rest:
            out.add(node.rest)

    elif isinstance(node, ast.MatchClass):
        for sub in node.patterns:
            _visit_pattern(sub, out)
        for sub in node.kwd_patterns:
            _visit_pattern(sub, out)

    elif isinstance(node, ast.MatchOr):
        for sub in node.patterns:
            _visit_pattern(sub, out)

    else:
        # attribute/subscript targets, MatchValue, MatchSingleton: nothing bound
        return
