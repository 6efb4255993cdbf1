"""Sub-expression extraction for the evaluation trace.

``subexpressions`` walks an expression tree and returns the nodes worth
showing in a trace, innermost first and the whole expression last.
Literals are skipped (their value is their text), except when the whole
expression is itself a literal.  Call targets are skipped but their
receivers are kept, so ``stack.pop()`` traces ``stack`` and not the bound
method.  Lambdas and comprehensions are traced as a whole; their bodies
refer to names that only exist while they run.
"""
from __future__ import annotations

import ast
from collections.abc import Iterator

_OPAQUE = (ast.Lambda, ast.ListComp, ast.SetComp, ast.DictComp, ast.GeneratorExp)


def is_literal(node: ast.expr) -> bool:
    """Return True if ``node`` is a literal, e.g. ``2`` or ``[1, "a"]``."""
    try:
        ast.literal_eval(node)
    except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError):
        return False
    return True


def expression_text(node: ast.expr) -> str:
    """Canonical source text of ``node``."""
    return ast.unparse(node)


def _children(node: ast.expr) -> Iterator[ast.expr]:
    if isinstance(node, _OPAQUE):
        return
    if isinstance(node, ast.Call):
        func = node.func
        if isinstance(func, ast.Attribute):
            yield func.value
        elif not isinstance(func, ast.Name):
            yield func
        yield from node.args
        for keyword in node.keywords:
            yield keyword.value
        return
    if isinstance(node, ast.FormattedValue):
        yield node.value
        return
    for child in ast.iter_child_nodes(node):
        if isinstance(child, ast.expr):
            yield child


def _walk(node: ast.expr) -> Iterator[ast.expr]:
    for child in _children(node):
        yield from _walk(child)
    yield node


def _traceable(node: ast.expr) -> bool:
    if isinstance(node, (ast.Starred, ast.FormattedValue, ast.Slice)):
        return False
    if isinstance(node, (ast.Name, ast.Attribute, ast.Subscript)) and not isinstance(
        node.ctx, ast.Load
    ):
        return False
    return not is_literal(node)


def subexpressions(expression: ast.expr) -> list[ast.expr]:
    """Return the traceable sub-expressions of ``expression``.

    Operands come before the expressions built from them, left to right,
    so ``expression`` itself is always the last entry.  Duplicates (by
    source text) keep their first position.
    """
    seen: set[str] = set()
    ordered: list[ast.expr] = []
    for node in _walk(expression):
        if node is not expression and not _traceable(node):
            continue
        text = expression_text(node)
        if text in seen:
            continue
        seen.add(text)
        ordered.append(node)
    return ordered
