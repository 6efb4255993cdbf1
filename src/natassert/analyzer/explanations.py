"""Plain-English explanations for failing comparisons.

A top-level comparison such as ``a == 2`` is explained as::

    expected: 1
    to equal: 2

``find_explanation`` recognises single-operator comparisons and regex
matches (``re.search(pattern, s)`` and ``pattern.search(s)``, optionally
negated with ``not``).  It only inspects syntax; deciding whether a
receiver really is a compiled pattern is left to the caller through
``Explanation.requires_pattern``.
"""
from __future__ import annotations

import ast
from dataclasses import dataclass

BINARY_EXPLANATIONS: dict[type[ast.cmpop], str] = {
    ast.Eq: "to equal",
    ast.NotEq: "to not equal",
    ast.Lt: "to be less than",
    ast.LtE: "to be less or equal to",
    ast.Gt: "to be greater than",
    ast.GtE: "to be greater or equal to",
    ast.In: "to be in",
    ast.NotIn: "to not be in",
    ast.Is: "to be",
    ast.IsNot: "to not be",
}

MATCH_EXPLANATION = "to match"
NOT_MATCH_EXPLANATION = "to not match"
EXPECTED_LABEL = "expected"

_MATCH_FUNCTIONS = frozenset({"search", "match", "fullmatch"})


@dataclass(frozen=True)
class Explanation:
    """What to show on the ``expected:`` and ``to <op>:`` lines.

    Parameters
    ----------
    expected:
        Expression whose value goes on the ``expected:`` line.
    description:
        The operator description, e.g. ``"to equal"``.
    actual:
        Expression whose value goes on the description line.
    requires_pattern:
        True when ``actual`` must evaluate to a compiled regex for the
        explanation to apply (the ``pattern.search(s)`` form).
    """

    expected: ast.expr
    description: str
    actual: ast.expr
    requires_pattern: bool = False


def _match_call(node: ast.expr) -> tuple[ast.expr, ast.expr, bool] | None:
    """Return ``(subject, pattern, requires_pattern)`` for a regex match call."""
    if not isinstance(node, ast.Call) or node.keywords:
        return None
    func = node.func
    if not isinstance(func, ast.Attribute) or func.attr not in _MATCH_FUNCTIONS:
        return None
    if isinstance(func.value, ast.Name) and func.value.id == "re":
        if len(node.args) >= 2:
            return node.args[1], node.args[0], False
        return None
    if len(node.args) == 1:
        return node.args[0], func.value, True
    return None


def find_explanation(expression: ast.expr) -> Explanation | None:
    """Return the explanation for ``expression``, or None if it has none."""
    if isinstance(expression, ast.Compare):
        if len(expression.ops) != 1:
            return None
        description = BINARY_EXPLANATIONS.get(type(expression.ops[0]))
        if description is None:
            return None
        return Explanation(expression.left, description, expression.comparators[0])

    negated = False
    if isinstance(expression, ast.UnaryOp) and isinstance(expression.op, ast.Not):
        negated = True
        expression = expression.operand
    match = _match_call(expression)
    if match is None:
        return None
    subject, pattern, requires_pattern = match
    description = NOT_MATCH_EXPLANATION if negated else MATCH_EXPLANATION
    return Explanation(subject, description, pattern, requires_pattern)
