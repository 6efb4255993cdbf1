"""Detect blocks that already use a framework's assertion vocabulary.

Such blocks report their own failures (by raising), so their return
value carries no meaning and they are not explained as natural
assertions.  Recognised forms:

* ``assert`` statements;
* ``x.should ...`` and ``x.should_not ...`` chains;
* ``expect(x).to ...``, ``expect(x).not_to ...``, ``expect(x).to_not ...``,
  including the block form ``expect(lambda: ...)``;
* ``pytest.raises(...)`` and bare ``raises(...)``.
"""
from __future__ import annotations

import ast
from collections.abc import Iterable

SHOULD_NAMES = frozenset({"should", "should_not"})
EXPECT_NAMES = frozenset({"to", "not_to", "to_not"})
RAISES_NAMES = frozenset({"raises"})


def _callee_name(node: ast.expr) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _is_expect_call(node: ast.expr) -> bool:
    return isinstance(node, ast.Call) and _callee_name(node.func) == "expect"


def is_framework_assertion(node: ast.AST) -> bool:
    """Return True if ``node`` itself is a framework assertion construct."""
    if isinstance(node, ast.Assert):
        return True
    if isinstance(node, ast.Attribute):
        if node.attr in SHOULD_NAMES:
            return True
        if node.attr in EXPECT_NAMES and _is_expect_call(node.value):
            return True
    if isinstance(node, ast.Call) and _callee_name(node.func) in RAISES_NAMES:
        return True
    return False


def uses_framework_assertion(statements: Iterable[ast.stmt]) -> bool:
    """Return True if any statement contains a framework assertion."""
    return any(
        is_framework_assertion(node)
        for statement in statements
        for node in ast.walk(statement)
    )
