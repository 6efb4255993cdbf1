"""Unit tests for natassert.analyzer.subexpressions."""
from __future__ import annotations

import ast

import pytest

from natassert.analyzer.subexpressions import expression_text, is_literal, subexpressions


def _texts(source: str) -> list[str]:
    expression = ast.parse(source, mode="eval").body
    return [expression_text(node) for node in subexpressions(expression)]


class TestSubexpressions:
    def test_comparison(self) -> None:
        assert _texts("a == 2") == ["a", "a == 2"]

    def test_operands_before_their_expression(self) -> None:
        assert _texts("a + b == 4") == ["a", "b", "a + b", "a + b == 4"]

    def test_method_call_keeps_receiver(self) -> None:
        assert _texts("stack.pop() == 1") == ["stack", "stack.pop()", "stack.pop() == 1"]

    def test_function_name_is_not_traced(self) -> None:
        assert _texts("len(items) > 0") == ["items", "len(items)", "len(items) > 0"]

    def test_subscript(self) -> None:
        assert _texts("ary[i] == 3") == ["ary", "i", "ary[i]", "ary[i] == 3"]

    def test_duplicates_keep_first_position(self) -> None:
        assert _texts("a + a == 2") == ["a", "a + a", "a + a == 2"]

    def test_literal_expression_is_kept(self) -> None:
        assert _texts("False") == ["False"]

    def test_literal_containers_are_skipped(self) -> None:
        assert _texts("a in [1, 2]") == ["a", "a in [1, 2]"]

    def test_comprehension_is_opaque(self) -> None:
        texts = _texts("any(x > limit for x in xs)")
        assert "x > limit" not in texts
        assert "x" not in texts
        assert texts[-1].startswith("any(")

    def test_keyword_arguments(self) -> None:
        assert _texts("f(key=value)") == ["value", "f(key=value)"]

    def test_boolean_operators(self) -> None:
        assert _texts("a and not b") == ["a", "b", "not b", "a and not b"]

    def test_walrus_target_is_not_traced(self) -> None:
        assert _texts("(n := a) > 1") == ["a", "(n := a)", "(n := a) > 1"]


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("1", True),
        ("-1.5", True),
        ("'text'", True),
        ("[1, (2, 'x')]", True),
        ("None", True),
        ("a", False),
        ("[a]", False),
        ("f()", False),
    ],
)
def test_is_literal(source: str, expected: bool) -> None:
    assert is_literal(ast.parse(source, mode="eval").body) is expected
