"""Unit tests for natassert.analyzer.explanations."""
from __future__ import annotations

import ast

import pytest

from natassert.analyzer.explanations import (
    BINARY_EXPLANATIONS,
    MATCH_EXPLANATION,
    NOT_MATCH_EXPLANATION,
    find_explanation,
)


def _expr(source: str) -> ast.expr:
    return ast.parse(source, mode="eval").body


@pytest.mark.parametrize(
    ("source", "description"),
    [
        ("a == b", "to equal"),
        ("a != b", "to not equal"),
        ("a < b", "to be less than"),
        ("a <= b", "to be less or equal to"),
        ("a > b", "to be greater than"),
        ("a >= b", "to be greater or equal to"),
        ("a in b", "to be in"),
        ("a not in b", "to not be in"),
        ("a is b", "to be"),
        ("a is not b", "to not be"),
    ],
)
def test_comparison_descriptions(source: str, description: str) -> None:
    found = find_explanation(_expr(source))
    assert found is not None
    assert found.description == description
    assert ast.unparse(found.expected) == "a"
    assert ast.unparse(found.actual) == "b"
    assert not found.requires_pattern


def test_every_comparison_operator_is_described() -> None:
    assert len(BINARY_EXPLANATIONS) == 10


class TestMatchExplanations:
    def test_re_search(self) -> None:
        found = find_explanation(_expr("re.search('HI', s)"))
        assert found is not None
        assert found.description == MATCH_EXPLANATION
        assert ast.unparse(found.expected) == "s"
        assert ast.unparse(found.actual) == "'HI'"
        assert not found.requires_pattern

    def test_re_fullmatch_negated(self) -> None:
        found = find_explanation(_expr("not re.fullmatch(p, s)"))
        assert found is not None
        assert found.description == NOT_MATCH_EXPLANATION

    def test_compiled_pattern_method(self) -> None:
        found = find_explanation(_expr("pattern.match(s)"))
        assert found is not None
        assert found.requires_pattern
        assert ast.unparse(found.actual) == "pattern"

    def test_re_search_with_flags_keyword_is_not_explained(self) -> None:
        assert find_explanation(_expr("re.search('x', s, flags=re.I)")) is None


@pytest.mark.parametrize(
    "source",
    ["1 < a < 3", "a and b", "not a", "f(a)", "a", "re.compile('x')", "re.search('x')"],
)
def test_no_explanation(source: str) -> None:
    assert find_explanation(_expr(source)) is None
