"""Natural-assertion analysis: classification, explanation and tracing."""
from __future__ import annotations

from natassert.analyzer.classifier import is_framework_assertion, uses_framework_assertion
from natassert.analyzer.explanations import (
    BINARY_EXPLANATIONS,
    Explanation,
    find_explanation,
)
from natassert.analyzer.natural_assertion import NaturalAssertion, TraceEntry
from natassert.analyzer.subexpressions import expression_text, is_literal, subexpressions

__all__ = [
    "BINARY_EXPLANATIONS",
    "Explanation",
    "NaturalAssertion",
    "TraceEntry",
    "expression_text",
    "find_explanation",
    "is_framework_assertion",
    "is_literal",
    "subexpressions",
    "uses_framework_assertion",
]
