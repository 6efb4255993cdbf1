"""The natural-assertion analyzer.

``NaturalAssertion`` takes a captured block whose expression came out
falsy and explains why, by re-evaluating every sub-expression in the
block's environment::

    Then expression failed at tests/test_stack.py:12
    expected: 1
    to equal: 2
      1     <- stack.depth
      False <- stack.depth == 2

Exceptions raised by a sub-expression do not abort the explanation; the
exception takes the place of the value and the remaining sub-expressions
are still traced.
"""
from __future__ import annotations

import ast
import logging
import re
import types
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from natassert.analyzer.classifier import uses_framework_assertion
from natassert.analyzer.explanations import (
    EXPECTED_LABEL,
    Explanation,
    find_explanation,
)
from natassert.analyzer.subexpressions import expression_text, subexpressions
from natassert.capture.block import CapturedBlock, capture_block
from natassert.config import Settings, get_settings
from natassert.errors import InvalidThenError
from natassert.render.formatter import (
    display_pairs,
    explain_expected,
    format_exception,
    format_value,
)

logger = logging.getLogger(__name__)

THEN_LABEL = "Then"


@dataclass(frozen=True)
class TraceEntry:
    """One line of the evaluation trace.

    Parameters
    ----------
    expression:
        Source text of the sub-expression.
    value:
        Rendered value, or the rendered exception when ``raised``.
    raised:
        True if evaluating the sub-expression raised.
    """

    expression: str
    value: str
    raised: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"expression": self.expression, "value": self.value, "raised": self.raised}


@dataclass(frozen=True)
class _Evaluation:
    value: Any = None
    error: Exception | None = None


class NaturalAssertion:
    """Explains a failing assertion block.

    Parameters
    ----------
    label:
        Clause label used in the message, e.g. ``"Then"``.
    block:
        The block function (a ``lambda`` or single-statement ``def``).
    context:
        The example object whose attributes the block reads.
    settings:
        Rendering options; defaults to the process-wide settings.

    Raises
    ------
    SourceUnavailableError
        If the block's source cannot be read.
    """

    def __init__(
        self,
        label: str,
        block: Callable[..., Any],
        context: Any = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        self._captured = capture_block(block, context, label=label)
        self._settings = settings

    @classmethod
    def from_capture(
        cls, captured: CapturedBlock, *, settings: Settings | None = None
    ) -> "NaturalAssertion":
        """Build an analyzer for an already captured block."""
        instance = cls.__new__(cls)
        instance._captured = captured
        instance._settings = settings
        return instance

    @classmethod
    def from_source(
        cls,
        text: str,
        context: Any = None,
        *,
        namespace: dict[str, Any] | None = None,
        label: str = THEN_LABEL,
        settings: Settings | None = None,
    ) -> "NaturalAssertion":
        """Build an analyzer for a block given as source text."""
        captured = CapturedBlock.from_source(
            text, context, namespace=namespace, label=label
        )
        return cls.from_capture(captured, settings=settings)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def captured(self) -> CapturedBlock:
        return self._captured

    @property
    def label(self) -> str:
        return self._captured.label

    @property
    def source(self) -> str:
        return self._captured.source

    @property
    def location(self) -> str:
        return self._captured.location

    @property
    def settings(self) -> Settings:
        return self._settings if self._settings is not None else get_settings()

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    def evaluate(self, expr: str) -> Any:
        """Evaluate ``expr`` in the block's environment and return the value."""
        return self._captured.evaluate(expr)

    def run(self) -> Any:
        """Execute the block and return its value."""
        return self._captured.run()

    def has_content(self) -> bool:
        """Return False for an empty block, True otherwise."""
        return bool(self._captured.statements)

    def using_framework_assertion(self) -> bool:
        """Return True if the block uses ``assert``, ``should`` or ``expect``."""
        return uses_framework_assertion(self._captured.statements)

    def expression(self) -> ast.expr | None:
        """Return the block's single expression, or None for an empty block.

        A lone ``return`` or ``assert`` statement contributes its expression.

        Raises
        ------
        InvalidThenError
            If the block has several statements, or a single statement
            that is not an expression.
        """
        statements = self._captured.statements
        if not statements:
            return None
        if len(statements) > 1:
            raise InvalidThenError(
                self.label,
                f"Multiple statements ({len(statements)})",
                self.location,
            )
        statement = statements[0]
        if isinstance(statement, ast.Expr):
            return statement.value
        if isinstance(statement, ast.Return) and statement.value is not None:
            return statement.value
        if isinstance(statement, ast.Assert):
            return statement.test
        raise InvalidThenError(
            self.label,
            f"Expected an expression, found a {type(statement).__name__} statement",
            self.location,
        )

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _evaluate(self, text: str, cache: dict[str, _Evaluation]) -> _Evaluation:
        if text not in cache:
            try:
                cache[text] = _Evaluation(value=self.evaluate(text))
            except Exception as exc:  # noqa: BLE001
                logger.debug("Evaluating %r in %s raised %r", text, self.location, exc)
                cache[text] = _Evaluation(error=exc)
        return cache[text]

    def _render(self, evaluation: _Evaluation) -> str:
        if evaluation.error is not None:
            return format_exception(evaluation.error)
        return format_value(evaluation.value, self.settings.max_inspect_size)

    def _trace(self, expression: ast.expr, cache: dict[str, _Evaluation]) -> list[TraceEntry]:
        entries: list[TraceEntry] = []
        for node in subexpressions(expression):
            text = expression_text(node)
            evaluation = self._evaluate(text, cache)
            if node is not expression and isinstance(evaluation.value, types.ModuleType):
                continue
            entries.append(
                TraceEntry(
                    expression=text,
                    value=self._render(evaluation),
                    raised=evaluation.error is not None,
                )
            )
        return entries

    def _explanation(
        self, expression: ast.expr, cache: dict[str, _Evaluation]
    ) -> tuple[str, str, str] | None:
        found: Explanation | None = find_explanation(expression)
        if found is None:
            return None
        actual = self._evaluate(expression_text(found.actual), cache)
        if found.requires_pattern and not isinstance(actual.value, re.Pattern):
            return None
        expected = self._evaluate(expression_text(found.expected), cache)
        return self._render(expected), found.description, self._render(actual)

    def trace(self) -> list[TraceEntry]:
        """Return the evaluation trace, innermost sub-expression first."""
        expression = self.expression()
        if expression is None:
            return []
        return self._trace(expression, {})

    def message(self) -> str:
        """Render the failure explanation for the block.

        Raises
        ------
        InvalidThenError
            If the block is not a single expression.
        """
        settings = self.settings
        output = f"{self.label} expression failed at {self.location}\n"
        if self.label != THEN_LABEL:
            output += f"Failing expression: {self.source.strip()}\n"

        expression = self.expression()
        if expression is None:
            return output

        cache: dict[str, _Evaluation] = {}
        explanation = self._explanation(expression, cache)
        if explanation is not None:
            expected, description, actual = explanation
            output += explain_expected(EXPECTED_LABEL, expected, description, actual)

        pairs = [(entry.value, entry.expression) for entry in self._trace(expression, cache)]
        output += display_pairs(pairs, settings.wrap_width, settings.trace_indent)
        return output

    def to_dict(self) -> dict[str, Any]:
        """Return the explanation as plain data, for JSON or YAML output."""
        expression = self.expression()
        data: dict[str, Any] = {
            "label": self.label,
            "location": self.location,
            "source": self.source,
            "result": None,
            "explanation": None,
            "trace": [],
        }
        if expression is None:
            return data
        cache: dict[str, _Evaluation] = {}
        explanation = self._explanation(expression, cache)
        if explanation is not None:
            expected, description, actual = explanation
            data["explanation"] = {
                "expected": expected,
                "description": description,
                "actual": actual,
            }
        trace = self._trace(expression, cache)
        data["trace"] = [entry.to_dict() for entry in trace]
        data["result"] = trace[-1].value if trace else None
        return data

    def __repr__(self) -> str:
        return f"NaturalAssertion({self.label!r}, {self.source!r} at {self.location})"
