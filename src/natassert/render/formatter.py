"""String formatting for natural-assertion messages.

All functions here are pure: they take already-evaluated values (or
their rendered text) and lay them out.  The trace layout is::

    expected: 1
    to equal: 2
      1     <- a
      False <- a == 2

Values wider than the wrap width, or spanning several lines, go on a line
of their own with the ``<-`` arrow on the next line::

      <TypeError: 'NoneType' object is not subscriptable>
            <- ary[1]
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

DEFAULT_WRAP_WIDTH = 20
DEFAULT_MAX_INSPECT_SIZE = 2000
DEFAULT_VALUE_WIDTH = 10
TRUNCATION_MARKER = " (...)"


def limit_length(text: str, max_size: int = DEFAULT_MAX_INSPECT_SIZE) -> str:
    """Truncate ``text`` to ``max_size`` characters, marking the cut."""
    if len(text) > max_size:
        return text[:max_size] + TRUNCATION_MARKER
    return text


def format_value(value: Any, max_size: int = DEFAULT_MAX_INSPECT_SIZE) -> str:
    """Render an evaluated value with ``repr``."""
    try:
        text = repr(value)
    except Exception as exc:  # noqa: BLE001
        text = f"<unrepresentable {type(value).__name__}: {format_exception(exc)}>"
    return limit_length(text, max_size)


def format_exception(exc: BaseException) -> str:
    """Render an exception raised while evaluating an expression."""
    return f"<{type(exc).__name__}: {exc}>"


def max_line_length(text: str) -> int:
    return max((len(line) for line in text.splitlines()), default=0)


def is_multi_line(text: str, wrap_width: int = DEFAULT_WRAP_WIDTH) -> bool:
    return len(text) > wrap_width or "\n" in text


def suggest_width(values: Sequence[str], wrap_width: int = DEFAULT_WRAP_WIDTH) -> int:
    """Width of the value column: the widest value that fits, else 10."""
    fitting = [max_line_length(v) for v in values if max_line_length(v) < wrap_width]
    return max(fitting, default=DEFAULT_VALUE_WIDTH)


def explain_expected(
    expected_label: str, expected: str, got_label: str, got: str
) -> str:
    """Render the right-aligned ``expected:`` / ``to <op>:`` pair."""
    width = max(len(expected_label), len(got_label))
    return (
        f"{expected_label:>{width}}: {expected}\n"
        f"{got_label:>{width}}: {got}\n"
    )


def display_pairs(
    pairs: Sequence[tuple[str, str]],
    wrap_width: int = DEFAULT_WRAP_WIDTH,
    indent: int = 2,
) -> str:
    """Render ``(value, expression)`` pairs as ``value <- expression`` lines."""
    width = suggest_width([value for value, _ in pairs], wrap_width)
    prefix = " " * indent
    lines: list[str] = []
    for value, expression in pairs:
        if is_multi_line(value, wrap_width):
            lines.append(f"{prefix}{value}")
            lines.append(f"{prefix}{' ' * width} <- {expression}")
        else:
            lines.append(f"{prefix}{value:<{width}} <- {expression}")
    return "".join(line + "\n" for line in lines)
