"""Exception types for natassert.

Library errors derive from ``NatAssertError`` so callers can catch the
whole family at once.  ``NaturalAssertionFailed`` is the exception raised
by ``assert_natural`` and is an ``AssertionError`` so that any test
runner reports it as an ordinary test failure.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from natassert.analyzer.natural_assertion import NaturalAssertion


class NatAssertError(Exception):
    """Base class for all natassert errors."""


class InvalidThenError(NatAssertError):
    """Raised when an assertion block cannot be analyzed as one expression.

    Parameters
    ----------
    label:
        The clause label of the offending block, e.g. ``"Then"``.
    reason:
        What is wrong with the block.
    location:
        ``file:line`` of the block, when known.
    """

    def __init__(self, label: str, reason: str, location: str = "") -> None:
        self.label = label
        self.reason = reason
        self.location = location
        where = f" at {location}" if location else ""
        super().__init__(f"{reason} in {label} block{where}")


class SourceUnavailableError(NatAssertError):
    """Raised when the source text of a block cannot be located."""

    def __init__(self, block: object, reason: str) -> None:
        self.block = block
        self.reason = reason
        super().__init__(f"Cannot read the source of {block!r}: {reason}")


class ConfigError(NatAssertError, ValueError):
    """Raised for an invalid configuration key or value."""


class NaturalAssertionFailed(AssertionError):
    """A failing natural assertion, carrying its rendered explanation.

    Parameters
    ----------
    explanation:
        The full diagnostic text.
    assertion:
        The analyzer that produced the text, or ``None`` when the block's
        source could not be captured.
    """

    def __init__(
        self, explanation: str, assertion: "NaturalAssertion | None" = None
    ) -> None:
        self.explanation = explanation
        self.assertion = assertion
        super().__init__(explanation)
