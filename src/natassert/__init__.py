"""natassert — natural-language explanations for failing assertion blocks.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import natassert

    a = 1
    natassert.assert_natural(lambda: a == 2)

    # NaturalAssertionFailed: Then expression failed at test_a.py:4
    # expected: 1
    # to equal: 2
    #   1     <- a
    #   False <- a == 2

    na = natassert.analyze(lambda: a == 2)
    na.evaluate("a + 1")
    na.has_content()
    na.using_framework_assertion()
    print(na.message())
"""
from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from natassert.errors import (
    ConfigError,
    InvalidThenError,
    NatAssertError,
    NaturalAssertionFailed,
    SourceUnavailableError,
)

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from natassert.analyzer.natural_assertion import NaturalAssertion


def analyze(
    block: Callable[..., Any], context: Any = None, *, label: str = "Then"
) -> "NaturalAssertion":
    """Capture ``block`` and return its ``NaturalAssertion`` analyzer.

    Parameters
    ----------
    block:
        A ``lambda`` or single-statement ``def``.
    context:
        The example object whose attributes the block reads.
    label:
        Clause label used in messages.

    Raises
    ------
    SourceUnavailableError
        If the block's source cannot be read.
    """
    from natassert.analyzer.natural_assertion import NaturalAssertion

    return NaturalAssertion(label, block, context)


def assert_natural(
    block: Callable[..., Any], context: Any = None, *, label: str = "Then"
) -> Any:
    """Run ``block`` and raise ``NaturalAssertionFailed`` if it is falsy.

    Returns
    -------
    Any
        The block's value.
    """
    from natassert.assertions import assert_natural as _assert_natural

    return _assert_natural(block, context, label=label)


def explain(block: Callable[..., Any], context: Any = None, *, label: str = "Then") -> str:
    """Return the failure explanation text for ``block``."""
    from natassert.assertions import explain as _explain

    return _explain(block, context, label=label)


def configure(**overrides: Any) -> Any:
    """Override process-wide rendering settings.

    Returns
    -------
    Settings
        The resulting settings.
    """
    from natassert.config import configure as _configure

    return _configure(**overrides)


__all__ = [
    "__version__",
    "analyze",
    "assert_natural",
    "explain",
    "configure",
    "ConfigError",
    "InvalidThenError",
    "NatAssertError",
    "NaturalAssertionFailed",
    "SourceUnavailableError",
]
