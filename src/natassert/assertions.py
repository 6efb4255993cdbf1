"""Checking blocks as natural assertions.

``assert_natural`` runs a block and, when it comes out falsy, raises
``NaturalAssertionFailed`` with the analyzer's explanation::

    from natassert import assert_natural

    def test_push(stack):
        stack.push(1)
        assert_natural(lambda: stack.depth == 2)

How much is explained depends on ``Settings.mode``:

``on``
    Falsy blocks are explained.  Blocks that use a framework assertion
    (``assert``, ``should``, ``expect``) signal failure by raising, so
    their return value is ignored.
``always``
    Every falsy block is explained, framework assertions included.
``off``
    Falsy blocks fail with a one-line message.

A block with no content (only ``pass``, ``...`` or a docstring) has
nothing to check and always passes.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from natassert.analyzer.natural_assertion import THEN_LABEL, NaturalAssertion
from natassert.capture.block import call_block
from natassert.config import Settings, get_settings
from natassert.errors import NaturalAssertionFailed, SourceUnavailableError

logger = logging.getLogger(__name__)


def assert_natural(
    block: Callable[..., Any],
    context: Any = None,
    *,
    label: str = THEN_LABEL,
    settings: Settings | None = None,
) -> Any:
    """Run ``block`` and fail with an explanation if its value is falsy.

    Parameters
    ----------
    block:
        A ``lambda`` or single-statement ``def``.
    context:
        The example object whose attributes the block reads.
    label:
        Clause label used in the failure message.
    settings:
        Rendering options; defaults to the process-wide settings.

    Returns
    -------
    Any
        The block's value, when the assertion passes.

    Raises
    ------
    NaturalAssertionFailed
        If the block's value is falsy.
    InvalidThenError
        If the failing block is not a single expression.
    """
    settings = settings if settings is not None else get_settings()
    try:
        assertion = NaturalAssertion(label, block, context, settings=settings)
    except SourceUnavailableError as exc:
        logger.debug("Checking %s without explanation: %s", label, exc)
        result = call_block(block, context)
        if not result:
            raise NaturalAssertionFailed(f"{label} expression failed") from None
        return result

    if not assertion.has_content():
        logger.debug("%s block at %s is empty; nothing to check", label, assertion.location)
        return None

    result = assertion.run()
    if result:
        return result
    if settings.mode == "on" and assertion.using_framework_assertion():
        return result
    if not settings.enabled:
        raise NaturalAssertionFailed(
            f"{label} expression failed at {assertion.location}", assertion
        )
    raise NaturalAssertionFailed(assertion.message(), assertion)


def explain(
    block: Callable[..., Any], context: Any = None, *, label: str = THEN_LABEL
) -> str:
    """Return the explanation of ``block`` without running it as a check."""
    return NaturalAssertion(label, block, context).message()
