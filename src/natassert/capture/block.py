"""Captured assertion blocks.

A ``CapturedBlock`` pairs the parsed body of an assertion block with the
``Environment`` it runs in.  It is what the analyzer works on.

Usage
-----
::

    from natassert.capture import capture_block

    captured = capture_block(lambda: stack.depth == 2, example)
    captured.run()                      # evaluate the block
    captured.evaluate("stack.depth")    # evaluate any sub-expression
"""
from __future__ import annotations

import ast
import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from natassert.capture.environment import Environment
from natassert.capture.source import locate_block, parse_source


@dataclass(frozen=True)
class CapturedBlock:
    """An assertion block and the lexical environment it was defined in.

    Parameters
    ----------
    label:
        Clause label used in messages, e.g. ``"Then"`` or ``"Invariant"``.
    source:
        Source text of the block body.
    statements:
        Parsed body statements.
    filename:
        File the block was defined in.
    lineno:
        Line the block starts on.
    environment:
        Name resolution for evaluating the block and its parts.
    """

    label: str
    source: str
    statements: tuple[ast.stmt, ...]
    filename: str
    lineno: int
    environment: Environment

    @property
    def location(self) -> str:
        return f"{self.filename}:{self.lineno}"

    def evaluate(self, expr: str) -> Any:
        """Evaluate ``expr`` in the block's environment."""
        return self.environment.evaluate(expr)

    def run(self) -> Any:
        """Execute the block body and return its value."""
        return self.environment.run(self.statements)

    @classmethod
    def from_source(
        cls,
        text: str,
        context: Any = None,
        *,
        namespace: Mapping[str, Any] | None = None,
        label: str = "Then",
        filename: str = "<expression>",
    ) -> "CapturedBlock":
        """Capture a block given as source text rather than a function.

        Parameters
        ----------
        text:
            The block body, usually a single expression.
        context:
            The example object whose attributes the block reads.
        namespace:
            Module-level names visible to the block.

        Raises
        ------
        SyntaxError
            If ``text`` is not valid Python.
        """
        parsed = parse_source(text, filename)
        environment = Environment(context=context, globals=namespace, filename=filename)
        return cls(
            label=label,
            source=parsed.text,
            statements=parsed.statements,
            filename=parsed.filename,
            lineno=parsed.lineno,
            environment=environment,
        )


def block_bindings(block: Callable[..., Any], context: Any = None) -> dict[str, Any]:
    """Collect the local bindings a block function closes over.

    Closure cells come first.  A leading positional parameter without a
    default is bound to ``context``; other parameters take their defaults.
    """
    code = block.__code__
    bindings: dict[str, Any] = {}
    for name, cell in zip(code.co_freevars, block.__closure__ or ()):
        try:
            bindings[name] = cell.cell_contents
        except ValueError:
            # cell not yet assigned in the enclosing scope
            continue

    context_name = _context_parameter(block)
    for param in inspect.signature(block).parameters.values():
        if param.name == context_name:
            bindings[param.name] = context
        elif param.default is not param.empty:
            bindings[param.name] = param.default
    return bindings


def _context_parameter(block: Callable[..., Any]) -> str | None:
    """Name of the parameter that receives the context, if any.

    Only a leading positional parameter without a default takes the
    context; ``lambda i=i: ...`` keeps its default.
    """
    params = list(inspect.signature(block).parameters.values())
    if not params:
        return None
    first = params[0]
    if first.kind not in (first.POSITIONAL_ONLY, first.POSITIONAL_OR_KEYWORD):
        return None
    if first.default is not first.empty:
        return None
    return first.name


def call_block(block: Callable[..., Any], context: Any = None) -> Any:
    """Call a block function directly, passing ``context`` if it takes one."""
    if _context_parameter(block) is not None:
        return block(context)
    return block()


def capture_block(
    block: Callable[..., Any], context: Any = None, *, label: str = "Then"
) -> CapturedBlock:
    """Capture ``block`` with its environment.

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
    located = locate_block(block)  # type: ignore[arg-type]
    environment = Environment(
        bindings=block_bindings(block, context),
        context=context,
        globals=block.__globals__,  # type: ignore[attr-defined]
        filename=located.filename,
    )
    return CapturedBlock(
        label=label,
        source=located.text,
        statements=located.statements,
        filename=located.filename,
        lineno=located.lineno,
        environment=environment,
    )
