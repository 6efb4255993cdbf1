"""Name resolution for captured assertion blocks.

An ``Environment`` answers "what does this identifier mean inside the
block?" using a fixed precedence, highest first:

1. local block bindings (closure cells of the block function, and the
   context parameter when the block declares one);
2. the context object, i.e. the example whose given values the block
   reads (attributes, or keys when the context is a mapping);
3. the module globals of the block;
4. builtins.

Expressions are evaluated against a fresh ``_Namespace`` dict whose
``__missing__`` hook performs the lookup above.  Because the namespace is
installed as the *globals* of the evaluated code, nested scopes inside
the expression (generator expressions, lambdas) resolve names the same
way as the top level.
"""
from __future__ import annotations

import ast
import builtins
import functools
import logging
from collections.abc import Iterator, Mapping, Sequence
from types import CodeType
from typing import Any

logger = logging.getLogger(__name__)

_RUNNER_NAME = "__natassert_block__"
_RUNNER_TEMPLATE = f"def {_RUNNER_NAME}():\n    pass\n"


@functools.lru_cache(maxsize=256)
def compile_expression(text: str, filename: str = "<expression>") -> CodeType:
    """Compile ``text`` in ``eval`` mode, caching the code object.

    Raises
    ------
    SyntaxError
        If ``text`` is not a single Python expression.
    """
    return compile(text.strip(), filename, "eval")


class _Namespace(dict):
    """Globals dict that defers unknown names to an ``Environment``."""

    def __init__(self, environment: "Environment") -> None:
        super().__init__(__builtins__=builtins.__dict__)
        self._environment = environment

    def __missing__(self, name: str) -> Any:
        return self._environment.lookup(name)


_UNSET = object()


class Environment(Mapping[str, Any]):
    """The lexical environment a block was captured in.

    Parameters
    ----------
    bindings:
        Local block bindings.  These shadow everything else.
    context:
        The example object.  Its attributes (or items, if it is a
        mapping) form the enclosing scope.
    globals:
        Module-level names visible to the block.
    filename:
        Used as the filename of compiled code, for tracebacks.
    """

    def __init__(
        self,
        bindings: Mapping[str, Any] | None = None,
        context: Any = None,
        globals: Mapping[str, Any] | None = None,  # noqa: A002
        filename: str = "<expression>",
    ) -> None:
        self._bindings: dict[str, Any] = dict(bindings or {})
        self._context = context
        self._globals: Mapping[str, Any] = globals if globals is not None else {}
        self.filename = filename

    @property
    def context(self) -> Any:
        return self._context

    @property
    def bindings(self) -> dict[str, Any]:
        return dict(self._bindings)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _from_context(self, name: str) -> Any:
        context = self._context
        if context is None or name.startswith("__"):
            return _UNSET
        if isinstance(context, Mapping):
            return context[name] if name in context else _UNSET
        try:
            return getattr(context, name)
        except AttributeError:
            return _UNSET

    def lookup(self, name: str) -> Any:
        """Resolve ``name`` through bindings, context and globals.

        Builtins are not consulted here; the evaluator falls back to them
        when this raises ``KeyError``.

        Raises
        ------
        KeyError
            If ``name`` is not bound at any level.
        """
        if name in self._bindings:
            return self._bindings[name]
        value = self._from_context(name)
        if value is not _UNSET:
            return value
        if name in self._globals:
            return self._globals[name]
        raise KeyError(name)

    def __getitem__(self, name: str) -> Any:
        try:
            return self.lookup(name)
        except KeyError:
            if hasattr(builtins, name):
                return getattr(builtins, name)
            raise

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        try:
            self[name]
        except KeyError:
            return False
        return True

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        names: list[str] = list(self._bindings)
        if isinstance(self._context, Mapping):
            names.extend(self._context)
        elif hasattr(self._context, "__dict__"):
            names.extend(n for n in vars(self._context) if not n.startswith("__"))
        names.extend(self._globals)
        for name in names:
            if name not in seen:
                seen.add(name)
                yield name

    def __len__(self) -> int:
        return sum(1 for _ in self)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def namespace(self) -> dict[str, Any]:
        """Return a fresh evaluation namespace backed by this environment."""
        return _Namespace(self)

    def evaluate(self, expr: str) -> Any:
        """Evaluate the expression ``expr`` and return its value.

        Exceptions raised by the expression propagate to the caller.
        """
        code = compile_expression(expr, self.filename)
        return eval(code, self.namespace())  # noqa: S307

    def run(self, statements: Sequence[ast.stmt]) -> Any:
        """Execute block ``statements`` and return the block's value.

        The statements become the body of a generated function so that
        ``return`` and local assignments behave as they do in the block.
        A trailing expression statement is returned as the value.
        """
        body = list(statements)
        if not body:
            return None
        last = body[-1]
        if isinstance(last, ast.Expr):
            body[-1] = ast.copy_location(ast.Return(value=last.value), last)

        module = ast.parse(_RUNNER_TEMPLATE)
        module.body[0].body = body  # type: ignore[attr-defined]
        ast.fix_missing_locations(module)
        namespace = self.namespace()
        exec(compile(module, self.filename, "exec"), namespace)  # noqa: S102
        return namespace[_RUNNER_NAME]()
