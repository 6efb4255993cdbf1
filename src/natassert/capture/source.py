"""Locate the source of a block function.

Python keeps no source text on function objects, only a filename and a
first line number.  ``locate_block`` reads the defining file through
``linecache``, parses it, and finds the ``lambda`` or ``def`` node the
function was compiled from.  When several lambdas start on the same line,
the one whose referenced names (and, on Python 3.11+, start column) match
the code object is chosen.
"""
from __future__ import annotations

import ast
import functools
import inspect
import linecache
import logging
from dataclasses import dataclass
from types import CodeType, FunctionType

from natassert.errors import SourceUnavailableError

logger = logging.getLogger(__name__)

_BlockNode = ast.Lambda | ast.FunctionDef | ast.AsyncFunctionDef


@dataclass(frozen=True)
class BlockSource:
    """Parsed body of a block together with where it came from.

    Parameters
    ----------
    filename:
        The file the block was defined in.
    lineno:
        1-based line of the ``lambda`` or ``def`` keyword.
    text:
        Source text of the block body.
    statements:
        The body statements.  A lambda body is one expression statement;
        docstrings, ``pass`` and ``...`` are dropped from ``def`` bodies.
    """

    filename: str
    lineno: int
    text: str
    statements: tuple[ast.stmt, ...]


@functools.lru_cache(maxsize=64)
def _parse_module(filename: str, source: str) -> ast.Module:
    return ast.parse(source, filename=filename)


def _first_line(node: _BlockNode) -> int:
    if isinstance(node, ast.Lambda) or not node.decorator_list:
        return node.lineno
    return min(node.lineno, *(d.lineno for d in node.decorator_list))


def _is_filler(stmt: ast.stmt) -> bool:
    if isinstance(stmt, ast.Pass):
        return True
    return (
        isinstance(stmt, ast.Expr)
        and isinstance(stmt.value, ast.Constant)
        and (stmt.value.value is Ellipsis or isinstance(stmt.value.value, str))
    )


def body_statements(body: list[ast.stmt]) -> tuple[ast.stmt, ...]:
    """Drop a leading docstring and filler statements from ``body``."""
    statements = list(body)
    if statements and _is_filler(statements[0]):
        statements = statements[1:]
    return tuple(s for s in statements if not _is_filler(s))


def _scope_names(node: ast.AST) -> set[str]:
    """Names and attributes referenced by ``node``'s own scope."""
    names: set[str] = set()
    todo = list(ast.iter_child_nodes(node))
    while todo:
        child = todo.pop()
        if isinstance(child, ast.Name):
            names.add(child.id)
        elif isinstance(child, ast.Attribute):
            names.add(child.attr)
        elif isinstance(child, ast.arg):
            names.add(child.arg)
        if isinstance(child, (ast.Lambda, ast.FunctionDef, ast.AsyncFunctionDef)):
            # nested scopes keep their names in their own code objects
            continue
        todo.extend(ast.iter_child_nodes(child))
    return names


def _code_names(code: CodeType) -> set[str]:
    return set(code.co_names) | set(code.co_varnames) | set(code.co_freevars) | set(
        code.co_cellvars
    )


def _code_column(code: CodeType) -> int | None:
    """Column of the first source-backed instruction on the first line."""
    positions = getattr(code, "co_positions", None)
    if positions is None:
        return None
    columns = [
        col
        for line, end_line, col, end_col in positions()
        if line == code.co_firstlineno
        and col is not None
        # RESUME and other synthetic instructions are zero-width at column 0
        and (end_line, end_col) != (line, col)
    ]
    return min(columns) if columns else None


def _start_column(node: _BlockNode) -> int:
    if isinstance(node, ast.Lambda):
        return node.body.col_offset
    return node.col_offset


def _choose(candidates: list[_BlockNode], code: CodeType) -> _BlockNode:
    if len(candidates) == 1:
        return candidates[0]
    wanted = _code_names(code)
    matching = [c for c in candidates if _scope_names(c) == wanted]
    if len(matching) == 1:
        return matching[0]
    pool = matching or candidates
    column = _code_column(code)
    if column is not None:
        # the code's first instruction lies inside the block body
        before = [c for c in pool if _start_column(c) <= column]
        if before:
            return max(before, key=_start_column)
    logger.debug(
        "Ambiguous block at %s:%d; using the first of %d candidates",
        code.co_filename,
        code.co_firstlineno,
        len(pool),
    )
    return pool[0]


def _lambdas_in_statement(tree: ast.Module, lineno: int) -> list[_BlockNode]:
    """Lambdas inside the statement that starts on ``lineno``.

    Code rewritten by pytest's assertion rewriter carries the location of
    the enclosing ``assert``, so a lambda on a continuation line reports
    the statement's first line.
    """
    for node in ast.walk(tree):
        if isinstance(node, ast.stmt) and node.lineno == lineno:
            found = [n for n in ast.walk(node) if isinstance(n, ast.Lambda)]
            if found:
                return found
    return []


def _segment(source: str, node: ast.AST) -> str:
    return ast.get_source_segment(source, node) or ast.unparse(node)


def locate_block(block: FunctionType) -> BlockSource:
    """Find and parse the source of ``block``.

    Raises
    ------
    SourceUnavailableError
        If ``block`` is not a Python function, its file cannot be read, or
        no matching ``lambda``/``def`` is found at its first line.
    """
    code = getattr(block, "__code__", None)
    if not isinstance(code, CodeType):
        raise SourceUnavailableError(block, "not a Python function")

    try:
        filename = inspect.getsourcefile(block) or code.co_filename
    except TypeError:
        filename = code.co_filename
    lines = linecache.getlines(filename, getattr(block, "__globals__", None))
    if not lines:
        raise SourceUnavailableError(block, f"no source lines for {filename}")
    source = "".join(lines)

    try:
        tree = _parse_module(filename, source)
    except SyntaxError as exc:
        raise SourceUnavailableError(block, f"cannot parse {filename}: {exc}") from exc

    is_lambda = code.co_name == "<lambda>"
    candidates: list[_BlockNode] = []
    for node in ast.walk(tree):
        if is_lambda and isinstance(node, ast.Lambda):
            if node.lineno == code.co_firstlineno:
                candidates.append(node)
        elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            if node.name == code.co_name and _first_line(node) == code.co_firstlineno:
                candidates.append(node)
    if not candidates and is_lambda:
        candidates = _lambdas_in_statement(tree, code.co_firstlineno)
    if not candidates:
        raise SourceUnavailableError(
            block, f"no block found at {filename}:{code.co_firstlineno}"
        )

    node = _choose(candidates, code)
    if isinstance(node, ast.Lambda):
        statement = ast.copy_location(ast.Expr(value=node.body), node.body)
        statements: tuple[ast.stmt, ...] = (statement,)
        text = _segment(source, node.body)
    else:
        statements = body_statements(node.body)
        text = "\n".join(_segment(source, s) for s in statements)
    logger.debug("Located %s block at %s:%d", code.co_name, filename, node.lineno)
    return BlockSource(
        filename=filename, lineno=node.lineno, text=text, statements=statements
    )


def parse_source(text: str, filename: str = "<expression>") -> BlockSource:
    """Parse a bare block body given as text.

    Raises
    ------
    SyntaxError
        If ``text`` is not valid Python.
    """
    tree = ast.parse(text.strip(), filename=filename)
    statements = body_statements(tree.body)
    return BlockSource(filename=filename, lineno=1, text=text.strip(), statements=statements)
