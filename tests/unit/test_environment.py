"""Unit tests for natassert.capture.environment — lookup order and evaluation."""
from __future__ import annotations

from types import SimpleNamespace

import pytest

from natassert.capture.environment import Environment, compile_expression
from natassert.capture.source import parse_source


def _env(
    bindings: dict | None = None,
    context: object = None,
    globals_: dict | None = None,
) -> Environment:
    return Environment(bindings=bindings, context=context, globals=globals_)


# ===========================================================================
# Lookup precedence
# ===========================================================================


class TestLookup:
    def test_bindings_shadow_context(self) -> None:
        env = _env({"a": "local"}, SimpleNamespace(a="context"))
        assert env.lookup("a") == "local"

    def test_context_shadows_globals(self) -> None:
        env = _env(context=SimpleNamespace(a="context"), globals_={"a": "global"})
        assert env.lookup("a") == "context"

    def test_globals_used_last(self) -> None:
        env = _env(context=SimpleNamespace(), globals_={"a": "global"})
        assert env.lookup("a") == "global"

    def test_mapping_context(self) -> None:
        env = _env(context={"a": 1})
        assert env.lookup("a") == 1

    def test_dunder_names_skip_context(self) -> None:
        env = _env(context=SimpleNamespace(), globals_={"__name__": "tests"})
        assert env.lookup("__name__") == "tests"

    def test_missing_name_raises_key_error(self) -> None:
        with pytest.raises(KeyError):
            _env().lookup("nowhere")

    def test_getitem_falls_back_to_builtins(self) -> None:
        assert _env()["len"] is len

    def test_contains(self) -> None:
        env = _env({"a": 1})
        assert "a" in env
        assert "len" in env
        assert "nowhere" not in env

    def test_iteration_lists_each_name_once(self) -> None:
        env = _env({"a": 1}, SimpleNamespace(a=2, b=3), {"c": 4, "b": 5})
        assert list(env) == ["a", "b", "c"]
        assert len(env) == 3


# ===========================================================================
# evaluate
# ===========================================================================


class TestEvaluate:
    def test_simple_expression(self) -> None:
        env = _env(context=SimpleNamespace(a=2), globals_={"X": 1})
        assert env.evaluate("X + a") == 3

    def test_builtins(self) -> None:
        assert _env(context={"xs": [1, 2]}).evaluate("len(xs)") == 2

    def test_unknown_name_raises_name_error(self) -> None:
        with pytest.raises(NameError):
            _env().evaluate("nowhere + 1")

    def test_generator_expression_sees_context(self) -> None:
        env = _env(context=SimpleNamespace(a=0, xs=[1, 2]))
        assert env.evaluate("all(x > a for x in xs)") is True

    def test_nested_lambda_sees_bindings(self) -> None:
        env = _env({"offset": 10})
        assert env.evaluate("(lambda n: n + offset)(1)") == 11

    def test_exceptions_propagate(self) -> None:
        with pytest.raises(TypeError):
            _env(context={"ary": None}).evaluate("ary[1]")

    def test_context_property_is_read_lazily(self) -> None:
        calls: list[str] = []

        class Example:
            @property
            def a(self) -> int:
                calls.append("a")
                return 1

        env = _env(context=Example())
        assert calls == []
        assert env.evaluate("a") == 1
        assert calls == ["a"]

    def test_syntax_error(self) -> None:
        with pytest.raises(SyntaxError):
            _env().evaluate("a ==")

    def test_compiled_code_is_cached(self) -> None:
        assert compile_expression("a + 1") is compile_expression("a + 1")


# ===========================================================================
# run
# ===========================================================================


class TestRun:
    def test_trailing_expression_is_the_value(self) -> None:
        parsed = parse_source("x = a + 1\nx * 2")
        assert _env(context={"a": 1}).run(parsed.statements) == 4

    def test_return_statement(self) -> None:
        parsed = parse_source("if a:\n    return 'yes'\nreturn 'no'")
        assert _env(context={"a": 0}).run(parsed.statements) == "no"

    def test_empty_body(self) -> None:
        assert _env().run(()) is None

    def test_assignments_do_not_leak(self) -> None:
        env = _env()
        env.run(parse_source("leaked = 1").statements)
        assert "leaked" not in env
