"""Test that the quickstart API works for natassert."""
from __future__ import annotations

import pytest


def test_quickstart_import() -> None:
    import natassert

    assert callable(natassert.analyze)
    assert callable(natassert.assert_natural)
    assert callable(natassert.explain)


def test_quickstart_version(expected_version: str) -> None:
    import natassert

    assert natassert.__version__ == expected_version


def test_quickstart_passing_block() -> None:
    import natassert

    a = 2
    assert natassert.assert_natural(lambda: a == 2) is True


def test_quickstart_failing_block() -> None:
    import natassert

    a = 1
    with pytest.raises(natassert.NaturalAssertionFailed) as info:
        natassert.assert_natural(lambda: a == 2)
    message = str(info.value)
    assert message.startswith("Then expression failed at ")
    assert "to equal: 2" in message


def test_quickstart_analyze() -> None:
    import natassert

    a = 1
    na = natassert.analyze(lambda: a == 2)
    assert na.evaluate("a + 1") == 2
    assert na.has_content()
    assert not na.using_framework_assertion()
    assert na.message().splitlines()[-1].endswith("<- a == 2")


def test_quickstart_errors_are_exported() -> None:
    import natassert

    assert issubclass(natassert.InvalidThenError, natassert.NatAssertError)
    assert issubclass(natassert.NaturalAssertionFailed, AssertionError)
