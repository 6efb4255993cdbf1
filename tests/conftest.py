"""Shared test fixtures for natassert.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

from collections.abc import Callable, Iterator
from types import SimpleNamespace
from typing import Any

import pytest

from natassert.analyzer import NaturalAssertion
from natassert.config import reset_settings

_SETTINGS_ENV = (
    "NATASSERT_MODE",
    "NATASSERT_WRAP_WIDTH",
    "NATASSERT_MAX_INSPECT_SIZE",
    "NATASSERT_TRACE_INDENT",
)


class FauxThen:
    """A block set up the way a real Then clause would set it up.

    The keyword arguments become the example's given values, so the
    block reads them like any other name::

        faux = FauxThen(lambda: a + 2, a=1)
        faux.block_result       # 3
        faux.na.evaluate("a")   # 1

    ``block_result`` is the value of the block, ``na`` the natural
    assertion whose context is the block.
    """

    def __init__(self, block: Callable[..., Any], **givens: Any) -> None:
        self.block = block
        self.example = SimpleNamespace(**givens)

    @property
    def block_result(self) -> Any:
        return self.na.run()

    @property
    def na(self) -> NaturalAssertion:
        return NaturalAssertion("FauxThen", self.block, self.example)


@pytest.fixture()
def faux_then() -> type[FauxThen]:
    """Return the ``FauxThen`` factory."""
    return FauxThen


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep process-wide settings and NATASSERT_* variables out of tests."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "natassert"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"
