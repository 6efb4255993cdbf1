#!/usr/bin/env python3
"""Example: Quickstart — natassert

Analyze a failing assertion block and print its explanation, then run
the same block as a check.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install natassert
"""
from __future__ import annotations

from types import SimpleNamespace

import natassert


class Stack:
    def __init__(self) -> None:
        self.items: list[str] = []

    def push(self, item: str) -> None:
        self.items.append(item)

    @property
    def depth(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return f"Stack({self.items!r})"


def main() -> None:
    print(f"natassert version: {natassert.__version__}")

    # The example context plays the role of the given values
    example = SimpleNamespace(stack=Stack())
    example.stack.push("bottom")

    na = natassert.analyze(lambda: stack.depth == 2, example)
    print(f"stack.depth evaluates to {na.evaluate('stack.depth')}")
    print(f"uses a framework assertion: {na.using_framework_assertion()}")
    print()
    print(na.message())

    try:
        natassert.assert_natural(lambda: stack.depth == 2, example)
    except natassert.NaturalAssertionFailed as exc:
        print("assert_natural raised NaturalAssertionFailed:")
        print(exc.explanation)


if __name__ == "__main__":
    main()
