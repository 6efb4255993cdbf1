"""Command-line interface for natassert.

``natassert.cli.main`` holds the Click group; the ``natassert`` console
script points at it.
"""
from __future__ import annotations
