"""Block capture: source location and name resolution for assertion blocks."""
from __future__ import annotations

from natassert.capture.block import CapturedBlock, block_bindings, call_block, capture_block
from natassert.capture.environment import Environment, compile_expression
from natassert.capture.source import BlockSource, locate_block, parse_source

__all__ = [
    "BlockSource",
    "CapturedBlock",
    "Environment",
    "block_bindings",
    "call_block",
    "capture_block",
    "compile_expression",
    "locate_block",
    "parse_source",
]
