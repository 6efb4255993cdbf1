"""Message layout helpers for natural-assertion diagnostics."""
from __future__ import annotations

from natassert.render.formatter import (
    display_pairs,
    explain_expected,
    format_exception,
    format_value,
    is_multi_line,
    limit_length,
    suggest_width,
)

__all__ = [
    "display_pairs",
    "explain_expected",
    "format_exception",
    "format_value",
    "is_multi_line",
    "limit_length",
    "suggest_width",
]
