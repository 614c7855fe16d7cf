"""
Header and cell cleanup for uploaded CSV rows.

Spreadsheet exports commonly prefix the first header with a byte-order mark
and wrap headers or cells in quotes. These helpers undo both, plus surrounding
whitespace, without touching anything else.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

BOM = "\ufeff"
QUOTE_CHARS = ("\"", "'")


def strip_quotes(text: str) -> str:
    """Remove one layer of quotes when both the first and last characters are quotes."""
    if len(text) >= 2 and text[0] in QUOTE_CHARS and text[-1] in QUOTE_CHARS:
        return text[1:-1]
    return text


def clean_header(raw: str) -> str:
    """Strip a leading BOM, then one layer of surrounding quotes, then whitespace."""
    if raw.startswith(BOM):
        raw = raw[1:]
    return strip_quotes(raw).strip()


def clean_value(value: Any) -> Any:
    """Apply quote stripping and trimming to text; other values pass through."""
    if isinstance(value, str):
        return strip_quotes(value).strip()
    return value


def clean_row(row: Mapping[Any, Any]) -> Dict[Any, Any]:
    """
    Return a new row with every header and cell cleaned.

    ``csv.DictReader`` files overflow cells under a ``None`` key; such keys are
    kept as-is so that no cell is silently dropped before field mapping.
    """
    cleaned: Dict[Any, Any] = {}
    for key, value in row.items():
        clean_key = clean_header(key) if isinstance(key, str) else key
        cleaned[clean_key] = clean_value(value)
    return cleaned


__all__ = ["BOM", "clean_header", "clean_row", "clean_value", "strip_quotes"]
