"""
Coercion of mapped CSV values into record drafts.

Ingestion never rejects a row: every coercion goes through ``parse_or_default``
so an unparsable or missing value collapses to the field's default.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Mapping, Optional, TypeVar

from csv_records.domain.models import RecordDraft

T = TypeVar("T")

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)", re.ASCII)

# Post ids are stored in a signed 64-bit column.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def parse_or_default(value: Any, parse: Callable[[Any], T], default: T) -> T:
    """
    Return ``parse(value)``, or ``default`` when the value is missing or unparsable.

    ``parse`` signals failure by raising ``ValueError`` or ``TypeError``.
    """
    if value is None:
        return default
    try:
        return parse(value)
    except (ValueError, TypeError):
        return default


def parse_int(value: Any) -> int:
    """
    Parse a base-10 integer from the leading digits of ``value``.

    Surrounding whitespace and trailing garbage are tolerated ("42abc" -> 42),
    matching how spreadsheet ids usually degrade. Only ASCII digits count.
    Raises ``ValueError`` when no digits lead the text or the number does not
    fit a signed 64-bit integer.
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not post identifiers")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        if match is None:
            raise ValueError(f"not an integer: {value!r}")
        parsed = int(match.group(1), 10)
    else:
        raise TypeError(f"cannot parse {type(value).__name__} as int")
    if not INT64_MIN <= parsed <= INT64_MAX:
        raise ValueError(f"integer out of range: {value!r}")
    return parsed


def coerce_text(value: Any) -> str:
    """Trim text values; anything that is not a string becomes an empty string."""
    if not isinstance(value, str):
        return ""
    return value.strip()


def build_record(mapped: Mapping[str, Optional[Any]]) -> RecordDraft:
    """Build a record draft from the field mapper's resolved values."""
    return RecordDraft(
        post_id=parse_or_default(mapped.get("post_id"), parse_int, 0),
        name=coerce_text(mapped.get("name")),
        email=coerce_text(mapped.get("email")),
        body=coerce_text(mapped.get("body")),
    )


__all__ = ["INT64_MAX", "INT64_MIN", "build_record", "coerce_text", "parse_int", "parse_or_default"]
