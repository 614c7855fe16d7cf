"""
Canonical field resolution for cleaned CSV rows.

Each canonical field accepts a fixed, ordered list of header spellings. The
first spelling present in a row with a non-blank value wins; a missing or
empty cell falls through to the next spelling. Matching is exact
per spelling; only the listed variants are tried.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple, TypedDict

FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "post_id": ("postId", "post_id", "Id", "id"),
    "name": ("name", "Name"),
    "email": ("email", "Email"),
    "body": ("body", "Body"),
}

# Value used when none of a field's spellings is present. The post identifier
# stays None so the record builder applies its numeric default.
MISSING_DEFAULTS: Dict[str, Any] = {
    "post_id": None,
    "name": "",
    "email": "",
    "body": "",
}


class MappedFields(TypedDict):
    post_id: Optional[Any]
    name: Any
    email: Any
    body: Any


def first_present(row: Mapping[str, Any], aliases: Tuple[str, ...]) -> Optional[Any]:
    """Return the value of the first alias in ``row`` that is neither None nor empty."""
    for alias in aliases:
        value = row.get(alias)
        if value is not None and value != "":
            return value
    return None


def resolve_fields(row: Mapping[str, Any]) -> MappedFields:
    """Resolve the four canonical fields of one cleaned row."""
    resolved: Dict[str, Any] = {}
    for field_name, aliases in FIELD_ALIASES.items():
        value = first_present(row, aliases)
        resolved[field_name] = MISSING_DEFAULTS[field_name] if value is None else value
    return MappedFields(**resolved)


__all__ = ["FIELD_ALIASES", "MISSING_DEFAULTS", "MappedFields", "first_present", "resolve_fields"]
