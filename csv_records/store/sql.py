"""
SQL fragments shared by the relational record stores.

Statements are written once with a ``{ph}`` placeholder marker and rendered
for the driver's paramstyle (``?`` for sqlite3, ``%s`` for psycopg).
"""

from __future__ import annotations

from typing import List, Optional, Tuple

TABLE = "csv_records"
SEARCH_FIELDS = ("name", "email", "body")
LIKE_ESCAPE = "\\"

SELECT_COLUMNS = "id, post_id, name, email, body, created_at, updated_at"

INSERT_SQL = (
    f"INSERT INTO {TABLE} (post_id, name, email, body, created_at, updated_at) "
    "VALUES ({ph}, {ph}, {ph}, {ph}, {ph}, {ph})"
)


def render(sql: str, placeholder: str) -> str:
    """Substitute the driver placeholder into a shared statement."""
    return sql.replace("{ph}", placeholder)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the search term is matched literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def search_filter(search: Optional[str]) -> Tuple[str, List[str]]:
    """
    Build the WHERE clause and parameters for a case-insensitive OR search.

    Both the column and the pattern go through the database's ``LOWER`` so they
    are folded the same way. An empty or None search term yields no clause.
    """
    if not search:
        return "", []
    pattern = f"%{escape_like(search)}%"
    clauses = [f"LOWER({field}) LIKE LOWER({{ph}}) ESCAPE '{LIKE_ESCAPE}'" for field in SEARCH_FIELDS]
    return " WHERE " + " OR ".join(clauses), [pattern] * len(SEARCH_FIELDS)


def count_sql(where: str) -> str:
    return f"SELECT COUNT(*) FROM {TABLE}{where}"


def page_sql(where: str) -> str:
    return f"SELECT {SELECT_COLUMNS} FROM {TABLE}{where} ORDER BY id ASC LIMIT {{ph}} OFFSET {{ph}}"


__all__ = [
    "INSERT_SQL",
    "SEARCH_FIELDS",
    "TABLE",
    "count_sql",
    "escape_like",
    "page_sql",
    "render",
    "search_filter",
]
