"""
Single-file SQLite record store.

The default backend: one on-disk database file holding the `csv_records`
table. Every operation opens its own connection, so the store is safe to
share between the API's worker threads.
"""

from __future__ import annotations

import sqlite3
from contextlib import closing, contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator, List, Optional, Sequence, Tuple

from csv_records.domain.models import Record, RecordDraft
from csv_records.errors import StoreError, StoreWriteError
from csv_records.store import sql
from csv_records.store.abstract import AbstractRecordStore
from csv_records.utils.logging import get_logger

log = get_logger(__name__)

_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {sql.TABLE} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    post_id INTEGER NOT NULL,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    body TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""


def _unicode_lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if isinstance(value, str) else value


def _row_to_record(row: sqlite3.Row) -> Record:
    return Record(
        id=row["id"],
        post_id=row["post_id"],
        name=row["name"],
        email=row["email"],
        body=row["body"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class SqliteRecordStore(AbstractRecordStore):
    """
    Record store backed by a single SQLite file.

    AUTOINCREMENT guarantees ids are never reused, even after a full clear.
    """

    name: str = "sqlite"

    def __init__(self, path: Path | str, timeout_seconds: float = 30.0) -> None:
        self.path = Path(path)
        self.timeout_seconds = timeout_seconds

    @contextmanager
    def _connect(self) -> Generator[sqlite3.Connection, None, None]:
        with closing(sqlite3.connect(str(self.path), timeout=self.timeout_seconds)) as conn:
            conn.row_factory = sqlite3.Row
            # Built-in LOWER folds ASCII only.
            conn.create_function("LOWER", 1, _unicode_lower, deterministic=True)
            yield conn

    def initialize(self) -> None:
        if not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            log.info("Created database directory", extra={"path": str(self.path.parent)})
        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            with conn:
                conn.execute(_SCHEMA)
        log.info("Database synchronized", extra={"backend": self.name, "path": str(self.path)})

    def insert_many(self, drafts: Sequence[RecordDraft]) -> int:
        now = datetime.now(timezone.utc).isoformat()
        params = [(d.post_id, d.name, d.email, d.body, now, now) for d in drafts]
        try:
            with self._connect() as conn:
                with conn:
                    conn.executemany(sql.render(sql.INSERT_SQL, "?"), params)
        except (sqlite3.Error, OverflowError) as exc:
            raise StoreWriteError(str(exc)) from exc
        return len(params)

    def find_and_count(
        self, search: Optional[str], limit: int, offset: int
    ) -> Tuple[int, List[Record]]:
        where, params = sql.search_filter(search)
        try:
            with self._connect() as conn:
                with conn:
                    total = conn.execute(sql.render(sql.count_sql(where), "?"), params).fetchone()[0]
                    rows = conn.execute(
                        sql.render(sql.page_sql(where), "?"), [*params, limit, offset]
                    ).fetchall()
        except (sqlite3.Error, OverflowError) as exc:
            raise StoreError(str(exc)) from exc
        return int(total), [_row_to_record(row) for row in rows]

    def delete_all(self) -> int:
        try:
            with self._connect() as conn:
                with conn:
                    cur = conn.execute(f"DELETE FROM {sql.TABLE}")
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        return cur.rowcount


__all__ = ["SqliteRecordStore"]
