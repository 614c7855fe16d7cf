"""
PostgreSQL record store using a psycopg connection pool.

Intended for deployments where several API processes share one database.
Request traffic goes through the pool; schema creation uses a dedicated,
retried connection so startup tolerates a database that is still booting.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from csv_records.domain.models import Record, RecordDraft
from csv_records.errors import StoreError, StoreWriteError
from csv_records.infrastructure.db_factory import get_sync_connection, get_sync_pool, open_pool
from csv_records.store import sql
from csv_records.store.abstract import AbstractRecordStore
from csv_records.utils.logging import get_logger

log = get_logger(__name__)

_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {sql.TABLE} (
    id BIGSERIAL PRIMARY KEY,
    post_id BIGINT NOT NULL,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    body TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""


def _row_to_record(row: Dict[str, Any]) -> Record:
    return Record(**row)


class PostgresRecordStore(AbstractRecordStore):
    """
    Record store backed by PostgreSQL through a psycopg ConnectionPool.
    """

    name: str = "postgres"

    def __init__(
        self,
        pool_min_size: int = 1,
        pool_max_size: int = 10,
        dsn_override: Optional[str] = None,
    ) -> None:
        self.pool_min_size = pool_min_size
        self.pool_max_size = pool_max_size
        self._dsn_override = dsn_override
        self._pool_instance: ConnectionPool | None = None
        self._owns_pool = False
        self._pool_lock = threading.Lock()

    def _get_pool(self) -> ConnectionPool:
        with self._pool_lock:
            if self._pool_instance is not None:
                return self._pool_instance
            if self._dsn_override:
                pool = ConnectionPool(
                    conninfo=self._dsn_override,
                    min_size=self.pool_min_size,
                    max_size=self.pool_max_size,
                    open=False,
                )
                open_pool(pool)
                self._pool_instance = pool
                self._owns_pool = True
            else:
                self._pool_instance = get_sync_pool(
                    min_size=self.pool_min_size, max_size=self.pool_max_size
                )
            return self._pool_instance

    def initialize(self) -> None:
        with get_sync_connection(self._dsn_override) as conn:
            conn.execute(_SCHEMA)
        log.info("Database synchronized", extra={"backend": self.name})

    def insert_many(self, drafts: Sequence[RecordDraft]) -> int:
        now = datetime.now(timezone.utc)
        params = [(d.post_id, d.name, d.email, d.body, now, now) for d in drafts]
        if not params:
            return 0
        try:
            with self._get_pool().connection() as conn:
                with conn.cursor() as cur:
                    cur.executemany(sql.render(sql.INSERT_SQL, "%s"), params)
        except psycopg.Error as exc:
            raise StoreWriteError(str(exc)) from exc
        return len(params)

    def find_and_count(
        self, search: Optional[str], limit: int, offset: int
    ) -> Tuple[int, List[Record]]:
        where, params = sql.search_filter(search)
        try:
            with self._get_pool().connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(sql.render(sql.count_sql(where), "%s"), params)
                    total = cur.fetchone()["count"]
                    cur.execute(sql.render(sql.page_sql(where), "%s"), [*params, limit, offset])
                    rows = cur.fetchall()
        except psycopg.Error as exc:
            raise StoreError(str(exc)) from exc
        return int(total), [_row_to_record(row) for row in rows]

    def delete_all(self) -> int:
        try:
            with self._get_pool().connection() as conn:
                cur = conn.execute(f"DELETE FROM {sql.TABLE}")
                deleted = cur.rowcount
        except psycopg.Error as exc:
            raise StoreError(str(exc)) from exc
        return deleted

    def close(self) -> None:
        # The shared pool belongs to PoolManager and is closed at exit.
        if self._owns_pool and self._pool_instance is not None:
            self._pool_instance.close()
        self._pool_instance = None
        self._owns_pool = False


__all__ = ["PostgresRecordStore"]
