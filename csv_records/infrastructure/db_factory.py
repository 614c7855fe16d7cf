"""
PostgreSQL connection plumbing for the ``postgres`` store backend.

One process-wide pool serves API requests (see ``PoolManager``); schema
creation at startup uses a dedicated connection instead. Both paths retry
transient connection failures with tenacity, so the API can start while the
database container is still accepting its first connections.
"""

from __future__ import annotations

import atexit
import threading
from typing import Optional

import psycopg
from psycopg import Connection
from psycopg_pool import ConnectionPool
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from csv_records.config import Settings, get_settings
from csv_records.utils.logging import get_logger

log = get_logger(__name__)

_TRANSIENT_ERRORS = (psycopg.OperationalError, psycopg.InterfaceError)

_retry_transient = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(_TRANSIENT_ERRORS),
    reraise=True,
)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a libpq URI from the ``DB_*`` settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@_retry_transient
def open_pool(pool: ConnectionPool, timeout: float = 10.0) -> None:
    """Open ``pool`` and block until its minimum connections are up."""
    pool.open(wait=True, timeout=timeout)


class PoolManager:
    """
    Process-wide owner of the shared record-store pool.

    The first caller decides the pool size; later callers get the same pool.
    The pool is closed by an atexit hook, so stores borrowing it never close it.
    """

    _instance: Optional["PoolManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "PoolManager":
        with cls._lock:
            if cls._instance is None:
                instance = super().__new__(cls)
                instance._sync_pool = None
                atexit.register(instance.close_all)
                cls._instance = instance
            return cls._instance

    def get_sync_pool(
        self,
        min_size: int = 1,
        max_size: int = 10,
        dsn: Optional[str] = None,
    ) -> ConnectionPool:
        """
        Return the shared pool, opening it on first use.

        Parameters
        ----------
        min_size : int
            Connections kept open while idle (``DB_POOL_MIN_SIZE``).
        max_size : int
            Upper bound on concurrent connections (``DB_POOL_MAX_SIZE``).
        dsn : str | None
            Connection string; defaults to ``build_dsn()``.
        """
        with self._lock:
            if self._sync_pool is None:
                pool = ConnectionPool(
                    conninfo=dsn or build_dsn(),
                    min_size=min_size,
                    max_size=max_size,
                    open=False,
                )
                open_pool(pool)
                self._sync_pool = pool
                log.info("Record store pool opened", extra={"min_size": min_size, "max_size": max_size})
            return self._sync_pool

    def close_all(self) -> None:
        with self._lock:
            pool, self._sync_pool = self._sync_pool, None
        if pool is not None:
            pool.close()
            log.info("Record store pool closed")


@_retry_transient
def get_sync_connection(dsn: Optional[str] = None) -> Connection:
    """
    Open a dedicated connection outside the pool.

    Used for one-off work such as creating the ``csv_records`` table at
    startup. Raises ``psycopg.OperationalError`` once the retries are spent.
    """
    return psycopg.connect(dsn or build_dsn())


def get_sync_pool(min_size: int = 1, max_size: int = 10, dsn: Optional[str] = None) -> ConnectionPool:
    """Shortcut for ``PoolManager().get_sync_pool(...)``."""
    return PoolManager().get_sync_pool(min_size=min_size, max_size=max_size, dsn=dsn)


__all__ = [
    "PoolManager",
    "build_dsn",
    "get_sync_connection",
    "get_sync_pool",
    "open_pool",
]
