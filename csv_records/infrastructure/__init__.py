"""
Infrastructure package for the CSV records service.

Centralizes database connectivity concerns (Postgres connection factory,
pooling). Store selection lives in `csv_records.infrastructure.store_factory`.
Keep this layer focused on I/O and resource management, decoupled from
ingestion and query logic.
"""

from csv_records.infrastructure.db_factory import (
    PoolManager,
    build_dsn,
    get_sync_connection,
    get_sync_pool,
)

__all__ = [
    "PoolManager",
    "build_dsn",
    "get_sync_connection",
    "get_sync_pool",
]
