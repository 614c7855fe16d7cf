"""
Record store selection for the CSV records service.

Maps the configured ``STORE_BACKEND`` to a concrete RecordStore so the API,
CLI, and tests build stores the same way.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from csv_records.config import Settings, get_settings
from csv_records.errors import ConfigError
from csv_records.store.abstract import RecordStore
from csv_records.store.postgres_store import PostgresRecordStore
from csv_records.store.sqlite_store import SqliteRecordStore


def _store_factories() -> Dict[str, Callable[[Settings], RecordStore]]:
    """Registry of available store backends."""
    return {
        "sqlite": lambda s: SqliteRecordStore(s.sqlite_path),
        "postgres": lambda s: PostgresRecordStore(
            pool_min_size=s.db_pool_min_size, pool_max_size=s.db_pool_max_size
        ),
    }


def available_backends() -> List[str]:
    """List available store backend names."""
    return sorted(_store_factories().keys())


def create_store(settings: Optional[Settings] = None) -> RecordStore:
    """Build the record store named by ``settings.store_backend``."""
    settings = settings or get_settings()
    factories = _store_factories()
    if settings.store_backend not in factories:
        raise ConfigError(
            f"Unknown store backend '{settings.store_backend}'. Available: {', '.join(factories)}"
        )
    return factories[settings.store_backend](settings)


__all__ = ["available_backends", "create_store"]
