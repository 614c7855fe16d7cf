"""
Record store package for the CSV records service.

This module re-exports the store interfaces and the concrete backends so
downstream code can import from `csv_records.store` directly.
"""

from csv_records.store.abstract import AbstractRecordStore, RecordStore
from csv_records.store.postgres_store import PostgresRecordStore
from csv_records.store.sqlite_store import SqliteRecordStore

__all__ = [
    # Abstracts
    "AbstractRecordStore",
    "RecordStore",
    # Concrete stores
    "PostgresRecordStore",
    "SqliteRecordStore",
]
