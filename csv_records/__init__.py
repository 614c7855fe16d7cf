"""
CSV Records - ingest messy CSV uploads and serve them back as searchable pages.

This package provides:

- An ingestion pipeline that cleans headers and cells, resolves canonical
  fields from accepted header spellings, and coerces values with lenient
  defaults
- A bulk loader that writes each upload as one atomic batch
- A query engine for paginated, case-insensitive substring search
- Interchangeable record stores (single-file SQLite, pooled PostgreSQL)
- A FastAPI HTTP surface and a Typer CLI
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from csv_records.config import Settings, get_settings
from csv_records.domain.models import Record, RecordDraft, RecordPage
from csv_records.ingest.bulk_loader import BulkLoader, LoadResult
from csv_records.query.engine import QueryEngine
from csv_records.store.abstract import AbstractRecordStore, RecordStore
from csv_records.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Record",
    "RecordDraft",
    "RecordPage",
    # Ingestion and querying
    "BulkLoader",
    "LoadResult",
    "QueryEngine",
    # Store abstractions
    "RecordStore",
    "AbstractRecordStore",
    # Logging
    "configure_logging",
    "get_logger",
]
