"""
Domain package for the CSV records service.

Exports the core domain models used across ingestion, storage, and querying.
Keep this package focused on data definitions and validation concerns.
"""

from csv_records.domain.models import COLUMNS, Record, RecordDraft, RecordPage

__all__ = [
    "COLUMNS",
    "Record",
    "RecordDraft",
    "RecordPage",
]
