"""
Ingestion package for the CSV records service.

Normalizer -> field mapper -> record builder -> bulk loader, leaves first.
"""

from csv_records.ingest.bulk_loader import BulkLoader, LoadResult, iter_drafts
from csv_records.ingest.field_mapper import FIELD_ALIASES, resolve_fields
from csv_records.ingest.normalizer import clean_header, clean_row, clean_value
from csv_records.ingest.record_builder import build_record, parse_int, parse_or_default

__all__ = [
    "BulkLoader",
    "FIELD_ALIASES",
    "LoadResult",
    "build_record",
    "clean_header",
    "clean_row",
    "clean_value",
    "iter_drafts",
    "parse_int",
    "parse_or_default",
    "resolve_fields",
]
