"""
Bulk loading of uploaded CSV files into the record store.

The loader owns the temporary upload it is given: rows are read, cleaned,
mapped, and built one at a time, buffered in memory, then written as a single
batch. The file is deleted only after a successful write. On a parse failure
or a store failure nothing is persisted and the file stays in place so the
upload can be inspected or retried.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterator, List, Optional, TypedDict

from csv_records.domain.models import RecordDraft
from csv_records.errors import CsvParseError, StoreWriteError
from csv_records.ingest.field_mapper import resolve_fields
from csv_records.ingest.normalizer import clean_header, clean_row
from csv_records.ingest.record_builder import build_record
from csv_records.store.abstract import RecordStore
from csv_records.utils.logging import get_logger
from csv_records.utils.profiler import profile_block

log = get_logger(__name__)


class LoadResult(TypedDict):
    """Outcome of one successful ingestion."""

    record_count: int
    duration_seconds: float
    peak_rss_bytes: Optional[int]


def iter_drafts(path: Path, encoding: str = "utf-8") -> Iterator[RecordDraft]:
    """
    Yield one record draft per data row of the CSV file at ``path``.

    Raises
    ------
    CsvParseError
        If the file cannot be decoded or split into rows.
    """
    try:
        with path.open("r", encoding=encoding, newline="") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is not None:
                reader.fieldnames = [clean_header(h) for h in reader.fieldnames]
            for index, row in enumerate(reader, start=1):
                draft = build_record(resolve_fields(clean_row(row)))
                log.debug(
                    f"Record {index}",
                    extra={
                        "post_id": draft.post_id,
                        "record_name": draft.name,
                        "email": draft.email,
                        "body_length": len(draft.body),
                    },
                )
                yield draft
    except (UnicodeDecodeError, csv.Error) as exc:
        raise CsvParseError(str(exc)) from exc


class BulkLoader:
    """
    Parse a CSV upload and insert its rows into a RecordStore as one batch.
    """

    def __init__(self, store: RecordStore, encoding: str = "utf-8") -> None:
        self.store = store
        self.encoding = encoding

    def load(self, path: Path | str) -> LoadResult:
        """
        Ingest the file at ``path`` and delete it once its rows are stored.

        Returns
        -------
        LoadResult
            The number of records accepted and profiling stats for the run.

        Raises
        ------
        CsvParseError
            The stream could not be parsed; nothing was inserted, file kept.
        StoreWriteError
            The batch insert failed; nothing was inserted, file kept.
        """
        path = Path(path)
        log.info("[INGEST START]", extra={"path": str(path), "backend": self.store.name})

        with profile_block(f"ingest:{path.name}") as stats:
            try:
                drafts: List[RecordDraft] = list(iter_drafts(path, encoding=self.encoding))
            except CsvParseError:
                log.exception("Error parsing CSV", extra={"path": str(path)})
                raise

            try:
                inserted = self.store.insert_many(drafts)
            except StoreWriteError:
                log.exception("Error saving records", extra={"path": str(path), "rows": len(drafts)})
                raise

        path.unlink()
        log.info(
            "[INGEST SUCCESS]",
            extra={
                "path": str(path),
                "rows": inserted,
                "duration_seconds": round(stats.duration_seconds, 3),
                "peak_rss_bytes": stats.peak_rss_bytes,
            },
        )
        return LoadResult(
            record_count=len(drafts),
            duration_seconds=stats.duration_seconds,
            peak_rss_bytes=stats.peak_rss_bytes,
        )


__all__ = ["BulkLoader", "LoadResult", "iter_drafts"]
