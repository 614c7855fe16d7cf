"""
HTTP routes for uploading CSV files and browsing stored records.

Every failure path answers with a JSON ``{"error": ...}`` body and a non-2xx
status; nothing is swallowed at this boundary.
"""

from __future__ import annotations

import shutil
import time
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, File, Request, UploadFile
from fastapi.responses import JSONResponse

from csv_records.errors import CsvParseError, StoreError, StoreWriteError
from csv_records.ingest.bulk_loader import BulkLoader
from csv_records.query.engine import QueryEngine
from csv_records.utils.logging import get_logger

log = get_logger(__name__)

router = APIRouter()

CSV_CONTENT_TYPE = "text/csv"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _engine(request: Request) -> QueryEngine:
    return request.app.state.engine


def _loader(request: Request) -> BulkLoader:
    return request.app.state.loader


def is_csv_upload(filename: Optional[str], content_type: Optional[str]) -> bool:
    """Accept uploads declared as text/csv or named *.csv."""
    return content_type == CSV_CONTENT_TYPE or (filename or "").endswith(".csv")


def save_upload(upload: UploadFile, upload_dir: Path) -> Path:
    """Write the upload to ``<upload_dir>/<epoch-millis>-<client file name>``, dropping any directories."""
    upload_dir.mkdir(parents=True, exist_ok=True)
    basename = Path(upload.filename or "upload.csv").name
    target = upload_dir / f"{int(time.time() * 1000)}-{basename}"
    with target.open("wb") as out:
        shutil.copyfileobj(upload.file, out)
    return target


@router.post("/upload")
def upload_csv(request: Request, file: Optional[UploadFile] = File(None)) -> Any:
    if file is None:
        return _error(400, "No file uploaded")
    if not is_csv_upload(file.filename, file.content_type):
        return _error(400, "Only CSV files are allowed")

    settings = request.app.state.settings
    try:
        path = save_upload(file, settings.upload_dir)
    except OSError:
        log.exception("Upload error", extra={"upload_name": file.filename})
        return _error(500, "Upload failed")

    try:
        result = _loader(request).load(path)
    except CsvParseError:
        return _error(500, "Error parsing CSV file")
    except StoreWriteError as exc:
        return _error(500, f"Error saving records: {exc}")

    return {"message": "CSV uploaded successfully", "recordCount": result["record_count"]}


@router.get("/records")
def get_records(
    request: Request,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    search: Optional[str] = None,
) -> Any:
    try:
        result = _engine(request).list_records(page=page, limit=limit, search=search)
    except StoreError:
        log.exception("Error fetching records")
        return _error(500, "Error fetching records")
    return result.to_api()


@router.get("/columns")
def get_columns(request: Request) -> Dict[str, Any]:
    return {"columns": _engine(request).list_columns()}


@router.delete("/records")
def clear_records(request: Request) -> Any:
    try:
        _engine(request).clear_all()
    except StoreError:
        log.exception("Error clearing records")
        return _error(500, "Error clearing records")
    return {"message": "All records cleared successfully"}


__all__ = ["router", "is_csv_upload", "save_upload"]
