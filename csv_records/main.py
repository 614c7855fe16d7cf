from __future__ import annotations

import shutil
import sys
import tempfile
from pathlib import Path
from typing import Optional

import typer

from csv_records.config import get_settings
from csv_records.errors import CsvParseError, CsvRecordsError
from csv_records.infrastructure.store_factory import create_store
from csv_records.ingest.bulk_loader import BulkLoader
from csv_records.query.engine import QueryEngine
from csv_records.reporter import print_load_result, print_records
from csv_records.store.abstract import RecordStore
from csv_records.utils.logging import configure_from_settings

app = typer.Typer(help="CSV Records CLI.")


def _open_store() -> RecordStore:
    settings = get_settings()
    configure_from_settings(settings)
    store = create_store(settings)
    store.initialize()
    return store


def _fail(message: str) -> None:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    if settings.store_backend == "sqlite":
        store_desc = f"sqlite:{settings.sqlite_path}"
    else:
        store_desc = (
            f"postgres:{settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name}"
        )
    typer.echo(
        f"STORE={store_desc} | uploads={settings.upload_dir} | "
        f"api=http://{settings.api_host}:{settings.api_port}{settings.api_prefix}"
    )


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default from settings)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default from settings)."),
) -> None:
    """
    Run the HTTP API with uvicorn.
    """
    import uvicorn

    from csv_records.api.app import create_app

    settings = get_settings()
    configure_from_settings(settings)
    uvicorn.run(
        create_app(settings),
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_config=None,
    )


@app.command()
def ingest(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV file to ingest."),
    keep: bool = typer.Option(
        False,
        "--keep",
        help="Ingest a temporary copy so the source file is not consumed.",
    ),
) -> None:
    """
    Load a CSV file into the store. The file is deleted on success unless --keep is set.
    """
    store = _open_store()
    source = path
    if keep:
        tmpdir = Path(tempfile.mkdtemp(prefix="csv_records_"))
        source = tmpdir / path.name
        shutil.copyfile(path, source)

    try:
        result = BulkLoader(store).load(source)
    except CsvParseError as exc:
        _fail(f"Error parsing CSV file: {exc}")
    except CsvRecordsError as exc:
        _fail(f"Error saving records: {exc}")
    finally:
        store.close()
    print_load_result(result)


@app.command("list")
def list_records(
    page: int = typer.Option(1, "--page", help="1-based page number."),
    limit: int = typer.Option(10, "--limit", "-l", help="Records per page."),
    search: str = typer.Option("", "--search", "-s", help="Case-insensitive substring filter."),
) -> None:
    """
    Show one page of stored records.
    """
    settings = get_settings()
    store = _open_store()
    try:
        engine = QueryEngine(store, settings.default_page, settings.default_limit)
        result = engine.list_records(page=page, limit=limit, search=search)
    except CsvRecordsError as exc:
        _fail(f"Error fetching records: {exc}")
    finally:
        store.close()
    print_records(result, search=search)


@app.command()
def columns() -> None:
    """
    Print the column list shown to clients.
    """
    typer.echo(", ".join(QueryEngine.list_columns()))


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """
    Delete every stored record.
    """
    if not yes:
        typer.confirm("Delete all records?", abort=True)
    store = _open_store()
    try:
        deleted = QueryEngine(store).clear_all()
    except CsvRecordsError as exc:
        _fail(f"Error clearing records: {exc}")
    finally:
        store.close()
    typer.echo(f"All records cleared successfully ({deleted} removed).")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
