from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from csv_records.domain.models import RecordPage
from csv_records.ingest.bulk_loader import LoadResult

BODY_PREVIEW_CHARS = 60


def _preview(text: str, width: int = BODY_PREVIEW_CHARS) -> str:
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"


def print_records(page: RecordPage, search: Optional[str] = None, console: Optional[Console] = None) -> None:
    """
    Render one page of records as a rich table.

    The caption mirrors the pagination footer of the web client.
    """
    console = console or Console()

    if not page.records:
        message = "No records found matching your search." if search else "No records yet."
        console.print(f"[yellow]{message}[/yellow]")
        return

    title = "CSV Records"
    if search:
        title = f"{title}\n[dim]Search: {search}[/dim]"

    first = (page.page - 1) * page.limit + 1
    last = min(page.page * page.limit, page.total)
    table = Table(
        title=title,
        box=box.ROUNDED,
        caption=f"Showing {first} to {last} of {page.total} │ Page {page.page} of {page.total_pages}",
    )

    table.add_column("ID", justify="right", style="cyan", no_wrap=True)
    table.add_column("Post ID", justify="right", style="magenta")
    table.add_column("Name", style="green")
    table.add_column("Email", style="blue")
    table.add_column("Body", style="white")

    for record in page.records:
        table.add_row(
            str(record.id),
            str(record.post_id),
            record.name,
            record.email,
            _preview(record.body),
        )

    console.print(table)


def print_load_result(result: LoadResult, console: Optional[Console] = None) -> None:
    """Summarize an ingestion run."""
    console = console or Console()
    mem_bytes = result["peak_rss_bytes"] or 0
    console.print(
        f"[green]Ingested {result['record_count']:,} records[/green] "
        f"in {result['duration_seconds']:.2f}s "
        f"(peak memory {mem_bytes / (1024 * 1024):.2f} MB)"
    )


__all__ = ["print_load_result", "print_records"]
