"""
Sample data generator for the CSV records service.

Emits deterministic pseudo-random CSV files in the shapes real uploads take:
byte-order marks, quoted headers, alternate header spellings, shuffled column
order, and malformed post ids. Optionally ingests the result
into the configured store.
"""

from __future__ import annotations

import csv
import random
import shutil
import sys
import tempfile
import time
from pathlib import Path
from typing import Dict, List, Sequence

import typer

from csv_records.config import get_settings
from csv_records.infrastructure.store_factory import create_store
from csv_records.ingest.bulk_loader import BulkLoader
from csv_records.utils.logging import configure_from_settings

app = typer.Typer(help="Generate sample CSV uploads and optionally ingest them.")

CANONICAL_HEADERS = {"post_id": "postId", "name": "name", "email": "email", "body": "body"}
ALTERNATE_HEADERS = {"post_id": "Id", "name": "Name", "email": "Email", "body": "Body"}

_FIRST_NAMES = ["Alice", "Bob", "Carol", "Dave", "Erin", "Frank", "Grace", "Heidi"]
_WORDS = ["lorem", "ipsum", "dolor", "sit", "amet", "consectetur", "adipiscing", "elit"]


def _generate_rows(rows: int, seed: int) -> List[Dict[str, str]]:
    """Canonical-field rows with the occasional unparsable post id."""
    rng = random.Random(seed)
    generated: List[Dict[str, str]] = []
    for i in range(rows):
        first = rng.choice(_FIRST_NAMES)
        post_id = str(rng.randint(1, 100)) if rng.random() > 0.1 else "n/a"
        generated.append(
            {
                "post_id": post_id,
                "name": f"{first} {i}",
                "email": f"{first.lower()}{i}@example.com",
                "body": " ".join(rng.choice(_WORDS) for _ in range(rng.randint(3, 12))),
            }
        )
    return generated


def _write_csv(
    csv_path: Path,
    rows: Sequence[Dict[str, str]],
    headers: Dict[str, str],
    column_order: Sequence[str] = ("post_id", "name", "email", "body"),
    quote_headers: bool = False,
    bom: bool = False,
) -> None:
    """Write canonical rows under the given header spellings and column order."""
    header_row = [headers[field] for field in column_order]
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        if bom:
            f.write("\ufeff")
        writer = csv.writer(f)
        if quote_headers:
            # Written raw: csv.writer would double the embedded quotes.
            f.write(",".join(f'"{h}"' for h in header_row) + "\r\n")
        else:
            writer.writerow(header_row)
        for row in rows:
            writer.writerow([row[field] for field in column_order])


def _generate_rows_csv(csv_path: Path, rows: int, seed: int, messy: bool = True) -> None:
    rng = random.Random(seed)
    order = ["post_id", "name", "email", "body"]
    if messy:
        rng.shuffle(order)
    _write_csv(
        csv_path,
        _generate_rows(rows, seed),
        headers=ALTERNATE_HEADERS if messy else CANONICAL_HEADERS,
        column_order=order,
        quote_headers=messy,
        bom=messy,
    )


@app.command()
def main(
    rows: int = typer.Option(1_000, "--rows", "-r", help="Number of rows to generate."),
    seed: int = typer.Option(42, "--seed", help="Deterministic RNG seed."),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Optional CSV output path (if omitted, a temp file will be used).",
    ),
    clean: bool = typer.Option(
        False,
        "--clean",
        help="Use canonical headers in canonical order (no BOM, no quotes).",
    ),
    load: bool = typer.Option(
        False,
        "--load",
        help="Ingest a copy of the generated file into the configured store.",
    ),
) -> None:
    """
    Generate a sample CSV upload and optionally ingest it.
    """
    start = time.perf_counter()
    if output:
        csv_path = output
        csv_path.parent.mkdir(parents=True, exist_ok=True)
    else:
        tmpdir = Path(tempfile.mkdtemp(prefix="csv_records_sample_"))
        csv_path = tmpdir / "sample.csv"

    typer.echo(f"Generating {rows:,} rows -> {csv_path} (seed={seed}, messy={not clean})")
    _generate_rows_csv(csv_path, rows=rows, seed=seed, messy=not clean)
    typer.echo(f"CSV generation completed in {time.perf_counter() - start:.2f}s")

    if not load:
        return

    settings = get_settings()
    configure_from_settings(settings)
    upload_copy = Path(tempfile.mkdtemp(prefix="csv_records_upload_")) / csv_path.name
    shutil.copyfile(csv_path, upload_copy)

    store = create_store(settings)
    store.initialize()
    try:
        result = BulkLoader(store).load(upload_copy)
    finally:
        store.close()
    typer.echo(f"Ingested {result['record_count']:,} records in {result['duration_seconds']:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
