"""
Pytest configuration for the CSV records service.

Provides fixtures for:
- Settings pointing at a throwaway SQLite file and upload directory
- A ready SQLite record store and an API test client
- CSV file writers for ingestion tests
- PostgreSQL connection management for integration tests
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Generator

import psycopg
import pytest
from fastapi.testclient import TestClient

from csv_records.api.app import create_app
from csv_records.config import Settings
from csv_records.domain.models import RecordDraft
from csv_records.store.postgres_store import PostgresRecordStore
from csv_records.store.sqlite_store import SqliteRecordStore

RUN_INTEGRATION = os.getenv("RUN_INTEGRATION_TESTS", "0") == "1"


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings fixture with test-specific overrides.

    Every test gets its own database file and upload directory.
    """
    return Settings(
        store_backend="sqlite",
        sqlite_path=tmp_path / "db" / "test.sqlite",
        upload_dir=tmp_path / "uploads",
        log_level="DEBUG",
    )


@pytest.fixture
def sqlite_store(test_settings: Settings) -> SqliteRecordStore:
    store = SqliteRecordStore(test_settings.sqlite_path)
    store.initialize()
    return store


@pytest.fixture
def api_client(
    test_settings: Settings, sqlite_store: SqliteRecordStore
) -> Generator[TestClient, None, None]:
    """API client bound to the per-test SQLite store; runs the app lifespan."""
    app = create_app(settings=test_settings, store=sqlite_store)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """
    Return a helper that writes CSV text (or raw bytes) to a file under tmp_path.
    """
    counter = {"n": 0}

    def _write(content: str | bytes, name: str | None = None) -> Path:
        counter["n"] += 1
        path = tmp_path / (name or f"upload-{counter['n']}.csv")
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8", newline="")
        return path

    return _write


@pytest.fixture
def sample_drafts() -> list[RecordDraft]:
    return [
        RecordDraft(post_id=1, name="Alice", email="a@x.com", body="hello"),
        RecordDraft(post_id=2, name="Bob", email="b@x.com", body="world"),
    ]


@pytest.fixture(scope="session")
def test_dsn() -> str:
    """
    Database connection string for Postgres integration tests.
    """
    return (
        f"postgresql://{os.getenv('DB_USER', 'postgres')}:{os.getenv('DB_PASSWORD', 'postgres')}"
        f"@{os.getenv('DB_HOST', 'localhost')}:{os.getenv('DB_PORT', '5432')}"
        f"/{os.getenv('DB_NAME', 'csv_records')}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    if not RUN_INTEGRATION:
        return False
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            conn.execute("SELECT 1;").fetchone()
        return True
    except psycopg.OperationalError:
        return False


@pytest.fixture
def postgres_store(
    test_dsn: str, db_connection_available: bool
) -> Generator[PostgresRecordStore, None, None]:
    """
    Provide an initialized, empty Postgres store.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    store = PostgresRecordStore(pool_min_size=1, pool_max_size=4, dsn_override=test_dsn)
    store.initialize()
    store.delete_all()
    try:
        yield store
    finally:
        store.delete_all()
        store.close()
