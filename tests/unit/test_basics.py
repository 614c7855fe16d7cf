import csv
from pathlib import Path
from time import sleep

import pytest

from csv_records import config
from csv_records.errors import ConfigError
from csv_records.infrastructure.db_factory import build_dsn
from csv_records.infrastructure.store_factory import available_backends, create_store
from csv_records.ingest.bulk_loader import iter_drafts
from csv_records.store.sqlite_store import SqliteRecordStore
from csv_records.utils import profiler
from scripts import generate_data

SAMPLE_ROWS = 5
SAMPLE_SEED = 123


def test_settings_defaults():
    settings = config.Settings(_env_file=None)
    assert settings.store_backend == "sqlite"
    assert settings.sqlite_path == Path("db/database.sqlite")
    assert settings.db_host == "localhost"
    assert settings.db_port == 5432
    assert settings.db_name == "csv_records"
    assert settings.api_port == 3001
    assert settings.api_prefix == "/api/csv"
    assert settings.default_page == 1
    assert settings.default_limit == 10


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("STORE_BACKEND", "postgres")
    monkeypatch.setenv("DEFAULT_LIMIT", "25")
    monkeypatch.setenv("API_PREFIX", "/v2/csv")
    settings = config.Settings(_env_file=None)
    assert settings.store_backend == "postgres"
    assert settings.default_limit == 25
    assert settings.api_prefix == "/v2/csv"


def test_build_dsn_uses_settings():
    settings = config.Settings(
        _env_file=None, db_user="u", db_password="p", db_host="h", db_port=6543, db_name="n"
    )
    assert build_dsn(settings) == "postgresql://u:p@h:6543/n"


def test_profile_block_measures_time():
    with profiler.profile_block("sleep") as stats:
        sleep(0.05)
    assert stats.duration_seconds >= 0.05
    assert stats.label == "sleep"
    if stats.cpu_percent is not None:
        assert isinstance(stats.cpu_percent, float)
    assert stats.peak_rss_bytes is None or stats.peak_rss_bytes > 0
    assert stats.rss_samples >= 1


def test_available_backends_contains_known_entries():
    assert available_backends() == ["postgres", "sqlite"]


def test_create_store_builds_sqlite_backend(tmp_path: Path):
    settings = config.Settings(_env_file=None, sqlite_path=tmp_path / "records.sqlite")
    store = create_store(settings)
    assert isinstance(store, SqliteRecordStore)
    assert store.path == tmp_path / "records.sqlite"


def test_create_store_rejects_unknown_backend(tmp_path: Path):
    settings = config.Settings(_env_file=None).model_copy(update={"store_backend": "mongo"})
    with pytest.raises(ConfigError, match="Unknown store backend 'mongo'"):
        create_store(settings)


def test_generate_data_writes_clean_csv(tmp_path: Path):
    csv_path = tmp_path / "records.csv"
    generate_data._generate_rows_csv(csv_path, rows=SAMPLE_ROWS, seed=SAMPLE_SEED, messy=False)
    assert csv_path.exists()
    with csv_path.open("r", newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    # header + 5 rows = 6 lines
    assert len(rows) == SAMPLE_ROWS + 1
    assert rows[0] == ["postId", "name", "email", "body"]


def test_generated_messy_csv_resolves_every_field(tmp_path: Path):
    csv_path = tmp_path / "messy.csv"
    generate_data._generate_rows_csv(csv_path, rows=SAMPLE_ROWS, seed=SAMPLE_SEED, messy=True)
    assert csv_path.read_bytes().startswith(b"\xef\xbb\xbf")

    drafts = list(iter_drafts(csv_path))
    expected = generate_data._generate_rows(SAMPLE_ROWS, SAMPLE_SEED)
    assert len(drafts) == SAMPLE_ROWS
    for draft, row in zip(drafts, expected):
        assert draft.name == row["name"]
        assert draft.email == row["email"]
        assert draft.body == row["body"]
        assert draft.post_id == (0 if row["post_id"] == "n/a" else int(row["post_id"]))
