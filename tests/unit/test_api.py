from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import pytest
from fastapi.testclient import TestClient

from csv_records.api import routes
from csv_records.api.app import create_app
from csv_records.api.routes import is_csv_upload
from csv_records.domain.models import Record, RecordDraft
from csv_records.errors import StoreError, StoreWriteError
from csv_records.store.abstract import AbstractRecordStore

PREFIX = "/api/csv"
CANONICAL_CSV = b"postId,name,email,body\n1,Alice,a@x.com,hello\n2,Bob,b@x.com,world\n"


class BrokenStore(AbstractRecordStore):
    """Store that fails every operation after startup."""

    name = "broken"

    def __init__(self) -> None:
        self.closed = False

    def initialize(self) -> None:
        pass

    def insert_many(self, drafts: Sequence[RecordDraft]) -> int:
        raise StoreWriteError("disk full")

    def find_and_count(
        self, search: Optional[str], limit: int, offset: int
    ) -> Tuple[int, List[Record]]:
        raise StoreError("database is locked")

    def delete_all(self) -> int:
        raise StoreError("database is locked")

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def broken_store() -> BrokenStore:
    return BrokenStore()


@pytest.fixture
def broken_client(test_settings, broken_store):
    app = create_app(settings=test_settings, store=broken_store)
    with TestClient(app) as client:
        yield client


def _upload(
    client: TestClient,
    content: bytes = CANONICAL_CSV,
    filename: str = "data.csv",
    content_type: str = "text/csv",
):
    return client.post(f"{PREFIX}/upload", files={"file": (filename, content, content_type)})


def test_health_check(api_client: TestClient) -> None:
    response = api_client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "OK"}


def test_upload_ingests_rows_and_removes_temp_file(api_client: TestClient, test_settings) -> None:
    response = _upload(api_client)

    assert response.status_code == 200
    assert response.json() == {"message": "CSV uploaded successfully", "recordCount": 2}
    assert list(test_settings.upload_dir.iterdir()) == []


def test_upload_accepts_csv_extension_with_generic_type(api_client: TestClient) -> None:
    response = _upload(api_client, content_type="application/octet-stream")
    assert response.status_code == 200


def test_upload_accepts_csv_content_type_with_other_name(api_client: TestClient) -> None:
    response = _upload(api_client, filename="export.txt", content_type="text/csv")
    assert response.status_code == 200


def test_upload_without_file_is_rejected(api_client: TestClient) -> None:
    response = api_client.post(f"{PREFIX}/upload", data={"note": "no file here"})
    assert response.status_code == 400
    assert response.json() == {"error": "No file uploaded"}


def test_upload_of_non_csv_is_rejected(api_client: TestClient, test_settings) -> None:
    response = _upload(api_client, content=b"hello", filename="notes.txt", content_type="text/plain")

    assert response.status_code == 400
    assert response.json() == {"error": "Only CSV files are allowed"}
    assert not test_settings.upload_dir.exists() or list(test_settings.upload_dir.iterdir()) == []


def test_unparsable_upload_is_kept(api_client: TestClient, test_settings) -> None:
    response = _upload(api_client, content=b"postId,name\n1,\xff\xfe\n", filename="../../evil.csv")

    assert response.status_code == 500
    assert response.json() == {"error": "Error parsing CSV file"}
    kept = list(test_settings.upload_dir.iterdir())
    assert len(kept) == 1
    assert kept[0].name.endswith("-evil.csv")
    assert kept[0].name.split("-", 1)[0].isdigit()


def test_unwritable_upload_dir(api_client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def _refuse(upload, upload_dir):
        raise PermissionError("read-only file system")

    monkeypatch.setattr(routes, "save_upload", _refuse)

    response = _upload(api_client)

    assert response.status_code == 500
    assert response.json() == {"error": "Upload failed"}


def test_store_failure_reports_message(broken_client: TestClient, test_settings) -> None:
    response = _upload(broken_client)

    assert response.status_code == 500
    assert response.json() == {"error": "Error saving records: disk full"}
    assert len(list(test_settings.upload_dir.iterdir())) == 1


def test_records_listing_after_upload(api_client: TestClient) -> None:
    _upload(api_client)

    body = api_client.get(f"{PREFIX}/records").json()

    assert [r["name"] for r in body["records"]] == ["Alice", "Bob"]
    assert body["pagination"] == {"total": 2, "page": 1, "limit": 10, "totalPages": 1}
    assert "createdAt" in body["records"][0]
    assert "updatedAt" in body["records"][0]


def test_records_search_and_pagination(api_client: TestClient) -> None:
    _upload(api_client)

    by_email = api_client.get(f"{PREFIX}/records", params={"search": "a@x"}).json()
    assert [r["name"] for r in by_email["records"]] == ["Alice"]

    second = api_client.get(f"{PREFIX}/records", params={"page": "2", "limit": "1"}).json()
    assert [r["name"] for r in second["records"]] == ["Bob"]
    assert second["pagination"] == {"total": 2, "page": 2, "limit": 1, "totalPages": 2}


def test_records_bad_paging_values_fall_back(api_client: TestClient) -> None:
    body = api_client.get(f"{PREFIX}/records", params={"page": "abc", "limit": "0"}).json()
    assert body["pagination"] == {"total": 0, "page": 1, "limit": 10, "totalPages": 0}


def test_records_oversized_paging_values_fall_back(api_client: TestClient) -> None:
    _upload(api_client)

    response = api_client.get(
        f"{PREFIX}/records",
        params={"page": "99999999999999999999", "limit": "99999999999999999999"},
    )

    assert response.status_code == 200
    assert response.json()["pagination"] == {"total": 2, "page": 1, "limit": 10, "totalPages": 1}


def test_upload_with_oversized_post_id_stores_zero(api_client: TestClient) -> None:
    content = b"postId,name,email,body\n99999999999999999999,Big,big@x.com,huge\n3,Small,s@x.com,ok\n"

    response = _upload(api_client, content=content)

    assert response.status_code == 200
    assert response.json() == {"message": "CSV uploaded successfully", "recordCount": 2}
    records = api_client.get(f"{PREFIX}/records").json()["records"]
    assert [(r["post_id"], r["name"]) for r in records] == [(0, "Big"), (3, "Small")]


def test_search_matches_non_ascii_names(api_client: TestClient) -> None:
    _upload(api_client, content="postId,name,email,body\n1,Élodie,e@x.com,a\n2,ÖZTÜRK,o@x.com,b\n".encode())

    for term, expected in (("Élodie", "Élodie"), ("élodie", "Élodie"), ("ÖZTÜRK", "ÖZTÜRK"), ("öztürk", "ÖZTÜRK")):
        body = api_client.get(f"{PREFIX}/records", params={"search": term}).json()
        assert [r["name"] for r in body["records"]] == [expected]


def test_records_read_failure(broken_client: TestClient) -> None:
    response = broken_client.get(f"{PREFIX}/records")
    assert response.status_code == 500
    assert response.json() == {"error": "Error fetching records"}


def test_columns(api_client: TestClient) -> None:
    response = api_client.get(f"{PREFIX}/columns")
    assert response.status_code == 200
    assert response.json() == {"columns": ["post_id", "name", "email", "body"]}


def test_clear_records(api_client: TestClient) -> None:
    _upload(api_client)

    response = api_client.delete(f"{PREFIX}/records")

    assert response.status_code == 200
    assert response.json() == {"message": "All records cleared successfully"}
    assert api_client.get(f"{PREFIX}/records").json()["pagination"]["total"] == 0
    assert api_client.delete(f"{PREFIX}/records").status_code == 200


def test_clear_records_failure(broken_client: TestClient) -> None:
    response = broken_client.delete(f"{PREFIX}/records")
    assert response.status_code == 500
    assert response.json() == {"error": "Error clearing records"}


def test_store_closed_on_shutdown(test_settings, broken_store: BrokenStore) -> None:
    with TestClient(create_app(settings=test_settings, store=broken_store)):
        assert broken_store.closed is False
    assert broken_store.closed is True


def test_custom_prefix(test_settings, sqlite_store) -> None:
    settings = test_settings.model_copy(update={"api_prefix": "/v2"})
    with TestClient(create_app(settings=settings, store=sqlite_store)) as client:
        assert client.get("/v2/columns").status_code == 200
        assert client.get(f"{PREFIX}/columns").status_code == 404


@pytest.mark.parametrize(
    "filename, content_type, expected",
    [
        ("a.csv", "text/csv", True),
        ("a.csv", None, True),
        ("a.txt", "text/csv", True),
        ("a.txt", "text/plain", False),
        (None, None, False),
        ("a.CSV", "text/plain", False),
    ],
)
def test_is_csv_upload(filename, content_type, expected) -> None:
    assert is_csv_upload(filename, content_type) is expected
