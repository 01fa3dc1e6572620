"""Tests for LocalFileDocumentStore.

Uses pytest's ``tmp_path`` so every test gets an isolated data
directory. Covers the on-disk layout, reload after restart, and the
mapping of file-system failures to StorageUnavailableError.
"""

import json
from datetime import date
from unittest.mock import patch

import pytest

from sec_filing_store.config.constants import (
    PROCESSED_DOCUMENTS_FILE,
    TRACKED_DOCUMENTS_FILE,
)
from sec_filing_store.core.exceptions import StorageUnavailableError
from sec_filing_store.core.types import generate_document_id
from sec_filing_store.storage.local import LocalFileDocumentStore
from tests.helpers import filing_url


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestInitialize:
    def test_creates_tables(self, tmp_path):
        store = LocalFileDocumentStore(str(tmp_path / "nested" / "data"))
        store.initialize()
        data = tmp_path / "nested" / "data"
        assert _read(data / TRACKED_DOCUMENTS_FILE) == []
        assert _read(data / PROCESSED_DOCUMENTS_FILE) == []
        assert (data / "content").is_dir()

    def test_idempotent(self, local_store):
        url = filing_url()
        local_store.track_document("Apple Inc.", "10-K", date(2024, 11, 1), url)
        local_store.initialize()
        assert len(local_store.list_documents()) == 1

    def test_lazy_initialise_on_first_use(self, tmp_path):
        store = LocalFileDocumentStore(str(tmp_path / "data"))
        assert store.list_documents() == []
        assert (tmp_path / "data" / TRACKED_DOCUMENTS_FILE).exists()

    def test_corrupt_json_is_unavailable(self, tmp_path):
        data = tmp_path / "data"
        data.mkdir()
        (data / TRACKED_DOCUMENTS_FILE).write_text("{not json", encoding="utf-8")
        (data / PROCESSED_DOCUMENTS_FILE).write_text("[]", encoding="utf-8")
        with pytest.raises(StorageUnavailableError) as exc_info:
            LocalFileDocumentStore(str(data)).initialize()
        assert exc_info.value.operation == "initialize"

    def test_non_array_table_is_unavailable(self, tmp_path):
        data = tmp_path / "data"
        data.mkdir()
        (data / TRACKED_DOCUMENTS_FILE).write_text("{}", encoding="utf-8")
        (data / PROCESSED_DOCUMENTS_FILE).write_text("[]", encoding="utf-8")
        with pytest.raises(StorageUnavailableError, match="JSON array"):
            LocalFileDocumentStore(str(data)).initialize()

    def test_unwritable_path_is_unavailable(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(StorageUnavailableError):
            LocalFileDocumentStore(str(blocker / "data")).initialize()


class TestPersistence:
    def test_tracked_row_layout(self, local_store):
        url = filing_url()
        local_store.track_document("Apple Inc.", "10-K", date(2024, 11, 1), url)
        [row] = _read(local_store.data_path / TRACKED_DOCUMENTS_FILE)
        assert row["id"] == generate_document_id(url)
        assert row["companyName"] == "Apple Inc."
        assert row["form"] == "10-K"
        assert row["filingDate"] == "2024-11-01"
        assert row["url"] == url
        assert "trackedAt" in row

    def test_processed_row_layout(self, local_store):
        url = filing_url()
        local_store.track_document("Apple Inc.", "10-K", date(2024, 11, 1), url)
        local_store.mark_processed(url, success=False, error_message="HTTP 429")
        [row] = _read(local_store.data_path / PROCESSED_DOCUMENTS_FILE)
        assert row["id"] == generate_document_id(url)
        assert row["success"] is False
        assert row["errorMessage"] == "HTTP 429"
        assert row["processedDate"] is not None

    def test_reload_after_restart(self, local_store):
        first, second = filing_url(n=1), filing_url(n=2)
        local_store.track_document("Apple Inc.", "10-K", date(2024, 11, 1), first)
        local_store.track_document("Apple Inc.", "10-Q", date(2024, 8, 2), second)
        local_store.mark_processed(first, success=True)

        reopened = LocalFileDocumentStore(str(local_store.data_path))
        reopened.initialize()
        records = reopened.list_documents()
        assert [r.url for r in records] == [first, second]
        assert records[0].processed is True
        assert records[0].success is True
        assert records[0].processed_date == local_store.list_documents()[0].processed_date
        assert records[1].processed is False

    def test_no_temp_files_left(self, local_store):
        local_store.track_document("Apple Inc.", "10-K", date(2024, 11, 1), filing_url())
        assert not list(local_store.data_path.glob("*.tmp"))


class TestWriteFailures:
    def test_track_rolls_back_on_write_error(self, local_store):
        with patch.object(
            LocalFileDocumentStore, "_write_text", side_effect=OSError("disk full")
        ):
            with pytest.raises(StorageUnavailableError) as exc_info:
                local_store.track_document("Apple Inc.", "10-K", date(2024, 11, 1), filing_url())
        assert exc_info.value.operation == "track_document"
        assert local_store.list_documents() == []

    def test_mark_processed_rolls_back_on_write_error(self, local_store):
        url = filing_url()
        local_store.track_document("Apple Inc.", "10-K", date(2024, 11, 1), url)
        with patch.object(
            LocalFileDocumentStore, "_write_text", side_effect=OSError("disk full")
        ):
            with pytest.raises(StorageUnavailableError):
                local_store.mark_processed(url, success=True)
        assert local_store.get_document(generate_document_id(url)).processed is False


class TestContent:
    def test_round_trip(self, local_store):
        url = filing_url()
        local_store.save_content(url, "Revenue growth was strong")
        document_id = generate_document_id(url)
        assert local_store.get_content(document_id) == "Revenue growth was strong"
        assert (local_store.data_path / "content" / f"{document_id}.txt").exists()

    def test_missing(self, local_store):
        assert local_store.get_content("0" * 64) is None


class TestHealth:
    def test_healthy(self, local_store):
        assert local_store.storage_type == "Local File Storage"
        assert local_store.is_healthy() is True
        assert not (local_store.data_path / "health_check.txt").exists()

    def test_unhealthy_when_tables_missing(self, local_store):
        (local_store.data_path / TRACKED_DOCUMENTS_FILE).unlink()
        assert local_store.is_healthy() is False

    def test_not_initialised(self, tmp_path):
        assert LocalFileDocumentStore(str(tmp_path / "nope")).is_healthy() is False
