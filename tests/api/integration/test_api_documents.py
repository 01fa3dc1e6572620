"""
Integration tests for ``GET /api/documents/{id}`` and ``GET /api/health``.
"""

from datetime import date
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from sec_filing_store.api.app import app
from sec_filing_store.api.dependencies import get_store
from sec_filing_store.core.exceptions import StorageUnavailableError
from sec_filing_store.core.types import generate_document_id
from tests.helpers import filing_url


@pytest.fixture
def client(memory_store):
    app.dependency_overrides[get_store] = lambda: memory_store
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def tracked_url(memory_store) -> str:
    url = filing_url()
    memory_store.track_document("Apple Inc.", "10-K", date(2024, 11, 1), url)
    memory_store.mark_processed(url, success=False, error_message="HTTP 500")
    memory_store.save_content(url, "Annual report text")
    return url


class TestGetDocument:
    def test_found_without_content(self, client, tracked_url):
        doc_id = generate_document_id(tracked_url)
        resp = client.get(f"/api/documents/{doc_id}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["id"] == doc_id
        assert data["title"] == "Apple Inc. - 10-K - 2024-11-01"
        assert data["form_type"] == "10-K"
        assert data["url"] == tracked_url
        assert data["processed"] is True
        assert data["success"] is False
        assert data["error_message"] == "HTTP 500"
        assert data["processed_date"] is not None
        assert data["content"] is None

    def test_include_content(self, client, tracked_url):
        doc_id = generate_document_id(tracked_url)
        resp = client.get(f"/api/documents/{doc_id}", params={"include_content": True})
        assert resp.json()["content"] == "Annual report text"

    def test_unknown_id_returns_404(self, client):
        resp = client.get(f"/api/documents/{'f' * 64}")
        assert resp.status_code == 404
        detail = resp.json()["detail"]
        assert detail["error"] == "not_found"
        assert "f" * 64 in detail["message"]

    def test_storage_error_is_503(self):
        store = MagicMock()
        store.get_document.side_effect = StorageUnavailableError("get_document")
        app.dependency_overrides[get_store] = lambda: store
        client = TestClient(app, raise_server_exceptions=False)
        try:
            resp = client.get(f"/api/documents/{'a' * 64}")
        finally:
            app.dependency_overrides.clear()
        assert resp.status_code == 503


class TestHealth:
    def teardown_method(self):
        app.dependency_overrides.clear()

    def test_ok(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["storage_healthy"] is True
        assert data["storage_type"] == "In-Memory Storage"
        assert data["version"] == "0.1.0"

    def test_degraded(self):
        store = MagicMock()
        store.is_healthy.return_value = False
        store.storage_type = "Azure Table Storage"
        app.dependency_overrides[get_store] = lambda: store
        client = TestClient(app, raise_server_exceptions=False)

        data = client.get("/api/health").json()
        assert data["status"] == "degraded"
        assert data["storage_healthy"] is False
        assert data["storage_type"] == "Azure Table Storage"
