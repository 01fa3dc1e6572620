"""
Shared pytest fixtures for sec-filing-store tests.

This module provides reusable stores and services used across both unit
and integration tests:

    - memory_store: An initialised, empty InMemoryDocumentStore
    - local_store: A LocalFileDocumentStore in pytest's tmp directory
    - azure_store: An AzureTableDocumentStore wired to in-memory fakes
    - populated_store: A memory store with a small, mixed crawl history
    - search_settings / search_service: Default search configuration
"""

from datetime import date

import pytest

from sec_filing_store.config.settings import SearchSettings
from sec_filing_store.search.service import DocumentSearchService
from sec_filing_store.storage.azure import AzureTableDocumentStore
from sec_filing_store.storage.local import LocalFileDocumentStore
from sec_filing_store.storage.memory import InMemoryDocumentStore
from tests.helpers import FakeBlobServiceClient, FakeTableServiceClient, filing_url


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    store = InMemoryDocumentStore()
    store.initialize()
    return store


@pytest.fixture
def local_store(tmp_path) -> LocalFileDocumentStore:
    """
    Local file store in an isolated temporary directory.

    Each test receives a unique directory, so JSON tables never collide
    or persist between runs.
    """
    store = LocalFileDocumentStore(str(tmp_path / "data"))
    store.initialize()
    return store


@pytest.fixture
def azure_services() -> tuple[FakeTableServiceClient, FakeBlobServiceClient]:
    return FakeTableServiceClient(), FakeBlobServiceClient()


@pytest.fixture
def azure_store(azure_services) -> AzureTableDocumentStore:
    """Azure store backed by the in-memory SDK fakes from ``tests.helpers``."""
    table_service, blob_service = azure_services
    store = AzureTableDocumentStore(
        table_service=table_service,
        blob_service=blob_service,
    )
    store.initialize()
    return store


@pytest.fixture(params=["memory", "local", "azure"])
def any_store(request):
    """Parametrised over every backend — for behaviour all backends share."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def populated_store(memory_store) -> InMemoryDocumentStore:
    """
    A small crawl history across three companies and two years.

        Apple Inc.       10-K 2023 ok, 10-Q 2024 failed (HTTP 429), 8-K 2024 pending
        Microsoft Corp   10-K 2023 ok, 10-K 2024 pending
        Pineapple Farms  10-Q 2024 ok

    "Pineapple Farms" contains "apple", which catches substring-vs-equality
    mistakes in company matching.
    """
    store = memory_store
    rows = [
        ("Apple Inc.", "10-K", date(2023, 11, 3)),
        ("Apple Inc.", "10-Q", date(2024, 2, 2)),
        ("Apple Inc.", "8-K", date(2024, 5, 10)),
        ("Microsoft Corp", "10-K", date(2023, 7, 27)),
        ("Microsoft Corp", "10-K", date(2024, 7, 30)),
        ("Pineapple Farms", "10-Q", date(2024, 4, 15)),
    ]
    for i, (company, form, filed) in enumerate(rows):
        store.track_document(company, form, filed, filing_url(company, i, form))

    store.mark_processed(filing_url("Apple Inc.", 0, "10-K"), success=True)
    store.mark_processed(
        filing_url("Apple Inc.", 1, "10-Q"), success=False, error_message="HTTP 429"
    )
    store.mark_processed(filing_url("Microsoft Corp", 3, "10-K"), success=True)
    store.mark_processed(filing_url("Pineapple Farms", 5, "10-Q"), success=True)
    return store


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


@pytest.fixture
def search_settings() -> SearchSettings:
    """Built-in defaults, independent of any SEARCH_* environment variables."""
    return SearchSettings(
        default_page_size=50,
        max_page_size=1000,
        max_content_page_size=100,
        highlight_window=40,
        max_highlights=5,
        title_region=500,
        preview_length=500,
    )


@pytest.fixture
def search_service(memory_store, search_settings) -> DocumentSearchService:
    return DocumentSearchService(memory_store, search_settings)
