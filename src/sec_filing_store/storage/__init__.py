"""Storage module — the document record store and its backends.

This module provides the storage layer for tracked SEC filings:
    - DocumentStore: Abstract contract shared by every backend
    - InMemoryDocumentStore: Process-local, lock-protected dict
    - LocalFileDocumentStore: Human-readable JSON tables on disk
    - AzureTableDocumentStore: Azure Table + Blob Storage (imported lazily)
    - create_store: Factory driven by ``STORAGE_PROVIDER``

Usage:
    from sec_filing_store.storage import create_store

    store = create_store()
    store.initialize()
    store.track_document("Apple Inc.", "10-K", date(2024, 11, 1), url)
    store.mark_processed(url, success=False, error_message="HTTP 429")
"""

from sec_filing_store.storage.base import DocumentFilter, DocumentStore
from sec_filing_store.storage.factory import create_store
from sec_filing_store.storage.local import LocalFileDocumentStore
from sec_filing_store.storage.memory import InMemoryDocumentStore

__all__ = [
    # Interface
    "DocumentStore",
    "DocumentFilter",
    # Backends
    "InMemoryDocumentStore",
    "LocalFileDocumentStore",
    # Factory
    "create_store",
]
