"""
In-memory document store.

Records live in an insertion-ordered dict keyed by document ID and guarded
by a single re-entrant lock. Records are immutable, so a write replaces the
dict entry with a new instance while holding the lock, and a read copies
the current values into a list under the lock and then works lock-free.

Nothing survives a process restart; use this backend for tests and
short-lived runs (``STORAGE_PROVIDER=Memory``).
"""

import threading
from datetime import date
from typing import Optional

from sec_filing_store.core import DocumentRecord, generate_document_id, get_logger
from sec_filing_store.storage.base import DocumentStore

logger = get_logger(__name__)


class InMemoryDocumentStore(DocumentStore):
    """
    Thread-safe, process-local document store.

    Example:
        >>> store = InMemoryDocumentStore()
        >>> store.initialize()
        >>> store.track_document("Apple Inc.", "10-K", date(2024, 11, 1), url)
        >>> store.mark_processed(url, success=True)
    """

    def __init__(self) -> None:
        self._documents: dict[str, DocumentRecord] = {}
        self._content: dict[str, str] = {}
        self._lock = threading.RLock()

    @property
    def storage_type(self) -> str:
        return "In-Memory Storage"

    def initialize(self) -> None:
        logger.info("In-memory storage initialised")

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def track_document(
        self,
        company_name: str,
        form: str,
        filing_date: date,
        url: str,
    ) -> None:
        record = DocumentRecord.discovered(company_name, form, filing_date, url)
        with self._lock:
            if record.id in self._documents:
                logger.debug("Document already tracked: %s", url)
                return
            self._documents[record.id] = record
        logger.debug("Tracked new document: %s %s %s", company_name, form, url)

    def mark_processed(
        self,
        url: str,
        success: bool = True,
        error_message: Optional[str] = None,
    ) -> None:
        document_id = generate_document_id(url)
        with self._lock:
            record = self._documents.get(document_id)
            if record is None:
                logger.warning("Document not found for processing: %s", url)
                return
            if record.processed:
                logger.debug("Document already processed: %s", url)
                return
            self._documents[document_id] = record.mark_processed(success, error_message)
        logger.debug("Marked document as processed: %s (success=%s)", url, success)

    def save_content(self, url: str, content: str) -> None:
        document_id = generate_document_id(url)
        with self._lock:
            self._content[document_id] = content

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def list_documents(self) -> list[DocumentRecord]:
        with self._lock:
            return list(self._documents.values())

    def get_document(self, document_id: str) -> Optional[DocumentRecord]:
        with self._lock:
            return self._documents.get(document_id)

    def get_content(self, document_id: str) -> Optional[str]:
        with self._lock:
            return self._content.get(document_id)

    def is_healthy(self) -> bool:
        return True
