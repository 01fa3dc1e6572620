"""
Abstract document store shared by every storage backend.

``DocumentStore`` defines the contract that the in-memory, local-file and
Azure Table backends implement. Backends provide the primitive reads and
writes; filtering, ordering, paging and metrics are implemented once here
on top of a record snapshot, so all three behave identically.

Atomicity contract (all backends):
    - ``track_document`` is an insert-if-absent keyed by the URL hash.
      Concurrent calls for the same URL produce exactly one record.
    - ``mark_processed`` replaces the whole record in one step. Readers see
      either the unprocessed or the processed record, never a mix.
    - A ``track_document`` followed by ``mark_processed`` from the same
      caller is observed in that order.
    - Reads work on a snapshot and never block writers for the duration of
      an aggregation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from sec_filing_store.core.types import (
    CrawlMetrics,
    DocumentRecord,
    ProcessingError,
    YearlyMetrics,
)
from sec_filing_store.metrics.compute import (
    collect_processing_errors,
    compute_crawl_metrics,
    compute_yearly_metrics,
)


@dataclass(frozen=True)
class DocumentFilter:
    """
    Search filter shared by the search and count operations.

    Attributes:
        company_names: Case-insensitive substrings; a record matches if
                       any of them occurs in its company name.
        form_types: Exact form types (case-insensitive). Empty = any.
        start_date: Inclusive lower bound on filing date.
        end_date: Inclusive upper bound on filing date.
    """

    company_names: tuple[str, ...] = ()
    form_types: tuple[str, ...] = ()
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @classmethod
    def build(
        cls,
        company_names: Optional[Iterable[str]] = None,
        form_types: Optional[Iterable[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> "DocumentFilter":
        names = tuple(n.strip() for n in company_names or () if n and n.strip())
        forms = tuple(f.strip().upper() for f in form_types or () if f and f.strip())
        return cls(
            company_names=names,
            form_types=forms,
            start_date=start_date,
            end_date=end_date,
        )

    def matches(self, record: DocumentRecord) -> bool:
        if self.company_names:
            company = record.company_name.casefold()
            if not any(name.casefold() in company for name in self.company_names):
                return False
        if self.form_types and record.form.upper() not in self.form_types:
            return False
        if self.start_date and record.filing_date < self.start_date:
            return False
        if self.end_date and record.filing_date > self.end_date:
            return False
        return True


def order_records(records: Iterable[DocumentRecord]) -> list[DocumentRecord]:
    """Order by filing date descending; the stable sort keeps insertion order on ties."""
    return sorted(records, key=lambda r: r.filing_date, reverse=True)


def page_slice(
    records: list[DocumentRecord],
    skip: int = 0,
    take: Optional[int] = None,
) -> list[DocumentRecord]:
    """Return at most ``take`` records starting at ``skip`` (``take=None`` = all)."""
    skip = max(skip, 0)
    if take is None:
        return records[skip:]
    return records[skip : skip + max(take, 0)]


class DocumentStore(ABC):
    """
    Keyed storage of filing records and their processing outcomes.

    Callers depend only on this interface; the concrete backend is chosen
    by configuration through ``create_store()``.
    """

    # ------------------------------------------------------------------
    # Backend primitives
    # ------------------------------------------------------------------

    @property
    @abstractmethod
    def storage_type(self) -> str:
        """Human-readable backend name (e.g. "Local File Storage")."""

    @abstractmethod
    def initialize(self) -> None:
        """
        Prepare the backend (idempotent).

        Raises:
            StorageUnavailableError: If the backend cannot be reached or created.
        """

    @abstractmethod
    def track_document(
        self,
        company_name: str,
        form: str,
        filing_date: date,
        url: str,
    ) -> None:
        """Insert an unprocessed record for ``url`` unless one already exists."""

    @abstractmethod
    def mark_processed(
        self,
        url: str,
        success: bool = True,
        error_message: Optional[str] = None,
    ) -> None:
        """
        Record the processing outcome for ``url``.

        Unknown URLs and already-processed records are a logged no-op.
        """

    @abstractmethod
    def list_documents(self) -> list[DocumentRecord]:
        """Snapshot of every record, in insertion order."""

    @abstractmethod
    def get_document(self, document_id: str) -> Optional[DocumentRecord]:
        """Return a single record by ID, or None."""

    @abstractmethod
    def save_content(self, url: str, content: str) -> None:
        """Store the extracted text of a tracked filing."""

    @abstractmethod
    def get_content(self, document_id: str) -> Optional[str]:
        """Return the stored text for a document, or None if absent."""

    @abstractmethod
    def is_healthy(self) -> bool:
        """Lightweight liveness probe. Never raises."""

    # ------------------------------------------------------------------
    # Queries built on the primitives
    # ------------------------------------------------------------------

    def get_unprocessed(self) -> list[DocumentRecord]:
        """All records that have not been processed yet."""
        return [r for r in self.list_documents() if not r.processed]

    def query(
        self,
        document_filter: DocumentFilter,
        skip: int = 0,
        take: Optional[int] = None,
    ) -> list[DocumentRecord]:
        """Filtered, ordered and sliced records."""
        matched = [r for r in self.list_documents() if document_filter.matches(r)]
        return page_slice(order_records(matched), skip, take)

    def count(self, document_filter: DocumentFilter) -> int:
        """Number of records matching the filter."""
        return sum(1 for r in self.list_documents() if document_filter.matches(r))

    def search_by_company(
        self,
        company_name: str,
        form_types: Optional[Iterable[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        skip: int = 0,
        take: Optional[int] = 50,
    ) -> list[DocumentRecord]:
        """Records whose company name contains ``company_name`` (case-insensitive)."""
        document_filter = DocumentFilter.build(
            company_names=[company_name],
            form_types=form_types,
            start_date=start_date,
            end_date=end_date,
        )
        return self.query(document_filter, skip, take)

    def search_by_form_type(
        self,
        form_types: Iterable[str],
        company_names: Optional[Iterable[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        skip: int = 0,
        take: Optional[int] = 50,
    ) -> list[DocumentRecord]:
        """Records with one of ``form_types``, optionally for some companies."""
        document_filter = DocumentFilter.build(
            company_names=company_names,
            form_types=form_types,
            start_date=start_date,
            end_date=end_date,
        )
        return self.query(document_filter, skip, take)

    def get_search_result_count(
        self,
        company_name: Optional[str] = None,
        form_types: Optional[Iterable[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        company_names: Optional[Iterable[str]] = None,
    ) -> int:
        """Total matches for the same filter the search calls use."""
        names = list(company_names or [])
        if company_name:
            names.append(company_name)
        document_filter = DocumentFilter.build(
            company_names=names,
            form_types=form_types,
            start_date=start_date,
            end_date=end_date,
        )
        return self.count(document_filter)

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    def get_crawl_metrics(self, company_name: Optional[str] = None) -> CrawlMetrics:
        return compute_crawl_metrics(self.list_documents(), company_name)

    def get_processing_errors(
        self,
        company_name: Optional[str] = None,
    ) -> list[ProcessingError]:
        return collect_processing_errors(self.list_documents(), company_name)

    def get_yearly_metrics(self) -> dict[int, YearlyMetrics]:
        return compute_yearly_metrics(self.list_documents())

    def get_company_yearly_metrics(self, company_name: str) -> dict[int, YearlyMetrics]:
        return compute_yearly_metrics(self.list_documents(), company_name)
