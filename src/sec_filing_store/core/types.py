"""Core data types for sec-filing-store.

This module defines the domain objects shared by the store, search and
metrics layers:
    - DocumentRecord: One tracked SEC filing and its processing outcome
    - ProcessingError: Denormalised view of a failed record
    - CrawlMetrics / YearlyMetrics / OverallCrawlMetrics: Aggregates
    - DocumentSearchResult: Read projection returned by searches

Design notes:
    - DocumentRecord is frozen; state transitions produce a new instance
      via ``mark_processed()`` so readers never observe a half-updated record
    - Metrics dataclasses expose derived values (pending count, success
      rate) as properties so the conservation invariants hold by construction
"""

import hashlib
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Optional

UNKNOWN_ERROR = "Unknown error"


def generate_document_id(url: str) -> str:
    """Return the reproducible document ID for a filing URL.

    The ID is the lower-case SHA-256 hex digest of the URL, so the same
    document always maps to the same record across crawls and backends.
    """
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DocumentRecord:
    """A single filing discovered by the crawler.

    Attributes:
        id: SHA-256 of ``url``; never changes
        company_name: Company display name as reported by the crawler
        form: SEC form type (e.g. "10-K", "8-K/A")
        filing_date: Date the filing was submitted to the SEC
        url: Source URL of the filing document
        processed: False until the crawler reports an outcome
        success: Outcome flag, meaningful only when ``processed`` is True
        error_message: Failure reason, set only for failed records
        processed_date: UTC time of the processing transition
        tracked_at: UTC time the record was first tracked
    """

    id: str
    company_name: str
    form: str
    filing_date: date
    url: str
    processed: bool = False
    success: bool = False
    error_message: Optional[str] = None
    processed_date: Optional[datetime] = None
    tracked_at: datetime = field(default_factory=utc_now)

    @classmethod
    def discovered(
        cls,
        company_name: str,
        form: str,
        filing_date: date,
        url: str,
    ) -> "DocumentRecord":
        """
        Create a new, unprocessed record with an ID derived from ``url``.

        The form is stored upper-cased so that exact-match filters behave
        the same on every backend.
        """
        return cls(
            id=generate_document_id(url),
            company_name=company_name,
            form=form.strip().upper(),
            filing_date=filing_date,
            url=url,
        )

    @property
    def failed(self) -> bool:
        return self.processed and not self.success

    @property
    def title(self) -> str:
        """Display title, e.g. ``Apple Inc. - 10-K - 2024-11-01``."""
        return f"{self.company_name} - {self.form} - {self.filing_date.isoformat()}"

    def mark_processed(
        self,
        success: bool,
        error_message: Optional[str] = None,
        processed_date: Optional[datetime] = None,
    ) -> "DocumentRecord":
        """Return the processed version of this record.

        Successful records never carry an error message; failures without
        a message are stored with ``UNKNOWN_ERROR``.

        Raises:
            ValueError: If the record has already been processed.
        """
        if self.processed:
            raise ValueError(f"Document {self.id} is already processed")

        if success:
            message = None
        else:
            message = error_message or UNKNOWN_ERROR

        return replace(
            self,
            processed=True,
            success=success,
            error_message=message,
            processed_date=processed_date or utc_now(),
        )


@dataclass
class ProcessingError:
    """A failed record, flattened for error reports.

    Always reconstructible from the DocumentRecord it was built from.
    """

    company_name: str
    form: str
    url: str
    error_message: str
    error_date: datetime

    @classmethod
    def from_record(cls, record: DocumentRecord) -> "ProcessingError":
        return cls(
            company_name=record.company_name,
            form=record.form,
            url=record.url,
            error_message=record.error_message or UNKNOWN_ERROR,
            error_date=record.processed_date or record.tracked_at,
        )


@dataclass
class CrawlMetrics:
    """Aggregate processing statistics for a set of records.

    ``company_name`` is ``"All Companies"`` for crawl-wide metrics.
    """

    company_name: str
    total_documents: int = 0
    processed_documents: int = 0
    successful_documents: int = 0
    failed_documents: int = 0
    last_processed_date: Optional[datetime] = None
    form_type_counts: dict[str, int] = field(default_factory=dict)

    @property
    def pending_documents(self) -> int:
        return self.total_documents - self.processed_documents

    @property
    def success_rate(self) -> float:
        """Fraction of processed documents that succeeded (0.0 when none processed)."""
        if self.processed_documents == 0:
            return 0.0
        return self.successful_documents / self.processed_documents


@dataclass
class YearlyMetrics:
    """Processing statistics for the filings of one calendar year."""

    year: int
    total_documents: int = 0
    processed_documents: int = 0
    successful_documents: int = 0
    failed_documents: int = 0
    form_type_counts: dict[str, int] = field(default_factory=dict)
    companies: list[str] = field(default_factory=list)

    @property
    def pending_documents(self) -> int:
        return self.total_documents - self.processed_documents

    @property
    def success_rate(self) -> float:
        if self.processed_documents == 0:
            return 0.0
        return self.successful_documents / self.processed_documents


@dataclass
class OverallCrawlMetrics:
    """Crawl-wide totals plus one CrawlMetrics entry per company."""

    total_companies: int = 0
    total_documents: int = 0
    processed_documents: int = 0
    successful_documents: int = 0
    failed_documents: int = 0
    last_crawl_date: Optional[datetime] = None
    form_type_counts: dict[str, int] = field(default_factory=dict)
    company_metrics: list[CrawlMetrics] = field(default_factory=list)

    @property
    def pending_documents(self) -> int:
        return self.total_documents - self.processed_documents

    @property
    def success_rate(self) -> float:
        if self.processed_documents == 0:
            return 0.0
        return self.successful_documents / self.processed_documents


@dataclass
class DocumentSearchResult:
    """A single search hit.

    Company and form searches have no ranking criterion and report a
    uniform ``relevance_score`` of 1.0 with no highlights. Content search
    fills both from the relevance engine.

    Attributes:
        id: Document ID (SHA-256 of the URL)
        title: Display title (company - form - date)
        company_name: Company display name
        form_type: SEC form type
        filing_date: Date the filing was submitted
        url: Source URL
        relevance_score: 0.0 to 1.0, higher is better
        highlights: Context snippets around matches, in document order
        content_preview: Leading excerpt of the stored text (optional)
        full_content: Entire stored text when explicitly requested
    """

    id: str
    title: str
    company_name: str
    form_type: str
    filing_date: date
    url: str
    relevance_score: float = 1.0
    highlights: list[str] = field(default_factory=list)
    content_preview: Optional[str] = None
    full_content: Optional[str] = None

    @classmethod
    def from_record(
        cls,
        record: DocumentRecord,
        relevance_score: float = 1.0,
        highlights: Optional[list[str]] = None,
    ) -> "DocumentSearchResult":
        return cls(
            id=record.id,
            title=record.title,
            company_name=record.company_name,
            form_type=record.form,
            filing_date=record.filing_date,
            url=record.url,
            relevance_score=relevance_score,
            highlights=list(highlights or []),
        )
