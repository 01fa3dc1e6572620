"""
Metrics facade over a document store.

``MetricsAggregator`` re-reads a snapshot from the store on every call
and hands it to the pure functions in ``metrics.compute``. It never
writes and holds no copy of the records between calls.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Optional

from sec_filing_store.core import (
    CrawlMetrics,
    DocumentRecord,
    OverallCrawlMetrics,
    ProcessingError,
    YearlyMetrics,
    get_logger,
)
from sec_filing_store.core.cancellation import Deadline
from sec_filing_store.core.exceptions import InvalidParameterError
from sec_filing_store.metrics.compute import (
    collect_processing_errors,
    compute_crawl_metrics,
    compute_overall_metrics,
    compute_yearly_metrics,
)
from sec_filing_store.search.pagination import PaginatedResult, slice_page, validate_page_request

if TYPE_CHECKING:
    from sec_filing_store.storage.base import DocumentStore

logger = get_logger(__name__)


class MetricsAggregator:
    """
    Crawl statistics computed from the current store contents.

    Every method accepts an optional ``timeout`` (seconds) and
    ``cancel_event``; expiry raises ``OperationCancelledError``.
    ``StorageUnavailableError`` from the store propagates unchanged.

    Example:
        >>> aggregator = MetricsAggregator(store)
        >>> metrics = aggregator.crawl_metrics("Apple Inc.")
        >>> print(f"{metrics.success_rate:.1%}")
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def _snapshot(
        self,
        operation: str,
        timeout: Optional[float],
        cancel_event: Optional[threading.Event],
    ) -> list[DocumentRecord]:
        deadline = Deadline.start(timeout, cancel_event)
        deadline.check(operation)
        records = self._store.list_documents()
        deadline.check(operation)
        return records

    def crawl_metrics(
        self,
        company_name: Optional[str] = None,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> CrawlMetrics:
        records = self._snapshot("crawl_metrics", timeout, cancel_event)
        return compute_crawl_metrics(records, company_name)

    def processing_errors(
        self,
        company_name: Optional[str] = None,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> list[ProcessingError]:
        records = self._snapshot("processing_errors", timeout, cancel_event)
        return collect_processing_errors(records, company_name)

    def yearly_metrics(
        self,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> dict[int, YearlyMetrics]:
        records = self._snapshot("yearly_metrics", timeout, cancel_event)
        return compute_yearly_metrics(records)

    def company_yearly_metrics(
        self,
        company_name: str,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> dict[int, YearlyMetrics]:
        if not company_name or not company_name.strip():
            raise InvalidParameterError(
                "company_name is required", parameter="company_name"
            )
        records = self._snapshot("company_yearly_metrics", timeout, cancel_event)
        return compute_yearly_metrics(records, company_name)

    def overall_metrics(
        self,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> OverallCrawlMetrics:
        records = self._snapshot("overall_metrics", timeout, cancel_event)
        return compute_overall_metrics(records)

    def company_breakdown(
        self,
        page: int = 1,
        page_size: int = 50,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> PaginatedResult[CrawlMetrics]:
        """One page of per-company metrics, ordered by company name."""
        validate_page_request(page, page_size)
        overall = self.overall_metrics(timeout=timeout, cancel_event=cancel_event)
        logger.debug(
            "Company breakdown page %d (size %d) of %d companies",
            page,
            page_size,
            overall.total_companies,
        )
        return slice_page(overall.company_metrics, page, page_size)
