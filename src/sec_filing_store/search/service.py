"""
Search service for tracked SEC filings.

This module provides the read-only query surface used by the CLI, the
HTTP API and the search tools: company search, form/date filtering and
full-text content search, all returning ``PaginatedResult`` pages.

Usage:
    from sec_filing_store.search import DocumentSearchService

    service = DocumentSearchService(store)
    page = service.search_by_company("Apple", form_types=["10-K"], page=2)
"""

from __future__ import annotations

import threading
from datetime import date
from typing import TYPE_CHECKING, Iterable, Optional

from sec_filing_store.config import SUPPORTED_FORMS, SearchSettings, normalise_form_types
from sec_filing_store.core import (
    DocumentRecord,
    DocumentSearchResult,
    InvalidParameterError,
    get_logger,
)
from sec_filing_store.core.cancellation import Deadline
from sec_filing_store.search.pagination import (
    PaginatedResult,
    compute_page,
    paginate,
    slice_page,
    validate_page_request,
)
from sec_filing_store.search.relevance import match_document, rank_results

if TYPE_CHECKING:
    from sec_filing_store.storage.base import DocumentStore

logger = get_logger(__name__)


def _normalise_forms(form_types: Optional[Iterable[str]]) -> tuple[str, ...]:
    try:
        return normalise_form_types(form_types)
    except ValueError as e:
        raise InvalidParameterError(
            str(e),
            parameter="form_types",
            details=f"Valid types: {', '.join(SUPPORTED_FORMS)}",
        ) from e


def _clean_names(company_names: Optional[Iterable[str]]) -> list[str]:
    return [n.strip() for n in company_names or () if n and n.strip()]


def _check_date_range(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date and end_date and start_date > end_date:
        raise InvalidParameterError(
            f"start_date {start_date.isoformat()} is after end_date {end_date.isoformat()}",
            parameter="start_date",
        )


class DocumentSearchService:
    """
    Read-only search over a ``DocumentStore``.

    All parameters are validated before the store is touched, so bad input
    raises ``InvalidParameterError`` without any I/O. Store failures
    (``StorageUnavailableError``) propagate unchanged and are never turned
    into an empty page. Each search accepts ``timeout`` (seconds) and
    ``cancel_event``; expiry raises ``OperationCancelledError``.

    Example:
        >>> service = DocumentSearchService(store)
        >>> page = service.search_by_content("revenue growth", page_size=10)
        >>> for hit in page.items:
        ...     print(f"[{hit.relevance_score:.3f}] {hit.title}")
    """

    def __init__(
        self,
        store: DocumentStore,
        settings: Optional[SearchSettings] = None,
    ) -> None:
        """
        Args:
            store: Backend to read from.
            settings: Page limits and highlight options. Defaults to
                      ``SearchSettings()`` (environment + built-in defaults).
        """
        self._store = store
        self._settings = settings if settings is not None else SearchSettings()

    @property
    def settings(self) -> SearchSettings:
        return self._settings

    # ------------------------------------------------------------------
    # Searches
    # ------------------------------------------------------------------

    def search_by_company(
        self,
        company_name: str,
        form_types: Optional[Iterable[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_content: bool = False,
        page: int = 1,
        page_size: Optional[int] = None,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> PaginatedResult[DocumentSearchResult]:
        """
        Filings whose company name contains ``company_name`` (case-insensitive).

        Results are ordered by filing date, newest first, and carry a
        uniform relevance score of 1.0.

        Raises:
            InvalidParameterError: Blank company name, unknown form type,
                inverted date range or page out of range.
            StorageUnavailableError: The backend failed.
            OperationCancelledError: Timeout elapsed or caller cancelled.
        """
        page_size = page_size if page_size is not None else self._settings.default_page_size
        validate_page_request(page, page_size, self._settings.max_page_size)
        if not company_name or not company_name.strip():
            raise InvalidParameterError("company_name is required", parameter="company_name")
        name = company_name.strip()
        forms = _normalise_forms(form_types)
        _check_date_range(start_date, end_date)

        deadline = Deadline.start(timeout, cancel_event)
        operation = "search_by_company"
        logger.info(
            "Company search: '%s' (forms=%s, page=%d, page_size=%d)",
            name,
            ",".join(forms) or "any",
            page,
            page_size,
        )

        info = compute_page(page, page_size)
        deadline.check(operation)
        records = self._store.search_by_company(
            name, forms, start_date, end_date, skip=info.skip, take=page_size
        )
        deadline.check(operation)
        total = self._store.get_search_result_count(
            company_name=name,
            form_types=forms,
            start_date=start_date,
            end_date=end_date,
        )

        items = self._build_results(records, include_content, deadline, operation)
        logger.info("Company search returned %d of %d results", len(items), total)
        return paginate(items, total, page, page_size)

    def search_by_form_type(
        self,
        form_types: Optional[Iterable[str]] = None,
        company_names: Optional[Iterable[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_content: bool = False,
        page: int = 1,
        page_size: Optional[int] = None,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> PaginatedResult[DocumentSearchResult]:
        """
        Filings of the given form types, optionally for some companies.

        An empty or missing ``form_types`` means every supported form type.
        """
        page_size = page_size if page_size is not None else self._settings.default_page_size
        validate_page_request(page, page_size, self._settings.max_page_size)
        forms = _normalise_forms(form_types) or SUPPORTED_FORMS
        names = _clean_names(company_names)
        _check_date_range(start_date, end_date)

        deadline = Deadline.start(timeout, cancel_event)
        operation = "search_by_form_type"
        logger.info(
            "Form search: %s (companies=%s, %s..%s, page=%d)",
            ",".join(forms),
            ",".join(names) or "any",
            start_date or "",
            end_date or "",
            page,
        )

        info = compute_page(page, page_size)
        deadline.check(operation)
        records = self._store.search_by_form_type(
            forms, names, start_date, end_date, skip=info.skip, take=page_size
        )
        deadline.check(operation)
        total = self._store.get_search_result_count(
            form_types=forms,
            start_date=start_date,
            end_date=end_date,
            company_names=names,
        )

        items = self._build_results(records, include_content, deadline, operation)
        logger.info("Form search returned %d of %d results", len(items), total)
        return paginate(items, total, page, page_size)

    def search_by_content(
        self,
        search_text: str,
        company_names: Optional[Iterable[str]] = None,
        form_types: Optional[Iterable[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        exact_match: bool = False,
        case_sensitive: bool = False,
        page: int = 1,
        page_size: Optional[int] = None,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> PaginatedResult[DocumentSearchResult]:
        """
        Full-text search ranked by relevance.

        Each candidate is matched on its title followed by its stored
        text, so filings without saved content can still match on
        company, form and date. Documents with no match are excluded.
        Results are sorted by relevance descending, then filing date
        descending.

        Args:
            search_text: Phrase (``exact_match``) or space-separated tokens.
            company_names: Case-insensitive company substrings (any).
            form_types: Restrict to these forms. Empty = any.
            start_date: Inclusive lower bound on filing date.
            end_date: Inclusive upper bound on filing date.
            exact_match: Match the literal phrase only.
            case_sensitive: Disable case folding.
            page: 1-based page number.
            page_size: Results per page, at most ``max_content_page_size``.
            timeout: Seconds before ``OperationCancelledError``.
            cancel_event: Set by the caller to abandon the search.
        """
        page_size = page_size if page_size is not None else self._settings.default_page_size
        validate_page_request(page, page_size, self._settings.max_content_page_size)
        if not search_text or not search_text.strip():
            raise InvalidParameterError("search_text is required", parameter="search_text")
        forms = _normalise_forms(form_types)
        names = _clean_names(company_names)
        _check_date_range(start_date, end_date)

        deadline = Deadline.start(timeout, cancel_event)
        operation = "search_by_content"
        logger.info(
            "Content search: '%s' (exact=%s, case_sensitive=%s, page=%d)",
            search_text[:80],
            exact_match,
            case_sensitive,
            page,
        )

        deadline.check(operation)
        candidates = self._store.search_by_form_type(
            forms, names, start_date, end_date, skip=0, take=None
        )

        hits: list[DocumentSearchResult] = []
        for record in candidates:
            deadline.check(operation)
            content = self._store.get_content(record.id)
            text = record.title if content is None else f"{record.title}\n{content}"
            match = match_document(
                text,
                search_text,
                exact_match=exact_match,
                case_sensitive=case_sensitive,
                highlight_window=self._settings.highlight_window,
                max_highlights=self._settings.max_highlights,
                title_region=self._settings.title_region,
            )
            if match is None:
                continue
            result = DocumentSearchResult.from_record(
                record,
                relevance_score=match.score,
                highlights=match.highlights,
            )
            result.content_preview = self._preview(content)
            hits.append(result)

        logger.debug("Content search matched %d of %d candidates", len(hits), len(candidates))
        return slice_page(rank_results(hits), page, page_size)

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    def get_document(
        self,
        document_id: str,
        include_content: bool = True,
    ) -> Optional[DocumentSearchResult]:
        """A single filing by ID with its full stored text, or None if unknown."""
        if not document_id or not document_id.strip():
            raise InvalidParameterError("document_id is required", parameter="document_id")
        record = self._store.get_document(document_id.strip())
        if record is None:
            return None
        result = DocumentSearchResult.from_record(record)
        if include_content:
            content = self._store.get_content(record.id)
            result.content_preview = self._preview(content)
            result.full_content = content
        return result

    def get_document_content(self, document_id: str) -> Optional[str]:
        """Stored text for a filing, or None when nothing was saved."""
        if not document_id or not document_id.strip():
            raise InvalidParameterError("document_id is required", parameter="document_id")
        return self._store.get_content(document_id.strip())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _preview(self, content: Optional[str]) -> Optional[str]:
        if not content:
            return None
        limit = self._settings.preview_length
        collapsed = " ".join(content[: limit * 2].split())
        if len(collapsed) <= limit:
            return collapsed
        return collapsed[:limit].rstrip() + "..."

    def _build_results(
        self,
        records: list[DocumentRecord],
        include_content: bool,
        deadline: Deadline,
        operation: str,
    ) -> list[DocumentSearchResult]:
        results = []
        for record in records:
            result = DocumentSearchResult.from_record(record)
            if include_content:
                deadline.check(operation)
                result.content_preview = self._preview(self._store.get_content(record.id))
            results.append(result)
        return results
