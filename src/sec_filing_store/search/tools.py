"""
Tool-style wrappers around the search service.

Agent and RPC front ends want one response shape for both outcomes. A
``ToolResponse`` is either a success carrying a page of results plus
typed ``SearchMetadata``, or an error carrying a message and whether a
retry may help. It is never both.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Generic, Optional, TypeVar

from sec_filing_store.core import (
    DocumentSearchResult,
    FilingStoreError,
    InvalidParameterError,
    OperationCancelledError,
    StorageUnavailableError,
    get_logger,
    utc_now,
)
from sec_filing_store.search.pagination import PaginatedResult
from sec_filing_store.search.service import DocumentSearchService

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class SearchMetadata:
    """What was searched for, echoed back with a successful response."""

    search_type: str
    search_term: Optional[str] = None
    form_types: list[str] = field(default_factory=list)
    company_names: list[str] = field(default_factory=list)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    exact_match: Optional[bool] = None
    case_sensitive: Optional[bool] = None
    execution_time: datetime = field(default_factory=utc_now)


@dataclass
class ToolResponse(Generic[T]):
    """Success-or-error envelope returned by every tool."""

    content: Optional[T] = None
    is_error: bool = False
    error_message: Optional[str] = None
    retryable: bool = False
    metadata: Optional[SearchMetadata] = None

    @classmethod
    def success(cls, content: T, metadata: Optional[SearchMetadata] = None) -> "ToolResponse[T]":
        return cls(content=content, metadata=metadata)

    @classmethod
    def error(cls, error_message: str, retryable: bool = False) -> "ToolResponse[T]":
        return cls(is_error=True, error_message=error_message, retryable=retryable)

    @classmethod
    def from_exception(cls, exc: FilingStoreError) -> "ToolResponse[T]":
        if isinstance(exc, InvalidParameterError):
            return cls.error(f"Validation failed: {exc}")
        if isinstance(exc, StorageUnavailableError):
            return cls.error(f"Search failed: {exc}", retryable=exc.retryable)
        if isinstance(exc, OperationCancelledError):
            return cls.error(f"Search cancelled: {exc}", retryable=True)
        return cls.error(f"Search failed: {exc}")


SearchPage = PaginatedResult[DocumentSearchResult]


class SearchTools:
    """
    Structured-response front for ``DocumentSearchService``.

    Library errors (``FilingStoreError`` subclasses) are logged and turned
    into error responses. Anything else is a bug and propagates.
    """

    def __init__(self, service: DocumentSearchService) -> None:
        self._service = service

    def _run(
        self,
        name: str,
        call: Callable[[], T],
        metadata: Optional[SearchMetadata] = None,
    ) -> ToolResponse[T]:
        try:
            content = call()
        except InvalidParameterError as e:
            logger.warning("%s rejected: %s", name, e)
            return ToolResponse.from_exception(e)
        except FilingStoreError as e:
            logger.error("%s failed: %s", name, e)
            return ToolResponse.from_exception(e)
        return ToolResponse.success(content, metadata)

    def company_search(
        self,
        company_name: str,
        form_types: Optional[list[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_content: bool = False,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> ToolResponse[SearchPage]:
        metadata = SearchMetadata(
            search_type="company",
            search_term=company_name,
            form_types=list(form_types or []),
            start_date=start_date,
            end_date=end_date,
        )
        return self._run(
            "Company search",
            lambda: self._service.search_by_company(
                company_name,
                form_types=form_types,
                start_date=start_date,
                end_date=end_date,
                include_content=include_content,
                page=page,
                page_size=page_size,
            ),
            metadata,
        )

    def form_filter(
        self,
        form_types: Optional[list[str]] = None,
        company_names: Optional[list[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_content: bool = False,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> ToolResponse[SearchPage]:
        metadata = SearchMetadata(
            search_type="form_filter",
            form_types=list(form_types or []),
            company_names=list(company_names or []),
            start_date=start_date,
            end_date=end_date,
        )
        return self._run(
            "Form filter",
            lambda: self._service.search_by_form_type(
                form_types,
                company_names=company_names,
                start_date=start_date,
                end_date=end_date,
                include_content=include_content,
                page=page,
                page_size=page_size,
            ),
            metadata,
        )

    def content_search(
        self,
        search_text: str,
        company_names: Optional[list[str]] = None,
        form_types: Optional[list[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        exact_match: bool = False,
        case_sensitive: bool = False,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> ToolResponse[SearchPage]:
        metadata = SearchMetadata(
            search_type="content",
            search_term=search_text,
            form_types=list(form_types or []),
            company_names=list(company_names or []),
            start_date=start_date,
            end_date=end_date,
            exact_match=exact_match,
            case_sensitive=case_sensitive,
        )
        return self._run(
            "Content search",
            lambda: self._service.search_by_content(
                search_text,
                company_names=company_names,
                form_types=form_types,
                start_date=start_date,
                end_date=end_date,
                exact_match=exact_match,
                case_sensitive=case_sensitive,
                page=page,
                page_size=page_size,
            ),
            metadata,
        )

    def document_retrieval(self, document_id: str) -> ToolResponse[DocumentSearchResult]:
        response: ToolResponse[Optional[DocumentSearchResult]] = self._run(
            "Document retrieval",
            lambda: self._service.get_document(document_id),
        )
        if not response.is_error and response.content is None:
            return ToolResponse.error(f"Document not found: {document_id}")
        return response  # type: ignore[return-value]
