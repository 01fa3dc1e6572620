"""
Pydantic v2 request and response schemas for the SEC Filing Store API.

Schemas are separate from the core dataclasses in ``sec_filing_store.core``
to provide a stable, explicit API contract.  Internal representations may
change without affecting the API surface.

Naming convention:
    - Request schemas:  ``<Resource>Request`` (e.g. ``CompanySearchRequest``)
    - Response schemas: ``<Resource>Response`` or ``<Resource>Schema``

Page bounds and form types are validated by the search service rather
than by field constraints, so bad values come back as 400 with the same
``ErrorResponse`` body as every other validation failure.

All dates are ISO 8601.  Relevance scores and success rates are floats
in [0.0, 1.0].
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from sec_filing_store.core import (
    CrawlMetrics,
    DocumentSearchResult,
    ProcessingError,
    YearlyMetrics,
)


# ---------------------------------------------------------------------------
# Shared / error
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """
    Structured error response returned for all 4xx and 5xx responses.

    Matches the CLI error format (error type, human message, optional hint).
    """

    error: str = Field(..., description="Machine-readable error type")
    message: str = Field(..., description="Human-readable error description")
    details: str | None = Field(None, description="Additional technical context")
    hint: str | None = Field(None, description="Suggested remediation action")


class HealthResponse(BaseModel):
    """Response for ``GET /api/health``."""

    status: str = Field(..., description="'ok' or 'degraded'")
    version: str
    storage_type: str
    storage_healthy: bool


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class _PageRequest(BaseModel):
    page: int = Field(1, description="1-based page number")
    page_size: int | None = Field(
        None, description="Results per page (defaults to SEARCH_DEFAULT_PAGE_SIZE)"
    )
    start_date: date | None = Field(None, description="Inclusive lower bound on filing date")
    end_date: date | None = Field(None, description="Inclusive upper bound on filing date")


class CompanySearchRequest(_PageRequest):
    """Request body for ``POST /api/search/company``."""

    company_name: str = Field(..., description="Company name or fragment (case-insensitive)")
    form_types: list[str] | None = Field(None, description="e.g. ['10-K', '10-Q']")
    include_content: bool = Field(False, description="Attach a content preview")


class FormSearchRequest(_PageRequest):
    """Request body for ``POST /api/search/forms``."""

    form_types: list[str] | None = Field(
        None, description="Form types to include; empty means all supported forms"
    )
    company_names: list[str] | None = Field(None, description="Company name fragments (any)")
    include_content: bool = Field(False, description="Attach a content preview")


class ContentSearchRequest(_PageRequest):
    """Request body for ``POST /api/search/content``."""

    search_text: str = Field(..., description="Phrase or space-separated terms")
    company_names: list[str] | None = None
    form_types: list[str] | None = None
    exact_match: bool = False
    case_sensitive: bool = False

    @field_validator("search_text")
    @classmethod
    def strip_search_text(cls, v: str) -> str:
        """Strip surrounding whitespace; blank text is rejected by the service."""
        return v.strip()


class SearchResultSchema(BaseModel):
    """A single search hit."""

    id: str
    title: str
    company_name: str
    form_type: str
    filing_date: date
    url: str
    relevance_score: float = Field(..., ge=0.0, le=1.0)
    highlights: list[str] = Field(default_factory=list)
    content_preview: str | None = None

    @classmethod
    def from_result(cls, result: DocumentSearchResult) -> SearchResultSchema:
        return cls(
            id=result.id,
            title=result.title,
            company_name=result.company_name,
            form_type=result.form_type,
            filing_date=result.filing_date,
            url=result.url,
            relevance_score=result.relevance_score,
            highlights=result.highlights,
            content_preview=result.content_preview,
        )


class SearchResponse(BaseModel):
    """Response for every ``POST /api/search/*`` route."""

    items: list[SearchResultSchema]
    total_count: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)
    has_next_page: bool
    has_previous_page: bool
    search_time_ms: float = Field(..., ge=0.0, description="Wall-clock search time in ms")


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------


class CrawlMetricsSchema(BaseModel):
    """Crawl counters for one company or for the whole store."""

    company_name: str
    total_documents: int = Field(..., ge=0)
    processed_documents: int = Field(..., ge=0)
    successful_documents: int = Field(..., ge=0)
    failed_documents: int = Field(..., ge=0)
    pending_documents: int = Field(..., ge=0)
    success_rate: float = Field(..., ge=0.0, le=1.0)
    form_type_counts: dict[str, int] = Field(default_factory=dict)
    last_processed_date: datetime | None = None

    @classmethod
    def from_metrics(cls, metrics: CrawlMetrics) -> CrawlMetricsSchema:
        return cls(
            company_name=metrics.company_name,
            total_documents=metrics.total_documents,
            processed_documents=metrics.processed_documents,
            successful_documents=metrics.successful_documents,
            failed_documents=metrics.failed_documents,
            pending_documents=metrics.pending_documents,
            success_rate=metrics.success_rate,
            form_type_counts=metrics.form_type_counts,
            last_processed_date=metrics.last_processed_date,
        )


class ProcessingErrorSchema(BaseModel):
    """A failed document and the reason it failed."""

    company_name: str
    form: str
    url: str
    error_message: str
    error_date: datetime | None = None

    @classmethod
    def from_error(cls, error: ProcessingError) -> ProcessingErrorSchema:
        return cls(
            company_name=error.company_name,
            form=error.form,
            url=error.url,
            error_message=error.error_message,
            error_date=error.error_date,
        )


class ProcessingErrorsResponse(BaseModel):
    """Response for ``GET /api/metrics/errors``."""

    errors: list[ProcessingErrorSchema]
    total: int = Field(..., ge=0)


class YearlyMetricsSchema(BaseModel):
    """Crawl counters for one filing year."""

    year: int
    total_documents: int = Field(..., ge=0)
    processed_documents: int = Field(..., ge=0)
    successful_documents: int = Field(..., ge=0)
    failed_documents: int = Field(..., ge=0)
    pending_documents: int = Field(..., ge=0)
    success_rate: float = Field(..., ge=0.0, le=1.0)
    form_type_counts: dict[str, int] = Field(default_factory=dict)
    companies: list[str] = Field(default_factory=list)

    @classmethod
    def from_metrics(cls, metrics: YearlyMetrics) -> YearlyMetricsSchema:
        return cls(
            year=metrics.year,
            total_documents=metrics.total_documents,
            processed_documents=metrics.processed_documents,
            successful_documents=metrics.successful_documents,
            failed_documents=metrics.failed_documents,
            pending_documents=metrics.pending_documents,
            success_rate=metrics.success_rate,
            form_type_counts=metrics.form_type_counts,
            companies=metrics.companies,
        )


class YearlyMetricsResponse(BaseModel):
    """Response for ``GET /api/metrics/yearly``."""

    company_name: str | None = None
    years: list[YearlyMetricsSchema]


class OverallMetricsResponse(BaseModel):
    """Response for ``GET /api/metrics/``."""

    storage_type: str
    metrics: CrawlMetricsSchema
    total_companies: int = Field(..., ge=0)
    last_crawl_date: datetime | None = None


class CompanyBreakdownResponse(BaseModel):
    """Response for ``GET /api/metrics/companies``."""

    companies: list[CrawlMetricsSchema]
    total_count: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)
    has_next_page: bool
    has_previous_page: bool


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class DocumentResponse(BaseModel):
    """Response for ``GET /api/documents/{document_id}``."""

    id: str
    title: str
    company_name: str
    form_type: str
    filing_date: date
    url: str
    processed: bool
    success: bool
    error_message: str | None = None
    processed_date: datetime | None = None
    content: str | None = Field(None, description="Stored filing text, when requested")
