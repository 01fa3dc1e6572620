"""
Metrics endpoints — crawl progress and processing failures.

Mirrors the CLI ``manage status``, ``manage errors``, ``manage yearly``
and ``manage companies`` commands.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from sec_filing_store.api.dependencies import get_metrics, get_store
from sec_filing_store.api.errors import to_http_exception
from sec_filing_store.api.schemas import (
    CompanyBreakdownResponse,
    CrawlMetricsSchema,
    ErrorResponse,
    OverallMetricsResponse,
    ProcessingErrorSchema,
    ProcessingErrorsResponse,
    YearlyMetricsResponse,
    YearlyMetricsSchema,
)
from sec_filing_store.config import ALL_COMPANIES
from sec_filing_store.core import CrawlMetrics, FilingStoreError
from sec_filing_store.metrics import MetricsAggregator
from sec_filing_store.storage import DocumentStore

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


@router.get(
    "/",
    response_model=OverallMetricsResponse,
    responses=_ERROR_RESPONSES,
    summary="Crawl-wide processing metrics",
)
def overall_metrics(
    company: Optional[str] = Query(None, description="Restrict to one company"),
    aggregator: MetricsAggregator = Depends(get_metrics),
    store: DocumentStore = Depends(get_store),
) -> OverallMetricsResponse:
    """
    Return document counts, success rate and form breakdown.

    With ``company`` the counters cover that company only (exact name,
    case-insensitive).
    """
    try:
        if company:
            metrics = aggregator.crawl_metrics(company)
            return OverallMetricsResponse(
                storage_type=store.storage_type,
                metrics=CrawlMetricsSchema.from_metrics(metrics),
                total_companies=1 if metrics.total_documents else 0,
                last_crawl_date=metrics.last_processed_date,
            )
        overall = aggregator.overall_metrics()
    except FilingStoreError as exc:
        raise to_http_exception(exc) from exc

    totals = CrawlMetrics(
        company_name=ALL_COMPANIES,
        total_documents=overall.total_documents,
        processed_documents=overall.processed_documents,
        successful_documents=overall.successful_documents,
        failed_documents=overall.failed_documents,
        last_processed_date=overall.last_crawl_date,
        form_type_counts=overall.form_type_counts,
    )
    return OverallMetricsResponse(
        storage_type=store.storage_type,
        metrics=CrawlMetricsSchema.from_metrics(totals),
        total_companies=overall.total_companies,
        last_crawl_date=overall.last_crawl_date,
    )


@router.get(
    "/errors",
    response_model=ProcessingErrorsResponse,
    responses=_ERROR_RESPONSES,
    summary="Failed documents, newest first",
)
def processing_errors(
    company: Optional[str] = Query(None, description="Restrict to one company"),
    aggregator: MetricsAggregator = Depends(get_metrics),
) -> ProcessingErrorsResponse:
    """List every failed document with its error message."""
    try:
        errors = aggregator.processing_errors(company)
    except FilingStoreError as exc:
        raise to_http_exception(exc) from exc
    return ProcessingErrorsResponse(
        errors=[ProcessingErrorSchema.from_error(e) for e in errors],
        total=len(errors),
    )


@router.get(
    "/yearly",
    response_model=YearlyMetricsResponse,
    responses=_ERROR_RESPONSES,
    summary="Processing metrics per filing year",
)
def yearly_metrics(
    company: Optional[str] = Query(None, description="Restrict to one company"),
    aggregator: MetricsAggregator = Depends(get_metrics),
) -> YearlyMetricsResponse:
    """Return one entry per filing year, oldest first."""
    try:
        if company:
            by_year = aggregator.company_yearly_metrics(company)
        else:
            by_year = aggregator.yearly_metrics()
    except FilingStoreError as exc:
        raise to_http_exception(exc) from exc
    return YearlyMetricsResponse(
        company_name=company,
        years=[YearlyMetricsSchema.from_metrics(m) for m in by_year.values()],
    )


@router.get(
    "/companies",
    response_model=CompanyBreakdownResponse,
    responses=_ERROR_RESPONSES,
    summary="Paginated per-company metrics",
)
def company_breakdown(
    page: int = Query(1, description="1-based page number"),
    page_size: int = Query(50, description="Companies per page"),
    aggregator: MetricsAggregator = Depends(get_metrics),
) -> CompanyBreakdownResponse:
    """One page of per-company metrics, ordered by company name."""
    try:
        result = aggregator.company_breakdown(page=page, page_size=page_size)
    except FilingStoreError as exc:
        raise to_http_exception(exc) from exc
    return CompanyBreakdownResponse(
        companies=[CrawlMetricsSchema.from_metrics(m) for m in result.items],
        total_count=result.total_count,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        has_next_page=result.has_next_page,
        has_previous_page=result.has_previous_page,
    )
