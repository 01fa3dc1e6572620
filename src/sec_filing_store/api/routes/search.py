"""
Search endpoints over tracked SEC filings.

Provides three routes, all returning a ``SearchResponse`` page:
    - ``POST /api/search/company`` — company name search
    - ``POST /api/search/forms``   — form type / date range filter
    - ``POST /api/search/content`` — full-text search ranked by relevance
"""

import time
from typing import Callable

from fastapi import APIRouter, Depends

from sec_filing_store.api.dependencies import get_search_service
from sec_filing_store.api.errors import to_http_exception
from sec_filing_store.api.schemas import (
    CompanySearchRequest,
    ContentSearchRequest,
    ErrorResponse,
    FormSearchRequest,
    SearchResponse,
    SearchResultSchema,
)
from sec_filing_store.core import DocumentSearchResult, FilingStoreError, get_logger
from sec_filing_store.search import DocumentSearchService, PaginatedResult

logger = get_logger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}


def _run_search(
    label: str,
    call: Callable[[], PaginatedResult[DocumentSearchResult]],
) -> SearchResponse:
    start = time.perf_counter()
    try:
        page = call()
    except FilingStoreError as exc:
        raise to_http_exception(exc) from exc
    elapsed_ms = (time.perf_counter() - start) * 1000

    logger.info(
        "%s search returned %d of %d result(s) in %.1f ms",
        label,
        len(page.items),
        page.total_count,
        elapsed_ms,
    )

    return SearchResponse(
        items=[SearchResultSchema.from_result(r) for r in page.items],
        total_count=page.total_count,
        page=page.page,
        page_size=page.page_size,
        total_pages=page.total_pages,
        has_next_page=page.has_next_page,
        has_previous_page=page.has_previous_page,
        search_time_ms=round(elapsed_ms, 1),
    )


@router.post(
    "/company",
    response_model=SearchResponse,
    responses=_ERROR_RESPONSES,
    summary="Search filings by company name",
)
def search_company(
    body: CompanySearchRequest,
    service: DocumentSearchService = Depends(get_search_service),
) -> SearchResponse:
    """
    Find filings whose company name contains ``company_name``.

    Matching is case-insensitive. Results are ordered by filing date,
    newest first.
    """
    return _run_search(
        "Company",
        lambda: service.search_by_company(
            body.company_name,
            form_types=body.form_types,
            start_date=body.start_date,
            end_date=body.end_date,
            include_content=body.include_content,
            page=body.page,
            page_size=body.page_size,
        ),
    )


@router.post(
    "/forms",
    response_model=SearchResponse,
    responses=_ERROR_RESPONSES,
    summary="Filter filings by form type and date range",
)
def search_forms(
    body: FormSearchRequest,
    service: DocumentSearchService = Depends(get_search_service),
) -> SearchResponse:
    """An empty ``form_types`` list means every supported form type."""
    return _run_search(
        "Form",
        lambda: service.search_by_form_type(
            body.form_types,
            company_names=body.company_names,
            start_date=body.start_date,
            end_date=body.end_date,
            include_content=body.include_content,
            page=body.page,
            page_size=body.page_size,
        ),
    )


@router.post(
    "/content",
    response_model=SearchResponse,
    responses=_ERROR_RESPONSES,
    summary="Full-text search over filing content",
)
def search_content(
    body: ContentSearchRequest,
    service: DocumentSearchService = Depends(get_search_service),
) -> SearchResponse:
    """
    Search stored filing text.

    Results are ranked by relevance and carry highlight snippets around
    each match.
    """
    return _run_search(
        "Content",
        lambda: service.search_by_content(
            body.search_text,
            company_names=body.company_names,
            form_types=body.form_types,
            start_date=body.start_date,
            end_date=body.end_date,
            exact_match=body.exact_match,
            case_sensitive=body.case_sensitive,
            page=body.page,
            page_size=body.page_size,
        ),
    )
