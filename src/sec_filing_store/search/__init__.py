"""Search module — structured and full-text search over tracked filings.

This module provides the read-only query surface:
    - DocumentSearchService: Company, form/date and content search
    - SearchTools: Same searches behind a success-or-error envelope
    - PaginatedResult / compute_page: Shared page arithmetic
    - match_document: Relevance scoring and highlight extraction

Usage:
    from sec_filing_store.search import DocumentSearchService

    service = DocumentSearchService(store)
    page = service.search_by_content("revenue growth", exact_match=True)
"""

from sec_filing_store.search.pagination import (
    PageInfo,
    PaginatedResult,
    compute_page,
    paginate,
    slice_page,
    validate_page_request,
)
from sec_filing_store.search.relevance import RelevanceMatch, match_document, rank_results
from sec_filing_store.search.service import DocumentSearchService
from sec_filing_store.search.tools import SearchMetadata, SearchTools, ToolResponse

__all__ = [
    # Service
    "DocumentSearchService",
    "SearchTools",
    "SearchMetadata",
    "ToolResponse",
    # Pagination
    "PageInfo",
    "PaginatedResult",
    "compute_page",
    "paginate",
    "slice_page",
    "validate_page_request",
    # Relevance
    "RelevanceMatch",
    "match_document",
    "rank_results",
]
