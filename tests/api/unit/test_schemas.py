"""
Tests for API Pydantic request/response schemas.

Validates field constraints, defaults, the search text validator and the
``from_*`` converters from core dataclasses — all via direct model
instantiation with no HTTP involved.
"""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from sec_filing_store.api.schemas import (
    CompanyBreakdownResponse,
    CompanySearchRequest,
    ContentSearchRequest,
    CrawlMetricsSchema,
    DocumentResponse,
    ErrorResponse,
    FormSearchRequest,
    HealthResponse,
    ProcessingErrorSchema,
    SearchResponse,
    SearchResultSchema,
    YearlyMetricsSchema,
)
from sec_filing_store.core import (
    CrawlMetrics,
    DocumentSearchResult,
    ProcessingError,
    YearlyMetrics,
)


def _result(**overrides) -> DocumentSearchResult:
    values = dict(
        id="a" * 64,
        title="Apple Inc. - 10-K - 2024-11-01",
        company_name="Apple Inc.",
        form_type="10-K",
        filing_date=date(2024, 11, 1),
        url="https://www.sec.gov/Archives/edgar/data/apple/10-k-0000.htm",
    )
    values.update(overrides)
    return DocumentSearchResult(**values)


# -----------------------------------------------------------------------
# ErrorResponse / HealthResponse
# -----------------------------------------------------------------------


class TestErrorResponse:
    """ErrorResponse carries structured error information."""

    def test_required_fields(self):
        resp = ErrorResponse(error="not_found", message="Document not found")
        assert resp.error == "not_found"
        assert resp.message == "Document not found"

    def test_optional_fields_default_none(self):
        resp = ErrorResponse(error="err", message="msg")
        assert resp.details is None
        assert resp.hint is None

    def test_missing_message_rejected(self):
        with pytest.raises(ValidationError):
            ErrorResponse(error="err")


class TestHealthResponse:
    def test_valid(self):
        resp = HealthResponse(
            status="ok", version="0.1.0", storage_type="Local File Storage", storage_healthy=True
        )
        assert resp.storage_healthy is True


# -----------------------------------------------------------------------
# Search requests
# -----------------------------------------------------------------------


class TestCompanySearchRequest:
    def test_defaults(self):
        req = CompanySearchRequest(company_name="Apple")
        assert req.page == 1
        assert req.page_size is None
        assert req.form_types is None
        assert req.include_content is False
        assert req.start_date is None
        assert req.end_date is None

    def test_company_required(self):
        with pytest.raises(ValidationError):
            CompanySearchRequest()

    def test_iso_dates_parsed(self):
        req = CompanySearchRequest(company_name="Apple", start_date="2024-01-31")
        assert req.start_date == date(2024, 1, 31)

    def test_bad_date_rejected(self):
        with pytest.raises(ValidationError):
            CompanySearchRequest(company_name="Apple", start_date="31/01/2024")

    def test_page_bounds_left_to_service(self):
        """Out-of-range pages reach the service, which answers with a 400."""
        req = CompanySearchRequest(company_name="Apple", page=0, page_size=5000)
        assert req.page == 0
        assert req.page_size == 5000


class TestFormSearchRequest:
    def test_everything_optional(self):
        req = FormSearchRequest()
        assert req.form_types is None
        assert req.company_names is None


class TestContentSearchRequest:
    def test_text_stripped(self):
        req = ContentSearchRequest(search_text="  revenue growth \n")
        assert req.search_text == "revenue growth"

    def test_blank_text_allowed_through(self):
        assert ContentSearchRequest(search_text="   ").search_text == ""

    def test_flags_default_false(self):
        req = ContentSearchRequest(search_text="x")
        assert req.exact_match is False
        assert req.case_sensitive is False


# -----------------------------------------------------------------------
# Search responses
# -----------------------------------------------------------------------


class TestSearchResultSchema:
    def test_from_result(self):
        schema = SearchResultSchema.from_result(
            _result(relevance_score=0.42, highlights=["...revenue..."], content_preview="Rev")
        )
        assert schema.relevance_score == 0.42
        assert schema.highlights == ["...revenue..."]
        assert schema.content_preview == "Rev"
        assert schema.form_type == "10-K"

    def test_full_content_not_exposed(self):
        schema = SearchResultSchema.from_result(_result(full_content="everything"))
        assert "full_content" not in schema.model_dump()

    @pytest.mark.parametrize("score", [-0.01, 1.01])
    def test_score_bounds(self, score):
        with pytest.raises(ValidationError):
            SearchResultSchema.from_result(_result(relevance_score=score))


class TestSearchResponse:
    def _page(self, **overrides):
        values = dict(
            items=[],
            total_count=0,
            page=1,
            page_size=50,
            total_pages=0,
            has_next_page=False,
            has_previous_page=False,
            search_time_ms=0.4,
        )
        values.update(overrides)
        return SearchResponse(**values)

    def test_empty_page(self):
        assert self._page().total_pages == 0

    @pytest.mark.parametrize(
        "field, value",
        [("total_count", -1), ("page", 0), ("page_size", 0), ("search_time_ms", -1.0)],
    )
    def test_bounds(self, field, value):
        with pytest.raises(ValidationError):
            self._page(**{field: value})


# -----------------------------------------------------------------------
# Metrics
# -----------------------------------------------------------------------


class TestCrawlMetricsSchema:
    def test_from_metrics_carries_derived_values(self):
        metrics = CrawlMetrics(
            company_name="Apple Inc.",
            total_documents=4,
            processed_documents=2,
            successful_documents=1,
            failed_documents=1,
            form_type_counts={"10-K": 4},
        )
        schema = CrawlMetricsSchema.from_metrics(metrics)
        assert schema.pending_documents == 2
        assert schema.success_rate == 0.5
        assert schema.form_type_counts == {"10-K": 4}
        assert schema.last_processed_date is None

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            CrawlMetricsSchema(
                company_name="X",
                total_documents=-1,
                processed_documents=0,
                successful_documents=0,
                failed_documents=0,
                pending_documents=0,
                success_rate=0.0,
            )


class TestYearlyMetricsSchema:
    def test_from_metrics(self):
        metrics = YearlyMetrics(
            year=2024,
            total_documents=3,
            processed_documents=3,
            successful_documents=3,
            companies=["Apple Inc."],
        )
        schema = YearlyMetricsSchema.from_metrics(metrics)
        assert schema.year == 2024
        assert schema.pending_documents == 0
        assert schema.success_rate == 1.0
        assert schema.companies == ["Apple Inc."]


class TestProcessingErrorSchema:
    def test_from_error(self):
        when = datetime(2024, 2, 3, 12, 0)
        error = ProcessingError(
            company_name="Apple Inc.",
            form="10-Q",
            url="https://www.sec.gov/x.htm",
            error_message="HTTP 429",
            error_date=when,
        )
        schema = ProcessingErrorSchema.from_error(error)
        assert schema.error_message == "HTTP 429"
        assert schema.error_date == when


class TestCompanyBreakdownResponse:
    def test_page_must_be_positive(self):
        with pytest.raises(ValidationError):
            CompanyBreakdownResponse(
                companies=[],
                total_count=0,
                page=0,
                page_size=50,
                total_pages=0,
                has_next_page=False,
                has_previous_page=False,
            )


# -----------------------------------------------------------------------
# Documents
# -----------------------------------------------------------------------


class TestDocumentResponse:
    def test_content_defaults_none(self):
        resp = DocumentResponse(
            id="a" * 64,
            title="Apple Inc. - 10-K - 2024-11-01",
            company_name="Apple Inc.",
            form_type="10-K",
            filing_date=date(2024, 11, 1),
            url="https://www.sec.gov/x.htm",
            processed=False,
            success=True,
        )
        assert resp.content is None
        assert resp.error_message is None
        assert resp.processed_date is None
