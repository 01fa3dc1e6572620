"""Tests for core data types.

DocumentRecord is the unit of state in every backend: its ID derivation,
immutability and the one-way processed transition underpin idempotent
tracking and monotonic processing. Metrics types derive pending counts
and success rates, so conservation holds by construction.
"""

import dataclasses
import hashlib
from datetime import date, datetime, timezone

import pytest

from sec_filing_store.core.types import (
    UNKNOWN_ERROR,
    CrawlMetrics,
    DocumentRecord,
    DocumentSearchResult,
    ProcessingError,
    YearlyMetrics,
    generate_document_id,
    utc_now,
)
from tests.helpers import make_record

URL = "https://www.sec.gov/Archives/edgar/data/320193/000032019324000123/aapl-20240928.htm"


class TestGenerateDocumentId:
    def test_is_sha256_of_url(self):
        assert generate_document_id(URL) == hashlib.sha256(URL.encode("utf-8")).hexdigest()

    def test_lowercase_hex_64_chars(self):
        doc_id = generate_document_id(URL)
        assert len(doc_id) == 64
        assert doc_id == doc_id.lower()

    def test_stable(self):
        assert generate_document_id(URL) == generate_document_id(URL)

    def test_distinct_urls_distinct_ids(self):
        assert generate_document_id(URL) != generate_document_id(URL + "?x=1")


class TestUtcNow:
    def test_timezone_aware(self):
        assert utc_now().tzinfo == timezone.utc


class TestDocumentRecord:
    """Creation, derived properties and the processed transition."""

    def test_discovered_defaults(self):
        record = DocumentRecord.discovered("Apple Inc.", "10-K", date(2024, 11, 1), URL)
        assert record.id == generate_document_id(URL)
        assert record.processed is False
        assert record.success is False
        assert record.error_message is None
        assert record.processed_date is None
        assert record.tracked_at.tzinfo is not None

    def test_discovered_upper_cases_form(self):
        record = DocumentRecord.discovered("Apple Inc.", " 10-k/a ", date(2024, 11, 1), URL)
        assert record.form == "10-K/A"

    def test_frozen(self):
        record = make_record()
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.processed = True  # type: ignore[misc]

    def test_title(self):
        record = make_record(company_name="Apple Inc.", form="10-K", filing_date=date(2024, 11, 1))
        assert record.title == "Apple Inc. - 10-K - 2024-11-01"

    def test_mark_processed_success(self):
        record = make_record()
        done = record.mark_processed(True, error_message="ignored")
        assert done.processed is True
        assert done.success is True
        assert done.error_message is None
        assert done.processed_date is not None
        assert done.failed is False

    def test_mark_processed_failure_keeps_message(self):
        done = make_record().mark_processed(False, "HTTP 429")
        assert done.failed is True
        assert done.error_message == "HTTP 429"

    def test_mark_processed_failure_without_message(self):
        done = make_record().mark_processed(False)
        assert done.error_message == UNKNOWN_ERROR

    def test_mark_processed_returns_new_instance(self):
        record = make_record()
        done = record.mark_processed(True)
        assert record.processed is False
        assert done is not record
        assert done.id == record.id
        assert done.tracked_at == record.tracked_at

    def test_mark_processed_twice_raises(self):
        done = make_record().mark_processed(True)
        with pytest.raises(ValueError, match="already processed"):
            done.mark_processed(False, "late")

    def test_explicit_processed_date(self):
        when = datetime(2024, 12, 1, 8, 30, tzinfo=timezone.utc)
        assert make_record().mark_processed(True, processed_date=when).processed_date == when


class TestProcessingError:
    def test_from_failed_record(self):
        record = make_record(processed=True, success=False, error_message="HTTP 500")
        error = ProcessingError.from_record(record)
        assert error.company_name == record.company_name
        assert error.form == record.form
        assert error.url == record.url
        assert error.error_message == "HTTP 500"
        assert error.error_date == record.processed_date


class TestMetricsTypes:
    """Derived counters on CrawlMetrics and YearlyMetrics."""

    def test_pending_documents(self):
        metrics = CrawlMetrics("Apple Inc.", total_documents=10, processed_documents=7)
        assert metrics.pending_documents == 3

    def test_success_rate_zero_when_nothing_processed(self):
        assert CrawlMetrics("Apple Inc.", total_documents=5).success_rate == 0.0

    def test_success_rate_fraction(self):
        metrics = CrawlMetrics(
            "Apple Inc.",
            total_documents=10,
            processed_documents=4,
            successful_documents=3,
            failed_documents=1,
        )
        assert metrics.success_rate == pytest.approx(0.75)

    def test_yearly_success_rate(self):
        metrics = YearlyMetrics(2024, total_documents=2, processed_documents=2, successful_documents=1)
        assert metrics.success_rate == pytest.approx(0.5)
        assert metrics.pending_documents == 0


class TestDocumentSearchResult:
    def test_from_record_defaults(self):
        record = make_record()
        result = DocumentSearchResult.from_record(record)
        assert result.id == record.id
        assert result.title == record.title
        assert result.form_type == record.form
        assert result.relevance_score == 1.0
        assert result.highlights == []
        assert result.content_preview is None
        assert result.full_content is None

    def test_from_record_with_score(self):
        result = DocumentSearchResult.from_record(make_record(), 0.42, ["...revenue..."])
        assert result.relevance_score == 0.42
        assert result.highlights == ["...revenue..."]
