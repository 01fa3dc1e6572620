"""
Pure aggregation over a snapshot of document records.

Every function here takes an iterable of ``DocumentRecord`` and returns a
new metrics object. Nothing is written anywhere, so the same functions
back all three storage backends and the ``MetricsAggregator`` facade.

Company scoping uses case-insensitive equality on the company name.
"""

from collections import Counter
from typing import Iterable, Optional

from sec_filing_store.config.constants import ALL_COMPANIES
from sec_filing_store.core.types import (
    CrawlMetrics,
    DocumentRecord,
    OverallCrawlMetrics,
    ProcessingError,
    YearlyMetrics,
)


def same_company(record: DocumentRecord, company_name: str) -> bool:
    """Case-insensitive company name equality."""
    return record.company_name.casefold() == company_name.strip().casefold()


def _scoped(
    records: Iterable[DocumentRecord],
    company_name: Optional[str],
) -> list[DocumentRecord]:
    if company_name and company_name.strip():
        return [r for r in records if same_company(r, company_name)]
    return list(records)


def compute_crawl_metrics(
    records: Iterable[DocumentRecord],
    company_name: Optional[str] = None,
) -> CrawlMetrics:
    """
    Count totals, outcomes and form types for one company or all of them.

    Args:
        records: Snapshot of records to aggregate.
        company_name: Restrict to this company (case-insensitive).
                      None or blank means all companies.

    Returns:
        CrawlMetrics. ``success_rate`` is 0.0 when nothing was processed.
    """
    scoped = _scoped(records, company_name)
    label = company_name.strip() if company_name and company_name.strip() else ALL_COMPANIES

    metrics = CrawlMetrics(company_name=label)
    forms: Counter[str] = Counter()

    for record in scoped:
        metrics.total_documents += 1
        forms[record.form] += 1
        if not record.processed:
            continue
        metrics.processed_documents += 1
        if record.success:
            metrics.successful_documents += 1
        else:
            metrics.failed_documents += 1
        if record.processed_date and (
            metrics.last_processed_date is None
            or record.processed_date > metrics.last_processed_date
        ):
            metrics.last_processed_date = record.processed_date

    metrics.form_type_counts = dict(sorted(forms.items()))
    return metrics


def collect_processing_errors(
    records: Iterable[DocumentRecord],
    company_name: Optional[str] = None,
) -> list[ProcessingError]:
    """Return one ProcessingError per failed record, most recent first."""
    errors = [
        ProcessingError.from_record(r)
        for r in _scoped(records, company_name)
        if r.failed
    ]
    errors.sort(key=lambda e: e.error_date, reverse=True)
    return errors


def compute_yearly_metrics(
    records: Iterable[DocumentRecord],
    company_name: Optional[str] = None,
) -> dict[int, YearlyMetrics]:
    """
    Group records by filing year.

    Returns:
        Mapping of year to YearlyMetrics, in ascending year order. Each
        entry lists the distinct company names filing in that year.
    """
    by_year: dict[int, YearlyMetrics] = {}
    forms: dict[int, Counter[str]] = {}
    companies: dict[int, set[str]] = {}

    for record in _scoped(records, company_name):
        year = record.filing_date.year
        metrics = by_year.get(year)
        if metrics is None:
            metrics = by_year[year] = YearlyMetrics(year=year)
            forms[year] = Counter()
            companies[year] = set()

        metrics.total_documents += 1
        if record.processed:
            metrics.processed_documents += 1
            if record.success:
                metrics.successful_documents += 1
            else:
                metrics.failed_documents += 1

        forms[year][record.form] += 1
        companies[year].add(record.company_name)

    for year, metrics in by_year.items():
        metrics.form_type_counts = dict(sorted(forms[year].items()))
        metrics.companies = sorted(companies[year])

    return dict(sorted(by_year.items()))


def compute_overall_metrics(records: Iterable[DocumentRecord]) -> OverallCrawlMetrics:
    """Crawl-wide totals with a per-company breakdown sorted by company name."""
    snapshot = list(records)
    totals = compute_crawl_metrics(snapshot)

    # Group case-insensitively, keeping the first spelling seen as the label.
    names: dict[str, str] = {}
    for record in snapshot:
        names.setdefault(record.company_name.casefold(), record.company_name)

    company_metrics = [
        compute_crawl_metrics(snapshot, name)
        for name in sorted(names.values(), key=str.casefold)
    ]

    return OverallCrawlMetrics(
        total_companies=len(names),
        total_documents=totals.total_documents,
        processed_documents=totals.processed_documents,
        successful_documents=totals.successful_documents,
        failed_documents=totals.failed_documents,
        last_crawl_date=totals.last_processed_date,
        form_type_counts=totals.form_type_counts,
        company_metrics=company_metrics,
    )
