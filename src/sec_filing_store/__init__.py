"""SEC Filing Store — tracking, search and crawl metrics for SEC filings.

This package records filings discovered by a crawler, keeps their
processing outcome in one of three interchangeable backends (in-memory,
local JSON files, Azure Table Storage) and answers structured and
full-text search queries over them.

Usage:
    from sec_filing_store import __version__
    from sec_filing_store.storage import create_store
    from sec_filing_store.search import DocumentSearchService
    from sec_filing_store.metrics import MetricsAggregator
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("sec-filing-store")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Re-export lightweight core types for convenience.
# Storage backends are NOT imported here so the Azure SDK is only loaded
# when the Azure provider is selected.
from sec_filing_store.core import (
    CrawlMetrics,
    DocumentRecord,
    DocumentSearchResult,
    FilingStoreError,
    ProcessingError,
    YearlyMetrics,
)

__all__ = [
    "__version__",
    # Core types
    "DocumentRecord",
    "DocumentSearchResult",
    "ProcessingError",
    "CrawlMetrics",
    "YearlyMetrics",
    # Base exception
    "FilingStoreError",
]
