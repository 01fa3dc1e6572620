"""Core module — types, exceptions, and logging.

This module provides the foundational components used throughout the package:
    - Data types (DocumentRecord, CrawlMetrics, DocumentSearchResult, ...)
    - Exception hierarchy (FilingStoreError and subclasses)
    - Logging utilities (get_logger, configure_logging)

Usage:
    from sec_filing_store.core import (
        DocumentRecord,
        StorageUnavailableError,
        get_logger,
    )
"""

from sec_filing_store.core.exceptions import (
    ConfigurationError,
    FilingStoreError,
    InvalidParameterError,
    OperationCancelledError,
    StorageUnavailableError,
)
from sec_filing_store.core.logging import (
    configure_logging,
    get_logger,
    suppress_third_party_loggers,
)
from sec_filing_store.core.types import (
    UNKNOWN_ERROR,
    CrawlMetrics,
    DocumentRecord,
    DocumentSearchResult,
    OverallCrawlMetrics,
    ProcessingError,
    YearlyMetrics,
    generate_document_id,
    utc_now,
)

__all__ = [
    # Types
    "DocumentRecord",
    "ProcessingError",
    "CrawlMetrics",
    "YearlyMetrics",
    "OverallCrawlMetrics",
    "DocumentSearchResult",
    "UNKNOWN_ERROR",
    "generate_document_id",
    "utc_now",
    # Exceptions
    "FilingStoreError",
    "ConfigurationError",
    "InvalidParameterError",
    "StorageUnavailableError",
    "OperationCancelledError",
    # Logging
    "get_logger",
    "configure_logging",
    "suppress_third_party_loggers",
]
