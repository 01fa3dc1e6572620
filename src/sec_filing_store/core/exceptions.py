"""
Custom exception hierarchy for sec-filing-store.

All exceptions inherit from FilingStoreError, allowing callers to catch
all project-specific errors with a single except clause when desired.

Exception hierarchy:
    FilingStoreError (base)
    ├── ConfigurationError — Invalid or missing configuration
    ├── InvalidParameterError — Malformed or out-of-range caller input
    ├── StorageUnavailableError — Backend unreachable or timed out (retryable)
    └── OperationCancelledError — Caller timeout or cancellation signal
"""

from typing import Optional


class FilingStoreError(Exception):
    """
    Base exception for all sec-filing-store errors.

    Args:
        message: Human-readable error description.
        details: Optional additional context for debugging.
    """

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        self.message = message
        self.details = details
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.details:
            return f"{self.message} — {self.details}"
        return self.message


class ConfigurationError(FilingStoreError):
    """
    Raised when configuration is invalid or missing.

    Examples:
        - Unknown storage provider (STORAGE_PROVIDER=Postgres)
        - Azure provider selected without a connection string
    """

    pass


class InvalidParameterError(FilingStoreError):
    """
    Raised when a caller passes malformed or out-of-range input.

    Always recoverable by the caller. Detected before any store call
    is made.

    Examples:
        - Unknown form type ("10-X")
        - page < 1 or page_size outside the allowed range
        - Blank company name or search text
        - start_date after end_date
    """

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        details: Optional[str] = None,
    ) -> None:
        self.parameter = parameter
        super().__init__(message, details)


class StorageUnavailableError(FilingStoreError):
    """
    Raised when a storage backend cannot be reached or a call times out.

    The failing store operation is recorded so callers can tell
    "no results" apart from "could not query". Always retryable.

    Examples:
        - Azure Table Storage connection refused or timed out
        - Local data directory cannot be created or read
        - Corrupt JSON tracking file
    """

    retryable = True

    def __init__(self, operation: str, details: Optional[str] = None) -> None:
        self.operation = operation
        super().__init__(f"Storage unavailable during {operation}", details)


class OperationCancelledError(FilingStoreError):
    """
    Raised when a search or metrics call exceeds its timeout or is cancelled.

    Read-only operations leave the store untouched when this is raised.
    """

    def __init__(self, operation: str, details: Optional[str] = None) -> None:
        self.operation = operation
        super().__init__(f"Operation cancelled: {operation}", details)
