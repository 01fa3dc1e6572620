"""
Map library exceptions to HTTP errors with an ``ErrorResponse`` body.

    InvalidParameterError     -> 400
    StorageUnavailableError   -> 503
    OperationCancelledError   -> 504
    any other FilingStoreError -> 500
"""

from fastapi import HTTPException

from sec_filing_store.core import (
    FilingStoreError,
    InvalidParameterError,
    OperationCancelledError,
    StorageUnavailableError,
)


def to_http_exception(exc: FilingStoreError) -> HTTPException:
    """Build the ``HTTPException`` for a library error (raise it ``from exc``)."""
    if isinstance(exc, InvalidParameterError):
        hint = f"Check the '{exc.parameter}' parameter." if exc.parameter else None
        return HTTPException(
            status_code=400,
            detail={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.details,
                "hint": hint,
            },
        )

    if isinstance(exc, StorageUnavailableError):
        return HTTPException(
            status_code=503,
            detail={
                "error": "storage_unavailable",
                "message": exc.message,
                "details": exc.details,
                "hint": "The storage backend is unreachable. Retry later.",
            },
        )

    if isinstance(exc, OperationCancelledError):
        return HTTPException(
            status_code=504,
            detail={
                "error": "operation_cancelled",
                "message": exc.message,
                "details": exc.details,
                "hint": "Narrow the filters or use a smaller page size.",
            },
        )

    return HTTPException(
        status_code=500,
        detail={
            "error": "internal_error",
            "message": exc.message,
            "details": exc.details,
        },
    )
