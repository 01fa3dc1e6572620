"""
Document retrieval endpoint.

Provides ``GET /api/documents/{document_id}`` returning the tracked
record, its processing outcome and optionally the stored filing text.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from sec_filing_store.api.dependencies import get_store
from sec_filing_store.api.errors import to_http_exception
from sec_filing_store.api.schemas import DocumentResponse, ErrorResponse
from sec_filing_store.core import FilingStoreError
from sec_filing_store.storage import DocumentStore

router = APIRouter()


@router.get(
    "/{document_id}",
    response_model=DocumentResponse,
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Get a single tracked document",
)
def get_document(
    document_id: str,
    include_content: bool = Query(False, description="Attach the stored filing text"),
    store: DocumentStore = Depends(get_store),
) -> DocumentResponse:
    """
    Retrieve a tracked document by its ID (SHA-256 of the URL).

    Returns 404 if the document is not tracked.
    """
    try:
        record = store.get_document(document_id)
        content = store.get_content(document_id) if record and include_content else None
    except FilingStoreError as exc:
        raise to_http_exception(exc) from exc

    if record is None:
        raise HTTPException(
            status_code=404,
            detail={
                "error": "not_found",
                "message": f"Document not found: {document_id}",
                "hint": "Use POST /api/search/company to find document IDs.",
            },
        )

    return DocumentResponse(
        id=record.id,
        title=record.title,
        company_name=record.company_name,
        form_type=record.form,
        filing_date=record.filing_date,
        url=record.url,
        processed=record.processed,
        success=record.success,
        error_message=record.error_message,
        processed_date=record.processed_date,
        content=content,
    )
