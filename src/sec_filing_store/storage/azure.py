"""
Azure Table Storage document store.

Layout:
    <processed_table_name>  one entity per document
                            PartitionKey = first two hex chars of the ID
                            RowKey       = document ID (SHA-256 of URL)
    <company_table_name>    one entity per company seen by the crawler
    <blob_container_name>   extracted filing text as ``<id>.txt`` blobs

All SDK calls run with bounded connection/read timeouts; any ``AzureError``
surfaces as ``StorageUnavailableError`` naming the failed operation.

Consistency: Table Storage queries are not guaranteed to reflect a write
issued a moment earlier by another client. A search immediately after
``track_document`` may miss the new record; this is accepted behaviour.
Within this client, ``mark_processed`` uses the entity ETag so two
concurrent writers cannot both apply an outcome.
"""

import re
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Iterator, Optional

from azure.core import MatchConditions
from azure.core.exceptions import (
    AzureError,
    ResourceExistsError,
    ResourceModifiedError,
    ResourceNotFoundError,
)
from azure.data.tables import TableServiceClient, UpdateMode
from azure.storage.blob import BlobServiceClient

from sec_filing_store.config.constants import (
    DEFAULT_BLOB_CONTAINER,
    DEFAULT_COMPANY_TABLE,
    DEFAULT_PROCESSED_TABLE,
    DEFAULT_STORAGE_TIMEOUT_SECONDS,
)
from sec_filing_store.core import (
    DocumentRecord,
    StorageUnavailableError,
    generate_document_id,
    get_logger,
    utc_now,
)
from sec_filing_store.storage.base import DocumentFilter, DocumentStore, order_records, page_slice

logger = get_logger(__name__)

COMPANY_PARTITION = "company"

# Characters Table Storage forbids in PartitionKey / RowKey values.
_INVALID_KEY_CHARS = re.compile(r"[\\/#?\x00-\x1f\x7f]")


def partition_key(document_id: str) -> str:
    """Spread documents over 256 partitions using the ID prefix."""
    return document_id[:2]


def company_key(company_name: str) -> str:
    """Normalised, key-safe company row key."""
    return _INVALID_KEY_CHARS.sub("_", company_name.strip().casefold())


def company_entity(company_name: str, last_tracked_at: Optional[datetime] = None) -> dict[str, Any]:
    """Company tracking row. MERGE upserts without a timestamp keep the stored one."""
    entity: dict[str, Any] = {
        "PartitionKey": COMPANY_PARTITION,
        "RowKey": company_key(company_name),
        "CompanyName": company_name,
    }
    if last_tracked_at is not None:
        entity["LastTrackedAt"] = last_tracked_at
    return entity


def build_query_filter(document_filter: DocumentFilter) -> tuple[str, dict[str, Any]]:
    """
    Translate the server-side part of a filter into OData.

    Form types and dates are pushed down; company substring matching has
    no OData equivalent and is applied client-side.

    Returns:
        ``(filter_expression, parameters)``; the expression is empty when
        nothing can be pushed down.
    """
    clauses: list[str] = []
    parameters: dict[str, Any] = {}

    if document_filter.form_types:
        forms = []
        for i, form in enumerate(document_filter.form_types):
            parameters[f"form{i}"] = form
            forms.append(f"Form eq @form{i}")
        clauses.append("(" + " or ".join(forms) + ")")

    # ISO dates compare correctly as strings.
    if document_filter.start_date:
        parameters["start"] = document_filter.start_date.isoformat()
        clauses.append("FilingDate ge @start")
    if document_filter.end_date:
        parameters["end"] = document_filter.end_date.isoformat()
        clauses.append("FilingDate le @end")

    return " and ".join(clauses), parameters


def record_to_entity(record: DocumentRecord) -> dict[str, Any]:
    """Table entity for a record. None-valued properties are omitted."""
    entity = {
        "PartitionKey": partition_key(record.id),
        "RowKey": record.id,
        "CompanyName": record.company_name,
        "Form": record.form,
        "FilingDate": record.filing_date.isoformat(),
        "Url": record.url,
        "Processed": record.processed,
        "Success": record.success,
        "ErrorMessage": record.error_message,
        "ProcessedDate": record.processed_date,
        "TrackedAt": record.tracked_at,
    }
    return {key: value for key, value in entity.items() if value is not None}


def entity_to_record(entity: dict[str, Any]) -> DocumentRecord:
    tracked_at = entity.get("TrackedAt")
    processed_date = entity.get("ProcessedDate")
    return DocumentRecord(
        id=entity["RowKey"],
        company_name=entity["CompanyName"],
        form=entity["Form"],
        filing_date=date.fromisoformat(entity["FilingDate"]),
        url=entity["Url"],
        processed=bool(entity.get("Processed", False)),
        success=bool(entity.get("Success", False)),
        error_message=entity.get("ErrorMessage"),
        processed_date=_as_datetime(processed_date),
        tracked_at=_as_datetime(tracked_at) or utc_now(),
    )


def _as_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@contextmanager
def _azure_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except AzureError as e:
        logger.error("Azure storage %s failed: %s", operation, e)
        raise StorageUnavailableError(operation, details=str(e)) from e


class AzureTableDocumentStore(DocumentStore):
    """
    Durable, multi-client document store on Azure Table + Blob Storage.

    Args:
        connection_string: Azure Storage account connection string.
        processed_table_name: Table holding one entity per document.
        company_table_name: Table holding one entity per company.
        blob_container_name: Container for extracted filing text.
        auto_create_tables: Create tables/container on ``initialize()``.
        timeout_seconds: Connection and read timeout for every call.
        table_service: Pre-built ``TableServiceClient`` (tests, custom
                       credentials). Built from the connection string if None.
        blob_service: Pre-built ``BlobServiceClient``.
    """

    def __init__(
        self,
        connection_string: str = "",
        processed_table_name: str = DEFAULT_PROCESSED_TABLE,
        company_table_name: str = DEFAULT_COMPANY_TABLE,
        blob_container_name: str = DEFAULT_BLOB_CONTAINER,
        auto_create_tables: bool = True,
        timeout_seconds: float = DEFAULT_STORAGE_TIMEOUT_SECONDS,
        table_service: Optional[TableServiceClient] = None,
        blob_service: Optional[BlobServiceClient] = None,
    ) -> None:
        self._connection_string = connection_string
        self._processed_table_name = processed_table_name
        self._company_table_name = company_table_name
        self._blob_container_name = blob_container_name
        self._auto_create = auto_create_tables
        self._timeout = timeout_seconds
        self._table_service = table_service
        self._blob_service = blob_service
        self._documents: Any = None
        self._companies: Any = None
        self._container: Any = None

    @property
    def storage_type(self) -> str:
        return "Azure Table Storage"

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        if self._table_service is None or self._blob_service is None:
            if not self._connection_string:
                raise StorageUnavailableError(
                    "initialize",
                    details="Azure connection string is required (STORAGE_AZURE_CONNECTION_STRING)",
                )
            try:
                self._table_service = self._table_service or TableServiceClient.from_connection_string(
                    self._connection_string,
                    connection_timeout=self._timeout,
                    read_timeout=self._timeout,
                )
                self._blob_service = self._blob_service or BlobServiceClient.from_connection_string(
                    self._connection_string,
                    connection_timeout=self._timeout,
                    read_timeout=self._timeout,
                )
            except ValueError as e:
                # Malformed connection strings are rejected before any I/O.
                raise StorageUnavailableError("initialize", details=str(e)) from e

        with _azure_errors("initialize"):
            if self._auto_create:
                self._documents = self._table_service.create_table_if_not_exists(
                    self._processed_table_name
                )
                self._companies = self._table_service.create_table_if_not_exists(
                    self._company_table_name
                )
                self._container = self._blob_service.get_container_client(
                    self._blob_container_name
                )
                try:
                    self._container.create_container()
                    logger.info("Created blob container: %s", self._blob_container_name)
                except ResourceExistsError:
                    pass
            else:
                self._documents = self._table_service.get_table_client(
                    self._processed_table_name
                )
                self._companies = self._table_service.get_table_client(
                    self._company_table_name
                )
                self._container = self._blob_service.get_container_client(
                    self._blob_container_name
                )

        logger.info(
            "Azure storage initialised (tables: %s, %s; container: %s)",
            self._processed_table_name,
            self._company_table_name,
            self._blob_container_name,
        )

    def _require(self, operation: str) -> None:
        if self._documents is None:
            raise StorageUnavailableError(operation, details="Azure storage not initialised")

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def track_document(
        self,
        company_name: str,
        form: str,
        filing_date: date,
        url: str,
    ) -> None:
        self._require("track_document")
        record = DocumentRecord.discovered(company_name, form, filing_date, url)

        with _azure_errors("track_document"):
            try:
                self._documents.create_entity(entity=record_to_entity(record))
            except ResourceExistsError:
                # The company write of an earlier call may have failed after
                # the document insert; register the stored record's company.
                existing = self._documents.get_entity(
                    partition_key=partition_key(record.id),
                    row_key=record.id,
                )
                self._companies.upsert_entity(
                    entity=company_entity(existing["CompanyName"]),
                    mode=UpdateMode.MERGE,
                )
                logger.debug("Document already tracked: %s", url)
                return

            self._companies.upsert_entity(
                entity=company_entity(company_name, last_tracked_at=record.tracked_at),
                mode=UpdateMode.MERGE,
            )

        logger.debug("Tracked new document: %s %s %s", company_name, form, url)

    def mark_processed(
        self,
        url: str,
        success: bool = True,
        error_message: Optional[str] = None,
    ) -> None:
        self._require("mark_processed")
        document_id = generate_document_id(url)

        with _azure_errors("mark_processed"):
            try:
                entity = self._documents.get_entity(
                    partition_key=partition_key(document_id),
                    row_key=document_id,
                )
            except ResourceNotFoundError:
                logger.warning("Document not found for processing: %s", url)
                return

            if entity.get("Processed"):
                logger.debug("Document already processed: %s", url)
                return

            updated = entity_to_record(entity).mark_processed(success, error_message)
            etag = getattr(entity, "metadata", {}).get("etag")
            try:
                self._documents.update_entity(
                    entity=record_to_entity(updated),
                    mode=UpdateMode.REPLACE,
                    etag=etag,
                    match_condition=MatchConditions.IfNotModified if etag else None,
                )
            except ResourceModifiedError:
                logger.debug("Document processed concurrently by another writer: %s", url)
                return

        logger.debug("Marked document as processed: %s (success=%s)", url, success)

    def save_content(self, url: str, content: str) -> None:
        self._require("save_content")
        document_id = generate_document_id(url)
        with _azure_errors("save_content"):
            self._container.upload_blob(
                name=f"{document_id}.txt",
                data=content.encode("utf-8"),
                overwrite=True,
            )

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def list_documents(self) -> list[DocumentRecord]:
        self._require("list_documents")
        with _azure_errors("list_documents"):
            records = [entity_to_record(e) for e in self._documents.list_entities()]
        # Table Storage returns key order; restore insertion order.
        return sorted(records, key=lambda r: r.tracked_at)

    def get_document(self, document_id: str) -> Optional[DocumentRecord]:
        self._require("get_document")
        with _azure_errors("get_document"):
            try:
                entity = self._documents.get_entity(
                    partition_key=partition_key(document_id),
                    row_key=document_id,
                )
            except ResourceNotFoundError:
                return None
        return entity_to_record(entity)

    def get_content(self, document_id: str) -> Optional[str]:
        self._require("get_content")
        with _azure_errors("get_content"):
            try:
                downloader = self._container.download_blob(f"{document_id}.txt")
            except ResourceNotFoundError:
                return None
            return downloader.readall().decode("utf-8")

    def get_unprocessed(self) -> list[DocumentRecord]:
        self._require("get_unprocessed")
        with _azure_errors("get_unprocessed"):
            entities = self._documents.query_entities(query_filter="Processed eq false")
            records = [entity_to_record(e) for e in entities]
        return sorted((r for r in records if not r.processed), key=lambda r: r.tracked_at)

    def query(
        self,
        document_filter: DocumentFilter,
        skip: int = 0,
        take: Optional[int] = None,
    ) -> list[DocumentRecord]:
        return page_slice(order_records(self._filtered(document_filter, "query")), skip, take)

    def count(self, document_filter: DocumentFilter) -> int:
        return len(self._filtered(document_filter, "count"))

    def _filtered(self, document_filter: DocumentFilter, operation: str) -> list[DocumentRecord]:
        """Run the server-side filter, then apply the full filter locally."""
        self._require(operation)
        expression, parameters = build_query_filter(document_filter)
        with _azure_errors(operation):
            if expression:
                entities = self._documents.query_entities(
                    query_filter=expression,
                    parameters=parameters,
                )
            else:
                entities = self._documents.list_entities()
            records = [entity_to_record(e) for e in entities]
        records.sort(key=lambda r: r.tracked_at)
        return [r for r in records if document_filter.matches(r)]

    def list_companies(self) -> list[str]:
        """Company names recorded in the company tracking table."""
        self._require("list_companies")
        with _azure_errors("list_companies"):
            entities = self._companies.query_entities(
                query_filter="PartitionKey eq @pk",
                parameters={"pk": COMPANY_PARTITION},
            )
            return sorted((e["CompanyName"] for e in entities), key=str.casefold)

    def is_healthy(self) -> bool:
        if self._table_service is None or self._documents is None:
            return False
        try:
            self._table_service.get_service_properties()
            return True
        except Exception as e:  # noqa: BLE001
            logger.warning("Azure storage health check failed: %s", e)
            return False
