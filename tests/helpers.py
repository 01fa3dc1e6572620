"""
Shared test helper utilities for sec-filing-store tests.

Plain functions and classes (not pytest fixtures) that can be imported
directly by test modules. Kept separate from conftest.py because
conftest.py is for fixtures only — plain helpers must be in a regular
module to be importable via standard Python imports.

The ``Fake*`` classes stand in for the Azure SDK clients. They keep
entities in dicts and mimic the behaviour the store relies on: ETags
that change on every write, ``ResourceExistsError`` on duplicate
inserts, ``ResourceNotFoundError`` on missing keys and
``ResourceModifiedError`` on a stale conditional update.
"""

from datetime import date, timedelta
from typing import Any, Optional

from azure.core.exceptions import (
    ResourceExistsError,
    ResourceModifiedError,
    ResourceNotFoundError,
)

from sec_filing_store.core.types import DocumentRecord
from sec_filing_store.storage.base import DocumentStore


def filing_url(company: str = "apple", n: int = 0, form: str = "10-K") -> str:
    """A unique, realistic-looking EDGAR URL."""
    slug = company.lower().replace(" ", "-").replace(".", "")
    form_slug = form.lower().replace("/", "")
    return f"https://www.sec.gov/Archives/edgar/data/{slug}/{form_slug}-{n:04d}.htm"


def make_record(
    *,
    company_name: str = "Apple Inc.",
    form: str = "10-K",
    filing_date: date = date(2024, 11, 1),
    url: Optional[str] = None,
    processed: bool = False,
    success: bool = True,
    error_message: Optional[str] = None,
) -> DocumentRecord:
    """
    Factory for DocumentRecord instances with sensible defaults.

    Not a fixture — accepts parameters so tests can create records with
    different values.
    """
    record = DocumentRecord.discovered(
        company_name,
        form,
        filing_date,
        url or filing_url(company_name, filing_date.toordinal(), form),
    )
    if processed:
        record = record.mark_processed(success, error_message)
    return record


def track_many(
    store: DocumentStore,
    count: int,
    company_name: str = "Apple Inc.",
    form: str = "10-K",
    first_date: date = date(2020, 1, 1),
) -> list[str]:
    """Track ``count`` filings on consecutive days. Returns their URLs."""
    urls = []
    for i in range(count):
        url = filing_url(company_name, i, form)
        store.track_document(company_name, form, first_date + timedelta(days=i), url)
        urls.append(url)
    return urls


# ---------------------------------------------------------------------------
# Azure SDK fakes
# ---------------------------------------------------------------------------


class FakeEntity(dict):
    """A dict with a ``metadata`` attribute, like ``azure.data.tables.TableEntity``."""

    def __init__(self, data: dict[str, Any], etag: Optional[str] = None) -> None:
        super().__init__(data)
        self.metadata = {"etag": etag}


class FakeTableClient:
    """In-memory stand-in for ``azure.data.tables.TableClient``."""

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name
        self.entities: dict[tuple[str, str], FakeEntity] = {}
        self.queries: list[tuple[str, Optional[dict[str, Any]]]] = []
        self._version = 0

    def _put(self, entity: dict[str, Any]) -> None:
        self._version += 1
        key = (entity["PartitionKey"], entity["RowKey"])
        self.entities[key] = FakeEntity(entity, etag=f'W/"{self._version}"')

    def _copy(self, entity: FakeEntity) -> FakeEntity:
        return FakeEntity(dict(entity), etag=entity.metadata["etag"])

    def create_entity(self, entity: dict[str, Any]) -> dict[str, Any]:
        if (entity["PartitionKey"], entity["RowKey"]) in self.entities:
            raise ResourceExistsError("The specified entity already exists.")
        self._put(entity)
        return {}

    def upsert_entity(self, entity: dict[str, Any], mode: Any = None) -> dict[str, Any]:
        key = (entity["PartitionKey"], entity["RowKey"])
        merged = dict(self.entities.get(key, {}))
        merged.update(entity)
        self._put(merged)
        return {}

    def update_entity(
        self,
        entity: dict[str, Any],
        mode: Any = None,
        etag: Optional[str] = None,
        match_condition: Any = None,
    ) -> dict[str, Any]:
        key = (entity["PartitionKey"], entity["RowKey"])
        current = self.entities.get(key)
        if current is None:
            raise ResourceNotFoundError("The specified resource does not exist.")
        if match_condition is not None and etag != current.metadata["etag"]:
            raise ResourceModifiedError("The update condition specified in the request was not satisfied.")
        self._put(entity)
        return {}

    def get_entity(self, partition_key: str, row_key: str) -> FakeEntity:
        try:
            return self._copy(self.entities[(partition_key, row_key)])
        except KeyError:
            raise ResourceNotFoundError("The specified resource does not exist.") from None

    def list_entities(self) -> list[FakeEntity]:
        return [self._copy(e) for e in self.entities.values()]

    def query_entities(
        self,
        query_filter: str,
        parameters: Optional[dict[str, Any]] = None,
    ) -> list[FakeEntity]:
        """
        Records the query and returns the matching entities.

        Only the ``Form eq @formN`` clauses are applied, case-sensitively
        like the service; the store re-filters everything else locally.
        """
        self.queries.append((query_filter, parameters))
        entities = self.list_entities()
        forms = {v for k, v in (parameters or {}).items() if k.startswith("form")}
        if forms:
            entities = [e for e in entities if e.get("Form") in forms]
        return entities


class FakeTableServiceClient:
    """In-memory stand-in for ``azure.data.tables.TableServiceClient``."""

    def __init__(self) -> None:
        self.tables: dict[str, FakeTableClient] = {}
        self.healthy = True

    def create_table_if_not_exists(self, table_name: str) -> FakeTableClient:
        return self.tables.setdefault(table_name, FakeTableClient(table_name))

    def get_table_client(self, table_name: str) -> FakeTableClient:
        return self.tables.setdefault(table_name, FakeTableClient(table_name))

    def get_service_properties(self) -> dict[str, Any]:
        if not self.healthy:
            raise ConnectionError("service unreachable")
        return {}


class _FakeDownloader:
    def __init__(self, data: bytes) -> None:
        self._data = data

    def readall(self) -> bytes:
        return self._data


class FakeContainerClient:
    """In-memory stand-in for ``azure.storage.blob.ContainerClient``."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.created = False
        self.blobs: dict[str, bytes] = {}

    def create_container(self) -> None:
        if self.created:
            raise ResourceExistsError("The specified container already exists.")
        self.created = True

    def upload_blob(self, name: str, data: bytes, overwrite: bool = False) -> None:
        if name in self.blobs and not overwrite:
            raise ResourceExistsError("The specified blob already exists.")
        self.blobs[name] = data

    def download_blob(self, name: str) -> _FakeDownloader:
        if name not in self.blobs:
            raise ResourceNotFoundError("The specified blob does not exist.")
        return _FakeDownloader(self.blobs[name])


class FakeBlobServiceClient:
    """In-memory stand-in for ``azure.storage.blob.BlobServiceClient``."""

    def __init__(self) -> None:
        self.containers: dict[str, FakeContainerClient] = {}

    def get_container_client(self, name: str) -> FakeContainerClient:
        return self.containers.setdefault(name, FakeContainerClient(name))
