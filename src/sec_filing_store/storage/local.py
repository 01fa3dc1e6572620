"""
Local JSON file document store.

Persists two human-readable tables under ``local_data_path``:

    tracked-documents.json    — one entry per discovered filing
    processed-documents.json  — one entry per processing outcome
    content/<id>.txt          — extracted filing text

The files are loaded into memory on ``initialize()`` and every write is
flushed to disk immediately through a temp file + ``os.replace`` so a
crash never leaves a half-written table. A single lock serialises writers
within the process; if a flush fails the in-memory change is rolled back
before the error is raised.
"""

import json
import os
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

from sec_filing_store.config.constants import (
    CONTENT_DIRECTORY,
    DEFAULT_LOCAL_DATA_PATH,
    PROCESSED_DOCUMENTS_FILE,
    TRACKED_DOCUMENTS_FILE,
)
from sec_filing_store.core import (
    DocumentRecord,
    StorageUnavailableError,
    generate_document_id,
    get_logger,
)
from sec_filing_store.storage.base import DocumentStore

logger = get_logger(__name__)

_HEALTH_CHECK_FILE = "health_check.txt"


class LocalFileDocumentStore(DocumentStore):
    """
    Durable single-process document store backed by JSON files.

    Args:
        data_path: Directory holding the JSON tables. Created on
                   ``initialize()`` if missing.
    """

    def __init__(self, data_path: str = DEFAULT_LOCAL_DATA_PATH) -> None:
        self._data_path = Path(data_path)
        self._tracked_file = self._data_path / TRACKED_DOCUMENTS_FILE
        self._processed_file = self._data_path / PROCESSED_DOCUMENTS_FILE
        self._content_dir = self._data_path / CONTENT_DIRECTORY
        self._documents: dict[str, DocumentRecord] = {}
        self._lock = threading.RLock()
        self._loaded = False

    @property
    def storage_type(self) -> str:
        return "Local File Storage"

    @property
    def data_path(self) -> Path:
        return self._data_path

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Create the data directory and tables if needed, then load them."""
        with self._lock:
            try:
                self._content_dir.mkdir(parents=True, exist_ok=True)
                for path in (self._tracked_file, self._processed_file):
                    if not path.exists():
                        self._write_json(path, [])
                        logger.info("Created tracking file: %s", path)
            except OSError as e:
                logger.error("Failed to initialise local storage at %s", self._data_path)
                raise StorageUnavailableError("initialize", details=str(e)) from e

            self._documents = self._load()
            self._loaded = True

        logger.info(
            "Local file storage initialised: %s (%d documents)",
            self._data_path,
            len(self._documents),
        )

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.initialize()

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
        record = DocumentRecord.discovered(company_name, form, filing_date, url)
        with self._lock:
            self._ensure_loaded()
            if record.id in self._documents:
                logger.debug("Document already tracked: %s", url)
                return

            self._documents[record.id] = record
            try:
                self._write_json(self._tracked_file, self._tracked_rows())
            except OSError as e:
                del self._documents[record.id]
                logger.error("Failed to track document: %s", url)
                raise StorageUnavailableError("track_document", details=str(e)) from e

        logger.debug("Tracked new document: %s %s %s", company_name, form, url)

    def mark_processed(
        self,
        url: str,
        success: bool = True,
        error_message: Optional[str] = None,
    ) -> None:
        document_id = generate_document_id(url)
        with self._lock:
            self._ensure_loaded()
            record = self._documents.get(document_id)
            if record is None:
                logger.warning("Document not found for processing: %s", url)
                return
            if record.processed:
                logger.debug("Document already processed: %s", url)
                return

            self._documents[document_id] = record.mark_processed(success, error_message)
            try:
                self._write_json(self._processed_file, self._processed_rows())
            except OSError as e:
                self._documents[document_id] = record
                logger.error("Failed to mark document as processed: %s", url)
                raise StorageUnavailableError("mark_processed", details=str(e)) from e

        logger.debug("Marked document as processed: %s (success=%s)", url, success)

    def save_content(self, url: str, content: str) -> None:
        document_id = generate_document_id(url)
        with self._lock:
            self._ensure_loaded()
            try:
                self._write_text(self._content_dir / f"{document_id}.txt", content)
            except OSError as e:
                raise StorageUnavailableError("save_content", details=str(e)) from e

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def list_documents(self) -> list[DocumentRecord]:
        with self._lock:
            self._ensure_loaded()
            return list(self._documents.values())

    def get_document(self, document_id: str) -> Optional[DocumentRecord]:
        with self._lock:
            self._ensure_loaded()
            return self._documents.get(document_id)

    def get_content(self, document_id: str) -> Optional[str]:
        path = self._content_dir / f"{document_id}.txt"
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageUnavailableError("get_content", details=str(e)) from e

    def is_healthy(self) -> bool:
        try:
            if not (self._tracked_file.exists() and self._processed_file.exists()):
                return False
            probe = self._data_path / _HEALTH_CHECK_FILE
            probe.write_text("health_check", encoding="utf-8")
            content = probe.read_text(encoding="utf-8")
            probe.unlink()
            return content == "health_check"
        except OSError:
            return False

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def _tracked_rows(self) -> list[dict[str, Any]]:
        return [
            {
                "id": r.id,
                "companyName": r.company_name,
                "form": r.form,
                "filingDate": r.filing_date.isoformat(),
                "url": r.url,
                "trackedAt": r.tracked_at.isoformat(),
            }
            for r in self._documents.values()
        ]

    def _processed_rows(self) -> list[dict[str, Any]]:
        return [
            {
                "id": r.id,
                "url": r.url,
                "success": r.success,
                "errorMessage": r.error_message,
                "processedDate": r.processed_date.isoformat() if r.processed_date else None,
            }
            for r in self._documents.values()
            if r.processed
        ]

    def _load(self) -> dict[str, DocumentRecord]:
        """Join the two tables back into records, keeping file order."""
        try:
            tracked = self._read_json(self._tracked_file)
            processed = {row["id"]: row for row in self._read_json(self._processed_file)}
            documents: dict[str, DocumentRecord] = {}
            for row in tracked:
                record = DocumentRecord(
                    id=row["id"],
                    company_name=row["companyName"],
                    form=row["form"],
                    filing_date=date.fromisoformat(row["filingDate"]),
                    url=row["url"],
                    tracked_at=datetime.fromisoformat(row["trackedAt"]),
                )
                outcome = processed.get(record.id)
                if outcome is not None:
                    processed_date = outcome.get("processedDate")
                    record = record.mark_processed(
                        success=bool(outcome["success"]),
                        error_message=outcome.get("errorMessage"),
                        processed_date=(
                            datetime.fromisoformat(processed_date) if processed_date else None
                        ),
                    )
                documents[record.id] = record
            return documents
        except (OSError, ValueError, KeyError, TypeError) as e:
            # json.JSONDecodeError is a ValueError subclass.
            logger.error("Failed to load local storage from %s", self._data_path)
            raise StorageUnavailableError("initialize", details=str(e)) from e

    @staticmethod
    def _read_json(path: Path) -> list[dict[str, Any]]:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"{path.name} must contain a JSON array")
        return data

    @classmethod
    def _write_json(cls, path: Path, rows: list[dict[str, Any]]) -> None:
        cls._write_text(path, json.dumps(rows, indent=2, ensure_ascii=False))

    @staticmethod
    def _write_text(path: Path, text: str) -> None:
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, path)
