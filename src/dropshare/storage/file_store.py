"""Catalog of uploaded files."""

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from dropshare.core.exceptions import NotFoundError
from dropshare.core.runtime import Clock, SystemClock
from dropshare.files.classifier import category_from_filter, classify_mime_type
from dropshare.storage.base import RecordBackend
from dropshare.storage.memory import MemoryBackend

logger = logging.getLogger(__name__)


class RecordStatus(str, Enum):
    """Upload status mirrored onto catalog records."""

    PENDING = "pending"
    UPLOADING = "uploading"
    COMPLETED = "completed"
    FAILED = "failed"


class FileRecord(BaseModel):
    """Catalog entry for an uploaded file.

    Share fields are always present; an unshared record has
    ``shared=False`` and null ``shared_at`` / ``expires_at``.
    """

    model_config = ConfigDict(extra="forbid")

    id: int = Field(..., description="Store-assigned record id")
    name: str
    size: int = Field(..., ge=0)
    mime_type: str
    uploaded_at: datetime
    status: RecordStatus = RecordStatus.PENDING
    progress: int = Field(0, ge=0, le=100)
    url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    shared: bool = False
    shared_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class FileRecordStore:
    """CRUD, search and share flags over file records."""

    def __init__(self, backend: RecordBackend | None = None, clock: Clock | None = None):
        self.backend = backend or MemoryBackend()
        self.clock = clock or SystemClock()

    def list(self) -> List[FileRecord]:
        """All records in insertion order."""
        return [FileRecord.model_validate(row) for row in self.backend.list_rows()]

    def get(self, record_id: int) -> Optional[FileRecord]:
        row = self.backend.get_row(record_id)
        return FileRecord.model_validate(row) if row is not None else None

    def get_or_raise(self, record_id: int) -> FileRecord:
        record = self.get(record_id)
        if record is None:
            raise NotFoundError(f"File record {record_id} not found")
        return record

    def create(self, **fields: Any) -> FileRecord:
        """Create a record.

        ``uploaded_at`` is always set to now; ``status`` defaults to
        pending and ``progress`` to 0 unless given.
        """
        fields.pop("id", None)
        row = {"status": RecordStatus.PENDING, "progress": 0, **fields, "id": 0, "uploaded_at": self.clock.now()}
        # Validate before inserting so a bad payload never reaches the backend
        draft = FileRecord.model_validate(row)
        stored = self.backend.insert_row(draft.model_dump(mode="json", exclude={"id"}))
        record = FileRecord.model_validate(stored)

        logger.info(
            f"File record created: id={record.id}, name={record.name}, status={record.status.value}"
        )
        return record

    def update(self, record_id: int, **fields: Any) -> FileRecord:
        """Merge fields into a record. The id cannot be changed.

        Raises:
            NotFoundError: If the record does not exist
        """
        fields.pop("id", None)
        current = self.get_or_raise(record_id)
        merged = FileRecord.model_validate({**current.model_dump(), **fields})
        stored = self.backend.update_row(record_id, merged.model_dump(mode="json"))
        if stored is None:
            raise NotFoundError(f"File record {record_id} not found")
        return FileRecord.model_validate(stored)

    def delete(self, record_id: int) -> None:
        if not self.backend.delete_row(record_id):
            raise NotFoundError(f"File record {record_id} not found")
        logger.info(f"File record deleted: id={record_id}")

    def delete_all(self) -> None:
        self.backend.clear()
        logger.info("All file records deleted")

    def re_upload(self, record_id: int) -> FileRecord:
        """Clone a record as a brand-new pending record.

        The original record is left untouched.

        Raises:
            NotFoundError: If the record does not exist
        """
        original = self.get_or_raise(record_id)
        fields = original.model_dump(exclude={"id", "uploaded_at"})
        fields.update(status=RecordStatus.PENDING, progress=0)
        record = self.create(**fields)
        logger.info(f"File record {record_id} re-uploaded as {record.id}")
        return record

    def search(self, term: str) -> List[FileRecord]:
        """Case-insensitive substring match on name."""
        return self._search(self.list(), term)

    def filter_by_type(self, category: str) -> List[FileRecord]:
        """Filter by catalog category (images, documents, spreadsheets, pdfs, all)."""
        return self._filter(self.list(), category)

    def search_and_filter(self, term: str = "", category: str = "all") -> List[FileRecord]:
        return self._filter(self._search(self.list(), term), category)

    def share(self, record_id: int, expiry_days: float | None) -> FileRecord:
        """Flag a record as shared, optionally with an expiry."""
        now = self.clock.now()
        expires_at = now + timedelta(days=expiry_days) if expiry_days is not None else None
        return self.update(record_id, shared=True, shared_at=now, expires_at=expires_at)

    def unshare(self, record_id: int) -> FileRecord:
        return self.update(record_id, shared=False, shared_at=None, expires_at=None)

    @staticmethod
    def _search(records: List[FileRecord], term: str) -> List[FileRecord]:
        needle = term.lower()
        if not needle:
            return records
        return [r for r in records if needle in r.name.lower()]

    @staticmethod
    def _filter(records: List[FileRecord], category: str) -> List[FileRecord]:
        wanted = category_from_filter(category)
        if wanted is None:
            return records
        return [r for r in records if classify_mime_type(r.mime_type) is wanted]
