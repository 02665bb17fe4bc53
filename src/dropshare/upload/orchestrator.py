"""Orchestrator for the in-session upload queue.

Owns the list of file entries and drives each pending entry through
``pending -> uploading -> completed | failed``. Entries are processed one
at a time; a failure on one entry never stops the rest of the batch.
"""

import asyncio
import logging
import random
import uuid
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Optional

from dropshare.core.config import settings
from dropshare.core.exceptions import (
    CompressionError,
    InvalidTransitionError,
    NotFoundError,
    UploadError,
    ValidationError,
)
from dropshare.core.logging import entry_id_context
from dropshare.core.runtime import default_random
from dropshare.files.classifier import format_file_size, matches_accepted_type
from dropshare.files.payload import RawFile
from dropshare.storage.file_store import FileRecordStore, RecordStatus
from dropshare.upload.compression import CompressionPipeline
from dropshare.upload.simulator import UploadSimulator

logger = logging.getLogger(__name__)


class EntryStatus(str, Enum):
    """Upload status of a session entry."""

    PENDING = "pending"
    UPLOADING = "uploading"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class FileEntry:
    """A file moving through the upload lifecycle."""

    id: str
    name: str
    size: int
    mime_type: str
    status: EntryStatus = EntryStatus.PENDING
    progress: int = 0
    source_payload: Optional[RawFile] = None
    last_modified: Optional[datetime] = None
    original_size: Optional[int] = None
    access_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    record_id: Optional[int] = None
    error: Optional[str] = None


ENTRY_FIELDS = {f.name for f in fields(FileEntry)}


@dataclass(frozen=True)
class RejectedFile:
    name: str
    reason: str


@dataclass
class AddFilesResult:
    """Outcome of adding files to the session."""

    accepted: List[FileEntry] = field(default_factory=list)
    rejected: List[RejectedFile] = field(default_factory=list)

    @property
    def accepted_count(self) -> int:
        return len(self.accepted)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)


@dataclass
class UploadBatchResult:
    """Entry ids by outcome for one upload_all call."""

    completed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class UploadStats:
    total: int
    pending: int
    uploading: int
    completed: int
    failed: int
    total_size: int
    total_size_display: str


class UploadOrchestrator:
    """Stateful owner of the session's file entries."""

    def __init__(
        self,
        compressor: CompressionPipeline,
        simulator: UploadSimulator,
        record_store: FileRecordStore | None = None,
        rng: random.Random | None = None,
        accepted_types: List[str] | None = None,
        max_size: int | None = None,
        default_quality: float | None = None,
    ):
        self.compressor = compressor
        self.simulator = simulator
        self.record_store = record_store
        self.rng = rng or default_random()
        self.accepted_types = accepted_types if accepted_types is not None else settings.accepted_upload_types
        self.max_size = max_size if max_size is not None else settings.max_upload_bytes
        self.default_quality = default_quality if default_quality is not None else settings.DEFAULT_COMPRESSION_QUALITY
        self._entries: List[FileEntry] = []

    @property
    def entries(self) -> List[FileEntry]:
        """Snapshot of the current entries."""
        return [replace(entry) for entry in self._entries]

    def get_entry(self, entry_id: str) -> Optional[FileEntry]:
        entry = self._find(entry_id)
        return replace(entry) if entry is not None else None

    def add_files(
        self,
        raw_files: Iterable[RawFile],
        accepted_types: List[str] | None = None,
        max_size: int | None = None,
    ) -> AddFilesResult:
        """Validate files and append the accepted ones as pending entries.

        Args:
            raw_files: Files in selection order
            accepted_types: MIME patterns (``image/*`` style wildcards allowed);
                defaults to the configured list, empty accepts everything
            max_size: Maximum size in bytes; defaults to the configured limit

        Returns:
            AddFilesResult with accepted entries and rejected files
        """
        accepted_types = self.accepted_types if accepted_types is None else accepted_types
        max_size = self.max_size if max_size is None else max_size
        result = AddFilesResult()

        for raw in raw_files:
            if raw.size > max_size:
                reason = f"{raw.name} is too large. Maximum size is {format_file_size(max_size)}"
            elif not matches_accepted_type(raw.mime_type, accepted_types):
                reason = f"{raw.name} is not a supported file type"
            else:
                entry = FileEntry(
                    id=self._new_entry_id(),
                    name=raw.name,
                    size=raw.size,
                    mime_type=raw.mime_type,
                    source_payload=raw,
                    last_modified=raw.last_modified,
                )
                self._entries.append(entry)
                result.accepted.append(replace(entry))
                continue

            logger.warning(f"File rejected: {reason}", extra={"file_name": raw.name, "size_bytes": raw.size})
            result.rejected.append(RejectedFile(name=raw.name, reason=reason))

        if result.accepted:
            logger.info(f"Added {result.accepted_count} file(s) to the upload queue")
        return result

    def update_entry(self, entry_id: str, **changes: Any) -> None:
        """Merge fields into an entry. Missing entries are ignored.

        Raises:
            ValueError: If a field name is not a FileEntry field
        """
        unknown = set(changes) - ENTRY_FIELDS
        if unknown:
            raise ValueError(f"Unknown entry fields: {', '.join(sorted(unknown))}")

        entry = self._find(entry_id)
        if entry is None:
            return
        for name, value in changes.items():
            setattr(entry, name, value)

    def remove_entry(self, entry_id: str) -> None:
        self._entries = [entry for entry in self._entries if entry.id != entry_id]

    def clear_all(self) -> None:
        """Drop every entry, including ones that are uploading."""
        self._entries = []
        logger.info("Cleared all files")

    def resubmit(self, entry_id: str) -> FileEntry:
        """Move a failed entry back to pending.

        Raises:
            NotFoundError: If the entry does not exist
            InvalidTransitionError: If the entry is not failed
        """
        entry = self._find(entry_id)
        if entry is None:
            raise NotFoundError(f"Upload entry {entry_id} not found")
        if entry.status is not EntryStatus.FAILED:
            raise InvalidTransitionError(
                f"Only failed entries can be resubmitted, entry {entry_id} is {entry.status.value}"
            )
        self.update_entry(entry_id, status=EntryStatus.PENDING, progress=0, error=None)
        return replace(entry)

    async def upload_all(
        self,
        compression_enabled: bool = False,
        compression_quality: float | None = None,
    ) -> UploadBatchResult:
        """Upload every pending entry, one after another.

        Args:
            compression_enabled: Compress each file before its transfer
            compression_quality: Quality factor in (0, 1]; defaults to the
                configured quality

        Returns:
            UploadBatchResult listing completed and failed entry ids

        Raises:
            ValidationError: If compression is enabled and the quality is
                outside (0, 1]; no entry changes state
        """
        quality = self.default_quality if compression_quality is None else compression_quality
        if compression_enabled and not 0 < quality <= 1:
            raise ValidationError(f"Compression quality must be in (0, 1], got {quality}")

        pending_ids = [entry.id for entry in self._entries if entry.status is EntryStatus.PENDING]
        result = UploadBatchResult()

        if not pending_ids:
            logger.info("No files to upload")
            return result

        logger.info(f"Uploading {len(pending_ids)} file(s)", extra={"compression_enabled": compression_enabled})

        for entry_id in pending_ids:
            if self._find(entry_id) is None:
                continue
            token = entry_id_context.set(entry_id)
            try:
                uploaded = await self._upload_entry(entry_id, compression_enabled, quality)
            except Exception as e:
                logger.error(f"Unexpected error while uploading entry {entry_id}: {e}", exc_info=True)
                self.update_entry(entry_id, status=EntryStatus.FAILED, progress=0, error=f"Unexpected error: {e}")
                uploaded = False
            finally:
                entry_id_context.reset(token)

            if uploaded:
                result.completed.append(entry_id)
            else:
                result.failed.append(entry_id)

        logger.info(
            f"Upload batch finished: {len(result.completed)} completed, {len(result.failed)} failed"
        )
        return result

    def stats(self) -> UploadStats:
        counts = {status: 0 for status in EntryStatus}
        for entry in self._entries:
            counts[entry.status] += 1
        total_size = sum(entry.size for entry in self._entries)
        return UploadStats(
            total=len(self._entries),
            pending=counts[EntryStatus.PENDING],
            uploading=counts[EntryStatus.UPLOADING],
            completed=counts[EntryStatus.COMPLETED],
            failed=counts[EntryStatus.FAILED],
            total_size=total_size,
            total_size_display=format_file_size(total_size),
        )

    async def _upload_entry(self, entry_id: str, compression_enabled: bool, quality: float) -> bool:
        entry = self._find(entry_id)
        payload = entry.source_payload or RawFile(name=entry.name, size=entry.size, mime_type=entry.mime_type)
        self.update_entry(entry_id, status=EntryStatus.UPLOADING, progress=0, error=None)

        if compression_enabled and self.compressor.is_compressible(payload):
            try:
                compressed = await asyncio.to_thread(self.compressor.compress, payload, quality)
            except CompressionError as e:
                logger.warning(f"Compression failed for {entry.name}: {e}")
                self.update_entry(entry_id, status=EntryStatus.FAILED, progress=0, error=str(e))
                return False

            if compressed is not payload:
                self.update_entry(
                    entry_id,
                    source_payload=compressed,
                    size=compressed.size,
                    original_size=payload.size,
                    last_modified=compressed.last_modified,
                )
                payload = compressed

        def on_progress(progress: int) -> None:
            self.update_entry(entry_id, progress=progress)

        try:
            upload = await self.simulator.upload(payload, on_progress)
        except UploadError as e:
            logger.warning(f"Failed to upload {entry.name}: {e}")
            self.update_entry(entry_id, status=EntryStatus.FAILED, progress=0, error=str(e))
            return False

        self.update_entry(
            entry_id,
            status=EntryStatus.COMPLETED,
            progress=100,
            access_url=upload.url,
            thumbnail_url=upload.thumbnail_url,
            source_payload=None,
        )
        logger.info(f"Uploaded {entry.name}", extra={"size_bytes": payload.size})

        if self.record_store is not None and self._find(entry_id) is not None:
            record = self.record_store.create(
                name=entry.name,
                size=payload.size,
                mime_type=entry.mime_type,
                status=RecordStatus.COMPLETED,
                progress=100,
                url=upload.url,
                thumbnail_url=upload.thumbnail_url,
            )
            self.update_entry(entry_id, record_id=record.id)

        return True

    def _find(self, entry_id: str) -> Optional[FileEntry]:
        return next((entry for entry in self._entries if entry.id == entry_id), None)

    def _new_entry_id(self) -> str:
        return str(uuid.UUID(int=self.rng.getrandbits(128), version=4))
