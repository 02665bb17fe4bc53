"""Upload API data models."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from dropshare.upload.orchestrator import FileEntry


class EntryResponse(BaseModel):
    """Response model for a session upload entry."""

    id: str
    name: str
    size: int
    mime_type: str
    status: str
    progress: int
    original_size: Optional[int] = None
    access_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    record_id: Optional[int] = None
    error: Optional[str] = None
    last_modified: Optional[datetime] = None

    @classmethod
    def from_entry(cls, entry: FileEntry) -> "EntryResponse":
        return cls(
            id=entry.id,
            name=entry.name,
            size=entry.size,
            mime_type=entry.mime_type,
            status=entry.status.value,
            progress=entry.progress,
            original_size=entry.original_size,
            access_url=entry.access_url,
            thumbnail_url=entry.thumbnail_url,
            record_id=entry.record_id,
            error=entry.error,
            last_modified=entry.last_modified,
        )


class RejectedFileResponse(BaseModel):
    name: str
    reason: str


class AddFilesResponse(BaseModel):
    """Response model for adding files to the queue."""

    accepted: List[EntryResponse]
    rejected: List[RejectedFileResponse]


class UploadAllRequest(BaseModel):
    """Request model for running the upload queue."""

    compression_enabled: bool = False
    compression_quality: Optional[float] = Field(None, gt=0, le=1)


class UploadAllResponse(BaseModel):
    completed: List[str]
    failed: List[str]


class UploadStatsResponse(BaseModel):
    total: int
    pending: int
    uploading: int
    completed: int
    failed: int
    total_size: int
    total_size_display: str
