"""File catalog and share link API data models."""

from typing import Optional

from pydantic import BaseModel, Field

from dropshare.storage.file_store import FileRecord
from dropshare.storage.share_registry import ShareLink


class ShareFileRequest(BaseModel):
    """Request model for flagging a record as shared."""

    expiry_days: Optional[float] = Field(None, gt=0)


class CreateLinkRequest(BaseModel):
    """Request model for generating a share link.

    ``expiry_days`` of null means the link never expires.
    """

    file_id: int
    expiry_days: Optional[float] = Field(None, gt=0)


class RevokeLinkRequest(BaseModel):
    link: str = Field(..., min_length=1, description="Share URL or bare token")


class CleanupResponse(BaseModel):
    cleaned_count: int


class SharedFileResponse(BaseModel):
    """Resolved share link with the record it points at, if it still exists."""

    link: ShareLink
    file: Optional[FileRecord] = None
