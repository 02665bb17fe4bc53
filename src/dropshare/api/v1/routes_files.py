"""File catalog API routes."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from dropshare.api.dependencies import get_services
from dropshare.core.exceptions import NotFoundError, ValidationError
from dropshare.models.share import ShareFileRequest
from dropshare.services import Services
from dropshare.storage.file_store import FileRecord

router = APIRouter(prefix="/api/v1/files", tags=["files"])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[FileRecord])
async def list_files(
    q: str = "",
    category: str = "all",
    services: Services = Depends(get_services),
) -> List[FileRecord]:
    """List catalog records, optionally searched by name and filtered by type."""
    try:
        return services.file_store.search_and_filter(q, category)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{record_id}", response_model=FileRecord)
async def get_file(record_id: int, services: Services = Depends(get_services)) -> FileRecord:
    record = services.file_store.get(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="File record not found")
    return record


@router.delete("/{record_id}", status_code=204)
async def delete_file(record_id: int, services: Services = Depends(get_services)) -> Response:
    try:
        services.file_store.delete(record_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@router.post("/{record_id}/reupload", response_model=FileRecord, status_code=201)
async def reupload_file(record_id: int, services: Services = Depends(get_services)) -> FileRecord:
    """Create a new pending record cloned from an existing one."""
    try:
        return services.file_store.re_upload(record_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{record_id}/share", response_model=FileRecord)
async def share_file(
    record_id: int,
    request: Optional[ShareFileRequest] = None,
    services: Services = Depends(get_services),
) -> FileRecord:
    request = request or ShareFileRequest()
    try:
        return services.file_store.share(record_id, request.expiry_days)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{record_id}/share", response_model=FileRecord)
async def unshare_file(record_id: int, services: Services = Depends(get_services)) -> FileRecord:
    try:
        return services.file_store.unshare(record_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
