"""Upload queue API routes."""

import logging
from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile

from dropshare.api.dependencies import get_services
from dropshare.core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from dropshare.files.payload import RawFile
from dropshare.models.upload import (
    AddFilesResponse,
    EntryResponse,
    RejectedFileResponse,
    UploadAllRequest,
    UploadAllResponse,
    UploadStatsResponse,
)
from dropshare.services import Services

router = APIRouter(prefix="/api/v1/uploads", tags=["upload"])
logger = logging.getLogger(__name__)


@router.post("", response_model=AddFilesResponse, status_code=201)
async def add_files(
    files: List[UploadFile] = File(...),
    services: Services = Depends(get_services),
) -> AddFilesResponse:
    """Queue files for upload. Oversized or disallowed files are rejected."""
    raw_files = []
    for upload in files:
        data = await upload.read()
        raw_files.append(
            RawFile.from_bytes(
                name=upload.filename or "unnamed",
                mime_type=upload.content_type or "application/octet-stream",
                data=data,
            )
        )

    result = services.orchestrator.add_files(raw_files)
    return AddFilesResponse(
        accepted=[EntryResponse.from_entry(entry) for entry in result.accepted],
        rejected=[RejectedFileResponse(name=r.name, reason=r.reason) for r in result.rejected],
    )


@router.get("", response_model=List[EntryResponse])
async def list_entries(services: Services = Depends(get_services)) -> List[EntryResponse]:
    return [EntryResponse.from_entry(entry) for entry in services.orchestrator.entries]


@router.get("/stats", response_model=UploadStatsResponse)
async def upload_stats(services: Services = Depends(get_services)) -> UploadStatsResponse:
    stats = services.orchestrator.stats()
    return UploadStatsResponse(**asdict(stats))


@router.post("/run", response_model=UploadAllResponse)
async def upload_all(
    request: Optional[UploadAllRequest] = None,
    services: Services = Depends(get_services),
) -> UploadAllResponse:
    """Upload every pending entry sequentially."""
    request = request or UploadAllRequest()
    try:
        result = await services.orchestrator.upload_all(
            compression_enabled=request.compression_enabled,
            compression_quality=request.compression_quality,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return UploadAllResponse(completed=result.completed, failed=result.failed)


@router.post("/{entry_id}/retry", response_model=EntryResponse)
async def retry_entry(entry_id: str, services: Services = Depends(get_services)) -> EntryResponse:
    """Move a failed entry back to pending."""
    try:
        entry = services.orchestrator.resubmit(entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))

    logger.info(f"Upload entry resubmitted: entry_id={entry_id}")
    return EntryResponse.from_entry(entry)


@router.delete("/{entry_id}", status_code=204)
async def remove_entry(entry_id: str, services: Services = Depends(get_services)) -> Response:
    services.orchestrator.remove_entry(entry_id)
    return Response(status_code=204)


@router.delete("", status_code=204)
async def clear_entries(services: Services = Depends(get_services)) -> Response:
    services.orchestrator.clear_all()
    return Response(status_code=204)
