"""Share link API routes."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from dropshare.api.dependencies import get_services
from dropshare.core.config import settings
from dropshare.core.exceptions import ExpiredError, NotFoundError
from dropshare.models.share import (
    CleanupResponse,
    CreateLinkRequest,
    RevokeLinkRequest,
    SharedFileResponse,
)
from dropshare.services import Services
from dropshare.storage.share_registry import ShareLink

router = APIRouter(prefix="/api/v1/shares", tags=["share"])
public_router = APIRouter(tags=["share"])
logger = logging.getLogger(__name__)


@router.post("", response_model=ShareLink, status_code=201)
async def create_link(request: CreateLinkRequest, services: Services = Depends(get_services)) -> ShareLink:
    """Generate a share link for a catalog record.

    Omitting ``expiry_days`` uses the configured default; an explicit
    null creates a link that never expires.
    """
    record = services.file_store.get(request.file_id)
    if record is None:
        raise HTTPException(status_code=404, detail="File record not found")

    if "expiry_days" in request.model_fields_set:
        expiry_days = request.expiry_days
    else:
        expiry_days = settings.DEFAULT_SHARE_EXPIRY_DAYS

    return services.share_registry.generate_link(record.id, record.name, expiry_days)


@router.get("", response_model=List[ShareLink])
async def list_links(
    file_id: Optional[int] = None,
    services: Services = Depends(get_services),
) -> List[ShareLink]:
    if file_id is not None:
        return services.share_registry.list_active_for_record(file_id)
    return services.share_registry.list_active()


@router.post("/revoke", response_model=ShareLink)
async def revoke_link(request: RevokeLinkRequest, services: Services = Depends(get_services)) -> ShareLink:
    try:
        return services.share_registry.revoke_link(request.link)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/cleanup", response_model=CleanupResponse)
async def cleanup_links(services: Services = Depends(get_services)) -> CleanupResponse:
    """Purge expired links. Meant to be called by an external scheduler."""
    return CleanupResponse(cleaned_count=services.share_registry.cleanup_expired())


@router.delete("/{link_id}", status_code=204)
async def delete_link(link_id: int, services: Services = Depends(get_services)) -> Response:
    try:
        services.share_registry.delete_link(link_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@public_router.get("/shared/{token}", response_model=SharedFileResponse)
async def open_shared_link(token: str, services: Services = Depends(get_services)) -> SharedFileResponse:
    """Resolve a share token.

    The referenced record may have been deleted since the link was made;
    the link still resolves and ``file`` is null.
    """
    try:
        link = services.share_registry.get_by_token(token)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ExpiredError as e:
        raise HTTPException(status_code=410, detail=str(e))

    return SharedFileResponse(link=link, file=services.file_store.get(link.file_record_id))
