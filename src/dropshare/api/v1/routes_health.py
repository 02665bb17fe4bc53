"""Health check endpoint for DropShare."""

from fastapi import APIRouter

from dropshare.core.config import settings

router = APIRouter()


@router.get("/health")
async def health_check() -> dict:
    """Report service identity and the configured record storage."""
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "storage_backend": settings.STORAGE_BACKEND,
    }
