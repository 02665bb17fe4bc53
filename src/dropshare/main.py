"""Main application entrypoint for DropShare."""

from fastapi import FastAPI

from dropshare.api.middleware import HTTPErrorLoggingMiddleware
from dropshare.api.v1 import routes_health
from dropshare.api.v1.routes_files import router as files_router
from dropshare.api.v1.routes_share import public_router as shared_router, router as share_router
from dropshare.api.v1.routes_upload import router as upload_router
from dropshare.core.config import settings
from dropshare.core.logging import setup_logging
from dropshare.services import Services, build_services


def create_app(services: Services | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        services: Pre-built services, mainly for tests; built from
            settings when omitted

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    setup_logging()

    app = FastAPI(
        title=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
    )
    app.state.services = services or build_services()

    app.add_middleware(HTTPErrorLoggingMiddleware)

    app.include_router(routes_health.router, tags=["health"])
    app.include_router(upload_router)
    app.include_router(files_router)
    app.include_router(share_router)
    app.include_router(shared_router)

    return app


# Export app instance for ASGI servers
app = create_app()
