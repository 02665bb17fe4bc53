"""Request logging middleware."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from dropshare.core.config import settings

logger = logging.getLogger(__name__)


def redact_share_token(path: str) -> str:
    """Hide the token of a public share URL path.

    >>> redact_share_token("/shared/AbC123")
    '/shared/***'
    """
    prefix = "/" + settings.SHARE_PATH_PREFIX.strip("/") + "/"
    if path.startswith(prefix) and len(path) > len(prefix):
        return prefix + "***"
    return path


class HTTPErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every non-2xx/3xx response.

    4xx go out at WARNING and 5xx at ERROR, with share tokens redacted
    from the path.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        status = response.status_code

        if status < 400:
            return response

        details = {
            "http_status": status,
            "method": request.method,
            "path": redact_share_token(request.url.path),
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            "client": request.client.host if request.client else None,
        }
        if status >= 500:
            logger.error(f"{request.method} {details['path']} failed with {status}", extra=details)
        else:
            logger.warning(f"{request.method} {details['path']} returned {status}", extra=details)

        return response
