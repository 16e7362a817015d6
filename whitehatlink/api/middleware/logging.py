"""Request logging middleware with request-scoped structlog context."""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from structlog.contextvars import bind_contextvars, clear_contextvars

from whitehatlink.api.middleware.rate_limit import get_client_ip

log = structlog.get_logger()

QUIET_PATHS = {"/api/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all HTTP requests with structured metadata.

    - Logs method, path, status_code, duration_ms, client_ip, request_id
    - Skips the health check endpoint to reduce noise
    - Never binds headers or bodies (form submissions carry personal data)
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        clear_contextvars()

        bind_contextvars(
            request_id=str(uuid.uuid4()),
            method=request.method,
            path=request.url.path,
            client_ip=get_client_ip(request),
        )

        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - start_time) * 1000)

        log.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        return response
