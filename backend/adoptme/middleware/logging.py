"""
AdoptMe Backend — Access Logging Middleware
=============================================

What:  One access-log line per request: method, path, status, duration.
Who:   Registered in create_app(); runs inside RequestIDMiddleware so the
       request id is already set when the line is written.

Level by status class:
    5xx → ERROR, 4xx → WARNING, everything else → INFO.
Pet payloads are never logged, only the route that carried them.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

access_logger = logging.getLogger("adoptme.access")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes an access line for every API and page request."""

    # Polled by monitors or fetched once per page load
    QUIET_PREFIXES = ("/health", "/static/")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path.startswith(self.QUIET_PREFIXES):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        route = request.url.path
        if request.url.query:
            route = f"{route}?{request.url.query}"

        access_logger.log(
            level_for_status(response.status_code),
            "%s %s → %d (%.1fms)",
            request.method,
            route,
            response.status_code,
            elapsed_ms,
        )
        return response
