"""
GardenGrid Backend — Request Logging Middleware
=================================================

What:  One access-log line per request: method, path, query, status,
       duration, request id.
Who:   Logger "gardengrid.access".

Level by status:
    5xx → ERROR, 4xx → WARNING (rejected placements show up here), else INFO.

Request bodies are never logged. /health is skipped.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from gardengrid.middleware.request_id import request_id_var

logger = logging.getLogger("gardengrid.access")

_QUIET_PATHS = frozenset({"/health"})


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in _QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        rid = request_id_var.get("")
        query = request.url.query
        status = response.status_code
        logger.log(
            _level_for(status),
            "%s %s%s %d %.1fms [%s]",
            request.method,
            path,
            f"?{query}" if query else "",
            status,
            duration_ms,
            rid,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
