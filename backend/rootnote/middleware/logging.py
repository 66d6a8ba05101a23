"""
RootNote Backend — Request Logging Middleware
=============================================

What:  One access-log line per HTTP request on the `rootnote.access` logger.
How:   Measures time around the downstream app and logs method, path,
       status, duration, request ID and client address.
When:  Runs inside RequestIDMiddleware, so the request ID is already set.

Level by status:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Unhandled exceptions from a route are turned into the 500 error envelope
here rather than in Starlette's outermost error middleware, so the response
still gets an access-log line and an `X-Request-ID` header.

Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from rootnote.middleware.request_id import request_id_var
from rootnote.schemas.plant import ErrorResponse

logger = logging.getLogger("rootnote.access")

# Probed by container health checks every few seconds
_UNLOGGED_PATHS = frozenset({"/api/health"})


def unexpected_error_response(rid: str) -> JSONResponse:
    body = ErrorResponse(
        error="internal_server_error",
        message="An unexpected error occurred. Please try again.",
        request_id=rid,
    )
    return JSONResponse(status_code=500, content=body.model_dump())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs structured information about each HTTP request and response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                "[%s] Unexpected error on %s %s", rid, method, path, exc_info=True
            )
            response = unexpected_error_response(rid)

        if path in _UNLOGGED_PATHS:
            return response

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
