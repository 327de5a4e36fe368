"""
Notebook API - Access Logging Middleware
========================================

What:  Writes one line to the `notebook_api.access` logger per request:
       method, path, status, elapsed time, request id, client address.
Who:   Wraps every route except the health probe. Sits inside
       RequestIDMiddleware, so request_id_var is already populated.

Levels:
    5xx (or an exception escaping the app) → ERROR
    4xx → WARNING
    anything else → INFO

Bodies are never logged; notes can hold arbitrary user text.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notebook_api.middleware.request_id import request_id_var

logger = logging.getLogger("notebook_api.access")

QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log with timing; see module docstring for level rules."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._emit(request, 500, started)
            raise

        self._emit(request, response.status_code, started)
        return response

    @staticmethod
    def _emit(request: Request, status: int, started: float) -> None:
        elapsed_ms = (time.perf_counter() - started) * 1000
        client = request.client.host if request.client else "-"
        rid = request_id_var.get()

        logger.log(
            level_for_status(status),
            "%s %s -> %d in %.1fms (rid=%s, client=%s)",
            request.method,
            request.url.path,
            status,
            elapsed_ms,
            rid,
            client,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(elapsed_ms, 2),
                "client_ip": client,
            },
        )
