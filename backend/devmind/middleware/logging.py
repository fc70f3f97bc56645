"""
DevMind Backend — Request Logging Middleware
==============================================

What:  One access log line per HTTP request: method, path, status, duration.
Why:   AI calls dominate latency (seconds, not milliseconds); per-request
       durations are the first thing to check when the assistant feels slow.
How:   Times the downstream handler and logs at a level chosen by status.

What we log vs what we DON'T log (privacy):
    ✅ Log: method, path, status, duration, client IP, request ID
    ❌ Don't log: request bodies (note content, API keys entered in the
       provider settings screen), response bodies (AI output)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from devmind.middleware.request_id import request_id_var

logger = logging.getLogger("devmind.access")

# Probed every few seconds by Docker / load balancers
_QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    Typical durations:
        - GET /health, GET /api/providers: 1-5ms
        - POST /api/ai: 1000-8000ms (vendor call dominates)
        - POST /api/providers/{id}/validate: 200-1500ms (one vendor round trip)
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in _QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        rid = request_id_var.get("")
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
