"""
DevMind Backend — Request ID Middleware
=========================================

What:  Assigns a correlation ID to each incoming request and returns it
       in the X-Request-ID response header.
Why:   One AI request produces log lines in the route, the facade and the
       adapter; a shared ID ties them together. Error responses carry the
       same ID so a user report can be matched to server logs.
How:   Reuses the client's X-Request-ID when present, otherwise generates a
       short UUID; stores it in a ContextVar for loggers and handlers.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID header if sent (frontend tracing)
        2. Otherwise generate an 8-char UUID prefix
        3. Store in request_id_var and request.state.request_id
        4. Echo it back in the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
