"""
FastAPI middleware for request tracing and correlation.

Every request gets an id that is echoed in the X-Request-ID header and bound
into the structlog context, so all log events written while serving the
request carry it.
"""

from __future__ import annotations

import uuid
from typing import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add a request id to each HTTP request.

    An incoming X-Request-ID is reused so a front-end action can be traced
    end to end; otherwise a UUID is generated. The id is:
    1. Stored in request.state.request_id for route handlers
    2. Bound as ``request_id`` in the structlog contextvars for the request
    3. Returned in the X-Request-ID response header
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
