"""
Request tracking middleware for logging correlation.
Provides request ID propagation and request/response logging.
"""

import logging
import time
import uuid
from collections.abc import Callable
from contextvars import ContextVar

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "x-request-id"

# Context variable for request ID
_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def generate_request_id() -> str:
    """Generate a short unique ID for request tracking."""
    return uuid.uuid4().hex[:12]


def get_request_id() -> str:
    """Get the current request ID or generate a new one."""
    request_id = _request_id.get()
    if request_id is None:
        request_id = generate_request_id()
        _request_id.set(request_id)
    return request_id


def set_request_id(request_id: str) -> None:
    """Set the request ID for the current context."""
    _request_id.set(request_id)


class RequestIdFilter(logging.Filter):
    """Logging filter that stamps the request ID onto log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind a request ID to the context and log each request's outcome.

    An incoming ``x-request-id`` header is honoured so callers can correlate
    their own logs; the ID is echoed back on the response.
    """

    def __init__(self, app, logger: logging.Logger | None = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("rentroll_backend.requests")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        set_request_id(request_id)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        self.logger.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration * 1000, 2),
                "client_ip": request.client.host if request.client else "unknown",
            },
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
