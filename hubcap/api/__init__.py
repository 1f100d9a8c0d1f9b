"""Hubcap API layer: routes, schemas, SSE framing and middleware."""

from hubcap.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from hubcap.api.routes import router
from hubcap.api.schemas import ErrorResponse, HealthResponse
from hubcap.api.sse import format_sse, sse_response

__all__ = [
    "ErrorHandlingMiddleware",
    "ErrorResponse",
    "HealthResponse",
    "RequestLoggingMiddleware",
    "configure_cors",
    "format_sse",
    "router",
    "sse_response",
]
