"""Middleware package."""

from taskboard.api.middleware.request_id import RequestIdMiddleware, get_request_id
from taskboard.api.middleware.logging import LoggingMiddleware

__all__ = [
    "RequestIdMiddleware",
    "get_request_id",
    "LoggingMiddleware",
]
