"""Logging module with structured logging and request tracking."""

from warden.core.logging.middleware import RequestLoggingMiddleware


__all__ = [
    "RequestLoggingMiddleware",
]

