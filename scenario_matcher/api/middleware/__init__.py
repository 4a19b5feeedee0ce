"""API middleware."""

from .logging import RequestResponseLoggingMiddleware

__all__ = ["RequestResponseLoggingMiddleware"]
