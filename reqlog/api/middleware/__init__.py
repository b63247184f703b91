"""
Middleware package for reqlog

Request-id middleware that attaches a request-scoped Logger to each request.
"""

from .logging import RequestContextMiddleware, get_request_logger

__all__ = ["RequestContextMiddleware", "get_request_logger"]
