"""Request Context Middleware

Purpose: Attach a request id and a request-scoped Logger to every request

This middleware:
- Reuses the inbound X-Request-ID header or generates a new id
- Stores the id in request.state for the StarletteStateContext lookup
- Attaches request.state.logger sharing one process-wide engine
- Echoes X-Request-ID on the response
"""

from typing import Optional
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from reqlog.config.settings import LoggingSettings
from reqlog.infrastructure.logging.adapters import StarletteStateContext
from reqlog.infrastructure.logging.fields import REQUEST_ID_LOOKUP_KEY
from reqlog.infrastructure.logging.logger import Logger, new_logger

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware binding a request id and a Logger to each request."""

    def __init__(
        self,
        app: ASGIApp,
        base_logger: Optional[Logger] = None,
        settings: Optional[LoggingSettings] = None,
    ):
        super().__init__(app)
        self.base_logger = base_logger or new_logger(settings=settings)

    async def dispatch(self, request: Request, call_next):
        """Process request with id assignment and logger binding."""

        # Generate or extract request ID
        request_id = request.headers.get(REQUEST_ID_HEADER)
        if not request_id:
            request_id = str(uuid4())

        setattr(request.state, REQUEST_ID_LOOKUP_KEY, request_id)
        request.state.logger = self.base_logger.with_context(StarletteStateContext(request))

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        request.state.logger.debug(
            "Request completed: %s %s -> %d",
            request.method,
            request.url.path,
            response.status_code,
        )
        return response


def get_request_logger(request: Request) -> Logger:
    """
    FastAPI dependency returning the request-scoped Logger.

    Falls back to a logger over the request itself when the middleware is not
    installed; such a logger carries the service field but no request id.
    """
    request_logger = getattr(request.state, "logger", None)
    if isinstance(request_logger, Logger):
        return request_logger
    return new_logger(request)
