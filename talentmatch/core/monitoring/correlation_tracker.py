"""
Correlation ID tracking for request tracing across services.
"""

import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from talentmatch.utils.logger import logger


correlation_id_context: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


class CorrelationTracker:
    """
    Correlation ID tracking and management.
    Provides utilities for creating, reading and propagating correlation IDs.
    """

    DEFAULT_HEADER_NAME = "X-Correlation-ID"

    def __init__(self, header_name: str = DEFAULT_HEADER_NAME):
        self.header_name = header_name

    @classmethod
    def generate_correlation_id(cls) -> str:
        return str(uuid.uuid4())

    @classmethod
    def get_current_correlation_id(cls) -> Optional[str]:
        return correlation_id_context.get()

    @classmethod
    def set_correlation_id(cls, correlation_id: str) -> None:
        correlation_id_context.set(correlation_id)
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

    @classmethod
    def clear_correlation_id(cls) -> None:
        correlation_id_context.set(None)
        structlog.contextvars.unbind_contextvars("correlation_id")

    def extract_correlation_id(self, request: Request) -> str:
        """Extract correlation ID from request headers or generate a new one."""
        correlation_id = request.headers.get(self.header_name)
        if not correlation_id:
            correlation_id = request.headers.get("X-Request-ID")
        if not correlation_id:
            correlation_id = self.generate_correlation_id()
        return correlation_id


class CorrelationMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for automatic correlation ID tracking.
    """

    def __init__(
        self,
        app,
        tracker: Optional[CorrelationTracker] = None,
        error_responder: Optional[Callable[[Request, Exception], Awaitable[Response]]] = None,
    ):
        super().__init__(app)
        self.tracker = tracker or CorrelationTracker()
        # Builds the response for unhandled errors while the correlation id is still bound
        self.error_responder = error_responder

    async def dispatch(self, request: Request, call_next):
        correlation_id = self.tracker.extract_correlation_id(request)
        self.tracker.set_correlation_id(correlation_id)
        start_time = datetime.now(timezone.utc)

        logger.info(
            "Request started",
            method=request.method,
            path=str(request.url.path),
        )

        try:
            response = await call_next(request)
            response.headers[self.tracker.header_name] = correlation_id

            duration = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round(duration, 2),
            )
            return response

        except Exception as e:
            duration = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
            logger.error(
                "Request failed",
                error=str(e),
                duration_ms=round(duration, 2),
                exc_info=True,
            )
            if self.error_responder is None:
                raise
            response = await self.error_responder(request, e)
            response.headers[self.tracker.header_name] = correlation_id
            return response

        finally:
            self.tracker.clear_correlation_id()


_global_tracker = CorrelationTracker()


def get_correlation_tracker() -> CorrelationTracker:
    """Get the global correlation tracker instance."""
    return _global_tracker


def get_current_correlation_id() -> Optional[str]:
    """Get the current correlation ID (convenience function)."""
    return CorrelationTracker.get_current_correlation_id()
