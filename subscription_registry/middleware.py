"""FastAPI middleware for request/response logging and correlation."""

import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from subscription_registry.logging_config import bind_context, clear_context, get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses with correlation IDs.

    Features:
    - Generates unique request_id for each request
    - Logs request method, path, client IP
    - Logs response status code and duration
    - Binds request_id to all logs within request context
    """

    def __init__(self, app: ASGIApp, include_request_details: bool = True):
        """Initialize middleware.

        Args:
            app: ASGI application
            include_request_details: If True, log full request details
        """
        super().__init__(app)
        self.include_request_details = include_request_details

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and add logging context.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            HTTP response
        """
        request_id = str(uuid.uuid4())
        bind_context(request_id=request_id)

        client_host = request.client.host if request.client else "unknown"

        if self.include_request_details:
            logger.info(
                "request_started",
                method=request.method,
                path=request.url.path,
                query_params=str(request.query_params) if request.query_params else None,
                client_host=client_host,
                user_agent=request.headers.get("user-agent"),
            )
        else:
            logger.info(
                "request_started",
                method=request.method,
                path=request.url.path,
            )

        start_time = time.time()

        try:
            response = await call_next(request)

            duration_ms = (time.time() - start_time) * 1000

            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )

            # Lets clients correlate responses with server logs
            response.headers["X-Request-ID"] = request_id

            return response

        except Exception as exc:
            duration_ms = (time.time() - start_time) * 1000

            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                duration_ms=round(duration_ms, 2),
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )

            raise

        finally:
            clear_context()


def _segment_after(path: str, marker: str) -> Optional[str]:
    """Return the path segment that follows marker, if any."""
    parts = [p for p in path.split("/") if p]
    try:
        index = parts.index(marker)
    except ValueError:
        return None
    if len(parts) > index + 1:
        return parts[index + 1]
    return None


class ContextMiddleware(BaseHTTPMiddleware):
    """Middleware for binding business context from requests.

    Extracts registry parameters from the path and binds them to logging context:
    - subscription_id (from /subscriptions/{id})
    - subscriber (from /subscribers/{subscriber})
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Extract business context from request.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            HTTP response
        """
        path = request.url.path

        subscription_id = _segment_after(path, "subscriptions")
        if subscription_id:
            bind_context(subscription_id=subscription_id)

        subscriber = _segment_after(path, "subscribers")
        if subscriber:
            bind_context(subscriber=subscriber)

        return await call_next(request)
