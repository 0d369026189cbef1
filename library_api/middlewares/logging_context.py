"""
Middleware for injecting contextual fields into structured logs.

This middleware adds request-specific information to the log context
that will be included in all log messages during request processing.
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from library_api.logging import clear_log_context, logger, set_log_context


class LoggingContextMiddleware(BaseHTTPMiddleware):  # type: ignore[misc]
    """
    Middleware to inject contextual fields into structured logs.

    This middleware:
    - Adds endpoint and method to log context
    - Adds user_id once the request is authenticated
    - Logs the status code and duration of each request
    - Clears log context after request completes
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        set_log_context(endpoint=request.url.path, method=request.method)
        started = time.perf_counter()

        try:
            response = await call_next(request)

            user = request.scope.get("user")
            if user is not None and getattr(user, "is_authenticated", False):
                set_log_context(user_id=user.identity)

            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            set_log_context(
                status_code=response.status_code, duration_ms=duration_ms
            )
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms} ms)"
            )
            return response
        finally:
            clear_log_context()
