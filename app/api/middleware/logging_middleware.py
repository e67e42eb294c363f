"""
Request logging middleware for the storefront API.

Logs one line per request and response with a correlation ID that is
echoed back to the client and attached to Sentry events.
"""

import logging
import time
import uuid
from collections.abc import Awaitable, Callable

import sentry_sdk
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    HTTP middleware for request/response logging.

    The caller's user ID (from the gateway header) is included so order
    activity can be followed per customer.
    """

    def __init__(self, app: ASGIApp, exclude_paths: tuple[str, ...] = ("/health", "/api/v1/health")) -> None:
        super().__init__(app)
        self._exclude_paths = exclude_paths

    def _should_log(self, path: str) -> bool:
        return not any(path.startswith(exclude) for exclude in self._exclude_paths)

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex[:8]
        request.state.correlation_id = correlation_id
        sentry_sdk.set_tag("correlation_id", correlation_id)

        if not self._should_log(request.url.path):
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            return response

        start_time = time.perf_counter()
        user_id = request.headers.get("X-User-Id", "anonymous")
        logger.info(
            f"[{correlation_id}] --> {request.method} {request.url.path} "
            f"user={user_id} from {self._get_client_ip(request)}"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"[{correlation_id}] <-- {request.method} {request.url.path} ERROR in {duration_ms:.2f}ms: {e}"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            log_level,
            f"[{correlation_id}] <-- {request.method} {request.url.path} "
            f"{response.status_code} in {duration_ms:.2f}ms",
        )

        response.headers[CORRELATION_HEADER] = correlation_id
        response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"
        return response

    @staticmethod
    def _get_client_ip(request: Request) -> str:
        """Client IP, preferring the first X-Forwarded-For hop."""
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"
