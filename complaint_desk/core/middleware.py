import logging
import time
from typing import Callable, Set

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from complaint_desk.core.logging_config import generate_request_id, set_request_id

logger = logging.getLogger(__name__)

SKIP_LOGGING_PATHS: Set[str] = {"/health", "/docs", "/redoc", "/openapi.json"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one line per HTTP request and tags it with a request id.

    The id comes from the X-Request-ID header when the caller sends one and
    is echoed back on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = request_id
        if request.url.path not in SKIP_LOGGING_PATHS:
            logger.info(
                "HTTP %s %s - %d (%.2fms)",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
            )
        return response
