"""
Request ID middleware.

Accepts X-Request-ID from the client or generates one, exposes it on
request.state and the response, and binds it to the logging context.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.logging_config import get_logger, request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# File downloads of large blobs are excluded from the slow request warning
SLOW_REQUEST_MS = 1000
_STREAMING_PREFIXES = ("/api/v1/pluginfile/",)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Correlate every log line of a request with one ID."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        try:
            start = time.perf_counter()
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000

            response.headers[REQUEST_ID_HEADER] = request_id

            path = request.url.path
            if duration_ms > SLOW_REQUEST_MS and not path.startswith(_STREAMING_PREFIXES):
                logger.warning(
                    "Slow request",
                    extra={
                        "path": path,
                        "method": request.method,
                        "status_code": response.status_code,
                        "duration_ms": round(duration_ms, 1),
                    },
                )

            return response
        finally:
            request_id_var.reset(token)
