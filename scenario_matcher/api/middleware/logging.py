"""
Request/response logging middleware.

One event when a request arrives and one when it completes. Trace id and
path are already bound to the logging context by TraceIDMiddleware.
"""

import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ...config.logging import get_logger

logger = get_logger(__name__)

# Polled by orchestration every few seconds
UNLOGGED_PATH_PREFIXES = ("/health",)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestResponseLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every API request with its status and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path.startswith(UNLOGGED_PATH_PREFIXES):
            return await call_next(request)

        started = time.perf_counter()
        logger.info(
            "API request received",
            query_params=str(request.query_params) or None,
            content_length=request.headers.get("content-length"),
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "API request failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=_elapsed_ms(started),
                exc_info=True,
            )
            raise

        if response.status_code >= 400:
            logger.warning(
                "API request completed with error",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(started),
            )
        else:
            logger.info("API request completed", status_code=response.status_code, duration_ms=_elapsed_ms(started))
        return response
