"""
Versioned API router plus the authentication and trace id middleware.

Everything under /api/v1 needs the X-API-Key header. /health and the
OpenAPI docs stay public.
"""

import uuid
from typing import Callable

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..config.settings import settings
from ..config.logging import get_logger, set_trace_id, bind_context

logger = get_logger(__name__)

API_PREFIX = "/api/v1"
API_KEY_HEADER = "X-API-Key"
TRACE_ID_HEADER = "X-Trace-ID"

api_router = APIRouter(prefix=API_PREFIX)


def verify_api_key(api_key: str) -> bool:
    """Check a caller's key against SCENARIO_MATCHER_API_KEY."""
    return api_key == settings.scenario_matcher_api_key


def _unauthorized(detail: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": detail})


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Rejects API requests without a valid X-API-Key header."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not request.url.path.startswith(API_PREFIX + "/"):
            return await call_next(request)

        api_key = request.headers.get(API_KEY_HEADER)
        if not api_key:
            logger.warning("API request without API key")
            return _unauthorized(f"Missing API key. Provide {API_KEY_HEADER} header.")
        if not verify_api_key(api_key):
            logger.warning("API request with invalid API key")
            return _unauthorized("Invalid API key.")

        return await call_next(request)


class TraceIDMiddleware(BaseHTTPMiddleware):
    """
    Binds a trace id to the logging context for the whole request.

    The caller's X-Trace-ID is reused when present; it is echoed back on
    every response, including 401s.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        trace_id = request.headers.get(TRACE_ID_HEADER) or str(uuid.uuid4())

        set_trace_id(trace_id)
        bind_context(
            path=request.url.path,
            method=request.method,
            client_ip=request.client.host if request.client else None,
        )

        response = await call_next(request)
        response.headers[TRACE_ID_HEADER] = trace_id
        return response
