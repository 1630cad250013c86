"""
API Middleware - Request context and error envelopes.

Every response carries X-Request-ID and X-Response-Time-Ms headers; domain
errors become {"error": {...}, "request_id": ...} bodies.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from neuranotes.config.errors import ErrorCode, NeuraNotesError

logger = logging.getLogger(__name__)

__all__ = ["RequestContextMiddleware", "ErrorHandlerMiddleware", "error_code_to_status"]

_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.SEARCH_INVALID_QUERY: 400,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.EMBEDDING_UNAVAILABLE: 503,
    ErrorCode.STORAGE_CONNECTION_FAILED: 503,
}


def error_code_to_status(code: ErrorCode) -> int:
    """Map error codes to HTTP status codes (500 when unmapped)."""
    return _STATUS_BY_CODE.get(code, 500)


def error_response(
    status_code: int,
    error: dict[str, Any],
    request_id: str,
) -> JSONResponse:
    """Build the JSON error envelope shared by middleware and routes."""
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "request_id": request_id},
    )


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request ID, time the request and log one access line."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time-Ms"] = f"{latency_ms:.1f}"

        logger.info(
            "%s %s -> %d in %.1fms request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            latency_ms,
            request_id,
        )
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn exceptions escaping a route into error envelopes."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = getattr(request.state, "request_id", "unknown")
        try:
            return await call_next(request)
        except NeuraNotesError as e:
            logger.error("%s request_id=%s details=%s", e, request_id, e.details)
            return error_response(error_code_to_status(e.code), e.to_dict(), request_id)
        except Exception:
            logger.exception("Unhandled error request_id=%s", request_id)
            return error_response(
                500,
                {
                    "code": ErrorCode.INTERNAL_ERROR.value,
                    "message": "Internal server error",
                    "details": {},
                },
                request_id,
            )
