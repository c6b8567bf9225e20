"""API middleware for request logging and error handling.

Starlette middleware is a stack: the last one added runs first.  In
``hsu.main.create_app`` the order of ``add_middleware`` calls is::

    ServerSessionMiddleware   # added 1st -> innermost
    ErrorHandlingMiddleware   # added 2nd
    RequestLoggingMiddleware  # added 3rd -> outermost

so request logging sees the final status code, including rejections that
ErrorHandlingMiddleware turned into JSON bodies.
"""

from __future__ import annotations

import time

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from hsu.api.schemas import ErrorResponse
from hsu.utils.errors import HsuError, SignedUrlRejectedError
from hsu.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration.

    Only the path is logged; query strings carry signatures.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


def error_response(exc: HsuError) -> JSONResponse:
    """Render *exc* as a sanitized :class:`ErrorResponse`."""
    body = ErrorResponse(
        error=type(exc).__name__,
        code=exc.code,
        detail=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Catch ``HsuError`` subclasses and return structured JSON errors.

    Signed-URL rejections are expected traffic and logged at warning level;
    anything else from the hierarchy is an error.  Stack traces stay in the
    server log.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except SignedUrlRejectedError as exc:
            _logger.warning(
                "signed_url_rejected",
                code=exc.code,
                scope_id=exc.scope_id,
                path=str(request.url.path),
            )
            return error_response(exc)
        except HsuError as exc:
            _logger.error(
                "application_error",
                error_type=type(exc).__name__,
                code=exc.code,
                message=exc.message,
                path=str(request.url.path),
            )
            return error_response(exc)
