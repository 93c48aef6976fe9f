"""
Error Handler Middleware

Provides consistent error handling and response formatting.
Logs errors with correlation IDs for debugging.

Typed engine errors map to fixed status codes:
- InvalidTransition -> 409
- ValidationError   -> 422
- UnknownSession    -> 404
"""

import time
import traceback
from uuid import uuid4

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from companion.config.logging_config import get_logger, bind_correlation_id, clear_context
from companion.domain.errors import (
    CompanionError,
    InvalidTransition,
    UnknownSession,
    ValidationError,
)
from companion.infrastructure.metrics import track_http_request

logger = get_logger(__name__)


ERROR_STATUS_CODES: dict[type[CompanionError], int] = {
    InvalidTransition: 409,
    ValidationError: 422,
    UnknownSession: 404,
}


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Provides:
    - Correlation ID tracking for all requests
    - Consistent error response format
    - Error logging with context
    - Request metrics
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request with error handling."""

        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid4())
        bind_correlation_id(correlation_id)
        start_time = time.perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Correlation-ID"] = correlation_id
            return response

        except Exception as e:
            logger.error(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error_type=type(e).__name__,
                traceback=traceback.format_exc(),
            )

            # Sanitized: no exception text reaches the client
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": "Internal server error",
                    "correlation_id": correlation_id,
                    "message": "An unexpected error occurred. Please try again.",
                },
                headers={"X-Correlation-ID": correlation_id},
            )

        finally:
            route = request.scope.get("route")
            track_http_request(
                method=request.method,
                endpoint=getattr(route, "path", request.url.path),
                status_code=status_code,
                duration_seconds=time.perf_counter() - start_time,
            )
            clear_context()


async def companion_error_handler(request: Request, exc: CompanionError) -> JSONResponse:
    """Translate a typed engine error into a JSON error body."""
    status_code = next(
        (code for error_type, code in ERROR_STATUS_CODES.items() if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )

    logger.info(
        "Request rejected",
        path=request.url.path,
        error_kind=exc.kind,
        status_code=status_code,
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for engine errors."""
    app.add_exception_handler(CompanionError, companion_error_handler)
