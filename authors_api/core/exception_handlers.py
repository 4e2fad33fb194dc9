"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain and unexpected) and return consistent JSON responses with proper
HTTP status codes and traceability.

Design:
- AppError subclasses → appropriate HTTP status (403, 404, 422, 429)
- NotModifiedAppError → bodiless 304
- Request body validation → 422 with the same envelope
- Unexpected Exception → generic 500 (safety net)
- All JSON responses include request_id for distributed tracing
"""

import logging
from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from authors_api.core.errors import (
    AppError,
    AuthenticationAppError,
    NotFoundAppError,
    NotModifiedAppError,
    RateLimitAppError,
    ValidationAppError,
)
from authors_api.core.logging import get_request_id

logger = logging.getLogger(__name__)

# Checked in order; first match wins
_STATUS_BY_ERROR: tuple[tuple[type[AppError], int], ...] = (
    (ValidationAppError, 422),
    (AuthenticationAppError, 403),
    (NotFoundAppError, 404),
    (NotModifiedAppError, 304),
    (RateLimitAppError, 429),
)


def status_code_for(exc: AppError) -> int:
    """Return the HTTP status code for a domain error (400 when unmapped)."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 400


def _error_response(status_code: int, content: dict, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": content}, headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> Response:
    """Handle domain application errors with consistent JSON format.

    Routes domain errors to appropriate HTTP status codes:
    - ValidationAppError → 422 Unprocessable Entity (rejected input)
    - AuthenticationAppError → 403 Forbidden (authorization fault)
    - NotFoundAppError → 404 Not Found
    - NotModifiedAppError → 304 Not Modified (no body allowed)
    - RateLimitAppError → 429 Too Many Requests (+ rate limit headers)

    JSON responses include:
    - error.code: Machine-readable error code
    - error.message: Human-readable message
    - error.request_id: For distributed tracing
    - error.details: Optional structured context

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        Response with appropriate status code and error details.
    """
    status_code = status_code_for(exc)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
            "request_id": get_request_id(),
        }
    )

    if status_code == 304:
        return Response(status_code=304, headers={"X-Error-Code": exc.code})

    error_content = {
        "code": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }

    # Include details only if present (optional structured context)
    if exc.details:
        error_content["details"] = exc.details

    headers = exc.headers if isinstance(exc, RateLimitAppError) else None
    return _error_response(status_code, error_content, headers=headers or None)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI request validation errors with the common envelope."""
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "invalid value"),
        }
        for err in exc.errors()
    ]

    logger.warning(
        "request_validation_failed",
        extra={
            "error_count": len(errors),
            "fields": [e["field"] for e in errors],
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )

    return _error_response(
        422,
        {
            "code": "validation_failed",
            "message": "Request validation failed",
            "request_id": get_request_id(),
            "details": {"errors": errors},
        },
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Catches any exception not handled by specific handlers.
    Logs detailed information for debugging while returning generic message.
    Prevents information leakage (no stack traces to client).

    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).

    Returns:
        JSONResponse with generic error (no implementation details leaked).
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        }
    )

    return _error_response(
        500,
        {
            "code": "internal_server_error",
            "message": "An unexpected error occurred. Please try again later.",
            "request_id": get_request_id(),
        },
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Must be called during app initialization, before route registration.

    Args:
        app: FastAPI application instance.

    Example:
        >>> from fastapi import FastAPI
        >>> from authors_api.core.exception_handlers import setup_exception_handlers
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
