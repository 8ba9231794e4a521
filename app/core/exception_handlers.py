"""Global exception handlers for consistent error responses.

Design:
- AppError subclasses -> 400 (validation) or 500 (LLM failure)
- Invalid request bodies -> 400 with the validation errors as details
- Unexpected Exception -> generic 500 (safety net)
- All responses include request_id for tracing

HTTPException (including the 429 from rate limiting) keeps FastAPI's
default handling so its headers reach the client untouched.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import AppError, LLMAppError
from app.core.logging import get_request_id

logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    error_content = {
        "code": code,
        "message": message,
        "request_id": get_request_id(),
    }
    if details:
        error_content["details"] = details
    return JSONResponse(status_code=status_code, content={"error": jsonable_encoder(error_content)})


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with appropriate status code and error details.
    """
    status_code = 500 if isinstance(exc, LLMAppError) else 400

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
        },
    )
    return _error_response(status_code, exc.code, exc.message, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject malformed request bodies with 400 instead of FastAPI's 422."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    logger.info(
        "request_validation_failed",
        extra={"error_count": len(errors), "request_path": request.url.path},
    )
    return _error_response(400, "invalid_request", "Request validation failed", {"errors": errors})


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs the failure and returns a generic message; no stack traces leak to
    the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )
    return _error_response(
        500,
        "internal_server_error",
        "An unexpected error occurred. Please try again later.",
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
