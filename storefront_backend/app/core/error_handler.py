"""
Error handling and sanitization

- Shipping errors → 200 with {"error", "message"} for the storefront UI
- Malformed quote requests → same 200 error body, never a 422
- Unhandled exceptions → logged with traceback, generic 500 to the client
"""
import logging
import traceback
from typing import Union

from fastapi import Request, HTTPException
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import settings
from app.core.exceptions import ShippingError, ShippingRequestError

logger = logging.getLogger(__name__)

# Routes whose clients expect the shipping error body on bad input
SHIPPING_QUOTE_PATHS = ("/api/shipping/calculate",)

# Patterns that indicate internal/sensitive error information
SENSITIVE_PATTERNS = [
    "password",
    "secret",
    "token",
    "bearer",
    "credential",
    "sqlalchemy",
    "asyncpg",
    "postgresql",
    "traceback",
    "file \"",
    "/app/",
]


def is_sensitive_error(message: str) -> bool:
    """Check if error message contains sensitive information."""
    message_lower = message.lower()
    return any(pattern in message_lower for pattern in SENSITIVE_PATTERNS)


def sanitize_error_message(error: Union[str, Exception]) -> str:
    """
    Sanitize an error message for safe client exposure.

    Full message in DEBUG; otherwise sensitive messages are replaced and
    long ones truncated.
    """
    message = error if isinstance(error, str) else str(error)

    if settings.DEBUG:
        return message

    if is_sensitive_error(message):
        return "An internal error occurred. Please try again later."

    if len(message) > 200:
        return message[:200] + "..."

    return message


def shipping_error_response(err: ShippingError) -> JSONResponse:
    """Stable user-facing body for a shipping failure. Always HTTP 200."""
    return JSONResponse(
        status_code=200,
        content={"error": err.error, "message": err.message},
    )


async def shipping_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Answer malformed quote requests with the shipping error body."""
    if request.url.path in SHIPPING_QUOTE_PATHS:
        logger.warning(f"Malformed shipping request on {request.url.path}: {exc.errors()}")
        return shipping_error_response(ShippingRequestError(details={"reason": "invalid_body"}))
    return await request_validation_exception_handler(request, exc)


class ErrorSanitizationMiddleware(BaseHTTPMiddleware):
    """
    Catch unhandled exceptions and sanitize error responses.

    - In production: Returns generic error, logs full details
    - In development: Returns full error for debugging
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except HTTPException:
            raise
        except Exception as e:
            error_id = f"{request.client.host if request.client else 'unknown'}-{id(e)}"
            logger.error(
                f"Unhandled exception [{error_id}]: {type(e).__name__}: {str(e)}\n"
                f"Path: {request.url.path}\n"
                f"Method: {request.method}\n"
                f"Traceback:\n{traceback.format_exc()}"
            )

            if settings.DEBUG:
                return JSONResponse(
                    status_code=500,
                    content={
                        "error": "internal_error",
                        "message": str(e),
                        "type": type(e).__name__,
                        "error_id": error_id,
                    }
                )
            return JSONResponse(
                status_code=500,
                content={
                    "error": "internal_error",
                    "message": "An unexpected error occurred. Please try again later.",
                    "error_id": error_id,
                }
            )
