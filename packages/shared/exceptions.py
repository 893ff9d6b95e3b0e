"""Shared exception classes and handlers."""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception.

    Every subclass carries the HTTP status it maps to, so services can raise
    them without knowing about the transport layer.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppException):
    """Missing or invalid field in a request."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class AuthError(AppException):
    """Missing, malformed or unresolvable credentials or token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFoundError(AppException):
    """Unknown identifier, or one hidden for ownership/visibility reasons."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(AppException):
    """Duplicate registration."""

    # Kept at 400 for compatibility with existing clients
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Already exist"


class InfrastructureError(AppException):
    """Storage directory or external store unavailable."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


async def app_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle AppException and return JSON response.

    Also registered for database and disk errors that escape a service;
    those are logged and rendered as a generic 500.
    """
    if isinstance(exc, AppException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message},
        )
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render body/query validation failures in the common error shape."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()))
        message = f"Invalid {location}" if location else message
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message},
    )
