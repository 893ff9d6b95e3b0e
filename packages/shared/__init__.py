"""Shared utilities package."""

from packages.shared.exceptions import (
    AppException,
    AuthError,
    ConflictError,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "AppException",
    "AuthError",
    "ConflictError",
    "InfrastructureError",
    "NotFoundError",
    "ValidationError",
]
