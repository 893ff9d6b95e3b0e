"""FastAPI dependencies for authentication."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header

from apps.api.auth.models import User
from apps.api.auth.service import AuthService
from apps.api.dependencies import get_auth_service
from packages.shared.exceptions import AuthError

TOKEN_HEADER = "X-Token"


def get_session_token(
    x_token: Annotated[str | None, Header(alias=TOKEN_HEADER)] = None,
) -> str | None:
    """Extract the session token from the X-Token header."""
    return x_token


# =============================================================================
# User Authentication
# =============================================================================


def get_current_user_id(
    token: Annotated[str | None, Depends(get_session_token)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> UUID:
    """Get the authenticated user id, or fail with 401."""
    user_id = auth.resolve_session(token)
    if user_id is None:
        raise AuthError()
    return user_id


def get_current_user_id_optional(
    token: Annotated[str | None, Depends(get_session_token)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> UUID | None:
    """Get the authenticated user id if any, None otherwise."""
    return auth.resolve_session(token)


def get_current_user(
    token: Annotated[str | None, Depends(get_session_token)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> User:
    """Get the authenticated user record, or fail with 401."""
    return auth.current_user(token)
