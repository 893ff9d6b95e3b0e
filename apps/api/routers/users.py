"""User routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from apps.api.auth.dependencies import get_current_user
from apps.api.auth.models import User
from apps.api.auth.schemas import UserCreate, UserResponse
from apps.api.auth.service import AuthService, sanitize_user
from apps.api.dependencies import get_auth_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    data: UserCreate,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> dict[str, str]:
    """Register a new user account."""
    user = auth.register(data.email, data.password)
    return sanitize_user(user)


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict[str, str]:
    """Get current authenticated user info."""
    return sanitize_user(current_user)
