"""Session routes: /connect and /disconnect."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Response, status

from apps.api.auth.dependencies import get_session_token
from apps.api.auth.schemas import TokenResponse
from apps.api.auth.service import AuthService
from apps.api.dependencies import get_auth_service

router = APIRouter(tags=["Authentication"])


@router.get("/connect", response_model=TokenResponse)
def connect(
    auth: Annotated[AuthService, Depends(get_auth_service)],
    authorization: Annotated[str | None, Header()] = None,
) -> TokenResponse:
    """
    Exchange Basic credentials for a session token.

    The token is valid for 24 hours and is sent back as X-Token.
    """
    return TokenResponse(token=auth.login(authorization))


@router.get("/disconnect", status_code=status.HTTP_204_NO_CONTENT)
def disconnect(
    auth: Annotated[AuthService, Depends(get_auth_service)],
    token: Annotated[str | None, Depends(get_session_token)],
) -> Response:
    """Close the session bound to X-Token."""
    auth.logout(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
