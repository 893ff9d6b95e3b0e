"""Pydantic schemas for authentication and users."""

from pydantic import BaseModel, ConfigDict

# =============================================================================
# Request Schemas
# =============================================================================


class UserCreate(BaseModel):
    """User registration request.

    Fields are optional at the schema level so missing values surface
    as the service's own "Missing ..." errors.
    """

    model_config = ConfigDict(extra="ignore")

    email: str | None = None
    password: str | None = None


# =============================================================================
# Response Schemas
# =============================================================================


class UserResponse(BaseModel):
    """User response (public info, never the digest)."""

    id: str
    email: str


class TokenResponse(BaseModel):
    """Token response after /connect."""

    token: str
