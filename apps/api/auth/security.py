"""Security utilities for password hashing, session tokens and Basic auth."""

import base64
import binascii
import secrets

from passlib.context import CryptContext

# =============================================================================
# Configuration
# =============================================================================

SESSION_TOKEN_BYTES = 32

# Password hashing
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


# =============================================================================
# Password Hashing
# =============================================================================


def hash_password(password: str) -> str:
    """Hash a password (salted, one-way)."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Unknown or corrupted digest format
        return False


# =============================================================================
# Session Tokens
# =============================================================================


def generate_session_token() -> str:
    """Generate a secure random session token."""
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)


# =============================================================================
# Basic Authorization Header
# =============================================================================


def parse_basic_auth(header_value: str | None) -> tuple[str, str] | None:
    """Decode an `Authorization: Basic <b64(email:password)>` value.

    Returns:
        (email, password) or None if the header is absent or malformed.
    """
    if not header_value:
        return None

    parts = header_value.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "basic":
        return None

    try:
        decoded = base64.b64decode(parts[1].strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    # Passwords may contain ':'; emails may not
    email, sep, password = decoded.partition(":")
    if not sep or not email:
        return None
    return email, password
