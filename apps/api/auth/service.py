"""Authentication service layer."""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from apps.api.auth.models import User
from apps.api.auth.security import hash_password, parse_basic_auth, verify_password
from apps.api.auth.sessions import SessionStore
from apps.api.jobs.dispatcher import JobDispatcher, WelcomeJob
from packages.shared.exceptions import (
    AuthError,
    ConflictError,
    InfrastructureError,
    ValidationError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# User Lookups
# =============================================================================


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get user by email address."""
    stmt = select(User).where(User.email == email)
    return db.execute(stmt).scalar_one_or_none()


def get_user_by_id(db: Session, user_id: UUID | str) -> User | None:
    """Get user by ID. Malformed ids resolve to None."""
    if not isinstance(user_id, UUID):
        try:
            user_id = UUID(str(user_id))
        except ValueError:
            return None
    return db.get(User, user_id)


def count_users(db: Session) -> int:
    """Total number of registered users."""
    return db.execute(select(func.count()).select_from(User)).scalar_one()


def sanitize_user(user: User) -> dict[str, str]:
    """Public projection of a user (never the digest)."""
    return {"id": str(user.id), "email": user.email}


# =============================================================================
# Service
# =============================================================================


class AuthService:
    """
    Issues and validates session tokens.

    Users live in the database, sessions in the Redis-backed SessionStore.
    Both are injected so tests can substitute in-memory fakes.
    """

    def __init__(
        self,
        db: Session,
        sessions: SessionStore,
        dispatcher: JobDispatcher | None = None,
    ):
        self.db = db
        self.sessions = sessions
        self.dispatcher = dispatcher

    # =========================================================================
    # Registration
    # =========================================================================

    def register(self, email: str | None, password: str | None) -> User:
        """
        Create a user and queue the welcome job.

        Raises:
            ValidationError: Missing email or password
            ConflictError: Email already registered
        """
        if not email:
            raise ValidationError("Missing email")
        if not password:
            raise ValidationError("Missing password")

        if get_user_by_email(self.db, email):
            raise ConflictError()

        user = User(email=email, password_hash=hash_password(password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration
            self.db.rollback()
            raise ConflictError() from None
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"User insert failed: {e}")
            raise InfrastructureError("Unable to create user") from e
        self.db.refresh(user)

        logger.info(f"Registered user {user.id}")
        if self.dispatcher is not None:
            self.dispatcher.submit(WelcomeJob(user_id=user.id))
        return user

    # =========================================================================
    # Sessions
    # =========================================================================

    def login(self, authorization: str | None) -> str:
        """
        Exchange Basic credentials for a session token.

        Args:
            authorization: Raw Authorization header value

        Returns:
            New session token, valid for the store's TTL

        Raises:
            AuthError: Header absent or malformed, unknown email, wrong password
        """
        credentials = parse_basic_auth(authorization)
        if credentials is None:
            raise AuthError()

        email, password = credentials
        user = get_user_by_email(self.db, email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("Rejected login attempt")
            raise AuthError()

        token = self.sessions.create(str(user.id))
        logger.info(f"User {user.id} connected")
        return token

    def logout(self, token: str | None) -> None:
        """
        Close a session.

        Raises:
            AuthError: No token, or token unknown/expired
        """
        if not token or self.sessions.resolve(token) is None:
            raise AuthError()
        self.sessions.revoke(token)
        logger.info("Session closed")

    def resolve_session(self, token: str | None) -> UUID | None:
        """Return the user id bound to a live token, or None."""
        user_id = self.sessions.resolve(token)
        if user_id is None:
            return None
        try:
            return UUID(user_id)
        except ValueError:
            logger.warning("Session cache holds a malformed user id")
            return None

    def current_user(self, token: str | None) -> User:
        """
        Resolve a token to its user.

        Raises:
            AuthError: Token unresolvable or user no longer exists
        """
        user_id = self.resolve_session(token)
        if user_id is None:
            raise AuthError()
        user = get_user_by_id(self.db, user_id)
        if user is None:
            raise AuthError()
        return user
