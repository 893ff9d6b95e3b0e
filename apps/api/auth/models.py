"""SQLAlchemy models for authentication."""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import Column, DateTime, String, Uuid

from db.base import Base

# =============================================================================
# User Model
# =============================================================================


class User(Base):
    """User account model.

    Only the password digest is stored; the clear-text password never
    reaches the database.
    """

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
