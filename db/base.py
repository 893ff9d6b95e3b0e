"""SQLAlchemy base class for declarative models."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base shared by the users and files tables."""

    pass
