"""Database package."""

from db.base import Base

__all__ = ["Base"]
