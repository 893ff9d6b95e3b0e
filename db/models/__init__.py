"""Database models package."""

from db.models.base_model import BaseModel, TimestampMixin
from db.models.file_entry import FileEntry, FileType

__all__ = [
    # Base models and mixins
    "BaseModel",
    "TimestampMixin",
    # File models
    "FileEntry",
    "FileType",
]
