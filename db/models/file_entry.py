"""
SQLAlchemy model for file entries.

A single table holds folders, regular files and images. Folders are
metadata-only; files and images point at their bytes in the content store.
"""

import uuid
from enum import Enum

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from db.models.base_model import BaseModel


class FileType(str, Enum):
    """Kinds of file entries."""

    FOLDER = "folder"
    FILE = "file"
    IMAGE = "image"

    @classmethod
    def parse(cls, value: str | None) -> "FileType | None":
        """Return the matching member, or None for unknown values."""
        try:
            return cls(value)
        except ValueError:
            return None


class FileEntry(BaseModel):
    """
    File metadata record.

    Invariants:
    - folders never have a local_path
    - files and images always have exactly one local_path
    - parent_id is NULL (root) or the id of a folder entry
    - user_id never changes; is_public and local_path are the only
      fields updated after creation
    """

    __tablename__ = "files"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[FileType] = mapped_column(nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("files.id"),
        nullable=True,
        comment="NULL means the root folder",
    )
    local_path: Mapped[str | None] = mapped_column(
        String(1024),
        nullable=True,
        comment="Content store reference; NULL for folders",
    )

    __table_args__ = (
        # Listing filters on (owner, parent)
        Index("ix_files_user_parent", "user_id", "parent_id"),
    )

    @property
    def is_folder(self) -> bool:
        return self.type == FileType.FOLDER

    def __repr__(self) -> str:
        return f"<FileEntry {self.type.value}:{self.name}>"
