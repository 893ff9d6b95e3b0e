"""Pydantic schemas for file entries."""

from pydantic import BaseModel, ConfigDict, Field

from db.models.file_entry import FileEntry

# Rendered in place of a parent id for entries at the top level
ROOT_PARENT_ID = 0


# =============================================================================
# Request Schemas
# =============================================================================


class FileCreate(BaseModel):
    """Body of POST /files.

    `type` and `data` stay plain strings here; the registry reports
    missing or unknown values with its own messages.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str | None = None
    type: str | None = None
    parent_id: str | int | None = Field(default=None, alias="parentId")
    is_public: bool = Field(default=False, alias="isPublic")
    data: str | None = None


# =============================================================================
# Response Schemas
# =============================================================================


class FileResponse(BaseModel):
    """Public projection of a file entry."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    name: str
    type: str
    is_public: bool = Field(alias="isPublic")
    parent_id: str | int = Field(alias="parentId")

    @classmethod
    def from_entry(cls, entry: FileEntry) -> "FileResponse":
        return cls(
            id=str(entry.id),
            user_id=str(entry.user_id),
            name=entry.name,
            type=entry.type.value,
            is_public=entry.is_public,
            parent_id=str(entry.parent_id) if entry.parent_id else ROOT_PARENT_ID,
        )
