"""
File entry routes.

All routes except GET /files/{id}/data require a session token (X-Token).
Content of public entries is readable anonymously.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from apps.api.auth.dependencies import get_current_user_id, get_current_user_id_optional
from apps.api.dependencies import get_file_registry
from apps.api.files.schemas import FileCreate, FileResponse
from apps.api.files.service import FileRegistry

router = APIRouter(prefix="/files", tags=["Files"])

CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]
Registry = Annotated[FileRegistry, Depends(get_file_registry)]


@router.post(
    "",
    response_model=FileResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_file(
    data: FileCreate,
    user_id: CurrentUserId,
    registry: Registry,
) -> FileResponse:
    """
    Create a folder, file or image.

    Files and images carry base64 `data`; their content is written to the
    content store before the entry is recorded. Images get size variants
    rendered in the background.
    """
    entry = await registry.create(
        user_id,
        name=data.name,
        type=data.type,
        is_public=data.is_public,
        parent_id=data.parent_id,
        data=data.data,
    )
    return FileResponse.from_entry(entry)


@router.get("", response_model=list[FileResponse])
def list_files(
    user_id: CurrentUserId,
    registry: Registry,
    parent_id: Annotated[str | None, Query(alias="parentId")] = None,
    page: Annotated[str | None, Query()] = None,
) -> list[FileResponse]:
    """List the caller's entries under a parent, 20 per page."""
    entries = registry.list_entries(user_id, parent_id=parent_id, page=page)
    return [FileResponse.from_entry(entry) for entry in entries]


@router.get("/{file_id}", response_model=FileResponse)
def get_file(
    file_id: str,
    user_id: CurrentUserId,
    registry: Registry,
) -> FileResponse:
    """Get one of the caller's entries."""
    return FileResponse.from_entry(registry.get(user_id, file_id))


@router.put("/{file_id}/publish", response_model=FileResponse)
def publish_file(
    file_id: str,
    user_id: CurrentUserId,
    registry: Registry,
) -> FileResponse:
    """Make an entry public. Idempotent."""
    return FileResponse.from_entry(registry.publish(user_id, file_id))


@router.put("/{file_id}/unpublish", response_model=FileResponse)
def unpublish_file(
    file_id: str,
    user_id: CurrentUserId,
    registry: Registry,
) -> FileResponse:
    """Make an entry private. Idempotent."""
    return FileResponse.from_entry(registry.unpublish(user_id, file_id))


@router.get("/{file_id}/data")
async def get_file_data(
    file_id: str,
    registry: Registry,
    user_id: Annotated[UUID | None, Depends(get_current_user_id_optional)],
    size: Annotated[str | None, Query()] = None,
) -> Response:
    """
    Return raw content with a Content-Type derived from the entry name.

    Private entries are only readable by their owner. `size` selects a
    thumbnail variant of an image.
    """
    content = await registry.read_content(user_id, file_id, size=size)
    return Response(content=content.data, media_type=content.content_type)
