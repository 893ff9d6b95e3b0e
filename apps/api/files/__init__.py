"""File entry module: registry service and request/response schemas."""

from apps.api.files.schemas import ROOT_PARENT_ID, FileCreate, FileResponse
from apps.api.files.service import FileContent, FileRegistry, count_files

__all__ = [
    # Schemas
    "FileCreate",
    "FileResponse",
    "ROOT_PARENT_ID",
    # Service
    "FileContent",
    "FileRegistry",
    "count_files",
]
