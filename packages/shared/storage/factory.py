"""Factory for creating storage backends based on configuration."""

from functools import lru_cache
from typing import TYPE_CHECKING

from packages.shared.storage.base import FileStorageBackend
from packages.shared.storage.local import LocalFileStorage

if TYPE_CHECKING:
    from apps.api.config import Settings


@lru_cache(maxsize=1)
def get_storage_backend(local_path: str | None = None) -> FileStorageBackend:
    """
    Create the content storage backend.

    Args:
        local_path: Storage root (defaults to settings.folder_path)

    Returns:
        Configured FileStorageBackend instance
    """
    # Import settings lazily to avoid circular imports
    from apps.api.config import get_settings

    settings = get_settings()
    return LocalFileStorage(base_path=local_path or settings.folder_path)


def get_storage_backend_from_settings(settings: "Settings") -> FileStorageBackend:
    """
    Create storage backend directly from a Settings object.

    Useful for dependency injection in tests and in the worker.
    """
    return LocalFileStorage(base_path=settings.folder_path)
