"""
Content storage backends.

Provides an abstract interface and the local disk implementation used
to persist raw file bytes under generated names.
"""

from packages.shared.storage.base import FileStorageBackend, StorageUnavailableError
from packages.shared.storage.local import LocalFileStorage
from packages.shared.storage.factory import (
    get_storage_backend,
    get_storage_backend_from_settings,
)

__all__ = [
    "FileStorageBackend",
    "LocalFileStorage",
    "StorageUnavailableError",
    "get_storage_backend",
    "get_storage_backend_from_settings",
]
