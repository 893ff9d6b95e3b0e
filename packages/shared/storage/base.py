"""Abstract base class for file storage backends."""

from abc import ABC, abstractmethod


class StorageUnavailableError(OSError):
    """Raised when the storage root cannot be created or reached."""


class FileStorageBackend(ABC):
    """
    Abstract base for content storage backends.

    Content is addressed by an opaque location reference returned from
    write(). Size variants of the same content live next to it under
    "<reference>_<suffix>".
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return the name of this backend (e.g., 'local')."""
        pass

    @abstractmethod
    async def ensure_root(self) -> None:
        """
        Make sure the storage root exists (idempotent, recursive).

        Raises:
            StorageUnavailableError: If the root cannot be created
        """
        pass

    @abstractmethod
    async def write(self, data: bytes, path: str | None = None) -> str:
        """
        Persist bytes and return their location reference.

        Args:
            data: Raw content
            path: Existing reference to replace; a fresh random name
                is generated when omitted

        Returns:
            Location reference for later read()/exists() calls
        """
        pass

    @abstractmethod
    async def read(self, path: str) -> bytes:
        """
        Read content by its location reference.

        Raises:
            FileNotFoundError: If nothing is stored at path
        """
        pass

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """
        Check if content exists at the given reference.

        Returns:
            True if content exists, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """
        Delete content by its location reference.

        Returns:
            True if deleted, False if not found
        """
        pass

    @staticmethod
    def variant_path(path: str, suffix: str | int) -> str:
        """Return the reference of a size variant of `path`."""
        return f"{path}_{suffix}"
