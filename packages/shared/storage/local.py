"""Local disk content storage backend."""

import logging
import uuid
from pathlib import Path

import aiofiles
import aiofiles.os

from packages.shared.storage.base import FileStorageBackend, StorageUnavailableError

logger = logging.getLogger(__name__)


class LocalFileStorage(FileStorageBackend):
    """
    Local disk storage backend.

    Files are stored flat under the base path with a random uuid4 name:
    <base_path>/<uuid>. The location reference is the absolute path.
    """

    def __init__(self, base_path: str = "/tmp/files_manager"):
        """
        Initialize local file storage.

        The directory is not created here; ensure_root() creates it on
        demand before the first write.

        Args:
            base_path: Base directory for file storage
        """
        self.base_path = Path(base_path).expanduser().absolute()

    @property
    def backend_name(self) -> str:
        return "local"

    async def ensure_root(self) -> None:
        """Create the base directory if needed."""
        try:
            await aiofiles.os.makedirs(self.base_path, exist_ok=True)
        except OSError as e:
            logger.error(f"Unable to create storage root {self.base_path}: {e}")
            raise StorageUnavailableError(str(e)) from e

    def _new_path(self) -> Path:
        return self.base_path / str(uuid.uuid4())

    async def write(self, data: bytes, path: str | None = None) -> str:
        """
        Write bytes to local disk.

        Args:
            data: Content to store
            path: Reference to overwrite; a new uuid4 name when omitted

        Returns:
            Absolute path of the stored file
        """
        await self.ensure_root()
        full_path = Path(path) if path else self._new_path()

        # "w+b": create or replace
        async with aiofiles.open(full_path, "w+b") as f:
            await f.write(data)

        logger.debug(f"Stored {len(data)} bytes at {full_path}")
        return str(full_path)

    async def read(self, path: str) -> bytes:
        """
        Read a file from local disk.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        full_path = Path(path)
        if not await aiofiles.os.path.isfile(full_path):
            raise FileNotFoundError(f"File not found: {path}")

        async with aiofiles.open(full_path, "rb") as f:
            return await f.read()

    async def exists(self, path: str) -> bool:
        return await aiofiles.os.path.isfile(Path(path))

    async def delete(self, path: str) -> bool:
        full_path = Path(path)
        if await aiofiles.os.path.isfile(full_path):
            await aiofiles.os.remove(full_path)
            return True
        return False
