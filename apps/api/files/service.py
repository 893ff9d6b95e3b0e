"""
File registry service.

Handles:
- Entry creation (folders, files, images) with parent validation
- Owner-scoped lookup and paginated listing
- Publish / unpublish
- Content retrieval, including image size variants

Ownership and visibility failures are reported exactly like unknown ids
(NotFoundError) so callers cannot discover other users' entries.
"""

import asyncio
import base64
import binascii
import logging
import mimetypes
import uuid
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from apps.api.jobs.dispatcher import JobDispatcher, ThumbnailJob
from db.models.file_entry import FileEntry, FileType
from packages.shared.exceptions import (
    InfrastructureError,
    NotFoundError,
    ValidationError,
)
from packages.shared.storage import FileStorageBackend, StorageUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class FileContent:
    """Bytes of an entry plus the media type inferred from its name."""

    data: bytes
    content_type: str


# =============================================================================
# Identifier Parsing
# =============================================================================


def parse_id(value: str | uuid.UUID | None) -> uuid.UUID | None:
    """Parse an entry id. Malformed ids resolve to None."""
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def is_root(value: str | int | None) -> bool:
    """True for every spelling of the root sentinel."""
    return value in (None, 0, "0", "")


def parse_page(value: str | int | None) -> int:
    """Page number; absent, malformed or negative values mean page 0."""
    try:
        page = int(value) if value is not None else 0
    except (TypeError, ValueError):
        return 0
    return max(page, 0)


def guess_content_type(name: str) -> str:
    content_type, _ = mimetypes.guess_type(name)
    return content_type or DEFAULT_CONTENT_TYPE


def count_files(db: Session) -> int:
    """Total number of file entries."""
    return db.execute(select(func.count()).select_from(FileEntry)).scalar_one()


# =============================================================================
# Service
# =============================================================================


class FileRegistry:
    """
    Service for managing file entries.

    Coordinates metadata in the database with bytes in the content store,
    and hands image post-processing to the job dispatcher.
    """

    # Entries per listing page
    PAGE_SIZE = 20

    def __init__(
        self,
        db: Session,
        storage: FileStorageBackend,
        dispatcher: JobDispatcher | None = None,
        page_size: int | None = None,
    ):
        """
        Initialize file registry.

        Args:
            db: Database session
            storage: Content store backend
            dispatcher: Post-upload job dispatcher (optional)
            page_size: Entries per listing page
        """
        self.db = db
        self.storage = storage
        self.dispatcher = dispatcher
        self.page_size = page_size or self.PAGE_SIZE

    # =========================================================================
    # Creation
    # =========================================================================

    async def create(
        self,
        owner_id: uuid.UUID,
        name: str | None,
        type: str | None,
        is_public: bool = False,
        parent_id: str | int | None = None,
        data: str | None = None,
    ) -> FileEntry:
        """
        Create a folder, file or image entry.

        Validation runs before anything is written, in this order:
        name, type, data (non-folders), parent.

        Args:
            owner_id: Owning user
            name: Entry name
            type: "folder", "file" or "image"
            is_public: Initial visibility
            parent_id: Parent folder id, or the root sentinel
            data: Base64-encoded content (required unless folder)

        Returns:
            The persisted entry

        Raises:
            ValidationError: Invalid input or parent
            InfrastructureError: Content or metadata store unavailable
        """
        if not name:
            raise ValidationError("Missing name")

        file_type = FileType.parse(type)
        if file_type is None:
            raise ValidationError("Missing type")

        if file_type != FileType.FOLDER and not data:
            raise ValidationError("Missing data")

        parent = await asyncio.to_thread(self._resolve_parent, parent_id)

        entry = FileEntry(
            user_id=owner_id,
            name=name,
            type=file_type,
            is_public=bool(is_public),
            parent_id=parent.id if parent else None,
        )

        if file_type == FileType.FOLDER:
            await asyncio.to_thread(self._insert, entry)
        else:
            content = self._decode(data)
            entry.local_path = await self._store(content)
            try:
                await asyncio.to_thread(self._insert, entry)
            except InfrastructureError:
                await self._discard(entry.local_path)
                raise

        logger.info(f"Created {file_type.value} {entry.id} for user {owner_id}")

        if file_type == FileType.IMAGE and self.dispatcher is not None:
            self.dispatcher.submit(ThumbnailJob(user_id=owner_id, file_id=entry.id))

        return entry

    def _resolve_parent(self, parent_id: str | int | None) -> FileEntry | None:
        if is_root(parent_id):
            return None

        parent_uuid = parse_id(parent_id)
        parent = self.db.get(FileEntry, parent_uuid) if parent_uuid else None
        if parent is None:
            raise ValidationError("Parent not found")
        if parent.type != FileType.FOLDER:
            raise ValidationError("Parent is not a folder")
        return parent

    @staticmethod
    def _decode(data: str) -> bytes:
        # Accept unpadded and URL-safe payloads
        data = "".join(data.split()).replace("-", "+").replace("_", "/")
        data += "=" * (-len(data) % 4)
        try:
            content = base64.b64decode(data)
        except (binascii.Error, ValueError):
            raise ValidationError("Invalid data") from None
        if not content:
            raise ValidationError("Missing data")
        return content

    async def _store(self, content: bytes) -> str:
        try:
            await self.storage.ensure_root()
        except StorageUnavailableError:
            raise InfrastructureError("Unable to locate folder") from None
        try:
            return await self.storage.write(content)
        except OSError as e:
            logger.error(f"Content write failed: {e}")
            raise InfrastructureError("Unable to store file") from e

    async def _discard(self, path: str) -> None:
        try:
            await self.storage.delete(path)
        except OSError:
            # Best effort; the orphaned bytes are unreachable without metadata
            logger.exception(f"Failed to remove orphaned content {path}")

    def _insert(self, entry: FileEntry) -> None:
        self.db.add(entry)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"File insert failed: {e}")
            raise InfrastructureError("Unable to save file") from e
        self.db.refresh(entry)

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, owner_id: uuid.UUID, file_id: str | uuid.UUID) -> FileEntry:
        """
        Fetch an entry owned by `owner_id`.

        Raises:
            NotFoundError: Unknown, malformed or foreign id
        """
        entry_id = parse_id(file_id)
        if entry_id is None:
            raise NotFoundError()

        stmt = select(FileEntry).where(
            FileEntry.id == entry_id,
            FileEntry.user_id == owner_id,
        )
        entry = self.db.execute(stmt).scalar_one_or_none()
        if entry is None:
            raise NotFoundError()
        return entry

    def list_entries(
        self,
        owner_id: uuid.UUID,
        parent_id: str | int | None = None,
        page: str | int | None = None,
    ) -> list[FileEntry]:
        """
        List one page of an owner's entries under a parent.

        The filtered set is re-evaluated for every page, so pages are not
        stable across concurrent inserts.

        Args:
            owner_id: Owning user
            parent_id: Parent folder id; absent, "0" or malformed means root
            page: Zero-based page number

        Returns:
            Up to page_size entries in insertion order
        """
        parent_uuid = None if is_root(parent_id) else parse_id(parent_id)
        page_number = parse_page(page)

        stmt = (
            select(FileEntry)
            .where(
                FileEntry.user_id == owner_id,
                FileEntry.parent_id.is_(None)
                if parent_uuid is None
                else FileEntry.parent_id == parent_uuid,
            )
            .order_by(FileEntry.created_at, FileEntry.id)
            .offset(page_number * self.page_size)
            .limit(self.page_size)
        )
        return list(self.db.execute(stmt).scalars().all())

    # =========================================================================
    # Visibility
    # =========================================================================

    def set_visibility(
        self,
        owner_id: uuid.UUID,
        file_id: str | uuid.UUID,
        is_public: bool,
    ) -> FileEntry:
        """
        Set the public flag of an owned entry. Idempotent.

        Raises:
            NotFoundError: Unknown, malformed or foreign id
        """
        entry = self.get(owner_id, file_id)
        if entry.is_public != is_public:
            entry.is_public = is_public
            try:
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Visibility update failed for {entry.id}: {e}")
                raise InfrastructureError("Unable to update file") from e
            self.db.refresh(entry)
            logger.info(f"File {entry.id} is now {'public' if is_public else 'private'}")
        return entry

    def publish(self, owner_id: uuid.UUID, file_id: str | uuid.UUID) -> FileEntry:
        return self.set_visibility(owner_id, file_id, True)

    def unpublish(self, owner_id: uuid.UUID, file_id: str | uuid.UUID) -> FileEntry:
        return self.set_visibility(owner_id, file_id, False)

    # =========================================================================
    # Content
    # =========================================================================

    async def read_content(
        self,
        requester_id: uuid.UUID | None,
        file_id: str | uuid.UUID,
        size: str | int | None = None,
    ) -> FileContent:
        """
        Read the bytes of an entry.

        Private entries are readable by their owner only. For images,
        `size` selects a pre-rendered variant.

        Raises:
            NotFoundError: Unknown id, private entry of another user,
                folder, or missing (variant) content
        """
        entry_id = parse_id(file_id)
        entry = (
            await asyncio.to_thread(self.db.get, FileEntry, entry_id)
            if entry_id
            else None
        )
        if entry is None:
            raise NotFoundError()

        if not entry.is_public and entry.user_id != requester_id:
            raise NotFoundError()

        if entry.is_folder:
            raise NotFoundError("A folder doesn't have content")

        path = entry.local_path
        if size and entry.type == FileType.IMAGE:
            if not str(size).isdigit():
                raise NotFoundError()
            path = self.storage.variant_path(path, size)

        try:
            found = bool(path) and await self.storage.exists(path)
            if not found:
                logger.info(f"No content for {entry.id} at {path}")
                raise NotFoundError()
            data = await self.storage.read(path)
        except FileNotFoundError:
            raise NotFoundError() from None
        except OSError as e:
            logger.error(f"Content read failed for {entry.id}: {e}")
            raise InfrastructureError("Unable to read file") from e

        return FileContent(data=data, content_type=guess_content_type(entry.name))
