"""
ARQ worker for post-upload jobs.

Usage:
    # Start worker
    arq apps.api.jobs.worker.WorkerSettings

Jobs:
- generate_thumbnails: render width-bounded variants of an uploaded image
  next to the original as "<path>_<width>"
- send_welcome: greet a newly registered user
"""

import asyncio
import logging
from datetime import timedelta
from io import BytesIO
from typing import Any
from uuid import UUID

from arq.connections import RedisSettings
from PIL import Image

from apps.api.auth.service import get_user_by_id
from apps.api.config import get_settings
from apps.api.db import SessionLocal
from db.models.file_entry import FileEntry, FileType
from packages.shared.storage import FileStorageBackend, get_storage_backend_from_settings

logger = logging.getLogger(__name__)


class JobError(Exception):
    """A job received arguments it cannot act on."""


# =============================================================================
# Thumbnails
# =============================================================================


def render_thumbnail(content: bytes, width: int) -> bytes:
    """
    Resize an image to `width` pixels wide, keeping its aspect ratio.

    The output keeps the source format (PNG when unknown).
    """
    with Image.open(BytesIO(content)) as img:
        image_format = img.format or "PNG"
        height = max(1, round(img.height * width / img.width))
        resized = img.resize((width, height))
        if image_format == "JPEG" and resized.mode not in ("RGB", "L"):
            resized = resized.convert("RGB")
        buffer = BytesIO()
        resized.save(buffer, format=image_format)
        return buffer.getvalue()


def _parse_uuid(value: str | None, label: str) -> UUID:
    if not value:
        raise JobError(f"Missing {label}")
    try:
        return UUID(str(value))
    except ValueError:
        raise JobError(f"Missing {label}") from None


def _load_image_path(session_factory, user_id: UUID, file_id: UUID) -> str:
    with session_factory() as db:
        entry = db.get(FileEntry, file_id)
        if entry is None or entry.user_id != user_id or entry.type != FileType.IMAGE:
            raise JobError("File not found")
        return entry.local_path


def _load_email(session_factory, user_id: UUID) -> str:
    with session_factory() as db:
        user = get_user_by_id(db, user_id)
        if user is None:
            raise JobError("User not found")
        return user.email


# =============================================================================
# Job Functions
# =============================================================================


async def generate_thumbnails(
    ctx: dict[str, Any],
    user_id: str | None = None,
    file_id: str | None = None,
) -> dict[str, Any]:
    """
    Background job to render image size variants.

    Args:
        ctx: ARQ context (session_factory, storage, thumbnail_widths)
        user_id: Owner UUID as string
        file_id: File entry UUID as string

    Returns:
        Job result dict with the written variant paths

    Raises:
        JobError: Missing ids, or no matching image entry for the owner
    """
    file_uuid = _parse_uuid(file_id, "fileId")
    user_uuid = _parse_uuid(user_id, "userId")
    logger.info(f"Generating thumbnails for file {file_uuid}")

    source_path = await asyncio.to_thread(
        _load_image_path, ctx["session_factory"], user_uuid, file_uuid
    )

    storage: FileStorageBackend = ctx["storage"]
    try:
        content = await storage.read(source_path)
    except FileNotFoundError:
        raise JobError("File not found") from None

    written = []
    for width in ctx["thumbnail_widths"]:
        thumbnail = await asyncio.to_thread(render_thumbnail, content, width)
        path = await storage.write(thumbnail, storage.variant_path(source_path, width))
        written.append(path)

    logger.info(f"Wrote {len(written)} thumbnails for file {file_uuid}")
    return {"status": "success", "file_id": str(file_uuid), "variants": written}


async def send_welcome(
    ctx: dict[str, Any],
    user_id: str | None = None,
) -> dict[str, Any]:
    """
    Background job to greet a new user.

    Raises:
        JobError: Missing id or unknown user
    """
    user_uuid = _parse_uuid(user_id, "userId")

    email = await asyncio.to_thread(_load_email, ctx["session_factory"], user_uuid)

    logger.info(f"Welcome {email}!")
    return {"status": "success", "user_id": str(user_uuid)}


# =============================================================================
# Startup/Shutdown Hooks
# =============================================================================


async def startup(ctx: dict[str, Any]) -> None:
    """Called when worker starts."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    ctx["session_factory"] = SessionLocal
    ctx["storage"] = get_storage_backend_from_settings(settings)
    ctx["thumbnail_widths"] = list(settings.thumbnail_widths)
    logger.info("Files worker starting up")


async def shutdown(ctx: dict[str, Any]) -> None:
    """Called when worker shuts down."""
    logger.info("Files worker shutting down")


# =============================================================================
# Worker Settings
# =============================================================================


class WorkerSettings:
    """ARQ worker settings."""

    # Job functions
    functions = [
        generate_thumbnails,
        send_welcome,
    ]

    # Lifecycle hooks
    on_startup = startup
    on_shutdown = shutdown

    # Redis connection
    redis_settings = RedisSettings.from_dsn(get_settings().redis_url)

    # Job settings
    max_jobs = 10  # Max concurrent jobs
    job_timeout = timedelta(minutes=5)  # Max job duration
    max_tries = 3  # Retry failed jobs
