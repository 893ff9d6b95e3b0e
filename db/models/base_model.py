"""Base model with common fields and mixins."""

import threading
import uuid
from datetime import UTC, datetime, timedelta

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


_clock_lock = threading.Lock()
_last_timestamp: datetime | None = None


def utcnow() -> datetime:
    """Timezone-aware current time (microsecond resolution).

    Strictly increasing within the process: a call landing on the same
    microsecond as the previous one is bumped by one microsecond, so rows
    ordered by created_at come back in insertion order.
    """
    global _last_timestamp
    with _clock_lock:
        now = datetime.now(UTC)
        if _last_timestamp is not None and now <= _last_timestamp:
            now = _last_timestamp + timedelta(microseconds=1)
        _last_timestamp = now
        return now


class TimestampMixin:
    """Mixin that adds a created_at timestamp.

    Set client-side from utcnow() so listing order matches insertion order.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )


class BaseModel(Base, TimestampMixin):
    """Base model with UUID primary key and creation timestamp."""

    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )
