"""
FastAPI dependencies wiring services to their stores.

Each collaborator has its own provider so tests can swap it through
app.dependency_overrides:
- get_db: SQLAlchemy session (users and file metadata)
- get_redis: redis-py client (sessions)
- get_storage: content store
- get_dispatcher: post-upload job dispatcher
"""

from typing import Annotated, Any

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from apps.api.auth.service import AuthService
from apps.api.auth.sessions import SessionStore
from apps.api.config import get_settings
from apps.api.db import get_db
from apps.api.files.service import FileRegistry
from apps.api.jobs.dispatcher import JobDispatcher
from apps.api.redis_client import get_redis
from packages.shared.storage import FileStorageBackend, get_storage_backend

__all__ = [
    "get_auth_service",
    "get_db",
    "get_dispatcher",
    "get_file_registry",
    "get_redis",
    "get_session_store",
    "get_storage",
]


def get_storage() -> FileStorageBackend:
    """Content store configured from settings."""
    return get_storage_backend()


def get_dispatcher(request: Request) -> JobDispatcher:
    """Dispatcher started by the application lifespan."""
    return request.app.state.dispatcher


def get_session_store(
    redis_client: Annotated[Any, Depends(get_redis)],
) -> SessionStore:
    """Session cache on top of Redis."""
    return SessionStore(redis_client, ttl_seconds=get_settings().session_ttl_seconds)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    sessions: Annotated[SessionStore, Depends(get_session_store)],
    dispatcher: Annotated[JobDispatcher, Depends(get_dispatcher)],
) -> AuthService:
    """Auth service with its stores injected."""
    return AuthService(db, sessions, dispatcher)


def get_file_registry(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[FileStorageBackend, Depends(get_storage)],
    dispatcher: Annotated[JobDispatcher, Depends(get_dispatcher)],
) -> FileRegistry:
    """File registry with its stores injected."""
    settings = get_settings()
    return FileRegistry(
        db,
        storage,
        dispatcher,
        page_size=settings.page_size,
    )
