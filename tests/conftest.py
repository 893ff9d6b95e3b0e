"""
Pytest configuration and fixtures.

Provides reusable fixtures for FastAPI testing:
- app: The FastAPI application instance
- client: Sync TestClient with every store overridden
- db_session: SQLite in-memory session shared with the client
- fake_redis: Dict-backed Redis stand-in with a controllable clock
- storage: Local content store rooted in a temporary directory
- dispatcher: Dispatcher that records submitted jobs
"""

import os
from collections.abc import Generator

# Settings are read on first import of the app modules
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import apps.api.auth.models  # noqa: E402, F401
import db.models  # noqa: E402, F401
from apps.api.auth.service import AuthService  # noqa: E402
from apps.api.auth.sessions import SessionStore  # noqa: E402
from apps.api.dependencies import (  # noqa: E402
    get_db,
    get_dispatcher,
    get_redis,
    get_storage,
)
from apps.api.files.service import FileRegistry  # noqa: E402
from db.base import Base  # noqa: E402
from packages.shared.storage import LocalFileStorage  # noqa: E402
from tests.helpers import FakeRedis, RecordingDispatcher, basic_auth  # noqa: E402

# =============================================================================
# App Fixture
# =============================================================================


@pytest.fixture(scope="module")
def app() -> FastAPI:
    """
    Import and return the FastAPI application.

    Scope: module (one app instance per test module)
    """
    from apps.api.main import app as fastapi_app

    return fastapi_app


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def test_engine():
    """SQLite in-memory engine shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    """Create session factory for tests."""
    return sessionmaker(bind=test_engine)


@pytest.fixture
def db_session(test_session_factory) -> Generator[Session, None, None]:
    """Provide a database session closed after the test."""
    session = test_session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def storage(tmp_path) -> LocalFileStorage:
    return LocalFileStorage(base_path=str(tmp_path / "files"))


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def sessions(fake_redis) -> SessionStore:
    return SessionStore(fake_redis)


@pytest.fixture
def auth_service(db_session, sessions, dispatcher) -> AuthService:
    return AuthService(db_session, sessions, dispatcher)


@pytest.fixture
def registry(db_session, storage, dispatcher) -> FileRegistry:
    return FileRegistry(db_session, storage, dispatcher)


# =============================================================================
# Client Fixture
# =============================================================================


@pytest.fixture
def client(
    app: FastAPI,
    test_session_factory,
    fake_redis,
    storage,
    dispatcher,
) -> Generator[TestClient, None, None]:
    """
    Create a TestClient for the FastAPI app.

    Scope: function (fresh client per test)
    Clears dependency_overrides before and after each test.
    """

    def override_get_db():
        session = test_session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: fake_redis
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def user_token(client: TestClient) -> str:
    """Register bob@dylan.com and return a session token."""
    client.post("/users", json={"email": "bob@dylan.com", "password": "toto1234!"})
    response = client.get(
        "/connect", headers=basic_auth("bob@dylan.com", "toto1234!")
    )
    return response.json()["token"]


@pytest.fixture
def other_token(client: TestClient) -> str:
    """Register a second user and return a session token."""
    client.post("/users", json={"email": "alice@example.com", "password": "secret"})
    response = client.get(
        "/connect", headers=basic_auth("alice@example.com", "secret")
    )
    return response.json()["token"]
