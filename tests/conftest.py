"""Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import os
from typing import Any, Callable, Optional

import pytest
from sqlalchemy import create_engine, event, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

# Set required environment variables for tests BEFORE importing app modules
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_LEVEL", "INFO")

from app.models.audit import AuditLog
from app.models.database import Base, create_session_factory
from app.schemas.responses import SurveySpec
from app.services.audit import AuditSink
from app.services.response_store import ResponseStore
from app.services.survey_registry import SurveyRegistry
from app.storage.base import AuditEntry, StorageBackend, StoredResponse
from app.storage.database import DatabaseBackend
from app.storage.memory import MemoryBackend


def _unavailable() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("connection refused"))


class FailingBackend(StorageBackend):
    """Durable backend stand-in whose every call fails like a dead database."""

    name = "database"

    def __init__(self):
        self.calls: list[str] = []

    def _fail(self, operation: str):
        self.calls.append(operation)
        raise _unavailable()

    async def find_survey(self, spec_id: str, version: int) -> Optional[str]:
        self._fail("find_survey")

    async def create_survey(self, spec: SurveySpec) -> str:
        self._fail("create_survey")

    async def create_response(
        self,
        survey_id: str,
        token: str,
        data: dict[str, Any],
        owner_user_id: Optional[str] = None,
        anonymous: bool = False,
    ) -> StoredResponse:
        self._fail("create_response")

    async def get_by_token(self, token: str) -> Optional[StoredResponse]:
        self._fail("get_by_token")

    async def find_response_id(self, token: str) -> Optional[str]:
        self._fail("find_response_id")

    async def apply_patch(self, response_id: str, patch: dict[str, Any]) -> bool:
        self._fail("apply_patch")

    async def mark_submitted(self, response_id: str) -> bool:
        self._fail("mark_submitted")

    async def list_responses(self) -> list[StoredResponse]:
        self._fail("list_responses")

    async def record_audit(self, entry: AuditEntry) -> None:
        self._fail("record_audit")


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine with SQLite in-memory database.

    Yields:
        Engine: SQLAlchemy engine with all tables created

    Note:
        Database is created fresh for each test function.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,  # Set to True for SQL debugging
    )

    # Enable foreign key support for SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine) -> sessionmaker:
    """Session factory bound to the test engine."""
    return create_session_factory(db_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a test database session.

    Yields:
        Session: SQLAlchemy session for testing

    Note:
        Session is rolled back after each test to ensure isolation.
    """
    session = session_factory()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def database_backend(session_factory) -> DatabaseBackend:
    """Durable backend on the test database."""
    return DatabaseBackend(session_factory)


@pytest.fixture
def memory_backend() -> MemoryBackend:
    """Empty in-memory backend."""
    return MemoryBackend()


@pytest.fixture
def failing_backend() -> FailingBackend:
    """Durable backend whose every call raises OperationalError."""
    return FailingBackend()


@pytest.fixture
def sample_survey_spec() -> SurveySpec:
    """Provide a sample survey specification for testing."""
    return SurveySpec(id="test-survey", version=1, meta={"title": "Test survey"})


@pytest.fixture
def durable_store(database_backend, sample_survey_spec) -> ResponseStore:
    """ResponseStore using the SQLite durable backend."""
    return ResponseStore(
        fallback=MemoryBackend(),
        registry=SurveyRegistry(sample_survey_spec, database_backend),
        audit=AuditSink(database_backend),
        durable=database_backend,
    )


@pytest.fixture
def memory_store(sample_survey_spec) -> ResponseStore:
    """ResponseStore running on the fallback store only."""
    return ResponseStore(
        fallback=MemoryBackend(),
        registry=SurveyRegistry(sample_survey_spec),
        audit=AuditSink(),
    )


@pytest.fixture
def failing_store(failing_backend, sample_survey_spec) -> ResponseStore:
    """ResponseStore whose durable backend is down."""
    return ResponseStore(
        fallback=MemoryBackend(),
        registry=SurveyRegistry(sample_survey_spec, failing_backend),
        audit=AuditSink(failing_backend),
        durable=failing_backend,
    )


@pytest.fixture
def audit_actions(session_factory) -> Callable[[], list[str]]:
    """Return a callable listing recorded audit actions in insertion order."""
    def _actions() -> list[str]:
        with session_factory() as db:
            return list(
                db.execute(select(AuditLog.action).order_by(AuditLog.id)).scalars()
            )
    return _actions
