"""Database setup and session management using SQLAlchemy 2.0.

This module defines the declarative base for all ORM models and the factories
for the engine and session used by the durable storage backend. Nothing here
connects at import time: the engine is only built once startup has decided a
durable store is configured.
"""

from typing import Any, Dict

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from app.config import Settings


class Base(DeclarativeBase):
    """Base class for all ORM models.

    Uses SQLAlchemy 2.0's DeclarativeBase for modern type-safe models.
    All models should inherit from this class.
    """
    pass


def create_db_engine(settings: Settings) -> Engine:
    """Create the engine for the configured durable store.

    Args:
        settings: Application settings with a database_url

    Returns:
        Engine: SQLAlchemy engine with connection pooling

    Raises:
        ValueError: If no database_url is configured
    """
    if settings.database_url is None:
        raise ValueError("database_url is not configured")

    engine_kwargs: Dict[str, Any] = {
        "pool_pre_ping": True,  # Verify connections before using
        "echo": False,
    }

    # SQLite doesn't support pool_size/max_overflow
    if not settings.database_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = settings.database_pool_size
        engine_kwargs["max_overflow"] = settings.database_max_overflow

    return create_engine(settings.database_url, **engine_kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to an engine.

    Args:
        engine: Engine to bind sessions to

    Returns:
        sessionmaker: Factory producing short-lived sessions
    """
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,  # Prevent lazy loading after commit
    )


def probe_connection(engine: Engine) -> None:
    """Run a trivial query to check the database is reachable.

    Args:
        engine: Engine to probe

    Raises:
        sqlalchemy.exc.SQLAlchemyError: If the database cannot be reached
    """
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
