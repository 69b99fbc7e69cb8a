"""Service construction and FastAPI dependencies.

The storage backend is chosen once, at startup, from configuration and a
connectivity probe. The resulting services live on ``app.state`` for the
lifetime of the application and are handed to routes through the
dependency functions below.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from fastapi import Request
from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.config import Settings
from app.logging_config import get_logger
from app.models.database import (
    Base,
    create_db_engine,
    create_session_factory,
    probe_connection,
)
from app.schemas.responses import SurveySpec
from app.services.audit import AuditSink
from app.services.email_queue import EmailQueue
from app.services.response_store import ResponseStore
from app.services.survey_registry import SurveyRegistry
from app.services.survey_spec import load_survey_spec
from app.storage.database import DatabaseBackend
from app.storage.memory import MemoryBackend

logger = get_logger(__name__)


@dataclass
class ResumeServices:
    """Everything the resume workflow needs, owned by the application.

    Attributes:
        store: Response store used by the routes
        email_queue: Queue of resume emails
        fallback: In-process fallback store
        durable: Durable backend, if one was selected at startup
        engine: Engine behind the durable backend, if any
    """
    store: ResponseStore
    email_queue: EmailQueue
    fallback: MemoryBackend
    durable: Optional[DatabaseBackend] = None
    engine: Optional[Engine] = None

    async def close(self) -> None:
        """Finish pending audit writes and release storage."""
        await self.email_queue.drain()
        await self.fallback.close()
        if self.engine is not None:
            self.engine.dispose()


def select_durable_backend(
    settings: Settings,
) -> Tuple[Optional[DatabaseBackend], Optional[Engine]]:
    """Decide whether a durable backend is used for this process.

    memory: never. database: always, even if the database is down right
    now (calls fall back individually). auto: only if a SELECT 1 probe
    succeeds at startup.

    Args:
        settings: Application settings

    Returns:
        Tuple of (backend, engine), both None when running memory-only
    """
    if not settings.durable_store_enabled:
        if settings.storage_backend == "database":
            logger.warning("STORAGE_BACKEND=database but DATABASE_URL is unset; using memory")
        logger.info("Running with in-memory storage only")
        return None, None

    engine = create_db_engine(settings)

    if settings.storage_backend == "auto":
        try:
            probe_connection(engine)
        except SQLAlchemyError as e:
            logger.warning(f"Database unreachable at startup, using in-memory storage: {e}")
            engine.dispose()
            return None, None

    if settings.database_create_tables:
        try:
            Base.metadata.create_all(engine)
        except SQLAlchemyError as e:
            logger.warning(f"Could not create database tables: {e}")

    logger.info("Using database storage with in-memory fallback")
    return DatabaseBackend(create_session_factory(engine)), engine


def build_services(settings: Settings, spec: Optional[SurveySpec] = None) -> ResumeServices:
    """Construct the resume workflow services.

    Args:
        settings: Application settings
        spec: Survey specification (loaded from settings if omitted)

    Returns:
        ResumeServices ready for use
    """
    spec = spec or load_survey_spec(settings)
    durable, engine = select_durable_backend(settings)

    audit = AuditSink(durable)
    fallback = MemoryBackend()
    store = ResponseStore(
        fallback=fallback,
        registry=SurveyRegistry(spec, durable),
        audit=audit,
        durable=durable,
    )
    email_queue = EmailQueue(
        audit=audit,
        resume_path=settings.resume_path,
        subject=settings.resume_email_subject,
    )
    return ResumeServices(
        store=store,
        email_queue=email_queue,
        fallback=fallback,
        durable=durable,
        engine=engine,
    )


def get_services(request: Request) -> ResumeServices:
    """Dependency returning the application's ResumeServices."""
    return request.app.state.services


def get_response_store(request: Request) -> ResponseStore:
    """Dependency returning the ResponseStore."""
    return get_services(request).store


def get_email_queue(request: Request) -> EmailQueue:
    """Dependency returning the EmailQueue."""
    return get_services(request).email_queue
