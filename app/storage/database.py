"""Durable storage backend backed by SQLAlchemy.

Every public method opens its own short-lived session and commits before
returning, so each call is a single unit of work on the database side. No
transaction spans two calls.

Methods are ``async`` to match the storage interface but run the blocking
SQLAlchemy calls directly on the event loop. A slow database stalls every
request being served by the process until the call returns.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload, sessionmaker

from app.logging_config import get_logger
from app.models.answer import SurveyAnswer
from app.models.audit import AuditLog
from app.models.response import SurveyResponse
from app.models.survey import SurveyDefinition
from app.schemas.responses import ResponseStatus, SurveySpec
from app.storage.base import AuditEntry, StorageBackend, StoredResponse

logger = get_logger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo on DateTime(timezone=True) columns; values are stored as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_stored(response: SurveyResponse) -> StoredResponse:
    return StoredResponse(
        id=response.id,
        token=response.token,
        status=ResponseStatus(response.status),
        created_at=_as_utc(response.created_at),
        updated_at=_as_utc(response.updated_at),
        data=response.answers_as_dict(),
        owner_user_id=response.owner_user_id,
    )


class DatabaseBackend(StorageBackend):
    """Storage backend persisting responses through SQLAlchemy.

    Also the only place audit entries are written; the in-memory backend
    keeps no audit trail.
    """

    name = "database"

    def __init__(self, session_factory: sessionmaker):
        """Initialize backend.

        Args:
            session_factory: Factory producing sessions for the durable store
        """
        self._session_factory = session_factory

    def _session(self) -> Session:
        return self._session_factory()

    async def find_survey(self, spec_id: str, version: int) -> Optional[str]:
        with self._session() as db:
            return db.execute(
                select(SurveyDefinition.id).where(
                    SurveyDefinition.spec_id == spec_id,
                    SurveyDefinition.version == version,
                )
            ).scalar_one_or_none()

    async def create_survey(self, spec: SurveySpec) -> str:
        with self._session() as db:
            survey = SurveyDefinition(spec_id=spec.id, version=spec.version, meta=spec.meta)
            db.add(survey)
            db.commit()
            logger.info(f"Registered survey {spec.id} v{spec.version} as {survey.id}")
            return survey.id

    async def create_response(
        self,
        survey_id: str,
        token: str,
        data: dict[str, Any],
        owner_user_id: Optional[str] = None,
        anonymous: bool = False,
    ) -> StoredResponse:
        with self._session() as db:
            response = SurveyResponse(
                survey_id=survey_id,
                token=token,
                status=ResponseStatus.PARTIAL.value,
                owner_user_id=owner_user_id,
                anonymous=anonymous,
            )
            response.answers = [
                SurveyAnswer(question_id=question_id, value=value)
                for question_id, value in data.items()
            ]
            db.add(response)
            db.commit()
            return _to_stored(response)

    async def get_by_token(self, token: str) -> Optional[StoredResponse]:
        with self._session() as db:
            response = db.execute(
                select(SurveyResponse)
                .options(selectinload(SurveyResponse.answers))
                .where(SurveyResponse.token == token)
            ).scalar_one_or_none()
            if response is None:
                return None
            return _to_stored(response)

    async def find_response_id(self, token: str) -> Optional[str]:
        with self._session() as db:
            return db.execute(
                select(SurveyResponse.id).where(SurveyResponse.token == token)
            ).scalar_one_or_none()

    async def apply_patch(self, response_id: str, patch: dict[str, Any]) -> bool:
        with self._session() as db:
            response = db.get(SurveyResponse, response_id)
            if response is None:
                return False

            for question_id, value in patch.items():
                SurveyAnswer.upsert(db, response_id, question_id, value)
            response.touch()
            db.commit()
            return True

    async def mark_submitted(self, response_id: str) -> bool:
        with self._session() as db:
            response = db.get(SurveyResponse, response_id)
            if response is None:
                return False

            response.mark_submitted()
            db.commit()
            return True

    async def list_responses(self) -> list[StoredResponse]:
        with self._session() as db:
            responses = db.execute(
                select(SurveyResponse).options(selectinload(SurveyResponse.answers))
            ).scalars().all()
            return [_to_stored(response) for response in responses]

    async def record_audit(self, entry: AuditEntry) -> None:
        """Append an entry to the audit trail.

        Args:
            entry: Audit entry to persist
        """
        with self._session() as db:
            db.add(
                AuditLog(
                    user_id=entry.user_id,
                    action=entry.action,
                    entity=entry.entity,
                    entity_id=entry.entity_id,
                    diff=entry.diff,
                    created_at=entry.timestamp,
                )
            )
            db.commit()
