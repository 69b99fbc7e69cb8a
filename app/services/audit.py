"""Best-effort audit trail recorder.

Audit writes are diagnostic. A failed write is logged and dropped; it never
changes the outcome of the operation being audited.
"""

from typing import Any, Optional

from app.logging_config import get_logger
from app.storage.base import AuditEntry
from app.storage.database import DatabaseBackend

logger = get_logger(__name__)

ACTION_CREATE_PARTIAL = "create_partial"
ACTION_UPDATE_PARTIAL = "update_partial"
ACTION_SUBMIT = "submit"
ACTION_EMAIL_QUEUED = "email_queued"


class AuditSink:
    """Write-only recorder of actions on survey responses.

    Entries go to the durable backend only. Without one, recording is a
    no-op.
    """

    def __init__(self, backend: Optional[DatabaseBackend] = None):
        """Initialize sink.

        Args:
            backend: Durable backend to write entries to, if configured
        """
        self._backend = backend

    @property
    def enabled(self) -> bool:
        """Whether entries are persisted anywhere."""
        return self._backend is not None

    async def record(
        self,
        action: str,
        entity_id: str,
        diff: Any = None,
        user_id: Optional[str] = None,
        entity: str = "SurveyResponse",
    ) -> bool:
        """Record one audit entry.

        Args:
            action: Action name (see ACTION_* constants)
            entity_id: Id of the affected entity
            diff: JSON-serialisable change payload
            user_id: Acting user, if known
            entity: Entity type

        Returns:
            True if the entry was persisted, False otherwise
        """
        if self._backend is None:
            return False

        entry = AuditEntry(
            action=action,
            entity_id=entity_id,
            diff=diff,
            user_id=user_id,
            entity=entity,
        )
        try:
            await self._backend.record_audit(entry)
        except Exception as e:
            logger.warning(
                f"Audit write failed for {action}: {e}",
                extra={"operation": action},
            )
            return False

        logger.debug(f"Audit entry recorded: {action}")
        return True
