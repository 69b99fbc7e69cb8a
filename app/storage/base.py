"""Storage interface shared by the durable and fallback backends.

Both implementations expose the same coroutine API and return the same
plain records, so the ResponseStore can switch between them without the
caller noticing.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from app.schemas.responses import ResponseStatus, SurveySpec

# Survey id used whenever no durable survey definition is available.
MEMORY_SURVEY_ID = "mem_survey"


class BackendUnavailableError(Exception):
    """Raised when the durable backend cannot serve a call."""
    pass


@dataclass
class StoredResponse:
    """A response as read back from a storage backend.

    Attributes:
        id: Internal response identifier
        token: Resume token
        status: Current lifecycle status
        created_at: When the response was started
        updated_at: Last change to answers or status
        data: Answers as a question_id -> value mapping
        owner_user_id: User who started the response, if any
    """
    id: str
    token: str
    status: ResponseStatus
    created_at: datetime
    updated_at: datetime
    data: dict[str, Any] = field(default_factory=dict)
    owner_user_id: Optional[str] = None


@dataclass
class AuditEntry:
    """One write to the audit trail.

    Attributes:
        action: What happened (create_partial, update_partial, submit, email_queued)
        entity_id: Response id, or the token for queued emails
        diff: JSON-serialisable description of the change
        user_id: Acting user, if known
        entity: Entity type acted on
        timestamp: When the action happened
    """
    action: str
    entity_id: str
    diff: Any = None
    user_id: Optional[str] = None
    entity: str = "SurveyResponse"
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class StorageBackend(ABC):
    """Operations every response storage backend provides.

    Methods report a missing token or id with None/False rather than raising.
    Any exception raised means the backend itself is unusable for that call.
    """

    #: Short label used in logs and the health endpoint.
    name: str = "abstract"

    @abstractmethod
    async def find_survey(self, spec_id: str, version: int) -> Optional[str]:
        """Return the id of the survey definition for (spec_id, version), if any."""

    @abstractmethod
    async def create_survey(self, spec: SurveySpec) -> str:
        """Register a survey definition and return its id."""

    @abstractmethod
    async def create_response(
        self,
        survey_id: str,
        token: str,
        data: dict[str, Any],
        owner_user_id: Optional[str] = None,
        anonymous: bool = False,
    ) -> StoredResponse:
        """Create a partial response with its initial answers."""

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[StoredResponse]:
        """Load a response and its answers by resume token."""

    @abstractmethod
    async def find_response_id(self, token: str) -> Optional[str]:
        """Resolve a resume token to the internal response id."""

    @abstractmethod
    async def apply_patch(self, response_id: str, patch: dict[str, Any]) -> bool:
        """Upsert every answer in patch by question id.

        Returns:
            False if the response does not exist, True otherwise
        """

    @abstractmethod
    async def mark_submitted(self, response_id: str) -> bool:
        """Set status to submitted and bump updated_at.

        Returns:
            False if the response does not exist, True otherwise
        """

    @abstractmethod
    async def list_responses(self) -> list[StoredResponse]:
        """Return every stored response with its answers."""

    async def close(self) -> None:
        """Release resources held by the backend."""
