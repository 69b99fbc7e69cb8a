"""In-process fallback storage backend.

Holds responses in plain dictionaries owned by a single MemoryBackend
instance. The instance is created once at startup and cleared on shutdown;
nothing survives a process restart.

There is no locking. The backend is safe under the service's single-threaded
asyncio model; a multi-threaded host must serialise access itself.
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from app.logging_config import get_logger
from app.schemas.responses import ResponseStatus, SurveySpec
from app.services.token_generator import FALLBACK_ID_PREFIX, TokenGenerator
from app.storage.base import MEMORY_SURVEY_ID, StorageBackend, StoredResponse

logger = get_logger(__name__)


@dataclass
class _MemoryResponse:
    id: str
    token: str
    survey_id: str
    status: ResponseStatus
    created_at: datetime
    updated_at: datetime
    owner_user_id: Optional[str] = None
    anonymous: bool = False
    data: dict[str, Any] = field(default_factory=dict)

    def snapshot(self) -> StoredResponse:
        # Callers get copies so they cannot mutate stored answers in place.
        return StoredResponse(
            id=self.id,
            token=self.token,
            status=self.status,
            created_at=self.created_at,
            updated_at=self.updated_at,
            data=copy.deepcopy(self.data),
            owner_user_id=self.owner_user_id,
        )


class MemoryBackend(StorageBackend):
    """Storage backend keeping responses in process memory.

    Survey definitions are not tracked: every response belongs to the
    sentinel in-memory survey.
    """

    name = "memory"

    def __init__(self, id_generator: Optional[TokenGenerator] = None):
        """Initialize an empty store.

        Args:
            id_generator: Source of internal response ids (mem_...)
        """
        self._ids = id_generator or TokenGenerator(prefix=FALLBACK_ID_PREFIX)
        self._responses: dict[str, _MemoryResponse] = {}
        self._ids_by_token: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._responses)

    async def find_survey(self, spec_id: str, version: int) -> Optional[str]:
        return MEMORY_SURVEY_ID

    async def create_survey(self, spec: SurveySpec) -> str:
        return MEMORY_SURVEY_ID

    async def create_response(
        self,
        survey_id: str,
        token: str,
        data: dict[str, Any],
        owner_user_id: Optional[str] = None,
        anonymous: bool = False,
    ) -> StoredResponse:
        if token in self._ids_by_token:
            raise ValueError("Resume token already in use")

        now = datetime.now(timezone.utc)
        record = _MemoryResponse(
            id=self._ids.generate(),
            token=token,
            survey_id=survey_id,
            status=ResponseStatus.PARTIAL,
            created_at=now,
            updated_at=now,
            owner_user_id=owner_user_id,
            anonymous=anonymous,
            data=copy.deepcopy(data),
        )
        self._responses[record.id] = record
        self._ids_by_token[token] = record.id

        logger.debug(f"Stored response {record.id} in memory")
        return record.snapshot()

    async def get_by_token(self, token: str) -> Optional[StoredResponse]:
        response_id = self._ids_by_token.get(token)
        if response_id is None:
            return None
        return self._responses[response_id].snapshot()

    async def find_response_id(self, token: str) -> Optional[str]:
        return self._ids_by_token.get(token)

    async def apply_patch(self, response_id: str, patch: dict[str, Any]) -> bool:
        record = self._responses.get(response_id)
        if record is None:
            return False

        # Key-wise merge: listed keys are replaced whole, others untouched.
        record.data = {**record.data, **copy.deepcopy(patch)}
        record.updated_at = datetime.now(timezone.utc)
        return True

    async def mark_submitted(self, response_id: str) -> bool:
        record = self._responses.get(response_id)
        if record is None:
            return False

        record.status = ResponseStatus.SUBMITTED
        record.updated_at = datetime.now(timezone.utc)
        return True

    async def list_responses(self) -> list[StoredResponse]:
        return [record.snapshot() for record in self._responses.values()]

    async def close(self) -> None:
        """Drop everything held in memory."""
        if self._responses:
            logger.info(f"Discarding {len(self._responses)} in-memory responses")
        self._responses.clear()
        self._ids_by_token.clear()
