"""Response store orchestrating the save-and-resume workflow.

Every operation runs in two explicit steps: attempt the durable backend and
capture the outcome as a BackendResult, then branch once. A failed or
missing durable backend sends the call to the in-process fallback store,
which has the same inputs and result shapes. Callers cannot tell which
backend served them.

Token-keyed operations that miss on the durable backend also look in the
fallback store, so responses started during a database outage stay
reachable after it recovers.

Concurrent patches to the same token are not serialised: answers are
written per key, so two overlapping patches resolve last-write-wins per
question rather than per patch.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from app.logging_config import get_logger
from app.schemas.responses import (
    CreatedResponse,
    LoadedResponse,
    ResponseSummary,
)
from app.services.audit import (
    ACTION_CREATE_PARTIAL,
    ACTION_SUBMIT,
    ACTION_UPDATE_PARTIAL,
    AuditSink,
)
from app.services.survey_registry import SurveyRegistry
from app.services.token_generator import TokenGenerator
from app.storage.base import (
    MEMORY_SURVEY_ID,
    BackendUnavailableError,
    StorageBackend,
)
from app.storage.memory import MemoryBackend

logger = get_logger(__name__)

T = TypeVar("T")

# Question whose answer decides whether the response is stored as anonymous.
ANONYMITY_QUESTION_ID = "anonymity_preference"
ANONYMOUS_CHOICE = "Anonymous"


@dataclass
class BackendResult(Generic[T]):
    """Outcome of one attempt against the durable backend.

    Attributes:
        ok: Whether the backend completed the call
        value: What the call returned when ok
        error: What the backend raised when not ok
    """
    ok: bool
    value: Optional[T] = None
    error: Optional[Exception] = None


class ResponseStore:
    """Lifecycle owner of survey responses (partial -> submitted)."""

    def __init__(
        self,
        fallback: MemoryBackend,
        registry: SurveyRegistry,
        audit: AuditSink,
        durable: Optional[StorageBackend] = None,
        tokens: Optional[TokenGenerator] = None,
    ):
        """Initialize store.

        Args:
            fallback: In-process store used whenever the durable one cannot be
            registry: Resolves the survey definition id for new responses
            audit: Recorder for durable-path audit entries
            durable: Durable backend selected at startup, if any
            tokens: Resume token generator
        """
        self._fallback = fallback
        self._registry = registry
        self._audit = audit
        self._durable = durable
        self._tokens = tokens or TokenGenerator()

    @property
    def storage_mode(self) -> str:
        """Name of the backend tried first."""
        return self._durable.name if self._durable is not None else self._fallback.name

    async def _attempt(
        self,
        operation: str,
        call: Callable[[StorageBackend], Awaitable[T]],
    ) -> BackendResult[T]:
        """Run call against the durable backend and capture the outcome.

        Args:
            operation: Operation name for logging
            call: Coroutine function taking the durable backend

        Returns:
            BackendResult with ok=False if there is no durable backend or
            it raised
        """
        if self._durable is None:
            return BackendResult(ok=False)

        try:
            value = await call(self._durable)
        except Exception as e:
            logger.warning(
                f"Durable store failed during {operation}, using fallback store: {e}",
                extra={"operation": operation, "storage": self._durable.name},
            )
            return BackendResult(ok=False, error=e)

        return BackendResult(ok=True, value=value)

    async def create_partial(
        self,
        data: dict[str, Any],
        user_id: Optional[str] = None,
    ) -> CreatedResponse:
        """Start a new partial response.

        Args:
            data: Already-validated answers, question_id -> value
            user_id: Authenticated user starting the response, if any

        Returns:
            CreatedResponse with the internal id and the resume token
        """
        token = self._tokens.generate()
        survey_id = await self._registry.ensure_survey()
        anonymous = data.get(ANONYMITY_QUESTION_ID) == ANONYMOUS_CHOICE

        async def create_durable(backend: StorageBackend) -> CreatedResponse:
            if survey_id == MEMORY_SURVEY_ID:
                raise BackendUnavailableError("survey definition could not be resolved")
            stored = await backend.create_response(
                survey_id=survey_id,
                token=token,
                data=data,
                owner_user_id=user_id,
                anonymous=anonymous,
            )
            await self._audit.record(ACTION_CREATE_PARTIAL, stored.id, diff=data, user_id=user_id)
            return CreatedResponse(id=stored.id, token=token)

        result = await self._attempt("create_partial", create_durable)
        if result.ok:
            logger.info(f"Created partial response {result.value.id}", extra={"token": token})
            return result.value

        stored = await self._fallback.create_response(
            survey_id=MEMORY_SURVEY_ID,
            token=token,
            data=data,
            owner_user_id=user_id,
            anonymous=anonymous,
        )
        logger.info(
            f"Created partial response {stored.id} in fallback store",
            extra={"token": token},
        )
        return CreatedResponse(id=stored.id, token=token)

    async def load_by_token(self, token: str) -> Optional[LoadedResponse]:
        """Load a response and its answers by resume token.

        Args:
            token: Resume token

        Returns:
            LoadedResponse, or None if the token is not recognised
        """
        result = await self._attempt("load_by_token", lambda backend: backend.get_by_token(token))
        stored = result.value if result.ok else None
        if stored is None:
            stored = await self._fallback.get_by_token(token)

        if stored is None:
            logger.info("Resume token not recognised", extra={"token": token})
            return None

        return LoadedResponse(id=stored.id, status=stored.status, data=stored.data)

    async def upsert_partial(
        self,
        token: str,
        patch: dict[str, Any],
        user_id: Optional[str] = None,
    ) -> bool:
        """Merge a patch of answers into an existing response.

        Keys in patch overwrite stored values in full; other answers are
        left untouched. Unknown tokens are not created implicitly.

        Args:
            token: Resume token
            patch: question_id -> value pairs to write
            user_id: Acting user, if any

        Returns:
            True if the patch was applied, False if the token is unknown
        """
        async def patch_durable(backend: StorageBackend) -> bool:
            response_id = await backend.find_response_id(token)
            if response_id is None:
                return False
            await self._audit.record(ACTION_UPDATE_PARTIAL, response_id, diff=patch, user_id=user_id)
            return await backend.apply_patch(response_id, patch)

        result = await self._attempt("upsert_partial", patch_durable)
        if result.ok and result.value:
            logger.debug(f"Patched {len(patch)} answers", extra={"token": token})
            return True

        response_id = await self._fallback.find_response_id(token)
        if response_id is None:
            logger.info("Patch for unknown resume token ignored", extra={"token": token})
            return False
        return await self._fallback.apply_patch(response_id, patch)

    async def submit_by_token(
        self,
        token: str,
        user_id: Optional[str] = None,
    ) -> Optional[str]:
        """Mark a response as submitted.

        Submitting twice keeps the status at submitted; each call still
        writes an audit entry. Empty responses may be submitted.

        Args:
            token: Resume token
            user_id: Acting user, if any

        Returns:
            Internal response id, or None if the token is unknown
        """
        async def submit_durable(backend: StorageBackend) -> Optional[str]:
            response_id = await backend.find_response_id(token)
            if response_id is None or not await backend.mark_submitted(response_id):
                return None
            await self._audit.record(ACTION_SUBMIT, response_id, diff={}, user_id=user_id)
            return response_id

        result = await self._attempt("submit_by_token", submit_durable)
        if result.ok and result.value is not None:
            logger.info(f"Submitted response {result.value}", extra={"token": token})
            return result.value

        response_id = await self._fallback.find_response_id(token)
        if response_id is None or not await self._fallback.mark_submitted(response_id):
            logger.info("Submit for unknown resume token ignored", extra={"token": token})
            return None

        logger.info(f"Submitted response {response_id} in fallback store", extra={"token": token})
        return response_id

    async def list_all(self) -> list[ResponseSummary]:
        """List every response with its answers.

        Durable rows come first, followed by fallback rows. No pagination
        or filtering; order within a backend is not guaranteed.

        Returns:
            ResponseSummary for each stored response
        """
        result = await self._attempt("list_all", lambda backend: backend.list_responses())
        rows = list(result.value) if result.ok else []
        rows.extend(await self._fallback.list_responses())

        return [
            ResponseSummary(id=row.id, created_at=row.created_at, data=row.data)
            for row in rows
        ]
