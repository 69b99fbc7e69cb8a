"""Registry ensuring one survey definition row per (spec id, version)."""

from typing import Optional

from app.logging_config import get_logger
from app.schemas.responses import SurveySpec
from app.storage.base import MEMORY_SURVEY_ID, StorageBackend

logger = get_logger(__name__)


class SurveyRegistry:
    """Resolves the survey definition responses are stored against.

    Two concurrent first calls may both miss the lookup and race to create
    the row; the unique constraint on (spec_id, version) makes the loser
    fail, and the loser falls back to the in-memory survey id for that call.
    """

    def __init__(self, spec: SurveySpec, backend: Optional[StorageBackend] = None):
        """Initialize registry.

        Args:
            spec: The fixed survey specification
            backend: Durable backend holding survey definitions, if configured
        """
        self.spec = spec
        self._backend = backend

    async def ensure_survey(self) -> str:
        """Return the survey definition id, creating the row on first use.

        Returns:
            Definition id, or MEMORY_SURVEY_ID when the durable backend is
            missing or failing
        """
        if self._backend is None:
            return MEMORY_SURVEY_ID

        try:
            existing = await self._backend.find_survey(self.spec.id, self.spec.version)
            if existing:
                return existing
            return await self._backend.create_survey(self.spec)
        except Exception as e:
            logger.warning(
                f"Survey registry unavailable, using in-memory survey: {e}",
                extra={"operation": "ensure_survey"},
            )
            return MEMORY_SURVEY_ID
