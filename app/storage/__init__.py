"""Storage backends for survey responses.

DatabaseBackend is the durable store; MemoryBackend is the in-process
fallback. Both implement StorageBackend.
"""

from app.storage.base import (
    MEMORY_SURVEY_ID,
    AuditEntry,
    BackendUnavailableError,
    StorageBackend,
    StoredResponse,
)
from app.storage.database import DatabaseBackend
from app.storage.memory import MemoryBackend

__all__ = [
    "MEMORY_SURVEY_ID",
    "AuditEntry",
    "BackendUnavailableError",
    "StorageBackend",
    "StoredResponse",
    "DatabaseBackend",
    "MemoryBackend",
]
