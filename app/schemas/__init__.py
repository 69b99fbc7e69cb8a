"""Pydantic schemas for data validation.

This package contains the result shapes of the resume workflow and the
request/response bodies of the HTTP API.
"""

from app.schemas.responses import (
    ResponseStatus,
    CreatedResponse,
    LoadedResponse,
    ResponseSummary,
    QueuedEmail,
    SurveySpec,
)
from app.schemas.api import (
    ResumeEmailRequest,
    TokenResult,
    LoadResult,
    SaveResult,
    SubmitResult,
    QueuedResult,
    NotFoundResult,
)

__all__ = [
    "ResponseStatus",
    "CreatedResponse",
    "LoadedResponse",
    "ResponseSummary",
    "QueuedEmail",
    "SurveySpec",
    "ResumeEmailRequest",
    "TokenResult",
    "LoadResult",
    "SaveResult",
    "SubmitResult",
    "QueuedResult",
    "NotFoundResult",
]
