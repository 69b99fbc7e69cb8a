"""Pydantic schemas for the resume workflow's results.

These are the shapes callers of the ResponseStore and EmailQueue see. They
are identical whether a call was served by the database or by the in-process
fallback store.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResponseStatus(str, Enum):
    """Lifecycle states of a survey response."""
    PARTIAL = "partial"
    SUBMITTED = "submitted"


class CreatedResponse(BaseModel):
    """Result of starting a partial response.

    Attributes:
        id: Internal response identifier
        token: Opaque resume token
    """
    id: str
    token: str


class LoadedResponse(BaseModel):
    """A response resolved from its resume token.

    Attributes:
        id: Internal response identifier
        status: Current lifecycle status
        data: Answers as a question_id -> value mapping
    """
    id: str
    status: ResponseStatus
    data: dict[str, Any] = Field(default_factory=dict)


class ResponseSummary(BaseModel):
    """One row of the full response listing.

    Attributes:
        id: Internal response identifier
        created_at: When the response was started
        data: Answers as a question_id -> value mapping
    """
    id: str
    created_at: datetime
    data: dict[str, Any] = Field(default_factory=dict)


class QueuedEmail(BaseModel):
    """A resume email awaiting delivery by an external sender.

    Instances are frozen: once queued an email is never modified.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    to: str
    subject: str
    body: str
    token: str
    created_at: datetime


class SurveySpec(BaseModel):
    """The survey specification responses are collected against.

    Attributes:
        id: Specification identifier
        version: Specification version (>= 1)
        meta: Opaque metadata stored alongside the definition
    """
    id: str = Field(..., min_length=1, max_length=100)
    version: int = Field(..., ge=1)
    meta: dict[str, Any] = Field(default_factory=dict)
