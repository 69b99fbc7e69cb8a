"""Request and response bodies for the HTTP API."""

from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.responses import ResponseStatus


class ResumeEmailRequest(BaseModel):
    """Body of a request to queue a resume email.

    The address is validated by the form workflow before it gets here;
    only basic shape is checked.
    """
    to: str = Field(..., min_length=3, max_length=320, description="Recipient address")


class TokenResult(BaseModel):
    """Result of creating a resume token."""
    ok: bool = True
    token: str


class LoadResult(BaseModel):
    """Result of loading a response by token."""
    ok: bool = True
    status: ResponseStatus
    data: dict


class SaveResult(BaseModel):
    """Result of saving a partial patch."""
    ok: bool


class SubmitResult(BaseModel):
    """Result of submitting a response."""
    ok: bool = True
    id: str


class QueuedResult(BaseModel):
    """Result of queueing a resume email."""
    ok: bool = True
    id: str


class NotFoundResult(BaseModel):
    """Body returned when a token is not recognised."""
    ok: bool = False
    error: Optional[str] = None
