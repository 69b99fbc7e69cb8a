"""Survey save-and-resume endpoints.

These are the actions the step-by-step form calls: start a response and get
a token, load by token, save a partial patch, submit, and email a resume
link. Payloads arrive already validated by the form layer; only the body
shape (a JSON object) is checked here.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from app.dependencies import get_email_queue, get_response_store
from app.logging_config import get_logger
from app.schemas.api import (
    LoadResult,
    NotFoundResult,
    QueuedResult,
    ResumeEmailRequest,
    SaveResult,
    SubmitResult,
    TokenResult,
)
from app.schemas.responses import ResponseSummary
from app.services.email_queue import EmailQueue
from app.services.response_store import ResponseStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/survey")


def _not_found(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content=NotFoundResult(error=message).model_dump(),
    )


@router.post("/tokens", response_model=TokenResult)
async def create_survey_token(
    data: dict[str, Any] = Body(...),
    store: ResponseStore = Depends(get_response_store),
) -> TokenResult:
    """Start a partial response and return its resume token."""
    created = await store.create_partial(data)
    return TokenResult(token=created.token)


@router.post("/submit", response_model=SubmitResult)
async def submit_survey_response(
    data: dict[str, Any] = Body(...),
    store: ResponseStore = Depends(get_response_store),
):
    """Store a complete response and submit it in one step."""
    created = await store.create_partial(data)
    response_id = await store.submit_by_token(created.token)
    if response_id is None:
        logger.error("Submit failed for a response created moments earlier")
        return _not_found("Submit failed")
    return SubmitResult(id=response_id)


@router.get("/responses", response_model=list[ResponseSummary])
async def list_survey_responses(
    store: ResponseStore = Depends(get_response_store),
) -> list[ResponseSummary]:
    """List every stored response."""
    return await store.list_all()


@router.get("/responses/{token}", response_model=LoadResult)
async def load_survey_by_token(
    token: str,
    store: ResponseStore = Depends(get_response_store),
):
    """Load a response's status and answers by resume token."""
    loaded = await store.load_by_token(token)
    if loaded is None:
        return _not_found("Resume token not recognised")
    return LoadResult(status=loaded.status, data=loaded.data)


@router.patch("/responses/{token}", response_model=SaveResult)
async def save_partial_by_token(
    token: str,
    patch: dict[str, Any] = Body(...),
    store: ResponseStore = Depends(get_response_store),
):
    """Merge a patch of answers into a partial response."""
    if not await store.upsert_partial(token, patch):
        return _not_found("Resume token not recognised")
    return SaveResult(ok=True)


@router.post("/responses/{token}/submit", response_model=SubmitResult)
async def submit_by_token(
    token: str,
    store: ResponseStore = Depends(get_response_store),
):
    """Submit a partial response."""
    response_id = await store.submit_by_token(token)
    if response_id is None:
        return _not_found("No in-progress response for this token")
    return SubmitResult(id=response_id)


@router.post("/responses/{token}/resume-email", response_model=QueuedResult)
async def send_resume_email(
    token: str,
    body: ResumeEmailRequest,
    email_queue: EmailQueue = Depends(get_email_queue),
) -> QueuedResult:
    """Queue an email carrying the resume link for token."""
    email_id = email_queue.queue_resume_email(body.to, token)
    return QueuedResult(id=email_id)
