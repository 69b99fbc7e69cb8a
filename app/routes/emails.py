"""Listing of queued resume emails for the external delivery worker."""

from fastapi import APIRouter, Depends

from app.dependencies import get_email_queue
from app.schemas.responses import QueuedEmail
from app.services.email_queue import EmailQueue

router = APIRouter()


@router.get("/api/emails", response_model=list[QueuedEmail])
async def list_queued_emails(
    email_queue: EmailQueue = Depends(get_email_queue),
) -> list[QueuedEmail]:
    """Return every queued email without removing any."""
    return email_queue.list_queued_emails()
