"""Queue of resume-link emails awaiting an external sender.

Queueing is synchronous: the caller gets the queued id straight away. The
matching audit entry is written by a background task that the caller never
waits on; if it fails, the failure is logged and forgotten.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlencode

from app.logging_config import get_logger
from app.schemas.responses import QueuedEmail
from app.services.audit import ACTION_EMAIL_QUEUED, AuditSink
from app.services.template_renderer import TemplateRenderer, get_template_renderer
from app.services.token_generator import EMAIL_ID_PREFIX, TokenGenerator

logger = get_logger(__name__)

DEFAULT_RESUME_PATH = "/survey"
DEFAULT_SUBJECT = "Your survey resume link"
RESUME_EMAIL_TEMPLATE = "Resume your survey here: {{ resume_url }}"


def build_resume_url(token: str, resume_path: str = DEFAULT_RESUME_PATH) -> str:
    """Build the link a respondent follows to resume.

    Args:
        token: Resume token
        resume_path: Path of the survey page

    Returns:
        Relative URL such as /survey?token=tok_...
    """
    return f"{resume_path}?{urlencode({'token': token})}"


class EmailQueue:
    """Append-only list of resume emails.

    Delivery and removal belong to the external sender; this queue only
    records what should be sent.
    """

    def __init__(
        self,
        audit: AuditSink,
        resume_path: str = DEFAULT_RESUME_PATH,
        subject: str = DEFAULT_SUBJECT,
        renderer: Optional[TemplateRenderer] = None,
        ids: Optional[TokenGenerator] = None,
    ):
        """Initialize queue.

        Args:
            audit: Recorder for email_queued entries
            resume_path: Survey page path used in resume links
            subject: Subject line of every queued email
            renderer: Template renderer for the body
            ids: Generator of queued email ids (mail_...)
        """
        self._audit = audit
        self.resume_path = resume_path
        self.subject = subject
        self._renderer = renderer or get_template_renderer()
        self._ids = ids or TokenGenerator(prefix=EMAIL_ID_PREFIX)
        self._emails: list[QueuedEmail] = []
        self._pending: set[asyncio.Task] = set()

    def queue_resume_email(self, to: str, token: str, user_id: Optional[str] = None) -> str:
        """Queue an email carrying a resume link.

        Args:
            to: Recipient address (already validated)
            token: Resume token to link to
            user_id: Acting user, if any, for the audit entry

        Returns:
            Id of the queued email
        """
        resume_url = build_resume_url(token, self.resume_path)
        email = QueuedEmail(
            id=self._ids.generate(),
            to=to,
            subject=self.subject,
            body=self._renderer.render(RESUME_EMAIL_TEMPLATE, {"resume_url": resume_url}),
            token=token,
            created_at=datetime.now(timezone.utc),
        )
        self._emails.append(email)
        logger.info(f"Queued resume email {email.id}", extra={"token": token})

        self._spawn_audit(email, user_id)
        return email.id

    def list_queued_emails(self) -> list[QueuedEmail]:
        """Return a snapshot of everything queued so far.

        The returned list is a copy; items are frozen.
        """
        return list(self._emails)

    def _spawn_audit(self, email: QueuedEmail, user_id: Optional[str]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running event loop, audit skipped for email {email.id}")
            return

        task = loop.create_task(
            self._audit.record(
                ACTION_EMAIL_QUEUED,
                email.token,
                diff={"to": email.to, "subject": email.subject},
                user_id=user_id,
            ),
            name=f"audit-{email.id}",
        )
        self._pending.add(task)
        task.add_done_callback(self._on_audit_done)

    def _on_audit_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            logger.warning(f"Audit task {task.get_name()} was cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Audit task {task.get_name()} failed: {error}")

    async def drain(self) -> None:
        """Wait for outstanding audit tasks to finish."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
