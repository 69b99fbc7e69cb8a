"""AuditLog model for the append-only audit trail."""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import (
    Index,
    String,
    DateTime,
    JSON,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.database import Base


class AuditLog(Base):
    """Model for a single audit trail entry.

    Rows are only ever inserted. The service never reads them back; they
    exist for operators investigating what happened to a response.

    Attributes:
        id: Primary key
        user_id: User who performed the action, if known
        action: Action name (create_partial, update_partial, submit, email_queued)
        entity: Entity type acted on
        entity_id: Response id, or the token for queued emails
        diff: JSON payload describing the change
        created_at: When the action happened
    """

    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    user_id: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="Acting user, if authenticated"
    )
    action: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Action name"
    )
    entity: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Entity type"
    )
    entity_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Entity identifier"
    )
    diff: Mapped[Any] = mapped_column(
        JSON,
        nullable=True,
        comment="Change payload"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When the action happened"
    )

    __table_args__ = (
        Index("idx_audit_entity", "entity", "entity_id"),
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<AuditLog(id={self.id}, action={self.action}, "
            f"entity={self.entity}, entity_id={self.entity_id})>"
        )
