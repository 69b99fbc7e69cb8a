"""SurveyResponse model for resumable survey responses.

A response is addressed externally only by its resume token. Its answers live
in the survey_answers table, one row per question.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import (
    Index,
    String,
    Boolean,
    DateTime,
    ForeignKey,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.database import Base
from app.schemas.responses import ResponseStatus


class SurveyResponse(Base):
    """Model for a single respondent's survey response.

    Status only moves forward: partial -> submitted. Answers are deleted
    with the response (CASCADE).

    Attributes:
        id: Primary key (UUID string, never exposed in resume links)
        survey_id: Foreign key to survey_definitions
        token: Unique resume token
        status: partial or submitted
        owner_user_id: Authenticated user who started the response, if any
        anonymous: Whether the respondent asked to stay anonymous
        created_at: When the response was started
        updated_at: Last time answers or status changed
        answers: Answers recorded for this response
    """

    __tablename__ = "survey_responses"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    survey_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("survey_definitions.id"),
        nullable=False,
        index=True,
        comment="Foreign key to survey_definitions table"
    )

    token: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Opaque resume token"
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ResponseStatus.PARTIAL.value,
        comment="partial or submitted"
    )
    owner_user_id: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="User who started the response"
    )
    anonymous: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Respondent requested anonymity"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When the response was started"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=lambda: datetime.now(timezone.utc),
        comment="Last update timestamp"
    )

    survey: Mapped["SurveyDefinition"] = relationship(
        "SurveyDefinition",
        back_populates="responses",
    )
    answers: Mapped[list["SurveyAnswer"]] = relationship(
        "SurveyAnswer",
        back_populates="response",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_response_created_at", "created_at"),
    )

    @property
    def is_submitted(self) -> bool:
        """Whether the response has been submitted."""
        return self.status == ResponseStatus.SUBMITTED.value

    def mark_submitted(self) -> None:
        """Mark the response as submitted.

        Safe to call repeatedly: status never reverts to partial, and
        updated_at is bumped each time.
        """
        self.status = ResponseStatus.SUBMITTED.value
        self.touch()

    def touch(self) -> None:
        """Set updated_at to the current UTC time."""
        self.updated_at = datetime.now(timezone.utc)

    def answers_as_dict(self) -> dict:
        """Flatten answers into a question_id -> value mapping."""
        return {answer.question_id: answer.value for answer in self.answers}

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<SurveyResponse(id={self.id}, "
            f"token={self.token[:12]}..., "
            f"status={self.status})>"
        )
