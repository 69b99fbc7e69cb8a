"""SurveyAnswer model for per-question answer values."""

from typing import Any

from sqlalchemy import (
    String,
    ForeignKey,
    JSON,
    UniqueConstraint,
    select,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, Session

from app.models.database import Base


class SurveyAnswer(Base):
    """Model for one answer within a survey response.

    Keyed uniquely by (response_id, question_id): writing the same question
    again replaces the stored value.

    Attributes:
        id: Primary key
        response_id: Foreign key to survey_responses
        question_id: Question the value answers
        value: JSON value as supplied by the form workflow
        response: Relationship to parent SurveyResponse
    """

    __tablename__ = "survey_answers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    response_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("survey_responses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to survey_responses table"
    )
    question_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Question identifier"
    )
    value: Mapped[Any] = mapped_column(
        JSON,
        nullable=True,
        comment="Answer value"
    )

    response: Mapped["SurveyResponse"] = relationship(
        "SurveyResponse",
        back_populates="answers",
    )

    __table_args__ = (
        UniqueConstraint("response_id", "question_id", name="uq_answer_response_question"),
    )

    @classmethod
    def upsert(
        cls,
        db: Session,
        response_id: str,
        question_id: str,
        value: Any
    ) -> "SurveyAnswer":
        """Create or overwrite the answer for a question.

        Args:
            db: Database session
            response_id: Owning response
            question_id: Question being answered
            value: New value (replaces any previous value in full)

        Returns:
            SurveyAnswer: The created or updated answer

        Note:
            Does not commit; the caller commits the whole patch at once.
        """
        existing = db.execute(
            select(cls).where(
                cls.response_id == response_id,
                cls.question_id == question_id,
            )
        ).scalar_one_or_none()

        if existing:
            existing.value = value
            return existing

        answer = cls(response_id=response_id, question_id=question_id, value=value)
        db.add(answer)
        return answer

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<SurveyAnswer(response_id={self.response_id}, "
            f"question_id={self.question_id})>"
        )
