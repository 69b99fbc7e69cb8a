"""SurveyDefinition model for registered survey specifications.

One row exists per (spec_id, version) pair. Responses stored in the durable
backend reference it by foreign key.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    String,
    Integer,
    DateTime,
    JSON,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.database import Base


class SurveyDefinition(Base):
    """Model for a registered survey specification.

    Created once on first use and never modified afterwards.

    Attributes:
        id: Primary key (UUID string)
        spec_id: Identifier of the survey specification
        version: Version of the survey specification
        meta: Opaque metadata blob from the specification
        created_at: When the definition was registered
        responses: Responses collected against this definition
    """

    __tablename__ = "survey_definitions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    spec_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Survey specification identifier"
    )
    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Survey specification version"
    )
    meta: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Opaque specification metadata"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When the definition was registered"
    )

    responses: Mapped[list["SurveyResponse"]] = relationship(
        "SurveyResponse",
        back_populates="survey",
    )

    __table_args__ = (
        UniqueConstraint("spec_id", "version", name="uq_survey_spec_version"),
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<SurveyDefinition(id={self.id}, "
            f"spec_id={self.spec_id}, version={self.version})>"
        )
