"""Database models and session management.

This package contains all SQLAlchemy ORM models and database utilities.
"""

from app.models.database import (
    Base,
    create_db_engine,
    create_session_factory,
    probe_connection,
)
from app.models.survey import SurveyDefinition
from app.models.response import SurveyResponse
from app.models.answer import SurveyAnswer
from app.models.audit import AuditLog

__all__ = [
    "Base",
    "create_db_engine",
    "create_session_factory",
    "probe_connection",
    "SurveyDefinition",
    "SurveyResponse",
    "SurveyAnswer",
    "AuditLog",
]
