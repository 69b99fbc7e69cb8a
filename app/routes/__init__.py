"""Routes package for FastAPI endpoints.

This package contains all API route modules for the survey resume service.
"""

from app.routes import emails, health, survey

__all__ = ["emails", "health", "survey"]
