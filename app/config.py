"""Application configuration management using Pydantic Settings.

This module loads and validates environment variables using Pydantic Settings.
All configuration is loaded from environment variables or a .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Attributes:
        database_url: SQLAlchemy connection string for the durable store
        database_pool_size: Number of connections to maintain in pool
        database_max_overflow: Maximum overflow connections beyond pool_size
        database_create_tables: Create missing tables at startup
        storage_backend: Durable store selection (auto, database, memory)
        environment: Application environment (development, staging, production)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        git_commit_sha: Git commit SHA reported at startup
        survey_spec_path: Optional YAML file describing the survey
        survey_spec_id: Survey identifier used when no YAML file is given
        survey_spec_version: Survey version used when no YAML file is given
        resume_path: Path of the survey page that accepts a resume token
        resume_email_subject: Subject line of queued resume emails
    """

    # Database Configuration
    database_url: Optional[str] = Field(
        default=None,
        description="Durable store connection string (unset disables it)"
    )
    database_pool_size: int = Field(
        default=5,
        description="Number of database connections in pool"
    )
    database_max_overflow: int = Field(
        default=10,
        description="Maximum overflow connections beyond pool size"
    )
    database_create_tables: bool = Field(
        default=True,
        description="Create missing tables from ORM metadata at startup"
    )
    storage_backend: str = Field(
        default="auto",
        description="Storage selection: auto, database or memory"
    )

    # Application Configuration
    environment: str = Field(
        default="development",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    git_commit_sha: str = Field(
        default="local",
        description="Git commit SHA for versioning"
    )

    # Survey Configuration
    survey_spec_path: Optional[str] = Field(
        default=None,
        description="Path to survey spec YAML file"
    )
    survey_spec_id: str = Field(
        default="default-survey",
        description="Survey identifier when no spec file is configured"
    )
    survey_spec_version: int = Field(
        default=1,
        ge=1,
        description="Survey version when no spec file is configured"
    )
    resume_path: str = Field(
        default="/survey",
        description="Survey page path used in resume links"
    )
    resume_email_subject: str = Field(
        default="Your survey resume link",
        description="Subject of queued resume emails"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed = {"development", "staging", "production"}
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"Log level must be one of {allowed}")
        return v_upper

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        """Validate storage backend is one of the allowed values."""
        allowed = {"auto", "database", "memory"}
        if v.lower() not in allowed:
            raise ValueError(f"Storage backend must be one of {allowed}")
        return v.lower()

    @field_validator("database_url")
    @classmethod
    def empty_database_url_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty DATABASE_URL as unset."""
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("resume_path")
    @classmethod
    def validate_resume_path(cls, v: str) -> str:
        """Validate resume path is absolute."""
        if not v.startswith("/"):
            raise ValueError("Resume path must start with '/' (e.g., /survey)")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def durable_store_enabled(self) -> bool:
        """Check whether a durable store may be used at all."""
        return self.storage_backend != "memory" and self.database_url is not None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings singleton

    Note:
        Uses lru_cache to ensure settings are only loaded once
        and shared across the application.
    """
    return Settings()
