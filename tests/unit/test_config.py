"""Unit tests for application settings validation."""

import pytest
from pydantic import ValidationError

from app.config import Settings


class TestSettings:
    """Test suite for Settings validators and helpers."""

    def test_storage_backend_is_normalised(self):
        """Test storage backend values are case-insensitive."""
        assert Settings(storage_backend="DATABASE").storage_backend == "database"

    def test_invalid_storage_backend_rejected(self):
        """Test unknown storage backends fail validation."""
        with pytest.raises(ValidationError, match="Storage backend"):
            Settings(storage_backend="redis")

    def test_invalid_environment_rejected(self):
        """Test unknown environments fail validation."""
        with pytest.raises(ValidationError, match="Environment"):
            Settings(environment="qa")

    def test_log_level_is_uppercased(self):
        """Test log level is normalised to upper case."""
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_empty_database_url_is_unset(self):
        """Test an empty DATABASE_URL disables the durable store."""
        settings = Settings(database_url="  ", storage_backend="auto")

        assert settings.database_url is None
        assert settings.durable_store_enabled is False

    def test_durable_store_enabled_with_url(self):
        """Test a database URL enables the durable store in auto mode."""
        settings = Settings(database_url="sqlite:///surveys.db", storage_backend="auto")

        assert settings.durable_store_enabled is True

    def test_memory_mode_ignores_url(self):
        """Test memory mode never uses the database."""
        settings = Settings(database_url="sqlite:///surveys.db", storage_backend="memory")

        assert settings.durable_store_enabled is False

    def test_resume_path_must_be_absolute(self):
        """Test resume path must start with a slash."""
        with pytest.raises(ValidationError, match="Resume path"):
            Settings(resume_path="survey")

    def test_survey_version_must_be_positive(self):
        """Test survey version must be at least 1."""
        with pytest.raises(ValidationError):
            Settings(survey_spec_version=0)

    def test_environment_helpers(self):
        """Test environment helper properties."""
        assert Settings(environment="production").is_production is True
        assert Settings(environment="development").is_development is True
