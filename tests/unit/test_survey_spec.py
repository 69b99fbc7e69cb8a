"""Unit tests for survey specification loading."""

import pytest

from app.config import Settings
from app.services.survey_spec import (
    SurveySpecError,
    load_survey_spec,
    load_survey_spec_file,
)


@pytest.fixture
def spec_file(tmp_path):
    """Write a valid survey spec YAML file."""
    path = tmp_path / "survey.yaml"
    path.write_text(
        "id: engineering-onboarding\n"
        "version: 3\n"
        "meta:\n"
        "  title: Engineering onboarding survey\n"
        "  steps: 4\n"
    )
    return path


class TestLoadSurveySpecFile:
    """Tests for load_survey_spec_file."""

    def test_load_valid_file(self, spec_file):
        """Test a valid file produces a SurveySpec."""
        spec = load_survey_spec_file(spec_file)

        assert spec.id == "engineering-onboarding"
        assert spec.version == 3
        assert spec.meta == {"title": "Engineering onboarding survey", "steps": 4}

    def test_missing_file(self, tmp_path):
        """Test a missing file raises SurveySpecError."""
        with pytest.raises(SurveySpecError, match="not found"):
            load_survey_spec_file(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test unparsable YAML raises SurveySpecError."""
        path = tmp_path / "bad.yaml"
        path.write_text("id: [unclosed\n")

        with pytest.raises(SurveySpecError, match="Invalid YAML"):
            load_survey_spec_file(path)

    def test_non_mapping(self, tmp_path):
        """Test a YAML list is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(SurveySpecError, match="must be a mapping"):
            load_survey_spec_file(path)

    def test_invalid_version(self, tmp_path):
        """Test schema violations raise SurveySpecError."""
        path = tmp_path / "v0.yaml"
        path.write_text("id: s\nversion: 0\n")

        with pytest.raises(SurveySpecError, match="failed validation"):
            load_survey_spec_file(path)

    def test_meta_defaults_to_empty(self, tmp_path):
        """Test meta is optional."""
        path = tmp_path / "min.yaml"
        path.write_text("id: s\nversion: 1\n")

        assert load_survey_spec_file(path).meta == {}


class TestLoadSurveySpec:
    """Tests for load_survey_spec."""

    def test_from_settings(self):
        """Test the spec is built from settings without a file."""
        settings = Settings(survey_spec_id="pulse", survey_spec_version=2, survey_spec_path=None)

        spec = load_survey_spec(settings)

        assert (spec.id, spec.version, spec.meta) == ("pulse", 2, {})

    def test_from_file(self, spec_file):
        """Test a configured file takes precedence."""
        settings = Settings(survey_spec_id="ignored", survey_spec_path=str(spec_file))

        assert load_survey_spec(settings).id == "engineering-onboarding"
