"""Unit tests for logging formatters and filters."""

import json
import logging

from app.logging_config import (
    DevelopmentFormatter,
    JSONFormatter,
    TokenRedactionFilter,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="app.services.response_store",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Created partial response %s",
        args=("resp-1",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestTokenRedactionFilter:
    """Tests for TokenRedactionFilter."""

    def test_long_token_truncated(self):
        """Test full tokens never pass through the filter."""
        record = _record(token="tok_abcdefghijklmnop_1700000000000")

        assert TokenRedactionFilter().filter(record) is True
        assert record.token == "tok_abcdefgh..."

    def test_records_without_token_untouched(self):
        """Test records without a token pass unchanged."""
        record = _record()

        assert TokenRedactionFilter().filter(record) is True
        assert not hasattr(record, "token")


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_includes_message_and_extras(self):
        """Test output is JSON with message and extra fields."""
        output = JSONFormatter().format(_record(operation="load_by_token", storage="database"))

        data = json.loads(output)
        assert data["message"] == "Created partial response resp-1"
        assert data["level"] == "INFO"
        assert data["operation"] == "load_by_token"
        assert data["storage"] == "database"
        assert "msg" not in data


class TestDevelopmentFormatter:
    """Tests for DevelopmentFormatter."""

    def test_includes_context_fields(self):
        """Test context fields are appended to the line."""
        output = DevelopmentFormatter().format(_record(operation="submit_by_token"))

        assert "Created partial response resp-1" in output
        assert "operation=submit_by_token" in output
