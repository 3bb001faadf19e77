"""Tests for custom exception classes."""

import pytest

from mactime_forensic.utils.exceptions import (
    ConfigurationError,
    InvalidFilterSyntaxError,
    MactimeForensicError,
    MalformedRecordError,
    TimelineIOError,
    UnparsableTimestampError,
)


class TestMactimeForensicError:
    """Tests for base MactimeForensicError."""

    def test_basic_error(self):
        """Test basic error creation."""
        error = MactimeForensicError("Test error")
        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.details == {}

    def test_error_with_details(self):
        """Test error with details."""
        error = MactimeForensicError("Test error", {"key": "value"})
        assert "key=value" in str(error)
        assert error.details == {"key": "value"}


class TestMalformedRecordError:
    """Tests for MalformedRecordError."""

    def test_with_line_number(self):
        error = MalformedRecordError(field_count=4, line_number=12, line="a|b|c|d")
        assert "line 12" in str(error)
        assert "expected 11 fields, found 4" in str(error)
        assert error.details["line_number"] == 12
        assert error.line == "a|b|c|d"

    def test_without_line_number(self):
        error = MalformedRecordError(field_count=2)
        assert "line" not in error.message
        assert "line_number" not in error.details


class TestUnparsableTimestampError:
    """Tests for UnparsableTimestampError."""

    def test_fields(self):
        error = UnparsableTimestampError("ctime", "abc", line_number=3)
        assert error.field == "ctime"
        assert error.value == "abc"
        assert "'abc'" in str(error)
        assert error.details == {"field": "ctime", "line_number": 3}


class TestInvalidFilterSyntaxError:
    """Tests for InvalidFilterSyntaxError."""

    def test_default_reason(self):
        error = InvalidFilterSyntaxError("bad")
        assert "YYYY-MM-DD..YYYY-MM-DD" in str(error)
        assert error.value == "bad"

    def test_custom_reason(self):
        error = InvalidFilterSyntaxError("bad", reason="Nope")
        assert error.reason == "Nope"
        assert "Nope" in str(error)


class TestTimelineIOError:
    """Tests for TimelineIOError."""

    def test_with_cause(self):
        cause = PermissionError("Access denied")
        error = TimelineIOError("/evidence/image.body", operation="read", cause=cause)
        assert error.cause is cause
        assert "Access denied" in str(error)
        assert error.details["cause_type"] == "PermissionError"

    def test_without_cause(self):
        error = TimelineIOError("/out.csv", operation="write")
        assert "write" in str(error)
        assert "cause_type" not in error.details


class TestConfigurationError:
    """Tests for ConfigurationError."""

    def test_with_path(self):
        error = ConfigurationError("Bad value", config_path="/etc/timeline.yaml")
        assert "Bad value" in str(error)
        assert error.details["config_path"] == "/etc/timeline.yaml"


class TestExceptionHierarchy:
    """Tests that every error can be caught through the base class."""

    @pytest.mark.parametrize(
        "error",
        [
            MalformedRecordError(field_count=1),
            UnparsableTimestampError("mtime", "x"),
            InvalidFilterSyntaxError("x"),
            TimelineIOError("/x"),
            ConfigurationError("x"),
        ],
    )
    def test_inherits_base(self, error):
        assert isinstance(error, MactimeForensicError)
        with pytest.raises(MactimeForensicError):
            raise error
