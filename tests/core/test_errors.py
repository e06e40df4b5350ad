"""Tests for error types and codes."""

import pytest

from apexlog.core.errors import (
    ApexLogError,
    ConfigError,
    ErrorCode,
    EventFieldError,
    LogFileError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.LOG_FILE_NOT_FOUND, 3000),
            (ErrorCode.LOG_FILE_UNREADABLE, 3000),
            (ErrorCode.EVENT_BAD_TIMESTAMP, 4000),
            (ErrorCode.EVENT_BAD_LINE_NUMBER, 4000),
            (ErrorCode.EVENT_BAD_ROW_COUNT, 4000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # Given
        error_code = code

        # When
        value = error_code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestApexLogError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = ApexLogError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        """Error string representation is human readable."""
        # Given
        error = ApexLogError(code=ErrorCode.LOG_FILE_NOT_FOUND, message="gone")

        # When
        result = str(error)

        # Then
        assert result == "[3001] LOG_FILE_NOT_FOUND: gone"

    def test_given_error_when_raised_then_catchable_as_exception(self) -> None:
        """Errors are ordinary exceptions."""
        with pytest.raises(ApexLogError) as exc_info:
            raise LogFileError.not_found("/tmp/missing.log")

        assert exc_info.value.error_name == "LOG_FILE_NOT_FOUND"


class TestConfigError:
    """ConfigError factory method tests."""

    def test_given_parse_failure_when_parse_error_then_includes_path(self) -> None:
        """parse_error names the file and the reason."""
        # When
        error = ConfigError.parse_error("/etc/apexlog.yaml", "bad indent")

        # Then
        assert error.code == ErrorCode.CONFIG_PARSE_ERROR
        assert "/etc/apexlog.yaml" in error.message
        assert error.details == {"path": "/etc/apexlog.yaml", "reason": "bad indent"}

    def test_given_bad_value_when_invalid_value_then_stringifies_value(self) -> None:
        """invalid_value keeps the field and a string form of the value."""
        # When
        error = ConfigError.invalid_value("report.max_issues", -1, "must be >= 0")

        # Then
        assert error.code == ErrorCode.CONFIG_INVALID_VALUE
        assert error.details["field"] == "report.max_issues"
        assert error.details["value"] == "-1"
        assert "report.max_issues" in str(error)


class TestLogFileError:
    """LogFileError factory method tests."""

    def test_given_missing_file_when_not_found_then_message_has_path(self) -> None:
        error = LogFileError.not_found("debug.log")

        assert error.message == "Log file not found: debug.log"
        assert error.details == {"path": "debug.log"}

    def test_given_os_error_when_unreadable_then_reason_kept(self) -> None:
        error = LogFileError.unreadable("debug.log", "Permission denied")

        assert error.code == ErrorCode.LOG_FILE_UNREADABLE
        assert error.details["reason"] == "Permission denied"


class TestEventFieldError:
    """EventFieldError factory method tests."""

    @pytest.mark.parametrize(
        ("factory", "code"),
        [
            (EventFieldError.bad_timestamp, ErrorCode.EVENT_BAD_TIMESTAMP),
            (EventFieldError.bad_line_number, ErrorCode.EVENT_BAD_LINE_NUMBER),
            (EventFieldError.bad_row_count, ErrorCode.EVENT_BAD_ROW_COUNT),
        ],
    )
    def test_given_field_text_when_factory_called_then_code_and_field_set(
        self, factory, code: ErrorCode
    ) -> None:
        """Each factory tags its own code and keeps the offending text."""
        # When
        error = factory("garbage")

        # Then
        assert error.code == code
        assert error.details == {"field": "garbage"}
        assert "'garbage'" in error.message
