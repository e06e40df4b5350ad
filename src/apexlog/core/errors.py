"""apexlog error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Log input
- 4xxx: Event fields
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Log input (3xxx)
    LOG_FILE_NOT_FOUND = 3001
    LOG_FILE_UNREADABLE = 3002

    # Event fields (4xxx)
    EVENT_BAD_TIMESTAMP = 4001
    EVENT_BAD_LINE_NUMBER = 4002
    EVENT_BAD_ROW_COUNT = 4003


@dataclass(frozen=True, slots=True)
class ApexLogError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(ApexLogError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class LogFileError(ApexLogError):
    """Debug log input could not be read."""

    @classmethod
    def not_found(cls, path: str) -> "LogFileError":
        return cls(
            code=ErrorCode.LOG_FILE_NOT_FOUND,
            message=f"Log file not found: {path}",
            details={"path": path},
        )

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "LogFileError":
        return cls(
            code=ErrorCode.LOG_FILE_UNREADABLE,
            message=f"Cannot read log file {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class EventFieldError(ApexLogError):
    """A record field could not be converted to its typed value.

    Raised by the event factory and caught by the dispatcher, which records
    the offending line as a parse error instead of aborting the parse.
    """

    @classmethod
    def bad_timestamp(cls, text: str) -> "EventFieldError":
        return cls(
            code=ErrorCode.EVENT_BAD_TIMESTAMP,
            message=f"Malformed timestamp field: {text!r}",
            details={"field": text},
        )

    @classmethod
    def bad_line_number(cls, text: str) -> "EventFieldError":
        return cls(
            code=ErrorCode.EVENT_BAD_LINE_NUMBER,
            message=f"Malformed line number field: {text!r}",
            details={"field": text},
        )

    @classmethod
    def bad_row_count(cls, text: str) -> "EventFieldError":
        return cls(
            code=ErrorCode.EVENT_BAD_ROW_COUNT,
            message=f"Malformed row count field: {text!r}",
            details={"field": text},
        )
