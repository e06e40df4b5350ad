"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (APEXLOG__SECTION__KEY)
3. Project YAML (.apexlog/config.yaml)
4. Global YAML (~/.config/apexlog/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    APEXLOG__<SECTION>__<KEY>=<VALUE>

Examples:
    APEXLOG__LOGGING__LEVEL=DEBUG
    APEXLOG__PARSER__MERGE_MANAGED_PACKAGES=false
    APEXLOG__REPORT__MAX_ISSUES=50
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from apexlog.config.constants import DEFAULT_FIELD_DELIMITER

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        APEXLOG__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every rejected record field.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ParserConfig(BaseModel):
    """Parser configuration.

    Env vars:
        APEXLOG__PARSER__FIELD_DELIMITER: Record field separator (default: |)
        APEXLOG__PARSER__MERGE_MANAGED_PACKAGES: Coalesce package entry runs
    """

    field_delimiter: str = Field(
        default=DEFAULT_FIELD_DELIMITER,
        description="Single character separating the fields of a record.",
    )
    merge_managed_packages: bool = Field(
        default=True,
        description="Collapse consecutive ENTERING_MANAGED_PKG siblings of the same "
        "namespace into one event. Disable to see every package transition.",
    )

    @field_validator("field_delimiter")
    @classmethod
    def validate_field_delimiter(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError(f"Field delimiter must be a single character, got {v!r}")
        return v


class ReportConfig(BaseModel):
    """Summary report configuration.

    Env vars:
        APEXLOG__REPORT__MAX_ISSUES: Issues listed in text summaries
        APEXLOG__REPORT__MAX_PARSE_ERRORS: Parse errors listed in text summaries
    """

    max_issues: int = Field(default=20, ge=0, description="Issues shown before '+N more'.")
    max_parse_errors: int = Field(
        default=10, ge=0, description="Parse errors shown before '+N more'."
    )


class ApexLogConfig(BaseModel):
    """Root configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
