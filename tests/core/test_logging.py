"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import pytest
import structlog

from apexlog.config.models import LoggingConfig, LogOutputConfig
from apexlog.core.logging import configure_logging, get_parse_id, parse_context


class TestParseIdCorrelation:
    """Parse ID context variable tests."""

    def test_given_no_context_when_read_then_none(self) -> None:
        assert get_parse_id() is None

    def test_given_no_id_when_context_then_generates_uuid(self) -> None:
        """parse_context generates a UUID-based ID when none is provided."""
        # When
        with parse_context() as pid:
            current = get_parse_id()

        # Then
        assert len(pid) == 12  # uuid4().hex[:12]
        assert current == pid

    def test_given_nested_context_when_exited_then_outer_id_restored(self) -> None:
        """parse_context binds an ID only for the duration of the block."""
        # Given
        with parse_context("outer"):
            # When
            with parse_context() as inner:
                during = get_parse_id()

            # Then
            assert during == inner
            assert inner != "outer"
            assert get_parse_id() == "outer"
        assert get_parse_id() is None

    def test_given_explicit_id_when_context_then_uses_it(self) -> None:
        with parse_context("fixed-id") as pid:
            assert pid == "fixed-id"
            assert get_parse_id() == "fixed-id"
        assert get_parse_id() is None


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        """Reset structlog and stdlib logging before each test."""
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()

    def test_given_json_format_when_log_then_valid_json_output(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """JSON format produces valid JSON with required fields."""
        # Given
        configure_logging(json_format=True, level="INFO")
        logger = structlog.get_logger("test")

        # When
        logger.info("test message", key="value")

        # Then
        captured = capsys.readouterr()
        lines = [line for line in captured.err.strip().split("\n") if line]
        if lines:
            data = json.loads(lines[-1])
            assert data["event"] == "test message"
            assert data["key"] == "value"
            assert "timestamp" in data
            assert data["level"] == "info"

    def test_given_parse_context_when_log_then_parse_id_attached(self, tmp_path: Path) -> None:
        """Lines logged inside parse_context carry the parse ID."""
        # Given
        log_file = tmp_path / "parse.log"
        configure_logging(
            config=LoggingConfig(
                level="DEBUG",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )
        logger = structlog.get_logger("apexlog.test")

        # When
        with parse_context("abc123abc123"):
            logger.info("inside")
        logger.info("outside")

        # Then
        records = [json.loads(line) for line in log_file.read_text().splitlines()]
        inside = next(r for r in records if r["event"] == "inside")
        outside = next(r for r in records if r["event"] == "outside")
        assert inside["parse_id"] == "abc123abc123"
        assert "parse_id" not in outside

    def test_given_config_object_when_configure_then_takes_precedence(self, tmp_path: Path) -> None:
        """LoggingConfig object takes precedence over simple params."""
        # Given
        log_file = tmp_path / "test.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[LogOutputConfig(format="json", destination=str(log_file))],
        )

        # When  - config's DEBUG should override the level="ERROR" param
        configure_logging(config=config, json_format=False, level="ERROR")
        logger = structlog.get_logger()
        logger.debug("debug msg")

        # Then
        assert "debug msg" in log_file.read_text()

    def test_given_multi_output_config_when_configure_then_logs_to_all(
        self, tmp_path: Path
    ) -> None:
        """Multiple outputs receive logs according to their levels."""
        # Given
        debug_file = tmp_path / "debug.log"
        info_file = tmp_path / "info.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(format="json", destination=str(info_file), level="INFO"),
                LogOutputConfig(format="json", destination=str(debug_file)),
            ],
        )

        # When
        configure_logging(config=config)
        logger = structlog.get_logger()
        logger.debug("debug only")
        logger.info("info msg")

        # Then - info_file should have INFO only (not DEBUG)
        info_content = info_file.read_text()
        assert "info msg" in info_content
        assert "debug only" not in info_content

        # Then - debug_file should have both (inherits DEBUG from config level)
        debug_content = debug_file.read_text()
        assert "debug only" in debug_content
        assert "info msg" in debug_content

    def test_given_relative_file_destination_when_validated_then_rejected(self) -> None:
        """File outputs must be absolute paths."""
        with pytest.raises(ValueError, match="absolute"):
            LogOutputConfig(destination="relative/file.log")
