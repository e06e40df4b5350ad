"""Parse orchestration: text in, finished ApexLog tree out."""

from __future__ import annotations

import time
from pathlib import Path

import structlog

from apexlog.config.models import ApexLogConfig, ParserConfig
from apexlog.core.errors import LogFileError
from apexlog.core.logging import parse_context
from apexlog.events.models import ApexLog
from apexlog.parsing.aggregate import aggregate_totals, merge_managed_package_events
from apexlog.parsing.builder import TreeBuilder
from apexlog.parsing.dispatcher import RecordDispatcher, parse_debug_levels
from apexlog.parsing.lines import split_lines
from apexlog.parsing.state import ParseState
from apexlog.parsing.usage import merge_namespace_usage

log = structlog.get_logger(__name__)


class ApexLogParser:
    """Parses Apex debug logs.

    The parser holds configuration only. Every call to `parse` works on
    fresh state, so one instance can be shared freely.
    """

    def __init__(self, config: ParserConfig | None = None) -> None:
        self.config = config or ParserConfig()

    def parse(self, text: str) -> ApexLog:
        """Build the call tree for one debug log.

        Malformed content never raises: it is reported through the returned
        log's `issues` and `parse_errors`.
        """
        with parse_context() as parse_id:
            started = time.perf_counter()
            log.debug("parse.started", chars=len(text), parse_id=parse_id)

            state = ParseState()
            dispatcher = RecordDispatcher(state, self.config.field_delimiter)
            builder = TreeBuilder(dispatcher.events(split_lines(text)), state)
            apex_log = builder.build()

            apex_log.set_times()
            if self.config.merge_managed_packages:
                merge_managed_package_events(apex_log)
            aggregate_totals([apex_log])

            apex_log.size = len(text.encode("utf-8"))
            apex_log.debug_levels = parse_debug_levels(text)
            apex_log.issues = state.issues.to_list()
            apex_log.parse_errors = list(state.parse_errors)
            apex_log.namespaces = sorted(state.namespaces)
            apex_log.governor_limits = state.governor_limits
            apex_log.truncation_timestamp = state.truncation_timestamp
            merge_namespace_usage(apex_log.governor_limits)

            log.debug(
                "parse.completed",
                top_level_events=len(apex_log.children),
                issues=len(apex_log.issues),
                parse_errors=len(apex_log.parse_errors),
                elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return apex_log


def parse(text: str, config: ApexLogConfig | ParserConfig | None = None) -> ApexLog:
    """Parse debug log *text* with the given (or default) parser settings."""
    if isinstance(config, ApexLogConfig):
        config = config.parser
    return ApexLogParser(config).parse(text)


def parse_file(path: Path | str, config: ApexLogConfig | ParserConfig | None = None) -> ApexLog:
    """Read and parse a debug log file.

    Raises:
        LogFileError: The file is missing or cannot be read.
    """
    path = Path(path)
    if not path.is_file():
        raise LogFileError.not_found(str(path))
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise LogFileError.unreadable(str(path), str(e)) from e
    return parse(text, config)
