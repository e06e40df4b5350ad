"""Record Dispatcher: one logical line in, at most one LogEvent out."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

import structlog

from apexlog.config.constants import DEFAULT_FIELD_DELIMITER
from apexlog.core.errors import EventFieldError
from apexlog.events.factory import create_event
from apexlog.events.models import DebugLevel, LogEvent
from apexlog.events.registry import describe
from apexlog.parsing.issues import (
    MAX_SIZE_REACHED,
    MAX_SIZE_REACHED_DESCRIPTION,
    SKIPPED_LINES,
    SKIPPED_LINES_DESCRIPTION,
)
from apexlog.parsing.state import ParseState

log = structlog.get_logger(__name__)

_TYPE_NAME = re.compile(r"^[A-Z_]+$")
SETTINGS_PATTERN = re.compile(r"^\d+\.\d+\sAPEX_CODE,\w+;APEX_PROFILING,.+$", re.MULTILINE)

SKIPPED_MARKER = "*** Skipped"
MAX_SIZE_MARKER = "MAXIMUM DEBUG LOG SIZE REACHED"


class RecordDispatcher:
    """Classifies each line as an event, continuation text, a marker or an error.

    The dispatcher remembers the last event it produced: continuation text
    is appended to it, markers are anchored to its timestamp, and its
    `on_after` hook runs once the following event (or end of input) is known.
    """

    def __init__(self, state: ParseState, delimiter: str = DEFAULT_FIELD_DELIMITER) -> None:
        self._state = state
        self._delimiter = delimiter
        self._last: LogEvent | None = None

    def dispatch(self, line: str) -> LogEvent | None:
        """Handle one logical line; returns the new event, if the line is one."""
        parts = line.split(self._delimiter)
        type_name = parts[1] if len(parts) > 1 else ""
        state = self._state
        last = self._last

        meta = describe(type_name)
        if meta is not None:
            try:
                event = create_event(meta, parts, state)
            except EventFieldError as e:
                log.debug("dispatch.field_rejected", type_name=type_name, error=e.message)
                state.add_parse_error(f"Invalid log line: {line}")
                return None
            event.log_line = line
            if last is not None:
                last.on_after(state, event)
            if event.namespace:
                state.namespaces.add(event.namespace)
            self._last = event
            return event

        has_type = bool(_TYPE_NAME.match(type_name))
        if not has_type and last is not None and last.accepts_continuation_text:
            last.text += "\n" + line
        elif has_type:
            state.add_parse_error(f"Unsupported log event name: {type_name}", once=True)
        elif last is not None and line.startswith(SKIPPED_MARKER):
            state.issues.add(
                last.timestamp, SKIPPED_LINES, f"{line}. {SKIPPED_LINES_DESCRIPTION}", "skip"
            )
        elif last is not None and MAX_SIZE_MARKER in line:
            state.issues.add(last.timestamp, MAX_SIZE_REACHED, MAX_SIZE_REACHED_DESCRIPTION, "skip")
            state.truncation_timestamp = last.timestamp
        elif SETTINGS_PATTERN.match(line):
            pass
        else:
            state.add_parse_error(f"Invalid log line: {line}")
        return None

    def finish(self) -> None:
        """Signal end of input to the last event's `on_after` hook."""
        if self._last is not None:
            self._last.on_after(self._state, None)

    def events(self, lines: Iterable[str]) -> Iterator[LogEvent]:
        """Lazily dispatch *lines*, yielding each event as it is recognised."""
        for line in lines:
            event = self.dispatch(line)
            if event is not None:
                yield event
        self.finish()


def parse_debug_levels(text: str) -> list[DebugLevel]:
    """Category/level pairs from the settings header, e.g. `59.0 APEX_CODE,FINE;DB,INFO`."""
    match = SETTINGS_PATTERN.search(text)
    if match is None:
        return []
    settings = match.group(0).rstrip("\r")
    levels = []
    for entry in settings[settings.find(" ") + 1 :].split(";"):
        category, _, level = entry.partition(",")
        levels.append(DebugLevel(category, level))
    return levels
