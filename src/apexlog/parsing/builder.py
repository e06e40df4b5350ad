"""Tree Builder: nests the flat event stream into a call tree.

Open entries live on an explicit stack rather than the Python call stack,
so logs nested deeper than the interpreter's recursion limit still parse.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from apexlog.config.constants import DEFAULT_NAMESPACE
from apexlog.events.models import ApexLog, LogEvent
from apexlog.parsing.issues import (
    MAX_SIZE_REACHED,
    MAX_SIZE_REACHED_DESCRIPTION,
    UNEXPECTED_END,
    UNEXPECTED_END_DESCRIPTION,
    UNEXPECTED_EXIT,
    UNEXPECTED_EXIT_DESCRIPTION,
)
from apexlog.parsing.state import ParseState


class LineIterator:
    """One-event look-ahead over a lazily produced event stream."""

    __slots__ = ("_events", "_next")

    def __init__(self, events: Iterable[LogEvent]) -> None:
        self._events: Iterator[LogEvent] = iter(events)
        self._next: LogEvent | None = next(self._events, None)

    def peek(self) -> LogEvent | None:
        """The next event, without consuming it."""
        return self._next

    def fetch(self) -> LogEvent | None:
        """Consume and return the next event (None once exhausted)."""
        current = self._next
        if current is not None:
            self._next = next(self._events, None)
        return current


class TreeBuilder:
    """Builds the tree for one parse.

    `discontinuity` is set once an exception-like event appears inside the
    open entries and cleared when an entry is closed by its own exit. While
    it is set, a mismatched exit unwinds the entry instead of being reported.
    """

    def __init__(self, events: Iterable[LogEvent], state: ParseState) -> None:
        self._cursor = LineIterator(events)
        self._state = state
        self._stack: list[LogEvent] = []
        self.discontinuity = False
        self.last_timestamp = 0

    def build(self, root: ApexLog | None = None) -> ApexLog:
        """Consume every event and attach it under *root*."""
        root = root if root is not None else ApexLog()
        cursor = self._cursor
        while (event := cursor.fetch()) is not None:
            self.last_timestamp = event.timestamp
            if event.is_parent:
                self._build_subtree(event)
            event.namespace = event.namespace or DEFAULT_NAMESPACE
            event.parent = root
            root.children.append(event)
        return root

    def _enter(self, event: LogEvent) -> None:
        self.last_timestamp = event.timestamp
        event.namespace = event.namespace or DEFAULT_NAMESPACE
        # Kinds without exit types (e.g. ENTERING_MANAGED_PKG) own no scope.
        if event.exit_types:
            self._stack.append(event)

    def _build_subtree(self, entry: LogEvent) -> None:
        stack = self._stack
        cursor = self._cursor
        state = self._state
        self._enter(entry)

        while stack:
            current = stack[-1]
            nxt = cursor.peek()
            if nxt is None:
                self._close_unterminated(current)
                continue

            self.discontinuity |= nxt.signals_discontinuity

            if (
                not current.closes_on_next_line
                and not nxt.closes_on_next_line
                and nxt.is_exit_candidate
                and not nxt.exit_types
                and self._end_method(current, nxt)
            ):
                current.on_end(nxt, stack)
                self._pop(current)
                continue

            if current.closes_on_next_line and (
                nxt.closes_on_next_line or nxt.is_exit_candidate or nxt.exit_types
            ):
                current.exit_stamp = nxt.timestamp
                current.on_end(nxt, stack)
                self._pop(current)
                continue

            if (
                self.discontinuity
                and state.truncation_timestamp is not None
                and nxt.timestamp > state.truncation_timestamp
            ):
                current.is_truncated = True
                self._close_unterminated(current)
                continue

            cursor.fetch()
            self.last_timestamp = nxt.timestamp
            nxt.namespace = nxt.namespace or current.namespace or DEFAULT_NAMESPACE
            nxt.parent = current
            current.children.append(nxt)
            if nxt.is_parent:
                self._enter(nxt)

    def _end_method(self, entry: LogEvent, end: LogEvent) -> bool:
        """Try to close *entry* with the exit candidate *end*."""
        if _is_matching_end(entry, end):
            entry.exit_stamp = end.timestamp
            self.discontinuity = False
            self._cursor.fetch()
            self.last_timestamp = end.timestamp
            return True

        if self.discontinuity:
            # An exception unwound past this entry's own exit.
            entry.exit_stamp = end.timestamp
            return True

        if any(_is_matching_end(open_entry, end) for open_entry in self._stack):
            # The exit belongs to an ancestor; this entry never logged its exit.
            entry.exit_stamp = end.timestamp
            return True

        self._state.issues.add(
            end.timestamp, UNEXPECTED_EXIT, UNEXPECTED_EXIT_DESCRIPTION, "unexpected"
        )
        return False

    def _close_unterminated(self, entry: LogEvent) -> None:
        """Close an entry whose exit never arrived: end of input or truncation."""
        state = self._state
        entry.exit_stamp = self.last_timestamp
        if state.truncation_timestamp is not None and self.last_timestamp > state.truncation_timestamp:
            # content past the size limit was dropped, so the exit may be among it
            entry.is_truncated = True
        if entry.is_truncated:
            state.issues.replace(
                self.last_timestamp, MAX_SIZE_REACHED, MAX_SIZE_REACHED_DESCRIPTION, "skip"
            )
            if state.truncation_timestamp is None:
                state.truncation_timestamp = self.last_timestamp
        else:
            state.issues.add(
                self.last_timestamp, UNEXPECTED_END, UNEXPECTED_END_DESCRIPTION, "unexpected"
            )
        entry.is_truncated = True
        self._pop(entry)

    def _pop(self, entry: LogEvent) -> None:
        self._stack.pop()
        entry.recalculate_durations()


def _is_matching_end(entry: LogEvent, end: LogEvent) -> bool:
    """An exit of the right type whose line number agrees (unknown matches anything)."""
    return end.type_name in entry.exit_types and (
        not entry.line_number or not end.line_number or entry.line_number == end.line_number
    )
