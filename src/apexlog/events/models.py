"""Event tree models.

A parsed debug log is a tree of LogEvent nodes under one ApexLog root.
Nodes own their children; the parent link is a weak reference so the tree
is released as soon as the caller drops the root.
"""

from __future__ import annotations

import re
import weakref
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from apexlog.config.constants import ROOT_TEXT
from apexlog.events.limits import GovernorLimits

if TYPE_CHECKING:
    from apexlog.parsing.state import ParseState

LineNumber = int | Literal["EXTERNAL"] | None
IssueKind = Literal["unexpected", "error", "skip"]

_WALL_CLOCK = re.compile(r"^(\d{1,2}):(\d{2}):(\d{2})\.(\d+)\s")


@dataclass(slots=True)
class SelfTotal:
    """A metric measured on a node alone (self) and including its subtree (total)."""

    self: int = 0
    total: int = 0

    def set(self, value: int) -> None:
        self.self = value
        self.total = value


@dataclass(frozen=True, slots=True)
class LogIssue:
    """A problem noticed while parsing, anchored to a timestamp."""

    start_time: int
    summary: str
    description: str
    kind: IssueKind


@dataclass(frozen=True, slots=True)
class DebugLevel:
    """One category/level pair from the log's settings header."""

    log_category: str
    log_level: str


@dataclass(slots=True, eq=False, weakref_slot=True)
class LogEvent:
    """One parsed record, and the node of the call tree it becomes.

    Structural flags are copied from the event kind's registry entry when
    the event is created. Kinds with extra fields or hooks subclass this
    (see events/kinds.py).
    """

    type_name: str = ""
    timestamp: int = 0
    exit_stamp: int | None = None
    line_number: LineNumber = None
    namespace: str = ""
    text: str = ""
    log_line: str = ""
    suffix: str = ""

    exit_types: frozenset[str] = frozenset()
    is_parent: bool = False
    closes_on_next_line: bool = False
    is_exit_candidate: bool = False
    signals_discontinuity: bool = False
    accepts_continuation_text: bool = False
    is_truncated: bool = False
    has_valid_symbols: bool = False

    category: str = ""
    cpu_type: str = ""
    debug_category: str = ""

    duration: SelfTotal = field(default_factory=SelfTotal)
    dml_count: SelfTotal = field(default_factory=SelfTotal)
    soql_count: SelfTotal = field(default_factory=SelfTotal)
    sosl_count: SelfTotal = field(default_factory=SelfTotal)
    dml_row_count: SelfTotal = field(default_factory=SelfTotal)
    soql_row_count: SelfTotal = field(default_factory=SelfTotal)
    sosl_row_count: SelfTotal = field(default_factory=SelfTotal)
    thrown_count: int = 0

    children: list[LogEvent] = field(default_factory=list, repr=False)
    _parent: weakref.ref[LogEvent] | None = field(default=None, repr=False)

    @property
    def parent(self) -> LogEvent | None:
        return self._parent() if self._parent is not None else None

    @parent.setter
    def parent(self, value: LogEvent | None) -> None:
        self._parent = weakref.ref(value) if value is not None else None

    def recalculate_durations(self) -> None:
        if self.exit_stamp is not None:
            self.duration.set(self.exit_stamp - self.timestamp)

    def parse_fields(self, parts: list[str], state: ParseState) -> None:
        """Populate kind-specific fields from the raw record fields."""

    def on_after(self, state: ParseState, next_event: LogEvent | None) -> None:
        """Called once the following record is known (None at end of input)."""

    def on_end(self, end: LogEvent, stack: list[LogEvent]) -> None:
        """Called when the builder closes this entry with *end*."""


@dataclass(slots=True, eq=False)
class ApexLog(LogEvent):
    """Root of a parsed debug log, plus log-wide results."""

    type_name: str = ""
    text: str = ROOT_TEXT
    size: int = 0
    start_time: int = 0
    execution_end_time: int = 0
    truncation_timestamp: int | None = None
    debug_levels: list[DebugLevel] = field(default_factory=list)
    namespaces: list[str] = field(default_factory=list)
    issues: list[LogIssue] = field(default_factory=list)
    parse_errors: list[str] = field(default_factory=list)
    governor_limits: GovernorLimits = field(default_factory=GovernorLimits)

    def set_times(self) -> None:
        """Derive the root span from its top-level children."""
        first = next((child for child in self.children if child.timestamp), None)
        self.timestamp = first.timestamp if first is not None else 0
        if first is not None:
            self.start_time = parse_wall_clock_ms(first.log_line)

        end_time: int | None = None
        for child in reversed(self.children):
            if child.exit_stamp:
                if end_time is None:
                    end_time = child.exit_stamp
                if child.exit_stamp > child.timestamp:
                    self.execution_end_time = child.exit_stamp
                    break
            if end_time is None:
                end_time = child.timestamp

        self.exit_stamp = end_time if end_time is not None else self.timestamp
        self.recalculate_durations()


def parse_wall_clock_ms(log_line: str) -> int:
    """Milliseconds since midnight from a record's `HH:MM:SS.f` prefix, or 0."""
    match = _WALL_CLOCK.match(log_line)
    if match is None:
        return 0
    hours, minutes, seconds, fraction = match.groups()
    millis = int(fraction.ljust(3, "0")[:3])
    return ((int(hours) * 60 + int(minutes)) * 60 + int(seconds)) * 1000 + millis


def iter_events(root: LogEvent) -> Iterator[LogEvent]:
    """Depth-first pre-order walk of every node below *root*."""
    stack = list(reversed(root.children))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def tree_depth(root: LogEvent) -> int:
    """Number of levels below *root* (0 for a childless root)."""
    depth = 0
    level = root.children
    while level:
        depth += 1
        level = [child for node in level for child in node.children]
    return depth
