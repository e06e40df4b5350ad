"""Issue Tracker: a time-ordered, summary-deduplicated list of log issues."""

from __future__ import annotations

import bisect
from collections.abc import Iterator

from apexlog.events.models import IssueKind, LogIssue

UNEXPECTED_END = "Unexpected-End"
UNEXPECTED_END_DESCRIPTION = (
    "An entry event was found without a corresponding exit event "
    "e.g a `METHOD_ENTRY` event without a `METHOD_EXIT`"
)
UNEXPECTED_EXIT = "Unexpected-Exit"
UNEXPECTED_EXIT_DESCRIPTION = (
    "An exit event was found without a corresponding entry event "
    "e.g a `METHOD_EXIT` event without a `METHOD_ENTRY`"
)
MAX_SIZE_REACHED = "Max-Size-reached"
MAX_SIZE_REACHED_DESCRIPTION = (
    "The maximum log size has been reached. Part of the log has been truncated."
)
SKIPPED_LINES = "Skipped-Lines"
SKIPPED_LINES_DESCRIPTION = (
    "A section of the log has been skipped and the log has been truncated. "
    "Full details of this section of log can not be provided."
)


class IssueTracker:
    """Collects issues, keeping at most one per summary, ordered by start time.

    Issues with equal start times keep their insertion order.
    """

    __slots__ = ("_issues", "_summaries")

    def __init__(self) -> None:
        self._issues: list[LogIssue] = []
        self._summaries: set[str] = set()

    def add(self, start_time: int, summary: str, description: str, kind: IssueKind) -> bool:
        """Record an issue unless one with the same summary exists.

        Returns:
            True if the issue was recorded.
        """
        if summary in self._summaries:
            return False
        self._summaries.add(summary)
        bisect.insort(
            self._issues,
            LogIssue(start_time, summary, description, kind),
            key=lambda issue: issue.start_time,
        )
        return True

    def replace(self, start_time: int, summary: str, description: str, kind: IssueKind) -> None:
        """Drop any issue with *summary*, then record the new one."""
        self.discard(summary)
        self.add(start_time, summary, description, kind)

    def discard(self, summary: str) -> None:
        if summary in self._summaries:
            self._summaries.remove(summary)
            self._issues = [issue for issue in self._issues if issue.summary != summary]

    def __iter__(self) -> Iterator[LogIssue]:
        return iter(self._issues)

    def __len__(self) -> int:
        return len(self._issues)

    def to_list(self) -> list[LogIssue]:
        return list(self._issues)
