"""Mutable state shared by the stages of one parse."""

from __future__ import annotations

from dataclasses import dataclass, field

from apexlog.events.limits import GovernorLimits
from apexlog.parsing.issues import IssueTracker


@dataclass(slots=True)
class ParseState:
    """Everything the dispatcher, event hooks and tree builder write to.

    A fresh instance is created per parse, so parses never share state.
    """

    issues: IssueTracker = field(default_factory=IssueTracker)
    parse_errors: list[str] = field(default_factory=list)
    namespaces: set[str] = field(default_factory=set)
    governor_limits: GovernorLimits = field(default_factory=GovernorLimits)
    truncation_timestamp: int | None = None
    _reported: set[str] = field(default_factory=set, repr=False)

    def add_parse_error(self, message: str, *, once: bool = False) -> None:
        """Record a parse error; with *once*, repeated messages are dropped."""
        if once:
            if message in self._reported:
                return
            self._reported.add(message)
        self.parse_errors.append(message)
