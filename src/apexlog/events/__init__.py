"""Event model, kind registry and event factory."""

from apexlog.events.limits import GovernorLimits, Limit, Limits
from apexlog.events.models import ApexLog, DebugLevel, LogEvent, LogIssue, SelfTotal
from apexlog.events.registry import EventMeta, describe

__all__ = [
    "ApexLog",
    "DebugLevel",
    "EventMeta",
    "GovernorLimits",
    "Limit",
    "Limits",
    "LogEvent",
    "LogIssue",
    "SelfTotal",
    "describe",
]
