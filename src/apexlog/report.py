"""Summaries of a parsed log for humans and for machines."""

from __future__ import annotations

from typing import Any

from apexlog.core.formatting import format_clock_ms, format_duration_ns, pluralize
from apexlog.events.models import ApexLog, LogEvent, iter_events, tree_depth


def _totals(log: ApexLog) -> dict[str, int]:
    return {
        "dml_statements": log.dml_count.total,
        "dml_rows": log.dml_row_count.total,
        "soql_queries": log.soql_count.total,
        "soql_rows": log.soql_row_count.total,
        "sosl_queries": log.sosl_count.total,
        "sosl_rows": log.sosl_row_count.total,
        "exceptions_thrown": log.thrown_count,
    }


def _is_truncated(log: ApexLog) -> bool:
    return any(event.is_truncated for event in iter_events(log))


def build_summary(log: ApexLog) -> dict[str, Any]:
    """JSON-serialisable overview of *log*."""
    events = sum(1 for _ in iter_events(log))
    limits = log.governor_limits
    return {
        "size": log.size,
        "start_time": log.start_time,
        "timestamp": log.timestamp,
        "exit_stamp": log.exit_stamp,
        "execution_end_time": log.execution_end_time,
        "duration_ns": log.duration.total,
        "event_count": events,
        "max_depth": tree_depth(log),
        "truncated": _is_truncated(log),
        "truncation_timestamp": log.truncation_timestamp,
        "namespaces": list(log.namespaces),
        "debug_levels": [
            {"category": level.log_category, "level": level.log_level}
            for level in log.debug_levels
        ],
        "issues": [
            {
                "start_time": issue.start_time,
                "summary": issue.summary,
                "description": issue.description,
                "kind": issue.kind,
            }
            for issue in log.issues
        ],
        "parse_errors": list(log.parse_errors),
        "governor_limits": {
            "total": limits.to_dict(),
            "by_namespace": {ns: usage.to_dict() for ns, usage in limits.by_namespace.items()},
        },
        "totals": _totals(log),
    }


def _describe(event: LogEvent) -> str:
    return f"{event.text}{event.suffix}"


def build_text_summary(log: ApexLog, max_issues: int = 20, max_parse_errors: int = 10) -> str:
    """Plain-text report: headline figures, then issues and parse errors."""
    totals = _totals(log)
    lines = [
        f"Log size: {pluralize(log.size, 'byte')}",
        f"Started: {format_clock_ms(log.start_time)}",
        f"Duration: {format_duration_ns(max(log.duration.total, 0))}",
        f"Events: {sum(1 for _ in iter_events(log))} (max depth {tree_depth(log)})",
        f"Namespaces: {', '.join(log.namespaces) or '-'}",
        f"SOQL: {pluralize(totals['soql_queries'], 'query', 'queries')}, "
        f"{pluralize(totals['soql_rows'], 'row')}",
        f"DML: {pluralize(totals['dml_statements'], 'statement')}, "
        f"{pluralize(totals['dml_rows'], 'row')}",
        f"Exceptions thrown: {totals['exceptions_thrown']}",
    ]
    if _is_truncated(log):
        lines.append("Truncated: yes")

    slowest = max(log.children, key=lambda event: event.duration.total, default=None)
    if slowest is not None and slowest.duration.total > 0:
        lines.append(
            f"Slowest top-level event: {_describe(slowest)} "
            f"({format_duration_ns(slowest.duration.total)})"
        )

    if log.issues:
        lines.append("")
        lines.append(f"{pluralize(len(log.issues), 'issue')}:")
        for issue in log.issues[:max_issues]:
            lines.append(f"  [{issue.kind}] {issue.summary} @ {issue.start_time}")
        if len(log.issues) > max_issues:
            lines.append(f"  +{len(log.issues) - max_issues} more")

    if log.parse_errors:
        lines.append("")
        lines.append(f"{pluralize(len(log.parse_errors), 'parse error')}:")
        for error in log.parse_errors[:max_parse_errors]:
            lines.append(f"  {error}")
        if len(log.parse_errors) > max_parse_errors:
            lines.append(f"  +{len(log.parse_errors) - max_parse_errors} more")

    return "\n".join(lines)
