"""Governor limit usage (ResourceUsage) as reported by LIMIT_USAGE_FOR_NS."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

LIMIT_LABELS: dict[str, str] = {
    "Number of SOQL queries": "soql_queries",
    "Number of query rows": "query_rows",
    "Number of SOSL queries": "sosl_queries",
    "Number of DML statements": "dml_statements",
    "Number of Publish Immediate DML": "publish_immediate_dml",
    "Number of DML rows": "dml_rows",
    "Maximum CPU time": "cpu_time",
    "Maximum heap size": "heap_size",
    "Number of callouts": "callouts",
    "Number of Email Invocations": "email_invocations",
    "Number of future calls": "future_calls",
    "Number of queueable jobs added to the queue": "queueable_jobs_added_to_queue",
    "Number of Mobile Apex push calls": "mobile_apex_push_calls",
}
"""Maps the labels printed in LIMIT_USAGE_FOR_NS blocks to Limits attributes."""

_USAGE_LINE = re.compile(r"^(.+?):\s*([\d,]+)/([\d,]+)")
_LEADING_WHITESPACE = re.compile(r"^[ \t]+", re.MULTILINE)


@dataclass(slots=True)
class Limit:
    used: int = 0
    limit: int = 0


@dataclass(slots=True)
class Limits:
    """Usage of each governor limit within one scope."""

    soql_queries: Limit = field(default_factory=Limit)
    query_rows: Limit = field(default_factory=Limit)
    sosl_queries: Limit = field(default_factory=Limit)
    dml_statements: Limit = field(default_factory=Limit)
    publish_immediate_dml: Limit = field(default_factory=Limit)
    dml_rows: Limit = field(default_factory=Limit)
    cpu_time: Limit = field(default_factory=Limit)
    heap_size: Limit = field(default_factory=Limit)
    callouts: Limit = field(default_factory=Limit)
    email_invocations: Limit = field(default_factory=Limit)
    future_calls: Limit = field(default_factory=Limit)
    queueable_jobs_added_to_queue: Limit = field(default_factory=Limit)
    mobile_apex_push_calls: Limit = field(default_factory=Limit)

    def items(self) -> Iterator[tuple[str, Limit]]:
        """(name, Limit) pairs in declaration order."""
        for name in LIMIT_LABELS.values():
            yield name, getattr(self, name)

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {name: {"used": lim.used, "limit": lim.limit} for name, lim in self.items()}


@dataclass(frozen=True, slots=True)
class GovernorSnapshot:
    """Usage of one namespace at the moment a LIMIT_USAGE_FOR_NS block was logged."""

    timestamp: int
    namespace: str
    limits: Limits


@dataclass(slots=True)
class GovernorLimits(Limits):
    """Log-wide usage: the merged global figures plus every namespace's own."""

    by_namespace: dict[str, Limits] = field(default_factory=dict)
    snapshots: list[GovernorSnapshot] = field(default_factory=list)

    def record(self, timestamp: int, namespace: str, limits: Limits) -> None:
        """Store the latest usage of *namespace*; earlier reports are superseded."""
        self.by_namespace[namespace] = limits
        self.snapshots.append(GovernorSnapshot(timestamp, namespace, limits))


def _to_int(text: str) -> int:
    return int(text.replace(",", ""))


def parse_limit_usage(text: str) -> tuple[str, Limits]:
    """Parse a LIMIT_USAGE_FOR_NS block into its namespace and usage figures.

    The block's first line holds the namespace in parentheses, each later
    line reads `Number of SOQL queries: 3 out of 100`, optionally prefixed
    with `******* CLOSE TO LIMIT`. Unknown labels are ignored.
    """
    first_line = text.split("\n", 1)[0]
    namespace = first_line.replace("(", "").replace(")", "").strip()

    cleaned = (
        _LEADING_WHITESPACE.sub("", text)
        .replace("******* CLOSE TO LIMIT", "")
        .replace(" out of ", "/")
    )
    limits = Limits()
    for line in cleaned.split("\n"):
        match = _USAGE_LINE.match(line)
        if match is None:
            continue
        name = LIMIT_LABELS.get(match.group(1).strip())
        if name is not None:
            setattr(limits, name, Limit(_to_int(match.group(2)), _to_int(match.group(3))))
    return namespace, limits
