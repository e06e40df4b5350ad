"""Resource Usage Merge: fold per-namespace governor usage into log-wide totals."""

from __future__ import annotations

from apexlog.events.limits import GovernorLimits


def merge_namespace_usage(governor_limits: GovernorLimits) -> None:
    """Sum every namespace's usage into the global figures.

    Each namespace reports the same ceiling, so the limit is simply taken
    from the last one seen.
    """
    for limits in governor_limits.by_namespace.values():
        for name, value in limits.items():
            total = getattr(governor_limits, name)
            total.limit = value.limit
            total.used += value.used
