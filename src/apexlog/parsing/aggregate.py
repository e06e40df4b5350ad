"""Aggregation passes run over the finished tree."""

from __future__ import annotations

from collections.abc import Sequence

from apexlog.config.constants import MANAGED_PACKAGE_EVENT
from apexlog.events.models import LogEvent


def merge_managed_package_events(root: LogEvent) -> None:
    """Collapse runs of adjacent ENTERING_MANAGED_PKG siblings with one namespace.

    The first event of a run survives and its span is stretched to the end of
    the last one; any other sibling, or a package event for a different
    namespace, ends the run.
    """
    stack = [root]
    while stack:
        node = stack.pop()
        kept: list[LogEvent] = []
        last_pkg: LogEvent | None = None
        merged = False

        for child in node.children:
            if child.type_name == MANAGED_PACKAGE_EVENT:
                if last_pkg is not None and child.namespace == last_pkg.namespace:
                    last_pkg.exit_stamp = child.exit_stamp or child.timestamp
                    for grandchild in child.children:
                        grandchild.parent = last_pkg
                        last_pkg.children.append(grandchild)
                    merged = True
                    continue
                _close_run(last_pkg)
                last_pkg = child
            else:
                _close_run(last_pkg)
                last_pkg = None

            if child.is_parent:
                stack.append(child)
            kept.append(child)

        _close_run(last_pkg)
        if merged:
            node.children[:] = kept


def _close_run(pkg: LogEvent | None) -> None:
    if pkg is not None:
        pkg.recalculate_durations()


def _nodes_by_depth(nodes: Sequence[LogEvent]) -> list[list[LogEvent]]:
    """Nodes that have children, grouped by depth below *nodes*."""
    levels: list[list[LogEvent]] = []
    current = [node for node in nodes if node.children]
    while current:
        levels.append(current)
        current = [child for node in current for child in node.children if child.children]
    return levels


def aggregate_totals(nodes: Sequence[LogEvent]) -> None:
    """Roll counters up into parents and derive self time.

    Levels are processed deepest first, so each child's totals are final
    before they are added to its parent. Iterating by level keeps deep call
    trees off the Python call stack.
    """
    for level in reversed(_nodes_by_depth(nodes)):
        for parent in level:
            for child in parent.children:
                parent.dml_count.total += child.dml_count.total
                parent.soql_count.total += child.soql_count.total
                parent.sosl_count.total += child.sosl_count.total
                parent.dml_row_count.total += child.dml_row_count.total
                parent.soql_row_count.total += child.soql_row_count.total
                parent.sosl_row_count.total += child.sosl_row_count.total
                parent.thrown_count += child.thrown_count
                parent.duration.self -= child.duration.total
