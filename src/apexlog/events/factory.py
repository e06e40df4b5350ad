"""Turn one split record into a LogEvent.

Records look like `HH:MM:SS.f (nanos)|TYPE|[line]|field|...`. The factory
parses the shared fields (timestamp and optional line number), copies the
kind's structural flags from the registry, and fills in the display text.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from apexlog.config.constants import DEFAULT_NAMESPACE
from apexlog.core.errors import EventFieldError
from apexlog.events.kinds import EVENT_CLASSES
from apexlog.events.models import LineNumber, LogEvent
from apexlog.events.registry import EventMeta

if TYPE_CHECKING:
    from apexlog.parsing.state import ParseState

TextBuilder = Callable[[list[str], LineNumber], str]

_PADDING = [""] * 10


def _template(template: str) -> TextBuilder:
    """Builder for a `str.format` template over record fields; `{ln}` is the line number."""

    def build(parts: list[str], line_number: LineNumber) -> str:
        return template.format(*parts, *_PADDING, ln=line_number)

    return build


def _join(start: int, sep: str = " | ") -> TextBuilder:
    def build(parts: list[str], line_number: LineNumber) -> str:  # noqa: ARG001
        return sep.join(parts[start:])

    return build


_FIELD_2 = _template("{2}")
_FIELD_3 = _template("{3}")

TEXT_BUILDERS: dict[str, TextBuilder] = {
    "BULK_HEAP_ALLOCATE": _FIELD_2,
    "CALLOUT_REQUEST": _FIELD_3,
    "CALLOUT_RESPONSE": _FIELD_3,
    "NAMED_CREDENTIAL_REQUEST": _template("{3} : {4} : {5} : {6}"),
    "NAMED_CREDENTIAL_RESPONSE": _FIELD_2,
    "NAMED_CREDENTIAL_RESPONSE_DETAIL": _template("{3} : {4} {5} : {6} {7}"),
    "SYSTEM_CONSTRUCTOR_ENTRY": _FIELD_3,
    "SYSTEM_METHOD_ENTRY": _FIELD_3,
    "CODE_UNIT_FINISHED": _FIELD_2,
    "VF_APEX_CALL_END": _FIELD_2,
    "VF_EVALUATE_FORMULA_BEGIN": _FIELD_3,
    "VF_EVALUATE_FORMULA_END": _FIELD_2,
    "VF_PAGE_MESSAGE": _FIELD_2,
    "HEAP_ALLOCATE": _FIELD_3,
    "VARIABLE_SCOPE_BEGIN": _join(3),
    "VARIABLE_ASSIGNMENT": _join(3),
    "USER_INFO": _template("{3} {4}"),
    "USER_DEBUG": _join(3),
    "CUMULATIVE_PROFILING": _template("{2} {3}"),
    "LIMIT_USAGE": _template("{3} {4} out of {5}"),
    "LIMIT_USAGE_FOR_NS": _FIELD_2,
    "NBA_NODE_BEGIN": _join(2),
    "NBA_NODE_DETAIL": _join(2),
    "NBA_NODE_END": _join(2),
    "NBA_NODE_ERROR": _join(2),
    "NBA_OFFER_INVALID": _join(2),
    "NBA_STRATEGY_BEGIN": _join(2),
    "NBA_STRATEGY_END": _join(2),
    "NBA_STRATEGY_ERROR": _join(2),
    "PUSH_TRACE_FLAGS": _template("{4}, line:{ln} - {5}"),
    "POP_TRACE_FLAGS": _template("{4}, line:{ln} - {5}"),
    "QUERY_MORE_BEGIN": _template("line: {ln}"),
    "QUERY_MORE_END": _template("line: {ln}"),
    "QUERY_MORE_ITERATIONS": _template("line: {ln}, iterations:{3}"),
    "SAVEPOINT_ROLLBACK": _template("{3}, line: {ln}"),
    "SAVEPOINT_SET": _template("{3}, line: {ln}"),
    "TOTAL_EMAIL_RECIPIENTS_QUEUED": _FIELD_2,
    "SYSTEM_MODE_ENTER": _FIELD_2,
    "SYSTEM_MODE_EXIT": _FIELD_2,
    "EVENT_SERVICE_PUB_BEGIN": _FIELD_2,
    "EVENT_SERVICE_PUB_END": _FIELD_2,
    "EVENT_SERVICE_PUB_DETAIL": _template("{2} {3} {4}"),
    "EVENT_SERVICE_SUB_BEGIN": _template("{2} {3}"),
    "EVENT_SERVICE_SUB_END": _template("{2} {3}"),
    "EVENT_SERVICE_SUB_DETAIL": _template("{2} {3} {4} {6}"),
    "FLOW_START_INTERVIEWS_ERROR": _template("{2} - {4}"),
    "FLOW_START_INTERVIEW_BEGIN": _FIELD_3,
    "FLOW_START_INTERVIEW_LIMIT_USAGE": _FIELD_2,
    "FLOW_START_SCHEDULED_RECORDS": _template("{2} : {3}"),
    "FLOW_CREATE_INTERVIEW_ERROR": _template("{2} : {3} : {4} : {5}"),
    "FLOW_ELEMENT_BEGIN": _template("{3} {4}"),
    "FLOW_ELEMENT_DEFERRED": _template("{2} {3}"),
    "FLOW_VALUE_ASSIGNMENT": _template("{3} {4}"),
    "FLOW_WAIT_EVENT_RESUMING_DETAIL": _template("{2} : {3} : {4} : {5}"),
    "FLOW_WAIT_EVENT_WAITING_DETAIL": _template("{2} : {3} : {4} : {5} : {6}"),
    "FLOW_WAIT_RESUMING_DETAIL": _template("{2} : {3} : {4}"),
    "FLOW_WAIT_WAITING_DETAIL": _template("{2} : {3} : {4} : {5}"),
    "FLOW_INTERVIEW_FINISHED": _FIELD_3,
    "FLOW_INTERVIEW_RESUMED": _template("{2} : {3}"),
    "FLOW_INTERVIEW_PAUSED": _template("{2} : {3} : {4}"),
    "FLOW_ELEMENT_ERROR": _template("{2} {3} {4}"),
    "FLOW_ELEMENT_FAULT": _template("{2} : {3} : {4}"),
    "FLOW_ELEMENT_LIMIT_USAGE": _FIELD_2,
    "FLOW_INTERVIEW_FINISHED_LIMIT_USAGE": _FIELD_2,
    "FLOW_SUBFLOW_DETAIL": _template("{2} : {3} : {4} : {5}"),
    "FLOW_ACTIONCALL_DETAIL": _template("{3} : {4} : {5} : {6}"),
    "FLOW_ASSIGNMENT_DETAIL": _template("{3} : {4} : {5}"),
    "FLOW_LOOP_DETAIL": _template("{3} : {4}"),
    "FLOW_RULE_DETAIL": _template("{3} : {4}"),
    "FLOW_BULK_ELEMENT_BEGIN": _template("{2} - {3}"),
    "FLOW_BULK_ELEMENT_DETAIL": _template("{2} : {3} : {4}"),
    "FLOW_BULK_ELEMENT_NOT_SUPPORTED": _template("{2} : {3} : {4}"),
    "FLOW_BULK_ELEMENT_LIMIT_USAGE": _FIELD_2,
    "PUSH_NOTIFICATION_INVALID_APP": _template("{2}.{3}"),
    "PUSH_NOTIFICATION_INVALID_CERTIFICATE": _template("{2}.{3}"),
    "PUSH_NOTIFICATION_INVALID_NOTIFICATION": _template("{2}.{3} : {4} : {5} : {6} : {7} : {8}"),
    "PUSH_NOTIFICATION_NO_DEVICES": _template("{2}.{3}"),
    "PUSH_NOTIFICATION_SENT": _template("{2}.{3} : {4} : {5} : {6} : {7}"),
    "SLA_END": _template("{2} : {3} : {4} : {5} : {6}"),
    "SLA_EVAL_MILESTONE": _FIELD_2,
    "SLA_PROCESS_CASE": _FIELD_2,
    "VALIDATION_RULE": _FIELD_3,
    "VALIDATION_ERROR": _FIELD_2,
    "VALIDATION_FORMULA": _FIELD_2,
    "VALIDATION_PASS": _FIELD_3,
    "WF_FLOW_ACTION_ERROR": _template("{1} {4}"),
    "WF_FLOW_ACTION_ERROR_DETAIL": _template("{1} {2}"),
    "WF_FIELD_UPDATE": _template(" {2} {3} {4} {5} {6}"),
    "WF_RULE_EVAL_BEGIN": _FIELD_2,
    "WF_RULE_EVAL_VALUE": _FIELD_2,
    "WF_RULE_FILTER": _FIELD_2,
    "WF_CRITERIA_BEGIN": _template("WF_CRITERIA : {5} : {3}"),
    "WF_FORMULA": _template("{2} : {3}"),
    "WF_ACTION": _FIELD_2,
    "WF_ACTIONS_END": _FIELD_2,
    "WF_ACTION_TASK": _template("{2} : {3} : {4} : {5} : {6} : {7}"),
    "WF_APPROVAL": _template("{2} : {3} : {4}"),
    "WF_APPROVAL_REMOVE": _FIELD_2,
    "WF_APPROVAL_SUBMIT": _FIELD_2,
    "WF_APPROVAL_SUBMITTER": _template("{2} : {3} : {4}"),
    "WF_ASSIGN": _template("{2} : {3}"),
    "WF_EMAIL_ALERT": _template("{2} : {3} : {4}"),
    "WF_EMAIL_SENT": _template("{2} : {3} : {4}"),
    "WF_ENQUEUE_ACTIONS": _FIELD_2,
    "WF_ESCALATION_ACTION": _template("{2} : {3}"),
    "WF_EVAL_ENTRY_CRITERIA": _template("{2} : {3} : {4}"),
    "WF_FLOW_ACTION_DETAIL": _template("{2} : {3}"),
    "WF_NEXT_APPROVER": _template("{2} : {3} : {4}"),
    "WF_OUTBOUND_MSG": _template("{2} : {3} : {4} : {5}"),
    "WF_PROCESS_FOUND": _template("{2} : {3}"),
    "WF_PROCESS_NODE": _FIELD_2,
    "WF_REASSIGN_RECORD": _template("{2} : {3}"),
    "WF_RESPONSE_NOTIFY": _template("{2} : {3} : {4} : {5}"),
    "WF_RULE_ENTRY_ORDER": _FIELD_2,
    "WF_RULE_INVOCATION": _FIELD_2,
    "WF_SOFT_REJECT": _FIELD_2,
    "WF_TIME_TRIGGER": _template("{2} : {3} : {4} : {5}"),
    "WF_SPOOL_ACTION_BEGIN": _FIELD_2,
    "FATAL_ERROR": _FIELD_2,
    "XDS_DETAIL": _FIELD_2,
    "XDS_RESPONSE": _template("{2} : {3} : {4} : {5} : {6}"),
    "XDS_RESPONSE_DETAIL": _FIELD_2,
    "XDS_RESPONSE_ERROR": _FIELD_2,
    "DUPLICATE_DETECTION_RULE_INVOCATION": _template("{3} - {4}"),
    "DUPLICATE_DETECTION_MATCH_INVOCATION_DETAILS": _join(2),
    "DUPLICATE_DETECTION_MATCH_INVOCATION_SUMMARY": _join(2),
    "BULK_DML_RETRY": _FIELD_2,
}
"""Display text for kinds without their own event class; others show the type name."""

DEFAULT_NAMESPACE_KINDS = frozenset(
    {
        "DML_BEGIN",
        "CUMULATIVE_LIMIT_USAGE",
        "CUMULATIVE_PROFILING",
        "CUMULATIVE_PROFILING_BEGIN",
        "LIMIT_USAGE",
        "LIMIT_USAGE_FOR_NS",
        "EXECUTION_STARTED",
    }
)
"""Kinds that always belong to the org's own namespace."""


def parse_timestamp(text: str) -> int:
    """Nanosecond timestamp from `HH:MM:SS.f (nanos)`."""
    start = text.find("(")
    if start == -1 or not text.endswith(")"):
        raise EventFieldError.bad_timestamp(text)
    try:
        return int(text[start + 1 : -1])
    except ValueError:
        raise EventFieldError.bad_timestamp(text) from None


def parse_line_number(text: str) -> LineNumber:
    """Source line from `[n]`; `[EXTERNAL]` for managed code, None when absent."""
    if not text:
        return None
    inner = text[1:-1] if text.startswith("[") and text.endswith("]") else ""
    if inner == "EXTERNAL":
        return "EXTERNAL"
    if inner.isdigit():
        return int(inner)
    raise EventFieldError.bad_line_number(text)


def create_event(meta: EventMeta, parts: list[str], state: ParseState) -> LogEvent:
    """Build the event for one record whose type is known.

    Raises:
        EventFieldError: A shared field (timestamp, line number, row count) is malformed.
    """
    event_cls = EVENT_CLASSES.get(meta.type_name, LogEvent)
    event = event_cls(
        type_name=meta.type_name,
        timestamp=parse_timestamp(parts[0]),
        exit_types=meta.exit_types,
        is_parent=meta.is_parent,
        closes_on_next_line=meta.closes_on_next_line,
        is_exit_candidate=meta.is_exit_candidate,
        signals_discontinuity=meta.signals_discontinuity,
        accepts_continuation_text=meta.accepts_continuation_text,
        category=meta.category,
        cpu_type=meta.cpu_type,
        debug_category=meta.debug_category,
    )
    if meta.has_line_number:
        event.line_number = parse_line_number(parts[2] if len(parts) > 2 else "")

    builder = TEXT_BUILDERS.get(meta.type_name)
    event.text = builder(parts, event.line_number) if builder else meta.type_name
    if meta.type_name in DEFAULT_NAMESPACE_KINDS:
        event.namespace = DEFAULT_NAMESPACE
    event.parse_fields(parts, state)
    return event
