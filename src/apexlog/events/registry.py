"""Event kind registry.

Every record type name the parser recognises has one immutable EventMeta
entry describing how the tree builder treats it. The table is built once at
import time; `describe()` is the only lookup the dispatcher needs.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Literal

LogCategory = Literal[
    "Apex", "System", "Code Unit", "Automation", "DML", "SOQL", "Validation", "Callout", ""
]
CpuType = Literal["loading", "custom", "method", "free", "system", "pkg", ""]

# Salesforce debug log categories
APEX_CODE = "Apex Code"
APEX_PROFILING = "Apex Profiling"
CALLOUT = "Callout"
DATABASE = "Database"
NBA = "NBA"
SYSTEM = "System"
VALIDATION = "Validation"
VISUALFORCE = "Visualforce"
WORKFLOW = "Workflow"


@dataclass(frozen=True, slots=True)
class EventMeta:
    """Structural description of one record type."""

    type_name: str
    exit_types: frozenset[str] = frozenset()
    is_parent: bool = False
    closes_on_next_line: bool = False
    is_exit_candidate: bool = False
    signals_discontinuity: bool = False
    accepts_continuation_text: bool = False
    has_line_number: bool = False
    category: LogCategory = ""
    cpu_type: CpuType = ""
    debug_category: str = ""


def _span(
    type_name: str,
    *exit_types: str,
    category: LogCategory,
    cpu_type: CpuType,
    debug_category: str,
    line_number: bool = False,
) -> EventMeta:
    return EventMeta(
        type_name,
        exit_types=frozenset(exit_types),
        is_parent=True,
        has_line_number=line_number,
        category=category,
        cpu_type=cpu_type,
        debug_category=debug_category,
    )


def _next_line(type_name: str, *, accepts_text: bool = False) -> EventMeta:
    """A workflow step that ends where the following record starts."""
    return EventMeta(
        type_name,
        exit_types=frozenset({type_name}),
        is_parent=True,
        closes_on_next_line=True,
        is_exit_candidate=True,
        accepts_continuation_text=accepts_text,
        category="Automation",
        cpu_type="custom",
        debug_category=WORKFLOW,
    )


def _point(
    type_name: str,
    *,
    debug_category: str = "",
    line_number: bool = False,
    accepts_text: bool = False,
    discontinuity: bool = False,
) -> EventMeta:
    return EventMeta(
        type_name,
        has_line_number=line_number,
        accepts_continuation_text=accepts_text,
        signals_discontinuity=discontinuity,
        debug_category=debug_category,
    )


def _points(names: Iterable[str], **kwargs: str | bool) -> list[EventMeta]:
    return [_point(name, **kwargs) for name in names]  # type: ignore[arg-type]


_SPANS = [
    _span("CALLOUT_REQUEST", "CALLOUT_RESPONSE",
          category="Callout", cpu_type="free", debug_category=CALLOUT, line_number=True),
    _span("CONSTRUCTOR_ENTRY", "CONSTRUCTOR_EXIT",
          category="Apex", cpu_type="method", debug_category=APEX_CODE, line_number=True),
    _span("METHOD_ENTRY", "METHOD_EXIT",
          category="Apex", cpu_type="method", debug_category=APEX_CODE, line_number=True),
    _span("SYSTEM_CONSTRUCTOR_ENTRY", "SYSTEM_CONSTRUCTOR_EXIT",
          category="System", cpu_type="method", debug_category=SYSTEM, line_number=True),
    _span("SYSTEM_METHOD_ENTRY", "SYSTEM_METHOD_EXIT",
          category="System", cpu_type="method", debug_category=SYSTEM, line_number=True),
    _span("CODE_UNIT_STARTED", "CODE_UNIT_FINISHED",
          category="Code Unit", cpu_type="custom", debug_category=APEX_CODE),
    _span("VF_APEX_CALL_START", "VF_APEX_CALL_END",
          category="Apex", cpu_type="method", debug_category=APEX_CODE, line_number=True),
    _span("VF_DESERIALIZE_VIEWSTATE_BEGIN", "VF_DESERIALIZE_VIEWSTATE_END",
          category="System", cpu_type="method", debug_category=VISUALFORCE),
    _span("VF_EVALUATE_FORMULA_BEGIN", "VF_EVALUATE_FORMULA_END",
          category="System", cpu_type="custom", debug_category=VISUALFORCE),
    _span("VF_SERIALIZE_VIEWSTATE_BEGIN", "VF_SERIALIZE_VIEWSTATE_END",
          category="System", cpu_type="method", debug_category=VISUALFORCE),
    _span("VF_SERIALIZE_CONTINUATION_STATE_BEGIN", "VF_SERIALIZE_CONTINUATION_STATE_END",
          category="Apex", cpu_type="method", debug_category=APEX_CODE),
    _span("VF_DESERIALIZE_CONTINUATION_STATE_BEGIN", "VF_DESERIALIZE_CONTINUATION_STATE_END",
          category="Apex", cpu_type="method", debug_category=APEX_CODE),
    _span("DML_BEGIN", "DML_END",
          category="DML", cpu_type="free", debug_category=DATABASE, line_number=True),
    _span("SOQL_EXECUTE_BEGIN", "SOQL_EXECUTE_END",
          category="SOQL", cpu_type="free", debug_category=DATABASE, line_number=True),
    _span("SOSL_EXECUTE_BEGIN", "SOSL_EXECUTE_END",
          category="SOQL", cpu_type="free", debug_category=DATABASE, line_number=True),
    _span("QUERY_MORE_BEGIN", "QUERY_MORE_END",
          category="SOQL", cpu_type="custom", debug_category=DATABASE, line_number=True),
    _span("CUMULATIVE_LIMIT_USAGE", "CUMULATIVE_LIMIT_USAGE_END",
          category="System", cpu_type="system", debug_category=APEX_PROFILING),
    _span("CUMULATIVE_PROFILING_BEGIN", "CUMULATIVE_PROFILING_END",
          category="System", cpu_type="custom", debug_category=APEX_PROFILING),
    _span("NBA_NODE_BEGIN", "NBA_NODE_END",
          category="Automation", cpu_type="method", debug_category=NBA),
    _span("NBA_STRATEGY_BEGIN", "NBA_STRATEGY_END",
          category="Automation", cpu_type="method", debug_category=NBA),
    _span("EXECUTION_STARTED", "EXECUTION_FINISHED",
          category="Apex", cpu_type="method", debug_category=APEX_CODE),
    _span("ENTERING_MANAGED_PKG",
          category="Apex", cpu_type="pkg", debug_category=APEX_CODE),
    _span("EVENT_SERVICE_PUB_BEGIN", "EVENT_SERVICE_PUB_END",
          category="Automation", cpu_type="custom", debug_category=WORKFLOW),
    _span("EVENT_SERVICE_SUB_BEGIN", "EVENT_SERVICE_SUB_END",
          category="Automation", cpu_type="custom", debug_category=WORKFLOW),
    _span("FLOW_START_INTERVIEWS_BEGIN", "FLOW_START_INTERVIEWS_END",
          category="Automation", cpu_type="custom", debug_category=WORKFLOW),
    _span("FLOW_START_INTERVIEW_BEGIN", "FLOW_START_INTERVIEW_END",
          category="Automation", cpu_type="custom", debug_category=WORKFLOW),
    _span("FLOW_ELEMENT_BEGIN", "FLOW_ELEMENT_END",
          category="Automation", cpu_type="custom", debug_category=WORKFLOW),
    _span("FLOW_BULK_ELEMENT_BEGIN", "FLOW_BULK_ELEMENT_END",
          category="Automation", cpu_type="custom", debug_category=WORKFLOW),
    _span("WF_RULE_EVAL_BEGIN", "WF_RULE_EVAL_END",
          category="Automation", cpu_type="custom", debug_category=WORKFLOW),
    _span("WF_CRITERIA_BEGIN", "WF_CRITERIA_END", "WF_RULE_NOT_EVALUATED",
          category="Automation", cpu_type="custom", debug_category=WORKFLOW),
    _span("DUPLICATE_DETECTION_BEGIN", "DUPLICATE_DETECTION_END",
          category="Automation", cpu_type="custom", debug_category=WORKFLOW),
    _span("MATCH_ENGINE_BEGIN", "MATCH_ENGINE_END",
          category="Apex", cpu_type="method", debug_category=APEX_CODE),
    *(
        _span(f"{scope}_CACHE_{op}_BEGIN", f"{scope}_CACHE_{op}_END",
              category="Apex", cpu_type="method", debug_category=APEX_CODE)
        for scope in ("SESSION", "ORG")
        for op in ("PUT", "GET", "REMOVE")
    ),
]

_NEXT_LINE = [
    _next_line("WF_FIELD_UPDATE"),
    _next_line("WF_FORMULA", accepts_text=True),
    _next_line("WF_APPROVAL"),
    _next_line("WF_APPROVAL_SUBMIT"),
    _next_line("WF_EMAIL_ALERT"),
    _next_line("WF_EMAIL_SENT"),
    _next_line("WF_EVAL_ENTRY_CRITERIA"),
    _next_line("WF_NEXT_APPROVER"),
    _next_line("WF_PROCESS_FOUND"),
    _next_line("WF_PROCESS_NODE"),
    _next_line("WF_RULE_INVOCATION"),
]

_POINTS = [
    _point("EXCEPTION_THROWN", line_number=True, accepts_text=True, discontinuity=True),
    _point("FATAL_ERROR", accepts_text=True, discontinuity=True),
    _point("USER_DEBUG", line_number=True, accepts_text=True, debug_category=APEX_CODE),
    _point("EMAIL_QUEUE", line_number=True, accepts_text=True),
    _point("VF_PAGE_MESSAGE", accepts_text=True, debug_category=APEX_CODE),
    _point("LIMIT_USAGE_FOR_NS", accepts_text=True, debug_category=APEX_PROFILING),
    _point("CUMULATIVE_PROFILING", accepts_text=True, debug_category=APEX_PROFILING),
    _point("TESTING_LIMITS", accepts_text=True, debug_category=APEX_PROFILING),
    _point("LIMIT_USAGE", line_number=True, debug_category=APEX_PROFILING),
    _point("VF_EVALUATE_FORMULA_END", debug_category=VISUALFORCE),
    *_points(("STACK_FRAME_VARIABLE_LIST", "STATIC_VARIABLE_LIST"), accepts_text=True),
    *_points(("VALIDATION_ERROR", "VALIDATION_FORMULA"),
             accepts_text=True, debug_category=VALIDATION),
    *_points(("VALIDATION_PASS", "VALIDATION_RULE"), debug_category=VALIDATION),
    *_points(
        (
            "FLOW_START_INTERVIEWS_ERROR",
            "FLOW_ELEMENT_ERROR",
            "FLOW_VALUE_ASSIGNMENT",
            "WF_FLOW_ACTION_ERROR",
            "WF_FLOW_ACTION_ERROR_DETAIL",
            "WF_RULE_FILTER",
        ),
        accepts_text=True,
        debug_category=WORKFLOW,
    ),
    *_points(
        (
            "CALLOUT_RESPONSE",
            "CONSTRUCTOR_EXIT",
            "METHOD_EXIT",
            "SYSTEM_CONSTRUCTOR_EXIT",
            "SYSTEM_METHOD_EXIT",
            "DML_END",
            "SOQL_EXECUTE_END",
            "SOQL_EXECUTE_EXPLAIN",
            "SOSL_EXECUTE_END",
            "QUERY_MORE_END",
            "QUERY_MORE_ITERATIONS",
            "IDEAS_QUERY_EXECUTE",
            "HEAP_ALLOCATE",
            "HEAP_DEALLOCATE",
            "STATEMENT_EXECUTE",
            "VARIABLE_SCOPE_BEGIN",
            "VARIABLE_ASSIGNMENT",
            "USER_INFO",
            "PUSH_TRACE_FLAGS",
            "POP_TRACE_FLAGS",
            "SAVEPOINT_ROLLBACK",
            "SAVEPOINT_SET",
        ),
        line_number=True,
    ),
    *_points(
        ("NAMED_CREDENTIAL_REQUEST", "NAMED_CREDENTIAL_RESPONSE", "NAMED_CREDENTIAL_RESPONSE_DETAIL"),
        debug_category=CALLOUT,
    ),
    *_points(
        (
            "FLOW_START_INTERVIEW_LIMIT_USAGE",
            "FLOW_START_SCHEDULED_RECORDS",
            "FLOW_CREATE_INTERVIEW_ERROR",
            "FLOW_ELEMENT_DEFERRED",
            "FLOW_ELEMENT_FAULT",
            "FLOW_ELEMENT_LIMIT_USAGE",
            "FLOW_INTERVIEW_FINISHED",
            "FLOW_INTERVIEW_FINISHED_LIMIT_USAGE",
            "FLOW_INTERVIEW_PAUSED",
            "FLOW_INTERVIEW_RESUMED",
            "FLOW_SUBFLOW_DETAIL",
            "FLOW_WAIT_EVENT_RESUMING_DETAIL",
            "FLOW_WAIT_EVENT_WAITING_DETAIL",
            "FLOW_WAIT_RESUMING_DETAIL",
            "FLOW_WAIT_WAITING_DETAIL",
            "FLOW_ACTIONCALL_DETAIL",
            "FLOW_ASSIGNMENT_DETAIL",
            "FLOW_LOOP_DETAIL",
            "FLOW_RULE_DETAIL",
            "FLOW_BULK_ELEMENT_DETAIL",
            "FLOW_BULK_ELEMENT_LIMIT_USAGE",
            "FLOW_BULK_ELEMENT_NOT_SUPPORTED",
            "WF_RULE_EVAL_VALUE",
            "WF_ACTION",
            "WF_ACTIONS_END",
            "WF_ACTION_TASK",
            "WF_APPROVAL_REMOVE",
            "WF_APPROVAL_SUBMITTER",
            "WF_ASSIGN",
            "WF_ENQUEUE_ACTIONS",
            "WF_ESCALATION_ACTION",
            "WF_FLOW_ACTION_DETAIL",
            "WF_OUTBOUND_MSG",
            "WF_REASSIGN_RECORD",
            "WF_RESPONSE_NOTIFY",
            "WF_RULE_ENTRY_ORDER",
            "WF_SOFT_REJECT",
            "WF_SPOOL_ACTION_BEGIN",
            "WF_TIME_TRIGGER",
        ),
        debug_category=WORKFLOW,
    ),
]

# Recognised records with no structural role of their own.
_PLAIN = (
    "BULK_DML_RETRY",
    "BULK_HEAP_ALLOCATE",
    "CODE_UNIT_FINISHED",
    "VF_APEX_CALL_END",
    "NBA_NODE_DETAIL",
    "NBA_NODE_ERROR",
    "NBA_OFFER_INVALID",
    "NBA_STRATEGY_ERROR",
    "TOTAL_EMAIL_RECIPIENTS_QUEUED",
    "SYSTEM_MODE_ENTER",
    "SYSTEM_MODE_EXIT",
    "EVENT_SERVICE_PUB_DETAIL",
    "EVENT_SERVICE_SUB_DETAIL",
    "PUSH_NOTIFICATION_INVALID_APP",
    "PUSH_NOTIFICATION_INVALID_CERTIFICATE",
    "PUSH_NOTIFICATION_INVALID_NOTIFICATION",
    "PUSH_NOTIFICATION_NO_DEVICES",
    "PUSH_NOTIFICATION_SENT",
    "PUSH_NOTIFICATION_NOT_ENABLED",
    "SLA_END",
    "SLA_EVAL_MILESTONE",
    "SLA_PROCESS_CASE",
    "SLA_NULL_START_DATE",
    "XDS_DETAIL",
    "XDS_RESPONSE",
    "XDS_RESPONSE_DETAIL",
    "XDS_RESPONSE_ERROR",
    "XDS_REQUEST_DETAIL",
    "DUPLICATE_DETECTION_RULE_INVOCATION",
    "DUPLICATE_DETECTION_MATCH_INVOCATION_DETAILS",
    "DUPLICATE_DETECTION_MATCH_INVOCATION_SUMMARY",
    "BULK_COUNTABLE_STATEMENT_EXECUTE",
    "TEMPLATE_PROCESSING_ERROR",
    "EXTERNAL_SERVICE_REQUEST",
    "EXTERNAL_SERVICE_RESPONSE",
    "FLOW_CREATE_INTERVIEW_BEGIN",
    "FLOW_CREATE_INTERVIEW_END",
    "VARIABLE_SCOPE_END",
    "VALIDATION_FAIL",
    "WF_FLOW_ACTION_BEGIN",
    "WF_FLOW_ACTION_END",
    "WF_ESCALATION_RULE",
    "WF_HARD_REJECT",
    "WF_NO_PROCESS_FOUND",
    "WF_TIME_TRIGGERS_BEGIN",
    "WF_KNOWLEDGE_ACTION",
    "WF_SEND_ACTION",
    "WAVE_APP_LIFECYCLE",
    "WF_QUICK_CREATE",
    "WF_APEX_ACTION",
    "INVOCABLE_ACTION_DETAIL",
    "INVOCABLE_ACTION_ERROR",
    "FLOW_COLLECTION_PROCESSOR_DETAIL",
    "FLOW_SCHEDULED_PATH_QUEUED",
    "ROUTE_WORK_ACTION",
    "ADD_SKILL_REQUIREMENT_ACTION",
    "ADD_SCREEN_POP_ACTION",
    "CALLOUT_REQUEST_PREPARE",
    "CALLOUT_REQUEST_FINALIZE",
    "FUNCTION_INVOCATION_REQUEST",
    "FUNCTION_INVOCATION_RESPONSE",
    "APP_CONTAINER_INITIATED",
    "DATAWEAVE_USER_DEBUG",
    "USER_DEBUG_FINER",
    "USER_DEBUG_FINEST",
    "USER_DEBUG_FINE",
    "USER_DEBUG_DEBUG",
    "USER_DEBUG_INFO",
    "USER_DEBUG_WARN",
    "USER_DEBUG_ERROR",
    "VF_APEX_CALL",
    "HEAP_DUMP",
    "SCRIPT_EXECUTION",
    "SESSION_CACHE_MEMORY_USAGE",
    "ORG_CACHE_MEMORY_USAGE",
    "AE_PERSIST_VALIDATION",
    "REFERENCED_OBJECT_LIST",
    "DUPLICATE_RULE_FILTER",
    "DUPLICATE_RULE_FILTER_RESULT",
    "DUPLICATE_RULE_FILTER_VALUE",
    "TEMPLATED_ASSET",
    "TRANSFORMATION_SUMMARY",
    "RULES_EXECUTION_SUMMARY",
    "ASSET_DIFF_SUMMARY",
    "ASSET_DIFF_DETAIL",
    "RULES_EXECUTION_DETAIL",
    "JSON_DIFF_SUMMARY",
    "JSON_DIFF_DETAIL",
    "MATCH_ENGINE_INVOCATION",
)


def _build_registry() -> Mapping[str, EventMeta]:
    table: dict[str, EventMeta] = {}
    for meta in (*_SPANS, *_NEXT_LINE, *_POINTS, *_points(_PLAIN)):
        if meta.type_name in table:
            raise ValueError(f"Duplicate event kind: {meta.type_name}")
        table[meta.type_name] = meta

    # Anything some kind names as its exit may close a scope.
    exit_names = {name for meta in table.values() for name in meta.exit_types}
    for name in exit_names:
        meta = table.get(name) or _point(name)
        table[name] = replace(meta, is_exit_candidate=True)
    return MappingProxyType(table)


EVENT_REGISTRY: Mapping[str, EventMeta] = _build_registry()


def describe(type_name: str) -> EventMeta | None:
    """Structural metadata for a record type name, or None if unrecognised."""
    return EVENT_REGISTRY.get(type_name)
