"""Event kinds with domain fields or builder hooks.

Record types not listed in EVENT_CLASSES are plain LogEvent instances whose
text comes from the TEXT_BUILDERS table in factory.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from apexlog.config.constants import DEFAULT_NAMESPACE, EXCEPTION_SUMMARY_MAX
from apexlog.core.errors import EventFieldError
from apexlog.events.limits import parse_limit_usage
from apexlog.events.models import LogEvent

if TYPE_CHECKING:
    from apexlog.parsing.state import ParseState


def part(parts: list[str], index: int) -> str:
    """Field *index* of a record, or "" when the record is shorter."""
    return parts[index] if index < len(parts) else ""


def parse_rows(text: str) -> int:
    """Row count from a `Rows:n` field; an empty field means 0."""
    if not text:
        return 0
    count = text[text.find("Rows:") + 5 :]
    try:
        return int(count)
    except ValueError:
        raise EventFieldError.bad_row_count(text) from None


def parse_object_namespace(text: str) -> str:
    if not text:
        return ""
    sep = text.find("__")
    return DEFAULT_NAMESPACE if sep == -1 else text[:sep]


def parse_vf_namespace(text: str) -> str:
    """Namespace of a Visualforce page path such as `/apex/ns__Page`."""
    sep = text.find("__")
    first_slash = text.find("/")
    if sep == -1 or first_slash == -1:
        return DEFAULT_NAMESPACE
    second_slash = text.find("/", first_slash + 1)
    if second_slash < 0:
        return DEFAULT_NAMESPACE
    return text[second_slash + 1 : sep]


@dataclass(slots=True, eq=False)
class MethodEntry(LogEvent):
    def parse_fields(self, parts: list[str], state: ParseState) -> None:
        method_name = part(parts, 4)
        self.has_valid_symbols = True
        self.text = method_name or self.type_name
        if self.text.startswith("System.Type.forName("):
            # class loading is not charged as method time
            self.cpu_type = "loading"
        elif namespace := self._method_namespace(method_name, state.namespaces):
            self.namespace = namespace

    def on_end(self, end: LogEvent, stack: list[LogEvent]) -> None:  # noqa: ARG002
        if end.namespace and not end.text.endswith(")"):
            self.namespace = end.namespace

    @staticmethod
    def _method_namespace(method_name: str, known: set[str]) -> str:
        bracket = method_name.find("(")
        dot = method_name.find(".")
        if bracket == -1 or dot == -1:
            return ""
        if method_name[:dot] in known:
            return method_name[:dot]
        name_parts = method_name[:bracket].split(".")
        if len(name_parts) == 4:
            return name_parts[0]
        if len(name_parts) == 2:
            return DEFAULT_NAMESPACE
        return ""


@dataclass(slots=True, eq=False)
class MethodExit(LogEvent):
    def parse_fields(self, parts: list[str], state: ParseState) -> None:  # noqa: ARG002
        if len(parts) > 4:
            self.text = parts[4]
        elif len(parts) > 3:
            self.text = parts[3]
        # Without a trailing ')' this is the first reference to a class: ns.Outer
        if not self.text.endswith(")"):
            dot = self.text.find(".")
            if dot != -1:
                self.namespace = self.text[:dot]


@dataclass(slots=True, eq=False)
class ConstructorEntry(LogEvent):
    def parse_fields(self, parts: list[str], state: ParseState) -> None:
        args, class_name = part(parts, 4), part(parts, 5)
        self.has_valid_symbols = True
        self.suffix = " (constructor)"
        self.text = class_name + (args[args.rfind("(") :] if args else "")

        dot = class_name.find(".")
        if dot != -1 and class_name[:dot] in state.namespaces:
            self.namespace = class_name[:dot]
        elif class_name.count(".") == 2:
            # inner class with a namespace
            self.namespace = class_name.split(".")[0]


@dataclass(slots=True, eq=False)
class CodeUnitStarted(LogEvent):
    code_unit_type: str = ""

    def parse_fields(self, parts: list[str], state: ParseState) -> None:  # noqa: ARG002
        self.suffix = " (entrypoint)"
        type_string = part(parts, 5) or part(parts, 4) or part(parts, 3)
        sep = type_string.find(":")
        if sep == -1:
            sep = type_string.find("/")
        self.code_unit_type = type_string[:sep] if sep != -1 else ""

        name = part(parts, 4) or part(parts, 3) or self.code_unit_type
        self.text = name
        self.cpu_type = "method"
        match self.code_unit_type:
            case "EventService":
                self.namespace = parse_object_namespace(type_string[sep + 1 :])
            case "Validation" | "Workflow" | "Flow":
                self.cpu_type = "custom"
            case "VF":
                self.namespace = parse_vf_namespace(name)
            case "apex":
                dot = name.find(".")
                self.namespace = (
                    name[name.find("apex://") + 7 : dot] if dot != -1 else DEFAULT_NAMESPACE
                )
            case "__sfdc_trigger":
                trigger_parts = part(parts, 5).split("/")
                if len(trigger_parts) == 3:
                    self.namespace = trigger_parts[1]
            case _:
                bracket = name.rfind("(")
                method_name = (name[: bracket + 1] if bracket != -1 else name).split(".")
                if len(method_name) == 3 or (
                    len(method_name) == 2 and not method_name[1].endswith("(")
                ):
                    self.namespace = method_name[0]
        self.namespace = self.namespace or DEFAULT_NAMESPACE


_SYSTEM_VF_CONTROLLERS = (
    "pagemessagescomponentcontroller",
    "pagemessagecomponentcontroller",
    "severitymessages",
)


@dataclass(slots=True, eq=False)
class VfApexCallStart(LogEvent):
    def parse_fields(self, parts: list[str], state: ParseState) -> None:  # noqa: ARG002
        self.has_valid_symbols = True
        self.suffix = " (VF APEX)"
        class_text = part(parts, 5) or part(parts, 3)
        method_text = part(parts, 4)

        if not method_text and (
            " " not in class_text
            or any(cls in class_text.lower() for cls in _SYSTEM_VF_CONTROLLERS)
        ):
            # System page-message calls never log an exit.
            self.exit_types = frozenset()
            self.has_valid_symbols = False
        elif method_text:
            method_index = method_text.find("(")
            constructor_index = method_text.find("<init>")
            if method_index > -1:
                method_text = "." + method_text[method_index:][1:-1] + "()"
            elif constructor_index > -1:
                method_text = method_text[constructor_index + 6 :] + "()"
            else:
                method_text = "." + method_text
        self.text = class_text + method_text


@dataclass(slots=True, eq=False)
class DmlBegin(LogEvent):
    def parse_fields(self, parts: list[str], state: ParseState) -> None:  # noqa: ARG002
        self.dml_count.set(1)
        self.text = f"DML {part(parts, 3)} {part(parts, 4)}"
        self.dml_row_count.set(parse_rows(part(parts, 5)))


@dataclass(slots=True, eq=False)
class SoqlExecuteBegin(LogEvent):
    aggregations: int = 0

    def parse_fields(self, parts: list[str], state: ParseState) -> None:  # noqa: ARG002
        self.soql_count.set(1)
        aggregation_text = part(parts, 3)
        if aggregation_text:
            value = aggregation_text[aggregation_text.find("Aggregations:") + 13 :]
            self.aggregations = int(value) if value.isdigit() else 0
        self.text = part(parts, 4)

    def on_end(self, end: LogEvent, stack: list[LogEvent]) -> None:  # noqa: ARG002
        self.soql_row_count.set(end.soql_row_count.total)


@dataclass(slots=True, eq=False)
class SoqlExecuteEnd(LogEvent):
    def parse_fields(self, parts: list[str], state: ParseState) -> None:  # noqa: ARG002
        self.soql_row_count.set(parse_rows(part(parts, 3)))


def _number_after(text: str, label: str) -> float | None:
    if not text:
        return None
    try:
        return float(text[text.find(label) + len(label) :])
    except ValueError:
        return None


@dataclass(slots=True, eq=False)
class SoqlExecuteExplain(LogEvent):
    """Query plan as reported by the query optimizer.

    `Index on Account : [Name], cardinality: 2, sobjectCardinality: 10, relativeCost 0.5`
    """

    leading_operation_type: str | None = None
    sobject_type: str | None = None
    fields: list[str] | None = None
    cardinality: float | None = None
    sobject_cardinality: float | None = None
    relative_cost: float | None = None

    def parse_fields(self, parts: list[str], state: ParseState) -> None:  # noqa: ARG002
        plan = part(parts, 3)
        self.text = plan
        plan_parts = plan.split("],")
        if len(plan_parts) < 2:
            return
        explain = plan_parts[0]
        cardinality, sobject_cardinality, cost = (plan_parts[1].split(",") + ["", "", ""])[:3]

        on_index = explain.find(" on")
        self.leading_operation_type = explain[:on_index]
        self.sobject_type = explain[on_index + 4 : explain.find(" :")]
        field_list = "".join(explain[explain.find("[") + 1 :].split())
        self.fields = field_list.split(",") if field_list else []
        self.cardinality = _number_after(cardinality, "cardinality: ")
        self.sobject_cardinality = _number_after(sobject_cardinality, "sobjectCardinality: ")
        self.relative_cost = _number_after(cost, "relativeCost ")


@dataclass(slots=True, eq=False)
class SoslExecuteBegin(LogEvent):
    def parse_fields(self, parts: list[str], state: ParseState) -> None:  # noqa: ARG002
        self.sosl_count.set(1)
        self.text = f"SOSL: {part(parts, 3)}"

    def on_end(self, end: LogEvent, stack: list[LogEvent]) -> None:  # noqa: ARG002
        self.sosl_row_count.set(end.sosl_row_count.total)


@dataclass(slots=True, eq=False)
class SoslExecuteEnd(LogEvent):
    def parse_fields(self, parts: list[str], state: ParseState) -> None:  # noqa: ARG002
        self.sosl_row_count.set(parse_rows(part(parts, 3)))


@dataclass(slots=True, eq=False)
class EnteringManagedPackage(LogEvent):
    def parse_fields(self, parts: list[str], state: ParseState) -> None:  # noqa: ARG002
        raw = part(parts, 2)
        self.namespace = self.text = raw[raw.rfind(".") + 1 :]

    def on_after(self, state: ParseState, next_event: LogEvent | None) -> None:  # noqa: ARG002
        if next_event is not None:
            self.exit_stamp = next_event.timestamp
            self.recalculate_durations()


@dataclass(slots=True, eq=False)
class FlowStartInterviewsBegin(LogEvent):
    def parse_fields(self, parts: list[str], state: ParseState) -> None:  # noqa: ARG002
        self.text = "FLOW_START_INTERVIEWS : "

    def on_end(self, end: LogEvent, stack: list[LogEvent]) -> None:  # noqa: ARG002
        self.suffix = f" ({self._flow_type(stack)})"
        if self.children:
            self.text += self.children[0].text

    def _flow_type(self, stack: list[LogEvent]) -> str:
        for open_event in reversed(stack):
            if open_event is self:
                continue
            if isinstance(open_event, CodeUnitStarted):
                return "Flow" if open_event.code_unit_type == "Flow" else "Process Builder"
            if open_event.type_name == "FLOW_START_INTERVIEWS_BEGIN":
                return "Flow"
        return ""


@dataclass(slots=True, eq=False)
class ExceptionThrown(LogEvent):
    def parse_fields(self, parts: list[str], state: ParseState) -> None:  # noqa: ARG002
        self.thrown_count = 1
        self.text = part(parts, 3)

    def on_after(self, state: ParseState, next_event: LogEvent | None) -> None:  # noqa: ARG002
        if "System.LimitException" not in self.text:
            return
        newline = self.text.find("\n")
        summary = self.text[:newline] if newline >= 0 else self.text[: EXCEPTION_SUMMARY_MAX + 1]
        truncated = len(self.text) > len(summary)
        state.issues.add(
            self.timestamp,
            summary + ("…" if truncated else ""),
            self.text if truncated else "",
            "error",
        )


@dataclass(slots=True, eq=False)
class FatalError(LogEvent):
    def on_after(self, state: ParseState, next_event: LogEvent | None) -> None:  # noqa: ARG002
        summary = self.text.split("\n", 1)[0]
        detail = self.text if summary != self.text else ""
        state.issues.add(self.timestamp, "FATAL ERROR! cause=" + summary, detail, "error")


@dataclass(slots=True, eq=False)
class LimitUsageForNs(LogEvent):
    limits_namespace: str = field(default="")

    def on_after(self, state: ParseState, next_event: LogEvent | None) -> None:  # noqa: ARG002
        namespace, limits = parse_limit_usage(self.text)
        self.limits_namespace = namespace
        state.governor_limits.record(self.timestamp, namespace, limits)


EVENT_CLASSES: dict[str, type[LogEvent]] = {
    "METHOD_ENTRY": MethodEntry,
    "METHOD_EXIT": MethodExit,
    "CONSTRUCTOR_ENTRY": ConstructorEntry,
    "CODE_UNIT_STARTED": CodeUnitStarted,
    "VF_APEX_CALL_START": VfApexCallStart,
    "DML_BEGIN": DmlBegin,
    "SOQL_EXECUTE_BEGIN": SoqlExecuteBegin,
    "SOQL_EXECUTE_END": SoqlExecuteEnd,
    "SOQL_EXECUTE_EXPLAIN": SoqlExecuteExplain,
    "SOSL_EXECUTE_BEGIN": SoslExecuteBegin,
    "SOSL_EXECUTE_END": SoslExecuteEnd,
    "ENTERING_MANAGED_PKG": EnteringManagedPackage,
    "FLOW_START_INTERVIEWS_BEGIN": FlowStartInterviewsBegin,
    "EXCEPTION_THROWN": ExceptionThrown,
    "FATAL_ERROR": FatalError,
    "LIMIT_USAGE_FOR_NS": LimitUsageForNs,
}
"""Record types whose events need more than a text field."""
