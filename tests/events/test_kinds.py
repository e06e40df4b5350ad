"""Tests for event kind hooks (on_after / on_end) and namespace helpers."""

import pytest

from apexlog.events.factory import create_event
from apexlog.events.kinds import parse_object_namespace, parse_vf_namespace
from apexlog.events.models import LogEvent
from apexlog.events.registry import describe
from apexlog.parsing.state import ParseState


def _make(line: str, state: ParseState) -> LogEvent:
    parts = line.split("|")
    meta = describe(parts[1])
    assert meta is not None
    return create_event(meta, parts, state)


@pytest.fixture
def state() -> ParseState:
    return ParseState()


class TestNamespaceHelpers:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [("", ""), ("Account", "default"), ("acme__Order__e", "acme")],
    )
    def test_parse_object_namespace(self, text: str, expected: str) -> None:
        assert parse_object_namespace(text) == expected

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("/apex/MyPage", "default"), ("/apex/acme__Page", "acme"), ("acme__Page", "default")],
    )
    def test_parse_vf_namespace(self, text: str, expected: str) -> None:
        assert parse_vf_namespace(text) == expected


class TestExceptionThrown:
    def test_limit_exception_raises_error_issue(self, state: ParseState) -> None:
        # Given
        event = _make(
            "12:00:00.0 (50)|EXCEPTION_THROWN|[3]|System.LimitException: Too many SOQL queries: 101",
            state,
        )

        # When
        event.on_after(state, None)

        # Then
        issues = state.issues.to_list()
        assert len(issues) == 1
        assert issues[0].summary == "System.LimitException: Too many SOQL queries: 101"
        assert issues[0].kind == "error"
        assert issues[0].start_time == 50
        assert issues[0].description == ""

    def test_multi_line_limit_exception_summarised(self, state: ParseState) -> None:
        event = _make("12:00:00.0 (50)|EXCEPTION_THROWN|[3]|System.LimitException: CPU", state)
        event.text += "\nClass.Foo.bar: line 3"

        event.on_after(state, None)

        issue = state.issues.to_list()[0]
        assert issue.summary == "System.LimitException: CPU…"
        assert issue.description == event.text

    def test_long_single_line_cut_at_one_hundred(self, state: ParseState) -> None:
        event = _make("12:00:00.0 (50)|EXCEPTION_THROWN|[3]|System.LimitException: " + "x" * 200, state)

        event.on_after(state, None)

        issue = state.issues.to_list()[0]
        assert len(issue.summary) == 101
        assert issue.summary.endswith("…")

    def test_other_exceptions_raise_nothing(self, state: ParseState) -> None:
        event = _make("12:00:00.0 (50)|EXCEPTION_THROWN|[3]|System.DmlException: nope", state)

        event.on_after(state, None)

        assert len(state.issues) == 0


class TestFatalError:
    def test_single_line(self, state: ParseState) -> None:
        event = _make("12:00:00.0 (70)|FATAL_ERROR|System.NullPointerException: oops", state)

        event.on_after(state, None)

        issue = state.issues.to_list()[0]
        assert issue.summary == "FATAL ERROR! cause=System.NullPointerException: oops"
        assert issue.description == ""
        assert issue.kind == "error"

    def test_multi_line_keeps_detail(self, state: ParseState) -> None:
        event = _make("12:00:00.0 (70)|FATAL_ERROR|System.NullPointerException: oops", state)
        event.text += "\n\nClass.Foo.bar: line 9, column 1"

        event.on_after(state, None)

        issue = state.issues.to_list()[0]
        assert issue.summary == "FATAL ERROR! cause=System.NullPointerException: oops"
        assert issue.description == event.text


class TestLimitUsageForNs:
    def test_accumulated_text_recorded_as_snapshot(self, state: ParseState) -> None:
        # Given
        event = _make("12:00:00.0 (90)|LIMIT_USAGE_FOR_NS|(default)|", state)
        event.text += "\n  Number of SOQL queries: 2 out of 100\n  Maximum CPU time: 15 out of 10000"

        # When
        event.on_after(state, None)

        # Then
        usage = state.governor_limits.by_namespace["default"]
        assert (usage.soql_queries.used, usage.soql_queries.limit) == (2, 100)
        assert usage.cpu_time.used == 15
        snapshot = state.governor_limits.snapshots[0]
        assert (snapshot.timestamp, snapshot.namespace) == (90, "default")


class TestManagedPackage:
    def test_exit_stamp_is_next_event_start(self, state: ParseState) -> None:
        pkg = _make("12:00:00.0 (10)|ENTERING_MANAGED_PKG|acme", state)
        nxt = _make("12:00:00.0 (25)|STATEMENT_EXECUTE|[1]", state)

        pkg.on_after(state, nxt)

        assert pkg.exit_stamp == 25
        assert pkg.duration.total == 15

    def test_end_of_input_leaves_exit_open(self, state: ParseState) -> None:
        pkg = _make("12:00:00.0 (10)|ENTERING_MANAGED_PKG|acme", state)

        pkg.on_after(state, None)

        assert pkg.exit_stamp is None


class TestOnEnd:
    def test_method_entry_adopts_class_reference_namespace(self, state: ParseState) -> None:
        entry = _make("12:00:00.0 (1)|METHOD_ENTRY|[1]|01p|Outer", state)
        exit_ = _make("12:00:00.0 (2)|METHOD_EXIT|[1]|01p|ns.Outer", state)

        entry.on_end(exit_, [entry])

        assert entry.namespace == "ns"

    def test_flow_interviews_named_from_stack(self, state: ParseState) -> None:
        # Given
        unit = _make("12:00:00.0 (1)|CODE_UNIT_STARTED|[EXTERNAL]|Flow:Account", state)
        flows = _make("12:00:00.0 (2)|FLOW_START_INTERVIEWS_BEGIN|1", state)
        child = _make("12:00:00.0 (3)|FLOW_START_INTERVIEW_BEGIN|x|Update_Account", state)
        flows.children.append(child)
        end = _make("12:00:00.0 (4)|FLOW_START_INTERVIEWS_END|1", state)

        # When
        flows.on_end(end, [unit, flows])

        # Then
        assert flows.suffix == " (Flow)"
        assert flows.text == "FLOW_START_INTERVIEWS : Update_Account"

    def test_flow_interviews_under_trigger_is_process_builder(self, state: ParseState) -> None:
        unit = _make("12:00:00.0 (1)|CODE_UNIT_STARTED|[EXTERNAL]|execute_anonymous_apex", state)
        flows = _make("12:00:00.0 (2)|FLOW_START_INTERVIEWS_BEGIN|1", state)
        end = _make("12:00:00.0 (4)|FLOW_START_INTERVIEWS_END|1", state)

        flows.on_end(end, [unit, flows])

        assert flows.suffix == " (Process Builder)"
        assert flows.text == "FLOW_START_INTERVIEWS : "
