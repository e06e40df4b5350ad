"""End-to-end tests for ApexLogParser, parse() and parse_file()."""

from pathlib import Path

import pytest

from apexlog import ApexLogParser, parse, parse_file
from apexlog.config.models import ApexLogConfig, ParserConfig
from apexlog.core.errors import ErrorCode, LogFileError
from apexlog.events.limits import Limit
from apexlog.events.models import ApexLog, DebugLevel, iter_events
from apexlog.report import build_summary


def rec(ts: int, type_name: str, *fields: str) -> str:
    return "|".join([f"12:00:00.0 ({ts})", type_name, *fields])


PACKAGE_LOG = "\n".join(
    [
        rec(100, "ENTERING_MANAGED_PKG", "ns1"),
        rec(200, "ENTERING_MANAGED_PKG", "ns1"),
        rec(300, "ENTERING_MANAGED_PKG", "ns2"),
        rec(400, "STATEMENT_EXECUTE", "[1]"),
    ]
)


class TestParseSample:
    """A well-formed anonymous Apex log."""

    def test_given_sample_when_parsed_then_tree_shape(self, sample_log_text: str) -> None:
        # When
        log = parse(sample_log_text)

        # Then
        (execution,) = log.children
        (unit,) = execution.children
        assert [child.type_name for child in unit.children] == [
            "METHOD_ENTRY",
            "CUMULATIVE_LIMIT_USAGE",
        ]
        method = unit.children[0]
        assert [child.type_name for child in method.children] == [
            "SOQL_EXECUTE_BEGIN",
            "DML_BEGIN",
            "USER_DEBUG",
        ]
        assert method.children[2].text.endswith("first\nsecond")

    def test_given_sample_when_parsed_then_root_span_and_times(self, sample_log_text: str) -> None:
        log = parse(sample_log_text)

        assert (log.timestamp, log.exit_stamp) == (100, 230)
        assert log.duration.total == 130
        assert log.execution_end_time == 230
        assert log.start_time == 43_200_100

    def test_given_sample_when_parsed_then_counters_aggregated(self, sample_log_text: str) -> None:
        # When
        log = parse(sample_log_text)

        # Then
        method = log.children[0].children[0].children[0]
        assert (method.duration.total, method.duration.self) == (80, 40)
        assert (log.soql_count.total, log.soql_row_count.total) == (1, 5)
        assert (log.dml_count.total, log.dml_row_count.total) == (1, 2)
        assert log.thrown_count == 0

    def test_given_sample_when_parsed_then_log_wide_results(self, sample_log_text: str) -> None:
        log = parse(sample_log_text)

        assert log.size == len(sample_log_text.encode("utf-8"))
        assert log.namespaces == ["default"]
        assert log.issues == []
        assert log.parse_errors == []
        assert log.debug_levels == [
            DebugLevel("APEX_CODE", "FINEST"),
            DebugLevel("APEX_PROFILING", "INFO"),
            DebugLevel("DB", "INFO"),
        ]
        assert log.governor_limits.soql_queries == Limit(1, 100)
        assert log.governor_limits.dml_statements == Limit(1, 150)
        assert set(log.governor_limits.by_namespace) == {"default"}

    def test_given_same_text_when_parsed_twice_then_identical_results(
        self, sample_log_text: str
    ) -> None:
        parser = ApexLogParser()

        first = build_summary(parser.parse(sample_log_text))
        second = build_summary(parser.parse(sample_log_text))

        assert first == second

    def test_given_crlf_endings_when_parsed_then_same_as_lf(self, sample_log_text: str) -> None:
        # Given
        crlf = sample_log_text.replace("\n", "\r\n")

        # When
        lf_summary = build_summary(parse(sample_log_text))
        crlf_summary = build_summary(parse(crlf))

        # Then
        lf_summary.pop("size")
        crlf_summary.pop("size")
        assert crlf_summary == lf_summary


UNWINDING_LOG = "\n".join(
    [
        rec(100, "METHOD_ENTRY", "[1]", "01p", "Outer.run()"),
        rec(110, "METHOD_ENTRY", "[2]", "01p", "Inner.run()"),
        rec(115, "STATEMENT_EXECUTE", "[3]"),
        rec(120, "EXCEPTION_THROWN", "[3]", "System.NullPointerException: x"),
        rec(150, "METHOD_EXIT", "[1]", "01p", "Outer.run()"),
    ]
)


def assert_self_time_consistent(log: ApexLog) -> None:
    for node in [log, *iter_events(log)]:
        children_total = sum(child.duration.total for child in node.children)
        assert node.duration.self == node.duration.total - children_total, node.text
        assert node.duration.self >= 0, node.text


class TestSelfTime:
    def test_given_sample_when_parsed_then_self_time_holds_for_every_node(
        self, sample_log_text: str
    ) -> None:
        assert_self_time_consistent(parse(sample_log_text))

    def test_given_exception_unwind_when_parsed_then_self_time_holds_for_every_node(
        self,
    ) -> None:
        # When
        log = parse(UNWINDING_LOG)

        # Then
        assert log.issues == []
        outer = log.children[0]
        inner = outer.children[0]
        assert (outer.duration.total, outer.duration.self) == (50, 10)
        assert (inner.duration.total, inner.duration.self) == (40, 40)
        assert_self_time_consistent(log)

class TestParseMalformed:
    def test_given_log_cut_mid_method_when_parsed_then_unexpected_end(
        self, sample_log_text: str
    ) -> None:
        # Given
        cut = sample_log_text[: sample_log_text.index("12:00:00.1 (200)")]

        # When
        log = parse(cut)

        # Then
        assert [issue.summary for issue in log.issues] == ["Unexpected-End"]
        assert log.issues[0].start_time == 190
        assert log.exit_stamp == 190

    def test_given_empty_text_when_parsed_then_empty_root(self) -> None:
        log = parse("")

        assert log.children == []
        assert (log.timestamp, log.exit_stamp, log.duration.total) == (0, 0, 0)
        assert log.issues == []
        assert log.parse_errors == []

    def test_given_garbage_when_parsed_then_reported_not_raised(self) -> None:
        log = parse("not a log\n" + rec(5, "NOT_A_REAL_EVENT") + "\n")

        assert log.children == []
        assert log.parse_errors == [
            "Invalid log line: not a log",
            "Unsupported log event name: NOT_A_REAL_EVENT",
        ]


class TestParserConfig:
    def test_given_default_config_when_parsed_then_packages_merged(self) -> None:
        log = parse(PACKAGE_LOG)

        spans = [(e.type_name, e.timestamp, e.exit_stamp) for e in log.children]
        assert spans == [
            ("ENTERING_MANAGED_PKG", 100, 300),
            ("ENTERING_MANAGED_PKG", 300, 400),
            ("STATEMENT_EXECUTE", 400, None),
        ]
        assert log.namespaces == ["ns1", "ns2"]

    def test_given_merging_disabled_when_parsed_then_every_package_kept(self) -> None:
        config = ApexLogConfig(parser=ParserConfig(merge_managed_packages=False))

        log = parse(PACKAGE_LOG, config)

        assert len(log.children) == 4
        assert [e.exit_stamp for e in log.children[:3]] == [200, 300, 400]

    def test_given_custom_delimiter_when_parsed_then_fields_split_on_it(self) -> None:
        text = PACKAGE_LOG.replace("|", "\t")

        log = ApexLogParser(ParserConfig(field_delimiter="\t")).parse(text)

        assert len(log.children) == 3
        assert log.parse_errors == []


class TestParseFile:
    def test_given_file_when_parsed_then_same_as_text(
        self, sample_log_file: Path, sample_log_text: str
    ) -> None:
        assert build_summary(parse_file(sample_log_file)) == build_summary(parse(sample_log_text))

    def test_given_missing_file_when_parsed_then_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(LogFileError) as exc_info:
            parse_file(tmp_path / "missing.log")

        assert exc_info.value.code == ErrorCode.LOG_FILE_NOT_FOUND

    def test_given_directory_when_parsed_then_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(LogFileError) as exc_info:
            parse_file(tmp_path)

        assert exc_info.value.code == ErrorCode.LOG_FILE_NOT_FOUND

    def test_given_invalid_utf8_when_parsed_then_replaced(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.log"
        path.write_bytes(rec(1, "USER_DEBUG", "[1]", "DEBUG", "caf").encode() + b"\xff\n")

        log = parse_file(path)

        assert log.children[0].text.endswith("caf\ufffd")
