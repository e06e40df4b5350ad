"""Tests for summary formatting helpers."""

import pytest

from apexlog.core.formatting import (
    format_clock_ms,
    format_duration_ns,
    pluralize,
    truncate_at_word,
)


class TestPluralize:
    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, "0 issues"), (1, "1 issue"), (2, "2 issues")],
    )
    def test_default_plural(self, count: int, expected: str) -> None:
        assert pluralize(count, "issue") == expected

    def test_custom_plural(self) -> None:
        assert pluralize(3, "query", "queries") == "3 queries"
        assert pluralize(1, "query", "queries") == "1 query"


class TestTruncateAtWord:
    def test_short_text_unchanged(self) -> None:
        assert truncate_at_word("short", max_len=40) == "short"

    def test_cuts_at_word_boundary(self) -> None:
        result = truncate_at_word("FATAL ERROR! cause=System.NullPointerException", max_len=20)

        assert result == "FATAL ERROR!..."
        assert len(result) <= 20

    def test_hard_cut_without_spaces(self) -> None:
        assert truncate_at_word("abcdefghijkl", max_len=8) == "abcde..."

    def test_tiny_limit_returns_suffix(self) -> None:
        assert truncate_at_word("abcdef", max_len=2) == "..."


class TestFormatDurationNs:
    @pytest.mark.parametrize(
        ("nanoseconds", "expected"),
        [
            (0, "0ns"),
            (850, "850ns"),
            (12_500, "12.5us"),
            (3_250_000, "3.25ms"),
            (1_500_000_000, "1.500s"),
            (90_000_000_000, "1m 30s"),
        ],
    )
    def test_picks_readable_unit(self, nanoseconds: int, expected: str) -> None:
        assert format_duration_ns(nanoseconds) == expected

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            format_duration_ns(-1)


class TestFormatClockMs:
    def test_formats_wall_clock(self) -> None:
        assert format_clock_ms(45_296_789) == "12:34:56.789"

    def test_midnight(self) -> None:
        assert format_clock_ms(0) == "00:00:00.000"
