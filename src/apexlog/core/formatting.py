"""Summary formatting utilities for consistent terminal output.

Design principles:
- Every summary line fits on one line (~80 chars max)
- Grammatically correct (1 issue vs 2 issues)
- Durations in the most readable unit for nanosecond timestamps
"""

from __future__ import annotations

_NS_PER_US = 1_000
_NS_PER_MS = 1_000_000
_NS_PER_S = 1_000_000_000


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Args:
        count: The number of items
        singular: Singular form (e.g., "issue")
        plural: Plural form (default: singular + "s")

    Returns:
        Formatted string like "1 issue" or "3 issues"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


def truncate_at_word(text: str, max_len: int = 40, suffix: str = "...") -> str:
    """Truncate text at word boundary.

    Args:
        text: Text to truncate
        max_len: Maximum length including suffix
        suffix: Suffix to append if truncated

    Examples:
        "FATAL ERROR! cause=System.NullPointerException" -> "FATAL ERROR!..."
    """
    if len(text) <= max_len:
        return text

    cut_at = max_len - len(suffix)
    if cut_at <= 0:
        return suffix

    space_idx = text.rfind(" ", 0, cut_at)
    if space_idx > 0:
        return text[:space_idx] + suffix

    # No space found, hard cut
    return text[:cut_at] + suffix


def format_duration_ns(nanoseconds: int) -> str:
    """Format a nanosecond duration to a human-readable string.

    Args:
        nanoseconds: Duration in nanoseconds (must be non-negative)

    Returns:
        Formatted string like "850ns", "12.5us", "3.25ms", "1.500s", "2m 30s"

    Examples:
        850 -> "850ns"
        3_250_000 -> "3.25ms"
        90_000_000_000 -> "1m 30s"
    """
    if nanoseconds < 0:
        raise ValueError("Duration must be non-negative")

    if nanoseconds < _NS_PER_US:
        return f"{nanoseconds}ns"
    if nanoseconds < _NS_PER_MS:
        return f"{nanoseconds / _NS_PER_US:.1f}us"
    if nanoseconds < _NS_PER_S:
        return f"{nanoseconds / _NS_PER_MS:.2f}ms"

    seconds = nanoseconds / _NS_PER_S
    if seconds < 60:
        return f"{seconds:.3f}s"

    minutes = int(seconds // 60)
    remaining_secs = int(seconds % 60)
    return f"{minutes}m {remaining_secs}s"


def format_clock_ms(milliseconds: int) -> str:
    """Format milliseconds since midnight as a wall-clock time.

    Examples:
        45_296_789 -> "12:34:56.789"
    """
    hours, rest = divmod(milliseconds, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1_000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"
