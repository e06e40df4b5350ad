"""Line Splitter: raw debug log text to logical lines."""

from __future__ import annotations

import re
from collections.abc import Iterator

_EXECUTION_STARTED = re.compile(
    r"^\d{2}:\d{2}:\d{2}\.\d \(\d+\)\|EXECUTION_STARTED\r?$", re.MULTILINE
)


def find_start_offset(text: str) -> int:
    """Offset of the `EXECUTION_STARTED` line, or 0 when the log has none."""
    match = _EXECUTION_STARTED.search(text)
    return match.start() if match else 0


def split_lines(text: str, start: int | None = None) -> Iterator[str]:
    """Yield the non-blank lines of *text* from the execution start onwards.

    Handles LF and CRLF endings, including a mix of both in one file. The
    last line is yielded even without a terminating newline.
    """
    offset = find_start_offset(text) if start is None else start
    crlf = text.find("\r\n", offset) != -1

    while True:
        end = text.find("\n", offset)
        if end == -1:
            break
        line_end = end - 1 if crlf and end > offset and text[end - 1] == "\r" else end
        if line_end > offset:
            yield text[offset:line_end]
        offset = end + 1

    if offset < len(text):
        last = text[offset:]
        if crlf and last.endswith("\r"):
            last = last[:-1]
        if last:
            yield last
