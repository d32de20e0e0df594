"""Block-state classification for partially streamed Markdown.

Offsets are plain string indices.  A line "lies before" an offset when its
first character does, so an offset in the middle of a line is governed by
that whole line.
"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterator
from enum import Enum

FENCE_MARKER = "```"


class BlockState(Enum):
    """Structural context of an offset in a Markdown buffer."""

    NORMAL = "normal"
    IN_CODE_FENCE = "in_code_fence"
    IN_TABLE = "in_table"


def iter_lines(text: str, start: int = 0, stop: int | None = None) -> Iterator[tuple[int, int]]:
    """Yield ``(start, end)`` spans of the lines beginning in ``[start, stop)``.

    ``end`` is the index of the terminating newline, or ``len(text)`` for a
    trailing line that has not been terminated yet.
    """
    stop = len(text) if stop is None else stop
    pos = start
    while pos < stop:
        nl = text.find("\n", pos)
        if nl == -1:
            nl = len(text)
        yield pos, nl
        pos = nl + 1


def line_start(text: str, offset: int) -> int:
    return text.rfind("\n", 0, offset) + 1


def line_end(text: str, offset: int) -> int:
    nl = text.find("\n", offset)
    return len(text) if nl == -1 else nl


def is_fence_line(line: str) -> bool:
    return line.strip().startswith(FENCE_MARKER)


def is_table_row(line: str) -> bool:
    stripped = line.strip()
    return len(stripped) >= 2 and stripped.startswith("|") and stripped.endswith("|")


def may_be_table_row(line: str, complete: bool) -> bool:
    """Return True if *line* is, or may still turn into, a table row."""
    if complete:
        return is_table_row(line)
    stripped = line.lstrip()
    return not stripped or stripped.startswith("|")


def fence_line_starts(text: str, stop: int | None = None) -> list[int]:
    """Start offsets of the fence-marker lines beginning before *stop*.

    Only marker occurrences are visited, so the scan stays in ``str.find``
    instead of walking every line.
    """
    stop = len(text) if stop is None else stop
    if stop <= 0:
        return []
    # a marker counts if its line begins before stop
    limit = line_end(text, stop - 1)
    starts: list[int] = []
    pos = text.find(FENCE_MARKER, 0, limit)
    while pos != -1:
        start = line_start(text, pos)
        if not text[start:pos].strip():
            starts.append(start)
        pos = text.find(FENCE_MARKER, line_end(text, pos), limit)
    return starts


class FenceIndex:
    """Fence-marker lines of one buffer, for repeated parity queries.

    Built once per analysis; each query is a binary search instead of a
    rescan from the start of the buffer.
    """

    def __init__(self, text: str) -> None:
        self._starts = fence_line_starts(text)

    def count(self, offset: int) -> int:
        """Number of fence lines beginning before *offset*."""
        return bisect_left(self._starts, offset)

    def in_fence(self, offset: int) -> bool:
        return self.count(offset) % 2 == 1

    def starts_between(self, start: int, stop: int) -> list[int]:
        return self._starts[bisect_left(self._starts, start):bisect_left(self._starts, stop)]

    def next_start(self, offset: int) -> int | None:
        """First fence line beginning at or after *offset*."""
        i = bisect_left(self._starts, offset)
        return self._starts[i] if i < len(self._starts) else None

    def unclosed_start(self) -> int | None:
        """Start of the opening line of a block still open at the end of the buffer."""
        if len(self._starts) % 2 == 0:
            return None
        return self._starts[-1]


def fence_count(text: str, offset: int) -> int:
    """Count fence-marker lines beginning before *offset*."""
    return len(fence_line_starts(text, offset))


def in_code_fence(text: str, offset: int, fences: FenceIndex | None = None) -> bool:
    if fences is not None:
        return fences.in_fence(offset)
    return fence_count(text, offset) % 2 == 1


def opens_fence(text: str, cursor: int, fences: FenceIndex | None = None) -> bool:
    """True if the line starting at *cursor* is a fence marker opening a block.

    This catches a fence whose opening line has arrived before anything
    else, so the marker is never flushed apart from its body.
    """
    if cursor >= len(text) or line_start(text, cursor) != cursor:
        return False
    if not is_fence_line(text[cursor:line_end(text, cursor)]):
        return False
    return not in_code_fence(text, cursor, fences)


def in_table(text: str, offset: int, lookback: int = 500) -> bool:
    """True if the rendered prefix ``[0, offset)`` ends inside a table.

    Walks backward through at most *lookback* characters and reports whether
    the nearest line before *offset* is a pipe-delimited row.  A blank line
    ends the search.
    """
    if offset <= 0 or line_start(text, offset) != offset:
        return False
    window = text[max(0, offset - lookback):offset]
    lines = window.split("\n")
    if window.endswith("\n"):
        lines.pop()
    if not lines or not lines[-1].strip():
        return False
    return is_table_row(lines[-1])


def starts_table_row(text: str, cursor: int) -> bool:
    """True if the line at *cursor* is, or may become, a table row."""
    if cursor >= len(text) or line_start(text, cursor) != cursor:
        return False
    end = line_end(text, cursor)
    line = text[cursor:end]
    return bool(line.strip()) and may_be_table_row(line, complete=end < len(text))


def classify(
    text: str, cursor: int, lookback: int = 500, fences: FenceIndex | None = None,
) -> BlockState:
    """Classify the unrendered region of *text* starting at *cursor*."""
    if in_code_fence(text, cursor, fences) or opens_fence(text, cursor, fences):
        return BlockState.IN_CODE_FENCE
    if in_table(text, cursor, lookback) or starts_table_row(text, cursor):
        return BlockState.IN_TABLE
    return BlockState.NORMAL


def inside_table_run(text: str, offset: int) -> bool:
    """True if *offset* splits a run of table rows, or may once more text arrives."""
    start = line_start(text, offset)
    end = line_end(text, offset)
    complete = end < len(text)
    if offset > start:
        # mid-line: unsafe on any row-like line
        line = text[start:end]
        return may_be_table_row(line, complete) and bool(line.strip())
    if start == 0:
        return False
    prev_start = line_start(text, start - 1)
    if not is_table_row(text[prev_start:start - 1]):
        return False
    return may_be_table_row(text[start:end], complete)


def is_safe_boundary(text: str, offset: int, fences: FenceIndex | None = None) -> bool:
    """True if flushing ``[0, offset)`` leaves no fence or table split open."""
    if offset <= 0:
        return True
    if offset > len(text):
        return False
    start = line_start(text, offset)
    if offset > start and is_fence_line(text[start:line_end(text, offset)]):
        return False
    if in_code_fence(text, offset, fences):
        return False
    return not inside_table_run(text, offset)
