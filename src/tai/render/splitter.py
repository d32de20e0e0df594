"""Safe split point analysis for streamed Markdown.

Given a growing buffer and the offset up to which it has already been
rendered, decide how far the buffer can be flushed without cutting an open
code fence or table in two.  Once flushed, text cannot be taken back, so
every candidate is checked with :func:`~tai.render.blocks.is_safe_boundary`
before it is returned.

Fence markers are indexed once per call (:class:`~tai.render.blocks.FenceIndex`)
and no candidate past an unclosed fence opener is considered, so a render
with a long open code block costs a single scan of the buffer.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from tai.render.blocks import (
    BlockState,
    FenceIndex,
    classify,
    is_safe_boundary,
    iter_lines,
    line_end,
    may_be_table_row,
)
from tai.types.config import SplitPolicy

logger = logging.getLogger(__name__)

# Full-width endings are not followed by a space in CJK text
SENTENCE_ENDINGS = ".!?"
WIDE_SENTENCE_ENDINGS = "。！？"

_LIST_ITEM = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s")


def find_safe_split_point(
    text: str, cursor: int, policy: SplitPolicy | None = None,
) -> int | None:
    """Return the furthest offset ``> cursor`` that is safe to flush.

    Returns ``None`` when nothing can be flushed yet.  The analysis is
    repeated from each split point found, so a buffer holding a closed code
    block followed by a few paragraphs is flushed in one go.
    """
    policy = policy or SplitPolicy()
    if cursor < 0 or cursor > len(text):
        logger.warning("Cursor %d outside buffer of length %d", cursor, len(text))
        return None

    fences = FenceIndex(text)
    best: int | None = None
    pos = cursor
    while (split := next_split_point(text, pos, policy, fences)) is not None:
        if split <= pos:
            break
        best = pos = split
    return best


def next_split_point(
    text: str, cursor: int, policy: SplitPolicy, fences: FenceIndex | None = None,
) -> int | None:
    """Apply the split policy once, starting at *cursor*."""
    if len(text) - cursor < policy.min_unrendered:
        return None
    fences = fences or FenceIndex(text)

    state = classify(text, cursor, policy.table_lookback, fences)
    if state is BlockState.IN_CODE_FENCE:
        split = closing_fence_end(text, cursor, fences)
        if split is None:
            logger.debug("Waiting for closing fence after offset %d", cursor)
        return split

    if state is BlockState.IN_TABLE:
        split = table_end(text, cursor)
        if split is None:
            logger.debug("Waiting for end of table after offset %d", cursor)
            return None
        if split > cursor:
            return split
        # The table already ended at the cursor; fall through.

    for finder in _FALLBACKS:
        split = finder(text, cursor, policy, fences)
        if split is not None:
            return split
    return None


def closing_fence_end(text: str, cursor: int, fences: FenceIndex | None = None) -> int | None:
    """Offset just past the newline of the fence line closing the open block."""
    fences = fences or FenceIndex(text)
    # Cursor sits on the opening marker line unless it is already inside
    start = fences.next_start(cursor if fences.in_fence(cursor) else cursor + 1)
    if start is None:
        return None
    end = line_end(text, start)
    return end + 1 if end < len(text) else None


def table_end(text: str, cursor: int) -> int | None:
    """Start of the first line at or after *cursor* that cannot be a table row."""
    for start, end in iter_lines(text, cursor):
        if not may_be_table_row(text[start:end], complete=end < len(text)):
            return start
    return None


def search_limit(text: str, fences: FenceIndex) -> int:
    """Furthest offset that can be safe: the start of an unclosed fence, if any."""
    start = fences.unclosed_start()
    return len(text) if start is None else start


def paragraph_break(
    text: str, cursor: int, policy: SplitPolicy, fences: FenceIndex | None = None,
) -> int | None:
    """Offset after the last fence-safe blank line (``\\n\\n``)."""
    fences = fences or FenceIndex(text)
    limit = search_limit(text, fences)
    idx = text.rfind("\n\n", cursor, limit)
    while idx != -1:
        split = idx + 2
        if is_safe_boundary(text, split, fences):
            return split
        idx = text.rfind("\n\n", cursor, idx + 1)
    return None


def heading_start(
    text: str, cursor: int, policy: SplitPolicy, fences: FenceIndex | None = None,
) -> int | None:
    """Start of the last heading line far enough past the cursor."""
    fences = fences or FenceIndex(text)
    limit = search_limit(text, fences)
    candidates = [
        start for start, _end in iter_lines(text, cursor, limit)
        if text.startswith("#", start)
        and start - cursor >= policy.min_heading_progress
    ]
    for split in reversed(candidates):
        if is_safe_boundary(text, split, fences):
            return split
    return None


def list_end(
    text: str, cursor: int, policy: SplitPolicy, fences: FenceIndex | None = None,
) -> int | None:
    """Offset after the blank line that closes a list block."""
    fences = fences or FenceIndex(text)
    limit = search_limit(text, fences)
    candidates: list[int] = []
    in_list = False
    for start, end in iter_lines(text, cursor, limit):
        line = text[start:end]
        if _LIST_ITEM.match(line):
            in_list = True
        elif not line.strip():
            if in_list and end < len(text):
                candidates.append(end + 1)
            in_list = False
        elif not line[0].isspace():
            in_list = False
    for split in reversed(candidates):
        if is_safe_boundary(text, split, fences):
            return split
    return None


def line_break(
    text: str, cursor: int, policy: SplitPolicy, fences: FenceIndex | None = None,
) -> int | None:
    """Offset after the last complete line, if it is far enough along.

    The flushed lines must close every inline span they open, since a
    bold phrase or code span may run across a soft line break.
    """
    fences = fences or FenceIndex(text)
    idx = text.rfind("\n", cursor, search_limit(text, fences))
    while idx != -1 and idx + 1 - cursor >= policy.min_line_progress:
        split = idx + 1
        if is_safe_boundary(text, split, fences) and inline_balanced(text, cursor, split, fences):
            return split
        idx = text.rfind("\n", cursor, idx)
    return None


def sentence_end(
    text: str, cursor: int, policy: SplitPolicy, fences: FenceIndex | None = None,
) -> int | None:
    """Offset after the last sentence-ending mark in a long unrendered run."""
    if len(text) - cursor <= policy.sentence_threshold:
        return None
    fences = fences or FenceIndex(text)
    for i in range(search_limit(text, fences) - 1, cursor - 1, -1):
        ch = text[i]
        if ch in WIDE_SENTENCE_ENDINGS:
            pass
        elif ch in SENTENCE_ENDINGS and i + 1 < len(text) and text[i + 1].isspace():
            pass
        else:
            continue
        split = i + 1
        if is_safe_boundary(text, split, fences) and inline_balanced(text, cursor, split, fences):
            return split
    return None


def inline_balanced(text: str, start: int, stop: int, fences: FenceIndex | None = None) -> bool:
    """True if ``text[start:stop]`` closes every inline code span and strong emphasis it opens.

    Fenced code blocks, marker lines included, are left out of the count.
    """
    fences = fences or FenceIndex(text)
    prose: list[str] = []
    pos = start
    inside = fences.in_fence(start)
    for fence in fences.starts_between(start, stop):
        if not inside:
            prose.append(text[pos:fence])
        inside = not inside
        pos = line_end(text, fence) + 1
    if not inside:
        prose.append(text[pos:stop])
    segment = "".join(prose)
    return segment.count("`") % 2 == 0 and segment.count("**") % 2 == 0


_FALLBACKS: tuple[Callable[[str, int, SplitPolicy, FenceIndex], int | None], ...] = (
    paragraph_break,
    heading_start,
    list_end,
    line_break,
    sentence_end,
)
