"""StreamSession — incremental rendering of one streamed model response."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from rich.console import Console

from tai.core.errors import RenderError, SessionFinishedError
from tai.render.formatter import MarkdownFormatter, ReasoningFormatter
from tai.render.splitter import find_safe_split_point
from tai.types.config import SplitPolicy, StyleConfig

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle of a :class:`StreamSession`."""

    IDLE = "idle"  # constructed, nothing appended yet
    STREAMING = "streaming"
    FINISHED = "finished"


class StreamSession:
    """Buffers reasoning and answer fragments and renders them as they become safe.

    Usage:
        session = StreamSession(console)
        for chunk in stream:
            session.append_answer(chunk)
            session.render()
        answer = session.finish()

    Reasoning text is written verbatim as soon as it arrives.  Answer text is
    only written up to the furthest point that does not cut an open code
    fence or table; the remainder waits for more fragments or for
    :meth:`finish`.  Cursors only move forward, and only after the write
    they cover has succeeded.
    """

    def __init__(
        self,
        console: Console | None = None,
        *,
        style: StyleConfig | None = None,
        policy: SplitPolicy | None = None,
        show_reasoning: bool = True,
    ) -> None:
        self._console = console or Console()
        self._policy = policy or SplitPolicy()
        self._show_reasoning = show_reasoning
        self._reasoning = ReasoningFormatter(self._console, style)
        self._answer = MarkdownFormatter(self._console, style)

        self._reasoning_text = ""
        self._answer_text = ""
        self._reasoning_cursor = 0
        self._answer_cursor = 0

        self._reasoning_written = False
        self._separator_written = False
        self._state = SessionState.IDLE

    # ── Accumulation ─────────────────────────────────────────────────────────

    def append_reasoning(self, text: str) -> None:
        """Append a reasoning fragment. No output is produced."""
        self._check_open()
        self._reasoning_text += text
        self._state = SessionState.STREAMING

    def append_answer(self, text: str) -> None:
        """Append an answer fragment. No output is produced."""
        self._check_open()
        self._answer_text += text
        self._state = SessionState.STREAMING

    # ── Rendering ────────────────────────────────────────────────────────────

    def render(self) -> None:
        """Write whatever part of the buffered text is safe to show.

        Raises :class:`RenderError` if the output surface fails; buffers and
        cursors are left as they were, so the call can be retried.
        """
        self._check_open()
        self._render_reasoning()

        text = self.answer_text
        split = find_safe_split_point(text, self._answer_cursor, self._policy)
        if split is not None:
            self._write_answer(text, split)

    def finish(self) -> str:
        """Flush everything still buffered and return the complete answer.

        Open code fences and tables are written as they stand, since no more
        text can arrive to close them.  Calling ``finish`` again returns the
        same answer without writing anything.
        """
        if self._state is SessionState.FINISHED:
            return self._answer_text
        self._render_reasoning()

        text = self.answer_text
        if self._answer_cursor < len(text):
            self._write_answer(text, len(text))

        if self._state is SessionState.STREAMING:
            logger.debug(
                "Stream finished: %d reasoning chars, %d answer chars",
                len(self._reasoning_text), len(text),
            )
        self._state = SessionState.FINISHED
        return text

    def _render_reasoning(self) -> None:
        text = self.reasoning_text
        if self._reasoning_cursor >= len(text):
            return
        if self._show_reasoning:
            self._guarded(self._reasoning.write, text[self._reasoning_cursor:])
            self._reasoning_written = True
        self._reasoning_cursor = len(text)

    def _write_answer(self, text: str, split: int) -> None:
        segment = text[self._answer_cursor:split]
        if segment.strip() and self._reasoning_written and not self._separator_written:
            self._guarded(self._reasoning.separator, self.reasoning_text.endswith("\n"))
            self._separator_written = True
        self._guarded(self._answer.write, segment)
        logger.debug("Flushed answer [%d, %d)", self._answer_cursor, split)
        self._answer_cursor = split

    @staticmethod
    def _guarded(write: Callable[..., None], *args: Any) -> None:
        try:
            write(*args)
        except OSError as exc:
            raise RenderError(f"Failed to write to output: {exc}") from exc

    def _check_open(self) -> None:
        if self._state is SessionState.FINISHED:
            raise SessionFinishedError("Stream session already finished")

    # ── Inspection ───────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def reasoning_text(self) -> str:
        return self._reasoning_text

    @property
    def answer_text(self) -> str:
        return self._answer_text

    @property
    def reasoning_cursor(self) -> int:
        return self._reasoning_cursor

    @property
    def answer_cursor(self) -> int:
        return self._answer_cursor
