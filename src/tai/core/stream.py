"""Fragment sources and the pump that drives a StreamSession.

The generation client itself lives outside this package; anything that
yields :class:`~tai.types.stream.StreamChunk` objects can be pumped.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterable, Iterator
from pathlib import Path

from tai.core.errors import TranscriptError
from tai.render.session import StreamSession
from tai.types.stream import StreamChunk

logger = logging.getLogger(__name__)

_KINDS = ("reasoning", "answer")


def chunk_text(text: str, size: int = 8) -> Iterator[StreamChunk]:
    """Split a document into answer fragments of at most *size* characters."""
    if size < 1:
        raise ValueError("chunk size must be positive")
    for i in range(0, len(text), size):
        yield StreamChunk(kind="answer", text=text[i:i + size])


def load_transcript(path: Path) -> list[StreamChunk]:
    """Read a JSONL transcript of ``{"type": ..., "text": ...}`` records.

    Blank lines are skipped.  Raises :class:`TranscriptError` on malformed
    records, naming the offending line.
    """
    chunks: list[StreamChunk] = []
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        raise TranscriptError(f"Cannot read transcript {path}: {exc}") from exc

    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            raise TranscriptError(f"{path}:{lineno}: invalid JSON: {exc.msg}") from exc
        if not isinstance(record, dict):
            raise TranscriptError(f"{path}:{lineno}: expected an object")
        kind = record.get("type")
        text = record.get("text")
        if kind not in _KINDS:
            raise TranscriptError(f"{path}:{lineno}: unknown chunk type {kind!r}")
        if not isinstance(text, str):
            raise TranscriptError(f"{path}:{lineno}: 'text' must be a string")
        chunks.append(StreamChunk(kind=kind, text=text))

    logger.debug("Loaded %d chunks from %s", len(chunks), path)
    return chunks


def pump(session: StreamSession, chunks: Iterable[StreamChunk], *, delay: float = 0.0) -> str:
    """Feed *chunks* into *session*, rendering after each, and finish it.

    *delay* seconds are slept between fragments to mimic a live stream.
    Interrupting with Ctrl+C stops reading but still flushes what arrived.
    Returns the complete answer text.
    """
    count = 0
    try:
        for chunk in chunks:
            if chunk.kind == "reasoning":
                session.append_reasoning(chunk.text)
            else:
                session.append_answer(chunk.text)
            session.render()
            count += 1
            if delay > 0:
                time.sleep(delay)
    except KeyboardInterrupt:
        logger.info("Stream interrupted after %d chunks", count)
    return session.finish()
