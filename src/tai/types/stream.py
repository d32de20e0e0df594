"""Stream chunk types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ChunkKind = Literal["reasoning", "answer"]


@dataclass(frozen=True, slots=True)
class StreamChunk:
    """One fragment produced by a generation stream."""

    kind: ChunkKind
    text: str
