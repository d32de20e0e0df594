"""Public type definitions."""

from tai.types.config import SplitPolicy, StyleConfig, TaiConfig
from tai.types.stream import ChunkKind, StreamChunk

__all__ = ["ChunkKind", "SplitPolicy", "StreamChunk", "StyleConfig", "TaiConfig"]
