"""tai — incremental, Markdown-safe rendering of streamed model output.

Usage:
    from rich.console import Console
    import tai

    session = tai.StreamSession(Console())
    for chunk in stream:
        session.append_answer(chunk)
        session.render()
    answer = session.finish()
"""

from tai.core.errors import (
    ConfigError,
    HistoryError,
    RenderError,
    SessionFinishedError,
    TaiError,
    TranscriptError,
)
from tai.render.blocks import BlockState
from tai.render.session import SessionState, StreamSession
from tai.render.splitter import find_safe_split_point
from tai.types.config import SplitPolicy, StyleConfig, TaiConfig
from tai.types.stream import StreamChunk

__version__ = "0.1.0"

__all__ = [
    # Core API
    "StreamSession",
    "SessionState",
    "BlockState",
    "find_safe_split_point",
    # Configuration
    "SplitPolicy",
    "StyleConfig",
    "TaiConfig",
    # Stream types
    "StreamChunk",
    # Errors
    "ConfigError",
    "HistoryError",
    "RenderError",
    "SessionFinishedError",
    "TaiError",
    "TranscriptError",
]
