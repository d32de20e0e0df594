"""Incremental Markdown-safe rendering of streamed responses."""

from tai.render.blocks import BlockState, classify, is_safe_boundary
from tai.render.formatter import MarkdownFormatter, ReasoningFormatter, build_theme, render_markdown
from tai.render.session import SessionState, StreamSession
from tai.render.splitter import find_safe_split_point

__all__ = [
    "BlockState",
    "MarkdownFormatter",
    "ReasoningFormatter",
    "SessionState",
    "StreamSession",
    "build_theme",
    "classify",
    "find_safe_split_point",
    "is_safe_boundary",
    "render_markdown",
]
