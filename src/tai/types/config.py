"""Configuration types for tai."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class StyleConfig:
    """Terminal styles used when formatting streamed output.

    Every value is a Rich style string (a colour name, hex colour or a
    full style such as ``"bold cyan"``), except ``code_block_style`` which
    names the Pygments theme used for fenced code blocks.
    """

    heading_color: str = "cyan"
    bold_color: str = "yellow"
    italic_color: str = "magenta"
    inline_code_color: str = "cyan"
    code_block_style: str = "monokai"
    table_color: str = "cyan"
    reasoning_color: str = "#7c7c8a"  # muted grey


@dataclass(frozen=True, slots=True)
class SplitPolicy:
    """Thresholds for the safe-split-point analyzer.

    All lengths are counted in characters.
    """

    min_unrendered: int = 10  # below this nothing is flushed
    min_heading_progress: int = 10  # heading must start this far past the cursor
    min_line_progress: int = 24  # a plain line break must advance at least this much
    sentence_threshold: int = 150  # unrendered length before sentence fallback applies
    table_lookback: int = 500  # how far back to look for an open table


@dataclass(frozen=True, slots=True)
class TaiConfig:
    """User settings loaded from ``~/.tai/config.toml``."""

    show_reasoning: bool = True
    save_history: bool = True
    max_history_count: int = 50
    debug_logging: bool = False
    style: StyleConfig = field(default_factory=StyleConfig)
    split: SplitPolicy = field(default_factory=SplitPolicy)
