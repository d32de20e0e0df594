"""Rich-powered formatting of flushed text segments."""

from __future__ import annotations

from typing import Any

from rich.console import Console, RenderableType
from rich.markdown import Markdown
from rich.text import Text
from rich.theme import Theme

from tai.types.config import StyleConfig

HEADING_LEVELS = range(1, 7)


def emit(console: Console, renderable: RenderableType, **kwargs: Any) -> None:
    """Render to a string first, then write it to the console's file in one call.

    A failing write raises straight to the caller and leaves nothing queued in
    the console, so retrying cannot repeat earlier output.
    """
    with console.capture() as capture:
        console.print(renderable, **kwargs)
    output = capture.get()
    if output:
        console.file.write(output)
        console.file.flush()


def build_theme(style: StyleConfig) -> Theme:
    """Map a :class:`StyleConfig` onto the style names Rich Markdown uses."""
    styles = {f"markdown.h{level}": f"bold {style.heading_color}" for level in HEADING_LEVELS}
    styles.update({
        "markdown.h2": f"bold underline {style.heading_color}",
        "markdown.strong": f"bold {style.bold_color}",
        "markdown.em": f"italic {style.italic_color}",
        "markdown.emph": f"italic {style.italic_color}",
        "markdown.code": f"bold {style.inline_code_color}",
        "table.header": f"bold {style.table_color}",
        "table.cell": style.table_color,
    })
    return Theme(styles)


def render_markdown(console: Console, text: str, style: StyleConfig | None = None) -> None:
    """Render *text* as Markdown in one shot."""
    MarkdownFormatter(console, style).write(text)


class ReasoningFormatter:
    """Writes reasoning text verbatim in a muted style."""

    def __init__(self, console: Console, style: StyleConfig | None = None) -> None:
        self._console = console
        self._style = (style or StyleConfig()).reasoning_color

    def write(self, text: str) -> None:
        emit(self._console, Text(text, style=self._style), end="", soft_wrap=True, highlight=False)

    def separator(self, at_line_start: bool = False) -> None:
        """Finish the reasoning block with a blank line."""
        emit(self._console, "\n" if at_line_start else "\n\n", end="")


class MarkdownFormatter:
    """Renders answer segments as styled Markdown.

    Each segment is rendered on its own, so callers must hand over segments
    that do not cut a code block or table in two.
    """

    def __init__(self, console: Console, style: StyleConfig | None = None) -> None:
        self._console = console
        self._style = style or StyleConfig()
        self._theme = build_theme(self._style)

    def write(self, text: str) -> None:
        if not text.strip():
            return
        markdown = Markdown(text, code_theme=self._style.code_block_style)
        with self._console.use_theme(self._theme):
            emit(self._console, markdown)
