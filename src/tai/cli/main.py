"""CLI entry point for tai."""

from __future__ import annotations

import dataclasses
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import IO

import click
from rich.console import Console

from tai.core.config import load_config, tai_home
from tai.core.errors import TaiError
from tai.core.history import HistoryStore
from tai.core.logging import setup_logging
from tai.core.stream import chunk_text, load_transcript, pump
from tai.render.session import StreamSession
from tai.types.config import TaiConfig
from tai.types.stream import StreamChunk


@click.group()
@click.option("--debug", is_flag=True, help="Write debug logs to ~/.tai/logs/tai.log")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """tai -- stream Markdown answers to the terminal without breaking them.

    \b
    Usage:
      tai render README.md
      cat answer.md | tai render --chunk-size 4 --delay 0.01
      tai replay transcript.jsonl
      tai history list
      tai config list
    """
    try:
        config = load_config()
    except TaiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    if debug:
        config = dataclasses.replace(config, debug_logging=True)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["logger"] = setup_logging(
        debug=config.debug_logging,
        log_file=tai_home() / "logs" / "tai.log",
    )


@cli.command("render")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--chunk-size", "-c", default=8, show_default=True,
    type=click.IntRange(min=1), help="Characters per fragment",
)
@click.option(
    "--delay", "-d", default=0.0,
    type=click.FloatRange(min=0.0), help="Seconds to wait between fragments",
)
@click.pass_context
def render_cmd(ctx: click.Context, source: IO[str], chunk_size: int, delay: float) -> None:
    """Stream a Markdown document through the renderer, fragment by fragment."""
    config: TaiConfig = ctx.obj["config"]
    text = source.read()
    ctx.obj["logger"].debug("Rendering %d chars in chunks of %d", len(text), chunk_size)
    _run_session(config, chunk_text(text, chunk_size), delay=delay)


@cli.command("replay")
@click.argument("transcript", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--delay", "-d", default=0.0,
    type=click.FloatRange(min=0.0), help="Seconds to wait between fragments",
)
@click.option("--reasoning/--no-reasoning", default=None, help="Show reasoning (default: from config)")
@click.option("--save/--no-save", default=None, help="Save the answer to history (default: from config)")
@click.pass_context
def replay_cmd(
    ctx: click.Context,
    transcript: Path,
    delay: float,
    reasoning: bool | None,
    save: bool | None,
) -> None:
    """Replay a recorded reasoning/answer transcript (JSONL)."""
    config: TaiConfig = ctx.obj["config"]
    if reasoning is not None:
        config = dataclasses.replace(config, show_reasoning=reasoning)

    try:
        chunks = load_transcript(transcript)
    except TaiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    answer = _run_session(config, chunks, delay=delay)

    should_save = config.save_history if save is None else save
    if should_save:
        store = HistoryStore(max_count=config.max_history_count)
        try:
            store.save(answer)
        except TaiError as e:
            ctx.obj["logger"].warning("Failed to save history: %s", e)


def _run_session(config: TaiConfig, chunks: Iterable[StreamChunk], *, delay: float) -> str:
    session = StreamSession(
        Console(),
        style=config.style,
        policy=config.split,
        show_reasoning=config.show_reasoning,
    )
    try:
        return pump(session, chunks, delay=delay)
    except TaiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _register_subcommands() -> None:
    """Register CLI subcommands."""
    from tai.cli.commands import config_cmd, history_cmd

    cli.add_command(config_cmd, "config")
    cli.add_command(history_cmd, "history")


_register_subcommands()


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
