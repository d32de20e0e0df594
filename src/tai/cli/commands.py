"""CLI subcommands for tai (history, config)."""

from __future__ import annotations

import dataclasses

import click
from rich.console import Console

from tai.core.errors import TaiError
from tai.core.history import HistoryStore
from tai.types.config import TaiConfig


@click.group()
def history_cmd() -> None:
    """Browse saved answers."""


@history_cmd.command("list")
@click.option("--limit", "-n", default=10, help="Max entries to show")
@click.pass_context
def history_list(ctx: click.Context, limit: int) -> None:
    """List saved answers, newest first."""
    store = _store(ctx)
    entries = store.list_entries(limit)
    if not entries:
        click.echo("No history entries.")
        return

    click.echo(f"{'#':<4} {'Saved':<20} {'Preview'}")
    click.echo("-" * 70)
    for i, entry in enumerate(entries, start=1):
        saved = entry.saved_at.strftime("%Y-%m-%d %H:%M:%S")
        first_line = next(
            (line.strip() for line in store.read(entry).splitlines() if line.strip()), "",
        )
        preview = first_line[:40] + ("..." if len(first_line) > 40 else "")
        click.echo(f"{i:<4} {saved:<20} {preview}")


@history_cmd.command("show")
@click.argument("index", default=1, type=click.IntRange(min=1))
@click.pass_context
def history_show(ctx: click.Context, index: int) -> None:
    """Render a saved answer (1 = most recent)."""
    from tai.render.formatter import render_markdown

    config: TaiConfig = ctx.obj["config"]
    store = _store(ctx)
    entries = store.list_entries(index)
    if len(entries) < index:
        click.echo(f"Error: no history entry #{index}", err=True)
        raise SystemExit(1)

    try:
        content = store.read(entries[index - 1])
    except TaiError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    render_markdown(Console(), content, config.style)


@history_cmd.command("clear")
@click.confirmation_option(prompt="Delete all saved answers?")
@click.pass_context
def history_clear(ctx: click.Context) -> None:
    """Delete all saved answers."""
    removed = _store(ctx).clear()
    click.echo(f"Removed {removed} history entries.")


def _store(ctx: click.Context) -> HistoryStore:
    config: TaiConfig = ctx.obj["config"]
    return HistoryStore(max_count=config.max_history_count)


@click.group()
def config_cmd() -> None:
    """Inspect tai configuration."""


@config_cmd.command("list")
@click.pass_context
def config_list(ctx: click.Context) -> None:
    """Show the effective configuration."""
    config: TaiConfig = ctx.obj["config"]

    click.echo("General:")
    for field in dataclasses.fields(config):
        if field.name in ("style", "split"):
            continue
        click.echo(f"  {field.name}: {getattr(config, field.name)}")

    click.echo("\nStyle:")
    for key, value in dataclasses.asdict(config.style).items():
        click.echo(f"  {key}: {value}")

    click.echo("\nSplit policy:")
    for key, value in dataclasses.asdict(config.split).items():
        click.echo(f"  {key}: {value}")


@config_cmd.command("path")
def config_path_cmd() -> None:
    """Print the location of the settings file."""
    from tai.core.config import config_path

    click.echo(str(config_path()))
