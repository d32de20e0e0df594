"""Shared fixtures: captured consoles, isolated tai home, failing output surfaces."""

from __future__ import annotations

from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console


class FlakyFile(StringIO):
    """A text surface whose next ``fail_count`` writes raise ``OSError``."""

    def __init__(self, fail_count: int = 1) -> None:
        super().__init__()
        self.fail_count = fail_count
        self.attempts = 0

    def write(self, s: str) -> int:
        self.attempts += 1
        if self.fail_count > 0:
            self.fail_count -= 1
            raise OSError("surface unavailable")
        return super().write(s)


def make_console(file: StringIO | None = None, width: int = 120) -> tuple[Console, StringIO]:
    """Create a plain (no ANSI) console writing into a buffer."""
    buf = file if file is not None else StringIO()
    console = Console(file=buf, force_terminal=False, color_system=None, width=width)
    return console, buf


@pytest.fixture
def console_buf() -> tuple[Console, StringIO]:
    return make_console()


@pytest.fixture(autouse=True)
def tai_home(tmp_path: Path, monkeypatch) -> Path:
    """Point TAI_HOME at a temp dir so no test touches the real ~/.tai."""
    home = tmp_path / "tai-home"
    monkeypatch.setenv("TAI_HOME", str(home))
    for var in ("TAI_DEBUG", "TAI_SHOW_REASONING", "TAI_SAVE_HISTORY"):
        monkeypatch.delenv(var, raising=False)
    return home
