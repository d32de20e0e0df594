"""Answer history — finished answers saved as Markdown files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from tai.core.config import tai_home
from tai.core.errors import HistoryError

logger = logging.getLogger(__name__)

DEFAULT_MAX_COUNT = 50
_STAMP_FORMAT = "%Y%m%d_%H%M%S_%f"


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """A saved answer on disk."""

    path: Path
    saved_at: datetime

    @property
    def name(self) -> str:
        return self.path.stem


class HistoryStore:
    """Saves answers under ``~/.tai/cache/history``, keeping the newest *max_count*.

    File names are timestamps, so ordering by name is ordering by age.
    """

    def __init__(self, history_dir: Path | None = None, *, max_count: int = DEFAULT_MAX_COUNT) -> None:
        self._dir = history_dir or (tai_home() / "cache" / "history")
        self._max_count = max_count

    @property
    def directory(self) -> Path:
        return self._dir

    def save(self, markdown: str) -> Path | None:
        """Save *markdown* and prune old entries. Empty answers are skipped."""
        if not markdown.strip():
            logger.debug("Not saving empty answer")
            return None
        now = datetime.now()
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            path = self._dir / f"{now.strftime(_STAMP_FORMAT)}.md"
            suffix = 1
            while path.exists():
                path = self._dir / f"{now.strftime(_STAMP_FORMAT)}-{suffix}.md"
                suffix += 1
            path.write_text(markdown, encoding="utf-8")
        except OSError as exc:
            raise HistoryError(f"Cannot save history entry: {exc}") from exc
        logger.debug("Saved history entry %s", path)
        self.cleanup()
        return path

    def cleanup(self) -> int:
        """Delete entries beyond the retention count. Returns the number removed."""
        removed = 0
        for entry in self._entries()[self._max_count:]:
            try:
                entry.path.unlink()
                removed += 1
                logger.debug("Removed old history entry %s", entry.path)
            except OSError as exc:
                logger.warning("Failed to remove old history entry %s: %s", entry.path, exc)
        return removed

    def list_entries(self, count: int | None = None) -> list[HistoryEntry]:
        """Return saved entries, newest first."""
        entries = self._entries()
        return entries if count is None else entries[:count]

    def read(self, entry: HistoryEntry) -> str:
        try:
            return entry.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise HistoryError(f"Cannot read history entry {entry.path}: {exc}") from exc

    def clear(self) -> int:
        """Delete every saved entry. Returns the number removed."""
        entries = self._entries()
        for entry in entries:
            entry.path.unlink(missing_ok=True)
        return len(entries)

    def _entries(self) -> list[HistoryEntry]:
        if not self._dir.is_dir():
            return []
        entries = []
        for path in self._dir.glob("*.md"):
            stamp = path.stem.partition("-")[0]
            try:
                saved_at = datetime.strptime(stamp, _STAMP_FORMAT)
            except ValueError:
                logger.debug("Skipping unrecognised history file %s", path)
                continue
            entries.append(HistoryEntry(path=path, saved_at=saved_at))
        entries.sort(key=_sort_key, reverse=True)
        return entries


def _sort_key(entry: HistoryEntry) -> tuple[datetime, int]:
    # Same-instant saves get a "-N" suffix
    _, _, seq = entry.name.partition("-")
    return entry.saved_at, int(seq) if seq.isdigit() else 0
