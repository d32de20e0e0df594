"""Tests for tai.core.history — saved answers."""

from __future__ import annotations

from pathlib import Path

import pytest

from tai.core.errors import HistoryError
from tai.core.history import HistoryEntry, HistoryStore


class TestHistoryStore:
    def test_default_directory(self, tai_home: Path):
        assert HistoryStore().directory == tai_home / "cache" / "history"

    def test_save_and_read(self, tmp_path: Path):
        store = HistoryStore(tmp_path)
        path = store.save("# Answer\n\nBody\n")
        assert path is not None and path.suffix == ".md"
        entries = store.list_entries()
        assert len(entries) == 1
        assert store.read(entries[0]) == "# Answer\n\nBody\n"

    def test_empty_answer_not_saved(self, tmp_path: Path):
        store = HistoryStore(tmp_path)
        assert store.save("   \n") is None
        assert store.list_entries() == []

    def test_newest_first(self, tmp_path: Path):
        store = HistoryStore(tmp_path)
        for i in range(3):
            store.save(f"answer {i}")
        contents = [store.read(e) for e in store.list_entries()]
        assert contents == ["answer 2", "answer 1", "answer 0"]

    def test_count_limits_listing(self, tmp_path: Path):
        store = HistoryStore(tmp_path)
        for i in range(4):
            store.save(f"answer {i}")
        assert len(store.list_entries(2)) == 2

    def test_retention_prunes_oldest(self, tmp_path: Path):
        store = HistoryStore(tmp_path, max_count=3)
        for i in range(5):
            store.save(f"answer {i}")
        contents = [store.read(e) for e in store.list_entries()]
        assert contents == ["answer 4", "answer 3", "answer 2"]
        assert len(list(tmp_path.glob("*.md"))) == 3

    def test_unrecognised_files_ignored(self, tmp_path: Path):
        (tmp_path / "notes.md").write_text("not history")
        store = HistoryStore(tmp_path)
        store.save("real")
        assert [store.read(e) for e in store.list_entries()] == ["real"]

    def test_missing_directory(self, tmp_path: Path):
        store = HistoryStore(tmp_path / "nope")
        assert store.list_entries() == []
        assert store.clear() == 0

    def test_clear(self, tmp_path: Path):
        store = HistoryStore(tmp_path)
        store.save("one")
        store.save("two")
        assert store.clear() == 2
        assert store.list_entries() == []

    def test_read_missing_file_raises(self, tmp_path: Path):
        store = HistoryStore(tmp_path)
        path = store.save("gone")
        entry = store.list_entries()[0]
        path.unlink()
        with pytest.raises(HistoryError):
            store.read(entry)

    def test_entry_name(self, tmp_path: Path):
        store = HistoryStore(tmp_path)
        path = store.save("x")
        entry = store.list_entries()[0]
        assert isinstance(entry, HistoryEntry)
        assert entry.name == path.stem
