"""Tests for tai.core.stream — fragment sources and the session pump."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tai.core.errors import TranscriptError
from tai.core.stream import chunk_text, load_transcript, pump
from tai.render.session import SessionState, StreamSession
from tai.types.stream import StreamChunk
from tests.conftest import make_console


class TestChunkText:
    def test_sizes(self):
        chunks = list(chunk_text("abcdefg", 3))
        assert [c.text for c in chunks] == ["abc", "def", "g"]
        assert all(c.kind == "answer" for c in chunks)

    def test_multibyte_characters_stay_whole(self):
        text = "héllo wörld 你好"
        assert "".join(c.text for c in chunk_text(text, 2)) == text

    def test_empty(self):
        assert list(chunk_text("", 4)) == []

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            list(chunk_text("abc", 0))


class TestLoadTranscript:
    def _write(self, path: Path, records: list) -> Path:
        path.write_text("\n".join(json.dumps(r) for r in records) + "\n\n")
        return path

    def test_reads_records(self, tmp_path: Path):
        path = self._write(tmp_path / "t.jsonl", [
            {"type": "reasoning", "text": "hmm"},
            {"type": "answer", "text": "Yes."},
        ])
        assert load_transcript(path) == [
            StreamChunk(kind="reasoning", text="hmm"),
            StreamChunk(kind="answer", text="Yes."),
        ]

    def test_bad_json(self, tmp_path: Path):
        path = tmp_path / "t.jsonl"
        path.write_text('{"type": "answer", "text": "ok"}\n{broken\n')
        with pytest.raises(TranscriptError, match=":2:"):
            load_transcript(path)

    def test_unknown_type(self, tmp_path: Path):
        path = self._write(tmp_path / "t.jsonl", [{"type": "tool", "text": "x"}])
        with pytest.raises(TranscriptError, match="unknown chunk type"):
            load_transcript(path)

    def test_text_must_be_string(self, tmp_path: Path):
        path = self._write(tmp_path / "t.jsonl", [{"type": "answer", "text": 3}])
        with pytest.raises(TranscriptError):
            load_transcript(path)

    def test_record_must_be_object(self, tmp_path: Path):
        path = self._write(tmp_path / "t.jsonl", [["answer", "x"]])
        with pytest.raises(TranscriptError):
            load_transcript(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(TranscriptError):
            load_transcript(tmp_path / "absent.jsonl")


class TestPump:
    def test_pump_returns_answer_only(self):
        console, buf = make_console()
        session = StreamSession(console)
        chunks = [
            StreamChunk("reasoning", "Considering. "),
            StreamChunk("reasoning", "Still thinking."),
            StreamChunk("answer", "First part.\n\n"),
            StreamChunk("answer", "Second part."),
        ]
        answer = pump(session, chunks)
        assert answer == "First part.\n\nSecond part."
        assert session.state is SessionState.FINISHED
        output = buf.getvalue()
        assert "Considering. Still thinking." in output
        assert "Second part." in output

    def test_pump_finishes_on_interrupt(self):
        console, buf = make_console()
        session = StreamSession(console)

        def interrupted():
            yield StreamChunk("answer", "Partial answer")
            raise KeyboardInterrupt

        assert pump(session, interrupted()) == "Partial answer"
        assert session.state is SessionState.FINISHED
        assert "Partial answer" in buf.getvalue()

    def test_pump_delay(self, monkeypatch):
        sleeps = []
        monkeypatch.setattr("tai.core.stream.time.sleep", sleeps.append)
        console, _ = make_console()
        pump(StreamSession(console), chunk_text("abcdef", 2), delay=0.5)
        assert sleeps == [0.5, 0.5, 0.5]
