"""Tests for tai.core.config — settings file and environment overrides."""

from __future__ import annotations

from pathlib import Path

import pytest

from tai.core.config import (
    config_path,
    load_config,
    load_env_config,
    load_toml_config,
    save_config,
)
from tai.core.config import tai_home as resolve_home
from tai.core.errors import ConfigError
from tai.types.config import SplitPolicy, StyleConfig, TaiConfig


class TestPaths:
    def test_tai_home_from_env(self, tai_home: Path):
        assert resolve_home() == tai_home
        assert config_path() == tai_home / "config.toml"

    def test_default_home(self, monkeypatch):
        monkeypatch.delenv("TAI_HOME")
        assert resolve_home() == Path.home() / ".tai"


class TestLoadConfig:
    def test_defaults_without_file(self):
        config = load_config()
        assert config == TaiConfig()
        assert config.style.code_block_style == "monokai"
        assert config.split.min_unrendered == 10

    def test_reads_sections(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text(
            "[general]\nshow_reasoning = false\nmax_history_count = 5\n"
            "[style]\nheading_color = \"green\"\n"
            "[split]\nsentence_threshold = 300\n"
        )
        config = load_config(path)
        assert config.show_reasoning is False
        assert config.max_history_count == 5
        assert config.style.heading_color == "green"
        assert config.style.bold_color == StyleConfig().bold_color
        assert config.split.sentence_threshold == 300
        assert config.split.min_line_progress == SplitPolicy().min_line_progress

    def test_unknown_keys_ignored(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[general]\nbogus = 1\n[style]\nsparkle = true\n")
        assert load_config(path) == TaiConfig()

    def test_wrong_type_raises(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[split]\nmin_unrendered = \"ten\"\n")
        with pytest.raises(ConfigError, match="min_unrendered"):
            load_config(path)

    def test_bool_is_not_an_int(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[general]\nmax_history_count = true\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_section_must_be_table(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("style = \"dark\"\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_malformed_file_falls_back(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[general\nthis is not toml")
        assert load_toml_config(path) == {}
        assert load_config(path) == TaiConfig()

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text("[general]\nshow_reasoning = true\n")
        monkeypatch.setenv("TAI_SHOW_REASONING", "0")
        monkeypatch.setenv("TAI_DEBUG", "yes")
        config = load_config(path)
        assert config.show_reasoning is False
        assert config.debug_logging is True


class TestEnvConfig:
    def test_invalid_env_value_ignored(self, monkeypatch):
        monkeypatch.setenv("TAI_SAVE_HISTORY", "maybe")
        assert "save_history" not in load_env_config()

    def test_empty_env(self):
        assert load_env_config() == {}


class TestSaveConfig:
    def test_round_trip(self, tai_home: Path):
        config = TaiConfig(
            show_reasoning=False,
            style=StyleConfig(heading_color="#ff00ff"),
            split=SplitPolicy(min_line_progress=40),
        )
        path = save_config(config)
        assert path == tai_home / "config.toml"
        assert load_config() == config
