"""Configuration loading (TOML settings file, env vars)."""

from __future__ import annotations

import dataclasses
import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from tai.core.errors import ConfigError
from tai.types.config import SplitPolicy, StyleConfig, TaiConfig

logger = logging.getLogger(__name__)

# Load .env from current directory (and parents), won't override existing env vars
load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}

ENV_MAP = {
    "TAI_DEBUG": "debug_logging",
    "TAI_SHOW_REASONING": "show_reasoning",
    "TAI_SAVE_HISTORY": "save_history",
}


def tai_home() -> Path:
    """Return the base directory for tai state (``$TAI_HOME`` or ``~/.tai``)."""
    if home := os.environ.get("TAI_HOME"):
        return Path(home).expanduser()
    return Path.home() / ".tai"


def config_path() -> Path:
    return tai_home() / "config.toml"


def load_toml_config(path: Path | None = None) -> dict[str, Any]:
    """Read the raw TOML settings, or ``{}`` if the file is missing or broken."""
    path = path or config_path()
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return {}
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Failed to read config %s, using defaults: %s", path, exc)
        return {}


def load_env_config() -> dict[str, bool]:
    """Collect boolean overrides from ``TAI_*`` environment variables."""
    config: dict[str, bool] = {}
    for env_var, key in ENV_MAP.items():
        raw = os.environ.get(env_var)
        if raw is None:
            continue
        value = raw.strip().lower()
        if value in _TRUTHY:
            config[key] = True
        elif value in _FALSY:
            config[key] = False
        else:
            logger.warning("Ignoring %s=%r: expected a boolean", env_var, raw)
    return config


def load_config(path: Path | None = None) -> TaiConfig:
    """Build a :class:`TaiConfig` from the settings file and environment.

    Environment variables take precedence over the file.  Raises
    :class:`ConfigError` when a known key holds a value of the wrong type.
    """
    data = load_toml_config(path)

    general = _coerce_section(TaiConfig, data.get("general", {}), "general")
    general.update(load_env_config())
    style = StyleConfig(**_coerce_section(StyleConfig, data.get("style", {}), "style"))
    split = SplitPolicy(**_coerce_section(SplitPolicy, data.get("split", {}), "split"))

    return TaiConfig(style=style, split=split, **general)


def save_config(config: TaiConfig, path: Path | None = None) -> Path:
    """Write *config* to the settings file. Returns the path written to."""
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    general = {
        f.name: getattr(config, f.name)
        for f in dataclasses.fields(config)
        if f.name not in ("style", "split")
    }
    data = {
        "general": general,
        "style": dataclasses.asdict(config.style),
        "split": dataclasses.asdict(config.split),
    }
    _write_toml(path, data)
    logger.debug("Saved config to %s", path)
    return path


def _coerce_section(cls: type, raw: Any, section: str) -> dict[str, Any]:
    """Keep the keys of *raw* that are fields of *cls*, checking their types."""
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table, got {type(raw).__name__}")

    fields = {
        f.name: f for f in dataclasses.fields(cls)
        if f.name not in ("style", "split")
    }
    result: dict[str, Any] = {}
    for key, value in raw.items():
        f = fields.get(key)
        if f is None:
            logger.debug("Ignoring unknown config key [%s].%s", section, key)
            continue
        expected = _field_type(cls, key)
        # bool is a subclass of int; reject it where a number is expected
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ConfigError(
                f"[{section}].{key} must be {expected.__name__}, got {type(value).__name__}"
            )
        result[key] = value
    return result


def _field_type(cls: type, name: str) -> type:
    default = getattr(cls(), name)
    return type(default)


def _write_toml(path: Path, data: dict[str, dict[str, Any]]) -> None:
    """Write a two-level dict of scalars as TOML."""
    lines: list[str] = []
    for section, values in data.items():
        if lines:
            lines.append("")
        lines.append(f"[{section}]")
        for key, value in values.items():
            lines.append(f"{key} = {_toml_value(value)}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
