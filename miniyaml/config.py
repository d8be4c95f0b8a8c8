"""Parser settings and their loading from workspace configuration files."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .diagnostics import DEFAULT_LOG_CAPACITY, DEFAULT_MESSAGE_CAPACITY, DiagnosticLog

DEFAULT_MAX_DEPTH = 64

CONFIG_FILENAME = "miniyaml.toml"
PYPROJECT_FILENAME = "pyproject.toml"

ENV_MAX_DEPTH = "MINIYAML_MAX_DEPTH"
ENV_ENCODING = "MINIYAML_ENCODING"


@dataclass(frozen=True)
class ParserSettings:
    """Limits and defaults applied to every parse."""

    max_depth: int = DEFAULT_MAX_DEPTH
    log_capacity: int = DEFAULT_LOG_CAPACITY
    message_capacity: int = DEFAULT_MESSAGE_CAPACITY
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.log_capacity < 1:
            raise ValueError(f"log_capacity must be positive, got {self.log_capacity}")
        if self.message_capacity < 2:
            raise ValueError(f"message_capacity must be at least 2, got {self.message_capacity}")
        if not self.encoding:
            raise ValueError("encoding must not be empty")

    def create_log(self) -> DiagnosticLog:
        """Build a fresh diagnostic log sized by these settings."""
        return DiagnosticLog(self.log_capacity, self.message_capacity)

    def with_overrides(self, **overrides: Any) -> "ParserSettings":
        """Return a copy with the non-``None`` overrides applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


def _read_toml_config(path: Path) -> Dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def locate_config_file(root: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    if explicit is not None:
        return explicit if explicit.exists() else None
    candidate = root / CONFIG_FILENAME
    if candidate.exists():
        return candidate
    pyproject = root / PYPROJECT_FILENAME
    if pyproject.exists():
        return pyproject
    return None


def _settings_section(path: Path, data: Dict[str, Any]) -> Dict[str, Any]:
    if path.name == PYPROJECT_FILENAME:
        section = data.get("tool", {}).get("miniyaml") or {}
    else:
        section = data.get("miniyaml", data)
    if not isinstance(section, dict):
        raise ValueError(f"Invalid miniyaml settings in {path}: expected a table")
    return section


def settings_from_mapping(section: Mapping[str, Any], base: Optional[ParserSettings] = None) -> ParserSettings:
    """Build settings from a plain mapping, ignoring unknown keys."""
    base = base or ParserSettings()
    known = {item.name for item in fields(ParserSettings)}
    values: Dict[str, Any] = {}
    for key, raw in section.items():
        if key not in known or raw is None:
            continue
        try:
            values[key] = str(raw) if key == "encoding" else int(raw)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid value for '{key}': {raw!r}") from exc
    return replace(base, **values)


def _apply_env_overrides(settings: ParserSettings, environ: Mapping[str, str]) -> ParserSettings:
    section: Dict[str, Any] = {}
    if environ.get(ENV_MAX_DEPTH):
        section["max_depth"] = environ[ENV_MAX_DEPTH]
    if environ.get(ENV_ENCODING):
        section["encoding"] = environ[ENV_ENCODING]
    if not section:
        return settings
    return settings_from_mapping(section, settings)


def load_settings(
    root: Optional[Path] = None,
    explicit: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> ParserSettings:
    """Resolve settings from config files under ``root`` and the environment."""
    root = (root or Path.cwd()).resolve()
    settings = ParserSettings()
    config_path = locate_config_file(root, explicit)
    if config_path is not None:
        data = _read_toml_config(config_path)
        settings = settings_from_mapping(_settings_section(config_path, data), settings)
    return _apply_env_overrides(settings, os.environ if environ is None else environ)


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "ParserSettings",
    "load_settings",
    "locate_config_file",
    "settings_from_mapping",
]
