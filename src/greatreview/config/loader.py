"""Load and merge configuration from .greatreview.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from greatreview.config.schema import (
    LOG_LEVELS,
    OUTPUT_FORMATS,
    DiffConfig,
    GitConfig,
    GreatReviewConfig,
    LogConfig,
    OutputConfig,
    RemoteConfig,
)

CONFIG_FILENAME = ".greatreview.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(search_dir: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = search_dir / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _merge_env_overrides(cfg: GreatReviewConfig) -> None:
    """Apply GREATREVIEW_* environment variable overrides."""
    if val := os.environ.get("GREATREVIEW_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("GREATREVIEW_REMOTE"):
        cfg.remote.default = val
    if val := os.environ.get("GREATREVIEW_SSH_COMMAND"):
        cfg.remote.ssh_command = val
    if val := os.environ.get("GREATREVIEW_CONNECT_TIMEOUT"):
        try:
            timeout = int(val)
        except ValueError:
            timeout = 0
        if timeout > 0:
            cfg.remote.connect_timeout = timeout
    if val := os.environ.get("GREATREVIEW_LOG_LEVEL"):
        if val.upper() in LOG_LEVELS:
            cfg.log.level = val.upper()


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: GreatReviewConfig) -> None:
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output.format: {cfg.output.format!r}")
    if cfg.log.level.upper() not in LOG_LEVELS:
        raise ConfigError(f"Invalid log.level: {cfg.log.level!r}")
    cfg.log.level = cfg.log.level.upper()
    if cfg.diff.context_lines is not None and (
        not isinstance(cfg.diff.context_lines, int) or cfg.diff.context_lines < 0
    ):
        raise ConfigError(f"Invalid diff.context_lines: {cfg.diff.context_lines!r}")
    for name in ("connect_timeout", "command_timeout"):
        value = getattr(cfg.remote, name)
        if not isinstance(value, int) or value <= 0:
            raise ConfigError(f"Invalid remote.{name}: {value!r}")
    if not isinstance(cfg.git.timeout, int) or cfg.git.timeout <= 0:
        raise ConfigError(f"Invalid git.timeout: {cfg.git.timeout!r}")


def load_config(
    search_dir: Path,
    config_override: Optional[str] = None,
) -> GreatReviewConfig:
    """Load, validate, and return a GreatReviewConfig."""
    config_path = find_config_file(search_dir, config_override)

    if config_path is None:
        cfg = GreatReviewConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = GreatReviewConfig(
            version=raw.get("version", "1.0"),
            diff=_build_section(raw, DiffConfig, "diff"),
            git=_build_section(raw, GitConfig, "git"),
            remote=_build_section(raw, RemoteConfig, "remote"),
            output=_build_section(raw, OutputConfig, "output"),
            log=_build_section(raw, LogConfig, "log"),
        )
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
