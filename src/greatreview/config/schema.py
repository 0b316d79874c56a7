"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

OutputFormat = Literal["terminal", "json"]

OUTPUT_FORMATS = ("terminal", "json")
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass
class DiffConfig:
    context_lines: Optional[int] = None  # None = git's default (3)
    default_range: Optional[str] = None


@dataclass
class GitConfig:
    timeout: int = 30  # seconds per local git invocation


@dataclass
class RemoteConfig:
    ssh_command: str = "ssh"
    connect_timeout: int = 5
    command_timeout: int = 60
    default: Optional[str] = None  # host:path used when --remote is not given


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_line_numbers: bool = True
    show_summary: bool = True


@dataclass
class LogConfig:
    level: str = "WARNING"
    file: Optional[str] = None


@dataclass
class GreatReviewConfig:
    version: str = "1.0"
    diff: DiffConfig = field(default_factory=DiffConfig)
    git: GitConfig = field(default_factory=GitConfig)
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    log: LogConfig = field(default_factory=LogConfig)
