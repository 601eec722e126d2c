from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import logging
import os
import tomllib
from typing import Any

VALID_FORMATS = ("text", "json")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

def _expand(p: str) -> str:
    return os.path.expandvars(os.path.expanduser(p))

def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"Invalid config: [{name}] must be a table, got {section!r}.")
    return section

def _flag(section: dict[str, Any], key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"Invalid {key}: {value!r}. Must be true or false.")
    return value

@dataclass(frozen=True)
class CompareConfig:
    """Settings for a directory comparison.

    Only the two roots are per-run; everything here can come from a
    config.toml so repeated audits use the same ignore list.
    """

    ignore: list[str] = field(default_factory=list)
    follow_symlinks: bool = False
    parallel: bool = False  # Scan both roots on two threads

    # Output
    show_progress: bool = True
    output_format: str = "text"  # text|json

    # Logging
    log_level: str = "WARNING"
    log_file: str | None = None

    def __post_init__(self):
        if not isinstance(self.log_level, str):
            raise ValueError(f"Invalid log level: {self.log_level!r}. Must be a level name string.")
        if self.log_file is not None and not isinstance(self.log_file, str):
            raise ValueError(f"Invalid log file: {self.log_file!r}. Must be a path string.")
        if self.output_format not in VALID_FORMATS:
            raise ValueError(f"Invalid output format: {self.output_format}. Must be one of {VALID_FORMATS}.")
        level = self.log_level.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}. Must be one of {VALID_LOG_LEVELS}.")
        object.__setattr__(self, 'log_level', level)
        if self.log_file:
            object.__setattr__(self, 'log_file', _expand(self.log_file))

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)

    @staticmethod
    def from_toml(path: str | Path) -> "CompareConfig":
        data = tomllib.loads(Path(path).read_text(encoding="utf-8"))
        cmp = _section(data, "compare")
        out = _section(data, "output")
        log = _section(data, "logging")

        ignore = cmp.get("ignore", [])
        if not isinstance(ignore, list) or not all(isinstance(p, str) for p in ignore):
            raise ValueError(f"Invalid ignore: {ignore!r}. Must be a list of glob strings.")

        # Environment variable takes precedence if explicitly set
        log_level = os.environ.get("DIRPARITY_LOG_LEVEL") or log.get("level", "WARNING")

        return CompareConfig(
            ignore=list(ignore),
            follow_symlinks=_flag(cmp, "follow_symlinks", False),
            parallel=_flag(cmp, "parallel", False),
            show_progress=_flag(out, "progress", True),
            output_format=out.get("format", "text"),
            log_level=log_level,
            log_file=log.get("file"),
        )

def load_config(path: str | Path | None = None) -> CompareConfig:
    """Load a config file, or return defaults when no path is given."""
    if path is None:
        env_level = os.environ.get("DIRPARITY_LOG_LEVEL")
        return CompareConfig(log_level=env_level) if env_level else CompareConfig()
    p = Path(_expand(str(path)))
    if not p.is_file():
        raise ValueError(f"Config file not found: {p}")
    return CompareConfig.from_toml(p)
