#!/usr/bin/env python3
"""
config.py
---------
User configuration for Dream Diary.

Settings are resolved in increasing order of precedence:
    1. Built-in defaults (see dreamdiary.core.paths)
    2. Optional YAML file (default: <data dir>/config.yaml)
    3. Environment variables (DREAMDIARY_DATA_DIR, DREAMDIARY_LOG_DIR)
    4. Explicit overrides (CLI options)

Example config.yaml:
    data_dir: ~/Dreams
    backup_retention_days: 60
    uncategorized_label: Misc
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

# --- Third party imports ---
import yaml

# --- Local imports ---
from .exceptions import ConfigError
from .paths import BACKUP_DIR, CONFIG_PATH, DATA_DIR, LOG_DIR

_PATH_FIELDS = {"data_dir", "log_dir", "backup_dir"}
_ENV_OVERRIDES = {
    "DREAMDIARY_DATA_DIR": "data_dir",
    "DREAMDIARY_LOG_DIR": "log_dir",
}


@dataclass
class DiaryConfig:
    """
    Resolved configuration.

    Attributes:
        data_dir: Directory holding the JSON collections
        log_dir: Directory for log files
        backup_dir: Directory for data backups
        backup_retention_days: Days to keep automatic backups
        uncategorized_label: Display name for the uncategorized sentinel
        top_tags_per_category: Tags listed per category in analytics
    """

    data_dir: Path = DATA_DIR
    log_dir: Path = LOG_DIR
    backup_dir: Path = BACKUP_DIR
    backup_retention_days: int = 30
    uncategorized_label: str = "Uncategorized"
    top_tags_per_category: int = 5

    def __post_init__(self) -> None:
        for name in _PATH_FIELDS:
            setattr(self, name, Path(getattr(self, name)).expanduser())
        if self.backup_retention_days < 0:
            raise ConfigError(
                f"backup_retention_days must be non-negative, "
                f"got {self.backup_retention_days}"
            )
        if self.top_tags_per_category < 1:
            raise ConfigError(
                f"top_tags_per_category must be positive, "
                f"got {self.top_tags_per_category}"
            )


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Read a YAML mapping from disk; an empty file is an empty mapping."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> DiaryConfig:
    """
    Build a DiaryConfig from file, environment and overrides.

    A missing config file is not an error; an explicitly passed path that
    does not exist is.

    Args:
        config_path: YAML file to read (default: CONFIG_PATH if present)
        overrides: Values that win over everything else; None values are ignored
        environ: Environment mapping (default: os.environ)

    Returns:
        Resolved DiaryConfig

    Raises:
        ConfigError: If the file is unreadable, malformed, or has unknown keys
    """
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    if config_path is not None:
        path = Path(config_path).expanduser()
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        values.update(_read_yaml(path))
    elif CONFIG_PATH.exists():
        values.update(_read_yaml(CONFIG_PATH))

    known = {f.name for f in fields(DiaryConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    for env_key, field_name in _ENV_OVERRIDES.items():
        if environ.get(env_key):
            values[field_name] = environ[env_key]

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    # Derived directories follow a relocated data_dir unless set explicitly
    if "data_dir" in values:
        data_dir = Path(values["data_dir"]).expanduser()
        values.setdefault("log_dir", data_dir / "logs")
        values.setdefault("backup_dir", data_dir / "backups")

    try:
        return DiaryConfig(**values)
    except TypeError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
