#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants for the Dream Diary project.

The journal lives in the per-user application data directory, shared with
the desktop application:

    <user data>/Dream Diary/
    ├── dreams.json          # Active entries
    ├── trashed_dreams.json  # Soft-deleted entries
    ├── categories.json      # User categories
    ├── schema.json          # Schema version marker
    ├── logs/                # Operation and error logs
    └── backups/             # Timestamped copies of the JSON files

All paths are resolved at import time; nothing is created until used.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
import sys
from pathlib import Path

APP_NAME = "Dream Diary"


def _get_user_data_dir() -> Path:
    """
    Determine the platform user-data directory for the application.

    Returns:
        %APPDATA%/Dream Diary on Windows,
        ~/Library/Application Support/Dream Diary on macOS,
        $XDG_CONFIG_HOME/Dream Diary (default ~/.config) elsewhere
    """
    home = Path.home()

    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else home / "AppData" / "Roaming"
    elif sys.platform == "darwin":
        base = home / "Library" / "Application Support"
    else:
        xdg = os.environ.get("XDG_CONFIG_HOME")
        base = Path(xdg) if xdg else home / ".config"

    return base / APP_NAME


# ----- Data directory -----
DATA_DIR: Path = _get_user_data_dir()

# ---- Collections ----
DREAMS_FILE = "dreams.json"
TRASHED_DREAMS_FILE = "trashed_dreams.json"
CATEGORIES_FILE = "categories.json"
SCHEMA_FILE = "schema.json"

# ---- Config, Logs & Backups ----
CONFIG_PATH = DATA_DIR / "config.yaml"
LOG_DIR = DATA_DIR / "logs"
BACKUP_DIR = DATA_DIR / "backups"
