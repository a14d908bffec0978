#!/usr/bin/env python3
"""
storage.py
----------
Persistence backends for the dream diary collections.

The store only ever asks a backend to read a whole collection or to replace
a whole collection. Two backends implement that contract:

    JsonFileStorage  One pretty-printed JSON file per collection in a data
                     directory (the desktop layout).
    MemoryStorage    A key/value map of JSON strings (the browser layout,
                     also used by tests).

Contract:
    - Missing files/keys read as empty collections.
    - Reads never raise for bad content; a corrupt file is moved aside and
      treated as empty.
    - Writes are synchronous and raise StorageError on failure.

Usage:
    from dreamdiary.store.storage import JsonFileStorage

    storage = JsonFileStorage(Path("~/Dreams").expanduser(), logger=logger)
    raw_dreams = storage.load_collection(DREAMS)
    storage.save(DREAMS, [entry.to_dict() for entry in entries])
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

# --- Local imports ---
from dreamdiary.core.exceptions import StorageError
from dreamdiary.core.logging_manager import DiaryLogger, safe_logger
from dreamdiary.core.paths import (
    CATEGORIES_FILE,
    DREAMS_FILE,
    SCHEMA_FILE,
    TRASHED_DREAMS_FILE,
)
from dreamdiary.utils.fs import write_text_atomic

from .decorators import handle_storage_errors

# ---- Collection names ----
DREAMS = "dreams"
TRASHED_DREAMS = "trashed_dreams"
CATEGORIES = "categories"
COLLECTIONS = (DREAMS, TRASHED_DREAMS, CATEGORIES)

_FILENAMES = {
    DREAMS: DREAMS_FILE,
    TRASHED_DREAMS: TRASHED_DREAMS_FILE,
    CATEGORIES: CATEGORIES_FILE,
}


def _check_collection(name: str) -> None:
    if name not in COLLECTIONS:
        raise StorageError(
            f"Unknown collection '{name}'. Must be one of: {', '.join(COLLECTIONS)}"
        )


class StorageBackend(ABC):
    """Whole-collection persistence for entries, trash and categories."""

    logger: Optional[DiaryLogger] = None

    @abstractmethod
    def _read_raw(self, name: str) -> Optional[Any]:
        """Return decoded JSON for a collection/marker, or None if absent."""

    @abstractmethod
    def _write_raw(self, name: str, data: Any) -> None:
        """Persist decoded JSON for a collection/marker."""

    def has_collection(self, name: str) -> bool:
        """True if the collection has ever been written."""
        _check_collection(name)
        return self._read_raw(name) is not None

    def load_collection(self, name: str) -> List[Any]:
        """
        Read a collection as a list of raw records.

        Returns:
            The stored list; [] if missing or not a list
        """
        _check_collection(name)
        data = self._read_raw(name)
        if data is None:
            return []
        if not isinstance(data, list):
            safe_logger(self.logger).log_warning(
                f"Collection '{name}' is not a list; treating as empty",
                {"type": type(data).__name__},
            )
            return []
        return data

    def load(self) -> Dict[str, List[Any]]:
        """Read all three collections."""
        return {name: self.load_collection(name) for name in COLLECTIONS}

    def save(self, name: str, data: List[Any]) -> None:
        """
        Replace a collection.

        Raises:
            StorageError: If the write fails
        """
        _check_collection(name)
        self._write_raw(name, data)
        safe_logger(self.logger).log_debug(
            f"Saved collection '{name}'", {"records": len(data)}
        )

    def load_marker(self) -> Optional[Dict[str, Any]]:
        """Read the schema version marker, if any."""
        data = self._read_raw("schema")
        return data if isinstance(data, dict) else None

    def save_marker(self, marker: Dict[str, Any]) -> None:
        """Write the schema version marker."""
        self._write_raw("schema", marker)


class JsonFileStorage(StorageBackend):
    """
    One JSON file per collection inside a data directory.

    Writes go to a temporary file in the same directory and are moved into
    place with os.replace, so a failed write never truncates existing data.
    """

    def __init__(self, data_dir: Path, logger: Optional[DiaryLogger] = None) -> None:
        self.data_dir = Path(data_dir)
        self.logger = logger

    def path_for(self, name: str) -> Path:
        """Filesystem path of a collection or of the schema marker."""
        if name == "schema":
            return self.data_dir / SCHEMA_FILE
        _check_collection(name)
        return self.data_dir / _FILENAMES[name]

    def _quarantine(self, path: Path, error: Exception) -> None:
        """Move an unreadable file aside so the next save does not destroy it."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        target = path.with_name(f"{path.name}.corrupt-{timestamp}")
        try:
            path.rename(target)
        except OSError as e:
            safe_logger(self.logger).log_error(
                e, {"operation": "quarantine", "path": str(path)}
            )
            raise StorageError(f"Cannot move corrupt file {path} aside: {e}") from e

        safe_logger(self.logger).log_warning(
            f"Corrupt data file moved aside: {path.name}",
            {"moved_to": str(target), "error": str(error)},
        )

    def _read_raw(self, name: str) -> Optional[Any]:
        path = self.path_for(name)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            self._quarantine(path, e)
            return None
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    @handle_storage_errors
    def _write_raw(self, name: str, data: Any) -> None:
        write_text_atomic(self.path_for(name), json.dumps(data, indent=2, ensure_ascii=False))


class MemoryStorage(StorageBackend):
    """
    Key/value storage of JSON strings.

    Values are serialized on write so that non-JSON data fails the same way
    it would on disk.
    """

    def __init__(
        self,
        initial: Optional[Dict[str, Any]] = None,
        logger: Optional[DiaryLogger] = None,
    ) -> None:
        self.items: Dict[str, str] = {}
        self.logger = logger
        for key, value in (initial or {}).items():
            self.items[key] = value if isinstance(value, str) else json.dumps(value)

    def _read_raw(self, name: str) -> Optional[Any]:
        stored = self.items.get(name)
        if stored is None:
            return None
        try:
            return json.loads(stored)
        except json.JSONDecodeError as e:
            safe_logger(self.logger).log_warning(
                f"Corrupt value for key '{name}'; treating as empty", {"error": str(e)}
            )
            return None

    @handle_storage_errors
    def _write_raw(self, name: str, data: Any) -> None:
        self.items[name] = json.dumps(data)
