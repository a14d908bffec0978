#!/usr/bin/env python3
"""
export_manager.py
-----------------
JSON export and import of the whole diary.

Export File Format:
    {
        "dreams": [...],          # active entries
        "trashedDreams": [...],   # trashed entries
        "categories": [...],      # user categories (additive key)
        "exportedAt": "2024-03-01T08:00:00.000Z",
        "version": "1.0"
    }

    Files from the earliest releases are a bare array of entries; they are
    read as ``dreams``.

Import Validation:
    A record is kept only if id, title, date and description are strings,
    tags and citedDreams are arrays, and citedTags is absent or an array.
    Invalid records are dropped. A file with no valid record at all is an
    error. Kept records go through the same normalization as stored data.

Outcomes:
    export_to_file and import_from_file report through OperationResult and
    never raise; the failure is logged and described in the result instead.

Usage:
    from dreamdiary.store.export_manager import ExportManager

    exporter = ExportManager(store, logger=logger)
    result = exporter.export_to_file(Path("dreams-export.json"))
    if not result.success:
        print(result.message)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

# --- Local imports ---
from dreamdiary.core.exceptions import (
    BackupError,
    ExportError,
    ImportDataError,
    StorageError,
)
from dreamdiary.core.logging_manager import DiaryLogger, safe_logger
from dreamdiary.core.validators import now_iso
from dreamdiary.models.entry import Entry
from dreamdiary.models.taxonomy import Category
from dreamdiary.utils.fs import write_text_atomic

from .decorators import log_store_operation
from .entry_store import EntryStore
from .migration import load_categories, normalize_dream

if TYPE_CHECKING:
    from dreamdiary.core.backup_manager import BackupManager

EXPORT_VERSION = "1.0"


class OperationStatus(str, Enum):
    """Outcome of an explicit user action."""

    SUCCESS = "success"
    CANCELLED = "cancelled"
    ERROR = "error"


@dataclass
class OperationResult:
    """
    Typed result of an export or import.

    Attributes:
        status: success, cancelled or error
        message: Human-readable summary
        details: Counts, paths and other specifics
    """

    status: OperationStatus
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def cancelled(self) -> bool:
        return self.status == OperationStatus.CANCELLED


@dataclass
class ImportBundle:
    """Validated, normalized contents of an import file."""

    dreams: List[Entry] = field(default_factory=list)
    trashed: List[Entry] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    skipped: int = 0


def build_export_payload(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Wrap serialized collections with the export timestamp and version."""
    return {
        "dreams": list(data.get("dreams", [])),
        "trashedDreams": list(data.get("trashedDreams", [])),
        "categories": list(data.get("categories", [])),
        "exportedAt": now_iso(),
        "version": EXPORT_VERSION,
    }


def is_valid_import_record(record: Any) -> bool:
    """Structural check applied to every imported entry record."""
    return (
        isinstance(record, dict)
        and isinstance(record.get("id"), str)
        and isinstance(record.get("title"), str)
        and isinstance(record.get("date"), str)
        and isinstance(record.get("description"), str)
        and isinstance(record.get("tags"), list)
        and isinstance(record.get("citedDreams"), list)
        and ("citedTags" not in record or isinstance(record.get("citedTags"), list))
    )


def parse_import_data(text: str) -> ImportBundle:
    """
    Parse and validate the contents of an import file.

    Args:
        text: Raw file contents

    Returns:
        ImportBundle with normalized entries and categories

    Raises:
        ImportDataError: If the JSON is invalid, the shape is wrong, or no
            valid entry remains

    Examples:
        >>> bundle = parse_import_data('[{"id": "a", "title": "t", "date": '
        ...     '"2024-01-01", "description": "", "tags": [], "citedDreams": []}]')
        >>> [e.id for e in bundle.dreams]
        ['a']
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise ImportDataError("Invalid JSON file") from e

    raw_trashed: List[Any] = []
    raw_categories: Any = []
    if isinstance(data, dict) and isinstance(data.get("dreams"), list):
        raw_dreams = data["dreams"]
        if isinstance(data.get("trashedDreams"), list):
            raw_trashed = data["trashedDreams"]
        raw_categories = data.get("categories", [])
    elif isinstance(data, list):
        raw_dreams = data
    else:
        raise ImportDataError("Invalid file format: expected dreams array")

    valid_dreams = [r for r in raw_dreams if is_valid_import_record(r)]
    valid_trashed = [r for r in raw_trashed if is_valid_import_record(r)]
    if not valid_dreams and not valid_trashed:
        raise ImportDataError("No valid dreams found in file")

    skipped = (len(raw_dreams) - len(valid_dreams)) + (len(raw_trashed) - len(valid_trashed))
    return ImportBundle(
        dreams=[normalize_dream(r) for r in valid_dreams],
        trashed=[normalize_dream(r) for r in valid_trashed],
        categories=load_categories(raw_categories),
        skipped=skipped,
    )


class ExportManager:
    """
    Handles export and import of the diary as a single JSON document.

    Attributes:
        store: The entry store to read from and import into
        logger: Optional DiaryLogger
    """

    def __init__(self, store: EntryStore, logger: Optional[DiaryLogger] = None) -> None:
        """
        Initialize export manager.

        Args:
            store: Entry store
            logger: Optional logger for export operations
        """
        self.store = store
        self.logger = logger

    def export_data(self) -> Dict[str, Any]:
        """Current store contents as an export payload."""
        return build_export_payload(self.store.export_data())

    @log_store_operation("write_export")
    def write_export(self, path: Path) -> Dict[str, Any]:
        """
        Write the export payload to path.

        Returns:
            Counts of exported records

        Raises:
            ExportError: If the file cannot be written
        """
        payload = self.export_data()
        try:
            write_text_atomic(Path(path), json.dumps(payload, indent=2, ensure_ascii=False))
        except OSError as e:
            raise ExportError(f"Failed to write export file {path}: {e}") from e

        return {
            "path": str(path),
            "dreams": len(payload["dreams"]),
            "trashed": len(payload["trashedDreams"]),
            "categories": len(payload["categories"]),
        }

    def export_to_file(self, path: Optional[Path], overwrite: bool = True) -> OperationResult:
        """
        Export to a file.

        Args:
            path: Destination; None means the user chose no destination
            overwrite: If False, an existing file cancels the export

        Returns:
            OperationResult; never raises
        """
        if path is None:
            return OperationResult(OperationStatus.CANCELLED, "Export cancelled")

        path = Path(path)
        if path.exists() and not overwrite:
            return OperationResult(
                OperationStatus.CANCELLED,
                f"Export cancelled: {path} already exists",
                {"path": str(path)},
            )

        try:
            details = self.write_export(path)
        except (ExportError, StorageError) as e:
            safe_logger(self.logger).log_error(e, {"operation": "export", "path": str(path)})
            return OperationResult(OperationStatus.ERROR, "Failed to export data", {"error": str(e)})

        return OperationResult(
            OperationStatus.SUCCESS,
            f"Exported {details['dreams']} dreams and {details['trashed']} trashed dreams",
            details,
        )

    def import_from_file(
        self,
        path: Optional[Path],
        backup_manager: Optional["BackupManager"] = None,
    ) -> OperationResult:
        """
        Import a file into the store, merging without overwriting.

        Args:
            path: Source file; None means the user chose no file
            backup_manager: If given, a backup is taken before anything changes

        Returns:
            OperationResult; never raises
        """
        if path is None:
            return OperationResult(OperationStatus.CANCELLED, "Import cancelled")

        path = Path(path)
        log = safe_logger(self.logger)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            log.log_error(e, {"operation": "import", "path": str(path)})
            return OperationResult(OperationStatus.ERROR, "Failed to read file", {"error": str(e)})

        try:
            bundle = parse_import_data(text)
        except ImportDataError as e:
            log.log_error(e, {"operation": "import", "path": str(path)})
            return OperationResult(OperationStatus.ERROR, str(e), {"path": str(path)})

        details: Dict[str, Any] = {"path": str(path), "skipped": bundle.skipped}
        try:
            if backup_manager is not None:
                details["backup"] = str(backup_manager.create_backup(backup_type="pre-import"))
            summary = self.store.import_data(bundle.dreams, bundle.trashed, bundle.categories)
        except (BackupError, StorageError) as e:
            log.log_error(e, {"operation": "import", "path": str(path)})
            return OperationResult(OperationStatus.ERROR, "Failed to import data", {"error": str(e)})

        details.update(summary)
        return OperationResult(
            OperationStatus.SUCCESS,
            f"Imported {summary['dreams']} dreams and {summary['trashed']} trashed dreams",
            details,
        )
