#!/usr/bin/env python3
"""
backup_manager.py
--------------------
Backup and recovery of the Dream Diary data files.

A backup is a timestamped directory holding copies of the JSON data files
(dreams, trash, categories, schema marker) as they were at that moment.
Destructive maintenance operations (import, tag reset, restore) take one
first so that they can be undone by hand.

Features:
    - Timestamped backup directories grouped by type
    - Marker files for precise creation timestamp tracking
    - Automatic cleanup of old automatic backups based on retention policy
    - Pre-restore backup creation for safe recovery

Usage:
    from dreamdiary.core.backup_manager import BackupManager

    manager = BackupManager(data_dir, backup_dir, retention_days=30)

    # Create manual backup
    backup_path = manager.create_backup("manual")

    # List all backups
    backups = manager.list_backups()

    # Restore from backup
    manager.restore_backup(backup_path)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import shutil
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

# --- Local imports ---
from .exceptions import BackupError
from .logging_manager import DiaryLogger, safe_logger
from .paths import CATEGORIES_FILE, DREAMS_FILE, SCHEMA_FILE, TRASHED_DREAMS_FILE

# ---- Constants ----
DATA_FILES = (DREAMS_FILE, TRASHED_DREAMS_FILE, CATEGORIES_FILE, SCHEMA_FILE)
VALID_BACKUP_TYPES = {"manual", "pre-import", "pre-reset", "pre-restore"}
"""Valid backup type identifiers."""
AUTOMATIC_BACKUP_TYPES = {"pre-import", "pre-reset", "pre-restore"}
"""Types subject to retention cleanup; manual backups are never pruned."""
MARKER_SUFFIX = ".marker"


class BackupManager:
    """
    Handles backup and recovery of the data directory's JSON files.

    Attributes:
        data_dir: Directory holding the live data files
        backup_dir: Root directory for backups (one subdirectory per type)
        retention_days: Days to retain automatic backups
        logger: Optional DiaryLogger
    """

    def __init__(
        self,
        data_dir: Path,
        backup_dir: Path,
        retention_days: int = 30,
        logger: Optional[DiaryLogger] = None,
    ) -> None:
        """
        Initialize backup manager.

        Args:
            data_dir: Directory holding the data files
            backup_dir: Directory for backup storage
            retention_days: Days to retain automatic backups
            logger: Optional logger for backup operations
        """
        self.data_dir = Path(data_dir)
        self.backup_dir = Path(backup_dir)
        self.retention_days = retention_days
        self.logger = logger

    @staticmethod
    def _get_timestamp_for_filename() -> str:
        """
        Timestamp for directory names: YYYYMMDD_HHMMSS_ffffff.

        Microseconds keep backups taken within the same second apart.
        """
        return datetime.now().strftime("%Y%m%d_%H%M%S_%f")

    @staticmethod
    def _get_timestamp_for_metadata() -> str:
        """ISO timestamp stored in marker files."""
        return datetime.now().isoformat()

    @staticmethod
    def _marker_for(backup_path: Path) -> Path:
        return backup_path.with_name(backup_path.name + MARKER_SUFFIX)

    def _existing_data_files(self) -> List[Path]:
        return [self.data_dir / name for name in DATA_FILES if (self.data_dir / name).exists()]

    def has_data(self) -> bool:
        """True if there is at least one data file to back up."""
        return bool(self._existing_data_files())

    def create_backup(
        self, backup_type: str = "manual", suffix: Optional[str] = None
    ) -> Path:
        """
        Copy the current data files into a new timestamped backup directory.

        Args:
            backup_type: Type of backup (manual, pre-import, pre-reset, pre-restore)
            suffix: Optional suffix for the directory name

        Returns:
            Path to the created backup directory

        Raises:
            BackupError: If backup creation fails or backup_type is invalid
        """
        if backup_type not in VALID_BACKUP_TYPES:
            valid_types = ", ".join(sorted(VALID_BACKUP_TYPES))
            raise BackupError(
                f"Invalid backup_type '{backup_type}'. "
                f"Must be one of: {valid_types}"
            )

        sources = self._existing_data_files()
        if not sources:
            raise BackupError(f"No data files found in {self.data_dir}")

        timestamp = self._get_timestamp_for_filename()
        backup_name = f"dreamdiary_{timestamp}_{suffix}" if suffix else f"dreamdiary_{timestamp}"
        backup_path = self.backup_dir / backup_type / backup_name

        try:
            backup_path.mkdir(parents=True)
            for source in sources:
                shutil.copy2(source, backup_path / source.name)

            self._marker_for(backup_path).write_text(self._get_timestamp_for_metadata())

            safe_logger(self.logger).log_operation(
                "backup_created",
                {
                    "backup_type": backup_type,
                    "backup_path": str(backup_path),
                    "files": [source.name for source in sources],
                },
            )
            return backup_path

        except OSError as e:
            safe_logger(self.logger).log_error(
                e,
                {
                    "operation": "create_backup",
                    "backup_type": backup_type,
                    "target_path": str(backup_path),
                },
            )
            raise BackupError(f"Failed to create backup: {e}") from e

    def _created_at(self, backup_path: Path) -> datetime:
        """Creation time from the marker file, falling back to mtime."""
        marker = self._marker_for(backup_path)
        if marker.exists():
            try:
                return datetime.fromisoformat(marker.read_text().strip())
            except ValueError:
                pass
        return datetime.fromtimestamp(backup_path.stat().st_mtime)

    def cleanup_old_backups(self) -> int:
        """
        Remove automatic backups older than the retention period.

        Returns:
            Number of backups removed
        """
        cutoff_date = datetime.now() - timedelta(days=self.retention_days)
        removed_count = 0

        for backup_type in sorted(AUTOMATIC_BACKUP_TYPES):
            type_dir = self.backup_dir / backup_type
            if not type_dir.exists():
                continue

            for backup_path in type_dir.iterdir():
                if not backup_path.is_dir():
                    continue
                try:
                    if self._created_at(backup_path) >= cutoff_date:
                        continue
                    shutil.rmtree(backup_path)
                    try:
                        self._marker_for(backup_path).unlink()
                    except FileNotFoundError:
                        pass
                    removed_count += 1
                except OSError as e:
                    safe_logger(self.logger).log_error(
                        e, {"operation": "cleanup_backup", "path": str(backup_path)}
                    )

        if removed_count > 0:
            safe_logger(self.logger).log_operation(
                "backup_cleanup",
                {"removed_count": removed_count, "retention_days": self.retention_days},
            )
        return removed_count

    def restore_backup(self, backup_path: Path) -> Path:
        """
        Replace the live data files with those of a backup.

        A pre-restore backup of the current files is taken first. Data files
        absent from the backup are removed, so the data directory matches the
        backup exactly.

        Args:
            backup_path: Backup directory to restore

        Returns:
            Path to the pre-restore backup (or the data dir if there was nothing to back up)

        Raises:
            BackupError: If the backup is missing or the restore fails
        """
        backup_path = Path(backup_path)
        if not backup_path.is_dir() or not any((backup_path / n).exists() for n in DATA_FILES):
            raise BackupError(f"Backup not found or empty: {backup_path}")

        if self._existing_data_files():
            current_backup = self.create_backup("pre-restore")
        else:
            current_backup = self.data_dir

        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            for name in DATA_FILES:
                source = backup_path / name
                target = self.data_dir / name
                if source.exists():
                    staging = target.with_name(f".{name}.restore")
                    shutil.copy2(source, staging)
                    staging.replace(target)
                elif target.exists():
                    target.unlink()

            safe_logger(self.logger).log_operation(
                "restore_backup",
                {
                    "restored_from": str(backup_path),
                    "pre_restore_backup": str(current_backup),
                },
            )
            return current_backup

        except OSError as e:
            safe_logger(self.logger).log_error(
                e, {"operation": "restore_backup", "backup_path": str(backup_path)}
            )
            raise BackupError(f"Failed to restore backup: {e}") from e

    def list_backups(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        List all available backups with metadata.

        Returns:
            Dictionary mapping backup types to lists of backup info, oldest first
        """
        backups: Dict[str, List[Dict[str, Any]]] = {t: [] for t in sorted(VALID_BACKUP_TYPES)}

        for backup_type in backups:
            type_dir = self.backup_dir / backup_type
            if not type_dir.exists():
                continue

            for backup_path in sorted(p for p in type_dir.iterdir() if p.is_dir()):
                files = sorted(f for f in backup_path.iterdir() if f.is_file())
                created = self._created_at(backup_path)
                backups[backup_type].append(
                    {
                        "name": backup_path.name,
                        "path": str(backup_path),
                        "files": [f.name for f in files],
                        "size": sum(f.stat().st_size for f in files),
                        "created": created.isoformat(),
                        "age_days": (datetime.now() - created).days,
                    }
                )

        return backups
