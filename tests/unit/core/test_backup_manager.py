"""
test_backup_manager.py
----------------------
Unit tests for dreamdiary.core.backup_manager.

Tests backup creation, listing, retention cleanup and restore.
"""
import os
import time
from datetime import datetime, timedelta

import pytest
from unittest.mock import MagicMock

from dreamdiary.core.backup_manager import BackupManager
from dreamdiary.core.exceptions import BackupError
from dreamdiary.core.logging_manager import DiaryLogger


@pytest.fixture
def data_dir(tmp_dir):
    path = tmp_dir / "data"
    path.mkdir()
    (path / "dreams.json").write_text('[{"id": "a"}]')
    (path / "categories.json").write_text("[]")
    return path


@pytest.fixture
def manager(data_dir, tmp_dir):
    return BackupManager(data_dir, tmp_dir / "backups", retention_days=30)


class TestCreateBackup:
    """Test BackupManager.create_backup."""

    def test_copies_existing_data_files(self, manager, data_dir):
        """Test only existing data files are copied, with a marker beside."""
        backup_path = manager.create_backup("manual")

        assert backup_path.parent.name == "manual"
        assert backup_path.name.startswith("dreamdiary_")
        assert sorted(f.name for f in backup_path.iterdir()) == [
            "categories.json",
            "dreams.json",
        ]
        assert (backup_path / "dreams.json").read_text() == '[{"id": "a"}]'
        assert backup_path.with_name(backup_path.name + ".marker").exists()

    def test_suffix_in_name(self, manager):
        """Test suffix is appended to the directory name."""
        backup_path = manager.create_backup("manual", suffix="before-cleanup")
        assert backup_path.name.endswith("_before-cleanup")

    def test_two_backups_same_second_are_distinct(self, manager):
        """Test microsecond timestamps keep quick backups apart."""
        first = manager.create_backup("pre-import")
        second = manager.create_backup("pre-import")
        assert first != second

    def test_invalid_type(self, manager):
        """Test unknown backup types are rejected."""
        with pytest.raises(BackupError, match="Invalid backup_type"):
            manager.create_backup("weekly")

    def test_no_data_files(self, tmp_dir):
        """Test backing up an empty data directory fails."""
        manager = BackupManager(tmp_dir / "empty", tmp_dir / "backups")
        assert manager.has_data() is False
        with pytest.raises(BackupError, match="No data files"):
            manager.create_backup()

    def test_logs_operation(self, data_dir, tmp_dir):
        """Test the logger receives backup_created."""
        mock_logger = MagicMock(spec=DiaryLogger)
        manager = BackupManager(data_dir, tmp_dir / "backups", logger=mock_logger)

        manager.create_backup("manual")

        assert mock_logger.log_operation.call_args[0][0] == "backup_created"


class TestListBackups:
    """Test BackupManager.list_backups."""

    def test_empty(self, manager):
        """Test every type is present even without backups."""
        backups = manager.list_backups()
        assert set(backups) == {"manual", "pre-import", "pre-reset", "pre-restore"}
        assert all(not items for items in backups.values())

    def test_lists_metadata(self, manager):
        """Test backup metadata."""
        backup_path = manager.create_backup("pre-reset")

        items = manager.list_backups()["pre-reset"]

        assert len(items) == 1
        assert items[0]["path"] == str(backup_path)
        assert items[0]["files"] == ["categories.json", "dreams.json"]
        assert items[0]["size"] > 0
        assert items[0]["age_days"] == 0


class TestCleanup:
    """Test retention cleanup."""

    def _age(self, manager, backup_path, days):
        marker = manager._marker_for(backup_path)
        marker.write_text((datetime.now() - timedelta(days=days)).isoformat())

    def test_removes_old_automatic_backups(self, manager):
        """Test automatic backups past retention are removed with their marker."""
        old = manager.create_backup("pre-import")
        recent = manager.create_backup("pre-import")
        self._age(manager, old, 45)

        removed = manager.cleanup_old_backups()

        assert removed == 1
        assert not old.exists()
        assert not manager._marker_for(old).exists()
        assert recent.exists()

    def test_manual_backups_never_pruned(self, manager):
        """Test manual backups survive regardless of age."""
        manual = manager.create_backup("manual")
        self._age(manager, manual, 400)

        assert manager.cleanup_old_backups() == 0
        assert manual.exists()

    def test_mtime_fallback_without_marker(self, manager):
        """Test age falls back to directory mtime when the marker is gone."""
        old = manager.create_backup("pre-reset")
        manager._marker_for(old).unlink()
        past = time.time() - 60 * 60 * 24 * 45
        os.utime(old, (past, past))

        assert manager.cleanup_old_backups() == 1


class TestRestore:
    """Test BackupManager.restore_backup."""

    def test_restore_replaces_and_removes_files(self, manager, data_dir):
        """Test restore makes the data dir match the backup exactly."""
        backup_path = manager.create_backup("manual")
        (data_dir / "dreams.json").write_text("[]")
        (data_dir / "trashed_dreams.json").write_text("[]")

        pre_restore = manager.restore_backup(backup_path)

        assert (data_dir / "dreams.json").read_text() == '[{"id": "a"}]'
        assert not (data_dir / "trashed_dreams.json").exists()
        assert pre_restore.parent.name == "pre-restore"
        assert (pre_restore / "trashed_dreams.json").exists()

    def test_restore_into_empty_data_dir(self, manager, data_dir, tmp_dir):
        """Test no pre-restore backup is taken when there is no data."""
        backup_path = manager.create_backup("manual")
        for f in data_dir.iterdir():
            f.unlink()

        result = manager.restore_backup(backup_path)

        assert result == data_dir
        assert (data_dir / "dreams.json").exists()
        assert not (tmp_dir / "backups" / "pre-restore").exists()

    def test_restore_missing_backup(self, manager, tmp_dir):
        """Test restoring from a non-backup directory fails."""
        empty = tmp_dir / "not-a-backup"
        empty.mkdir()
        with pytest.raises(BackupError, match="not found or empty"):
            manager.restore_backup(empty)
