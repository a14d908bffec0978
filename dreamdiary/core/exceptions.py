#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the Dream Diary project.

Only failures the caller must see are modelled here. Malformed journal data
(bad tags, unparseable dates or colors, dangling citations) is repaired in
place by the migration layer and never raised.

Exception Hierarchy:
    Exception (built-in)
    ├── StorageError - Base for all persistence failures
    │   ├── BackupError - Backup creation/restoration failures
    │   └── ExportError - Export file write failures
    ├── ImportDataError - Unreadable or empty import payloads
    ├── ValidationError - Invalid explicit user input
    └── ConfigError - Unreadable or invalid configuration file

Usage:
    from dreamdiary.core.exceptions import StorageError, ValidationError

    try:
        store.update_entry(entry_id, {"title": "Flying again"})
    except ValidationError as e:
        logger.log_warning(f"Rejected patch: {e}")
    except StorageError as e:
        logger.log_error(e, {"operation": "update_entry"})
"""


class StorageError(Exception):
    """
    Base exception for persistence failures.

    Raised when a collection cannot be written to (or removed from) its
    backing store. Unlike data-shape problems these mean the on-disk state
    may no longer match what the user sees, so they are always propagated.

    Examples:
        >>> raise StorageError("Failed to save 'dreams': disk full")

    See Also:
        BackupError, ExportError
    """

    pass


class BackupError(StorageError):
    """
    Exception for backup creation and restoration failures.

    Examples:
        >>> raise BackupError("Backup directory not writable")
        >>> raise BackupError("Cannot restore from backup: not found")
    """

    pass


class ExportError(StorageError):
    """
    Exception for export file failures.

    Examples:
        >>> raise ExportError("Failed to write export file: permission denied")
    """

    pass


class ImportDataError(Exception):
    """
    Exception for import payloads that cannot be used at all.

    Individual invalid records are dropped silently; this is raised only
    when the payload is not JSON, has the wrong top-level shape, or holds
    no valid records.

    Examples:
        >>> raise ImportDataError("Invalid JSON file")
        >>> raise ImportDataError("No valid dreams found in file")
    """

    pass


class ValidationError(Exception):
    """
    Exception for invalid explicit user input.

    Raised for things a user asked for directly and that cannot be honored:
    - Patching immutable entry fields
    - Unknown patch keys
    - Empty category names

    Examples:
        >>> raise ValidationError("Field 'id' cannot be updated")
        >>> raise ValidationError("Category name cannot be empty")
    """

    pass


class ConfigError(Exception):
    """
    Exception for configuration file problems.

    Examples:
        >>> raise ConfigError("Invalid YAML in config.yaml")
        >>> raise ConfigError("Unknown config keys: colour")
    """

    pass
