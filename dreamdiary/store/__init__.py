#!/usr/bin/env python3
"""
Dream Diary Store Package
-------------------------
Persistence and derivations for dream entries.

This package provides:
- Storage backends (JSON files, in-memory key/value)
- Schema migration of legacy records
- The EntryStore (CRUD, trash, categories, citations, tags)
- Entry filtering and sorting
- Citation graph derivation
- Tag analytics
- JSON export and import
"""

from dreamdiary.core.exceptions import (
    StorageError,
    ValidationError,
    BackupError,
    ExportError,
    ImportDataError,
)
from .storage import StorageBackend, JsonFileStorage, MemoryStorage
from .migration import (
    CURRENT_SCHEMA_VERSION,
    SchemaVersion,
    StoreState,
    load_state,
    migrate_dreams,
    normalize_dream,
    normalize_tag,
    seed_categories_from_entries,
)
from .entry_store import EntryStore
from .filters import DateRange, TimeRange, EntryFilters, filter_entries, sort_entries
from .graph import GraphFilters, GraphData, GraphNode, GraphEdge, build_citation_graph
from .analytics import (
    TagAnalytics,
    TagStats,
    TagRelationship,
    CategorySummary,
    compute_tag_stats,
    compute_tag_relationships,
    compute_category_summaries,
)
from .export_manager import (
    ExportManager,
    OperationResult,
    OperationStatus,
    parse_import_data,
)
from .decorators import log_store_operation, handle_storage_errors

__all__ = [
    # Main store
    "EntryStore",
    # Exceptions
    "StorageError",
    "ValidationError",
    "BackupError",
    "ExportError",
    "ImportDataError",
    # Storage
    "StorageBackend",
    "JsonFileStorage",
    "MemoryStorage",
    # Migration
    "CURRENT_SCHEMA_VERSION",
    "SchemaVersion",
    "StoreState",
    "load_state",
    "migrate_dreams",
    "normalize_dream",
    "normalize_tag",
    "seed_categories_from_entries",
    # Filtering
    "DateRange",
    "TimeRange",
    "EntryFilters",
    "filter_entries",
    "sort_entries",
    # Graph
    "GraphFilters",
    "GraphData",
    "GraphNode",
    "GraphEdge",
    "build_citation_graph",
    # Analytics
    "TagAnalytics",
    "TagStats",
    "TagRelationship",
    "CategorySummary",
    "compute_tag_stats",
    "compute_tag_relationships",
    "compute_category_summaries",
    # Export
    "ExportManager",
    "OperationResult",
    "OperationStatus",
    "parse_import_data",
    # Decorators
    "log_store_operation",
    "handle_storage_errors",
]
