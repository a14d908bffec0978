"""
Dream Diary Core
================

A local-first dream journal: entries with category-scoped tags, citations
between entries, trash, analytics, and JSON export/import.

Main Components:
    - models: Entry, Tag and Category records and the color taxonomy
    - store: Persistence backends, migration, the entry store, filtering,
      citation graph, tag analytics, export/import
    - core: Logging, exceptions, configuration, paths, validators, backups
    - cli: Command-line interface (``dreamdiary``)

Example Usage:
    >>> from dreamdiary.store import EntryStore, JsonFileStorage
    >>> from dreamdiary.core.paths import DATA_DIR
    >>> store = EntryStore(JsonFileStorage(DATA_DIR))
    >>> entry = store.add_entry({"title": "Falling", "date": "2024-05-01"})
"""

__version__ = "1.0.0"
