#!/usr/bin/env python3
"""
entry_store.py
--------------
The in-memory source of truth for dream entries, trash and categories.

Provides the EntryStore class. Every mutation builds the new collections,
writes them through the storage backend, and only then swaps them into
memory. If a write fails, a StorageError propagates, the in-memory state is
left as it was, and collections already written by the same operation are
restored best-effort.

Core Operations:
    Entry Lifecycle:
        - add_entry: Create an active entry
        - update_entry: Patch an active entry
        - delete_entry: Move an entry to the trash
        - restore_entry: Move an entry back from the trash
        - permanently_delete_entry: Remove a trashed entry for good
        - clear_trash: Remove every trashed entry

    Queries:
        - get_entry / is_active / get_trashed_entries
        - get_filtered_entries: Conjunctive filters (see filters.py)

    Categories:
        - add_category / update_category / delete_category / get_categories

    Citations:
        - add_citation / remove_citation
        - get_cited_entries / get_citing_entries

    Tags:
        - get_all_tags / get_all_tags_with_colors / get_tag_color

    Data:
        - export_data / import_data / reset_tags

Unknown ids never raise: update, delete, restore and permanent delete are
no-ops that return None or False and log a warning.

Usage:
    from dreamdiary.store import EntryStore, JsonFileStorage

    store = EntryStore(JsonFileStorage(data_dir, logger=logger), logger=logger)
    entry = store.add_entry({"title": "Flying", "date": "2024-03-01"})
    store.delete_entry(entry.id)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

# --- Local imports ---
from dreamdiary.core.exceptions import StorageError, ValidationError
from dreamdiary.core.logging_manager import DiaryLogger, safe_logger
from dreamdiary.core.validators import (
    DataValidator,
    current_time_string,
    now_iso,
    today_string,
)
from dreamdiary.models.entry import Entry, generate_id
from dreamdiary.models.taxonomy import (
    UNCATEGORIZED_CATEGORY_ID,
    Category,
    CategoryColor,
    normalize_category_color,
    resolve_tag_color,
)
from dreamdiary.utils.slugify import slugify, unique_slug

from .decorators import log_store_operation
from .filters import EntryFilters, filter_entries
from .migration import StoreState, load_state, normalize_citations, normalize_tags
from .storage import CATEGORIES, DREAMS, TRASHED_DREAMS, StorageBackend

# Patch keys accepted by add_entry/update_entry
EDITABLE_FIELDS = {
    "title",
    "description",
    "date",
    "time",
    "tags",
    "cited_dreams",
    "cited_tags",
}
PROTECTED_FIELDS = {"id", "created_at", "deleted_at", "createdAt", "deletedAt"}


class EntryStore:
    """
    Owner of the three persisted collections.

    Attributes:
        storage: Persistence backend
        logger: Optional DiaryLogger
    """

    def __init__(
        self,
        storage: StorageBackend,
        logger: Optional[DiaryLogger] = None,
        state: Optional[StoreState] = None,
    ) -> None:
        """
        Load (and migrate if needed) the stored collections.

        Args:
            storage: Persistence backend
            logger: Optional logger
            state: Pre-loaded state; skips loading from storage when given
        """
        self.storage = storage
        self.logger = logger
        if state is None:
            state = load_state(storage, logger=logger)
        self._entries: List[Entry] = state.entries
        self._trashed: List[Entry] = state.trashed_entries
        self._categories: List[Category] = state.categories

    # ----- Read access -----

    @property
    def entries(self) -> List[Entry]:
        """Active entries, in stored order."""
        return list(self._entries)

    @property
    def trashed_entries(self) -> List[Entry]:
        return list(self._trashed)

    @property
    def categories(self) -> List[Category]:
        return list(self._categories)

    def get_entry(self, entry_id: str, include_trashed: bool = False) -> Optional[Entry]:
        """Find an active entry (optionally also a trashed one) by id."""
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        if include_trashed:
            for entry in self._trashed:
                if entry.id == entry_id:
                    return entry
        return None

    def is_active(self, entry_id: str) -> bool:
        return any(entry.id == entry_id for entry in self._entries)

    def get_trashed_entries(self) -> List[Entry]:
        return list(self._trashed)

    def get_categories(self) -> List[Category]:
        return list(self._categories)

    def get_filtered_entries(self, filters: Optional[EntryFilters] = None) -> List[Entry]:
        """Active entries matching every set filter; never mutates state."""
        return filter_entries(self._entries, filters)

    # ----- Persistence -----

    def _commit(
        self,
        entries: Optional[List[Entry]] = None,
        trashed: Optional[List[Entry]] = None,
        categories: Optional[List[Category]] = None,
    ) -> None:
        """
        Persist the given collections, then replace them in memory.

        Raises:
            StorageError: If any write fails; memory is unchanged
        """
        pending = []
        if categories is not None:
            pending.append((CATEGORIES, categories, self._categories))
        if entries is not None:
            pending.append((DREAMS, entries, self._entries))
        if trashed is not None:
            pending.append((TRASHED_DREAMS, trashed, self._trashed))

        written = []
        try:
            for name, new, old in pending:
                self.storage.save(name, [item.to_dict() for item in new])
                written.append((name, old))
        except StorageError:
            self._rollback(written)
            raise

        if categories is not None:
            self._categories = categories
        if entries is not None:
            self._entries = entries
        if trashed is not None:
            self._trashed = trashed

    def _rollback(self, written: Sequence[Any]) -> None:
        """Best-effort restore of collections written before a failure."""
        for name, old in reversed(written):
            try:
                self.storage.save(name, [item.to_dict() for item in old])
            except StorageError as e:
                safe_logger(self.logger).log_error(
                    e, {"operation": "rollback", "collection": name}
                )

    # ----- Entry lifecycle -----

    def _check_patch(self, patch: Mapping[str, Any]) -> None:
        protected = sorted(set(patch) & PROTECTED_FIELDS)
        if protected:
            raise ValidationError(f"Cannot modify protected fields: {', '.join(protected)}")
        unknown = sorted(set(patch) - EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown entry fields: {', '.join(unknown)}")

    @staticmethod
    def _clean_date(value: Any) -> str:
        normalized = DataValidator.normalize_date(value)
        if normalized is None:
            raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")
        return normalized

    @staticmethod
    def _clean_time(value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        normalized = DataValidator.normalize_time(value)
        if normalized is None:
            raise ValidationError(f"Invalid time: {value!r} (expected HH:MM[:SS])")
        return normalized

    def _apply_patch(self, entry: Entry, patch: Mapping[str, Any]) -> Entry:
        """Return a copy of entry with cleaned patch values applied."""
        changes: Dict[str, Any] = {}
        for key, value in patch.items():
            if key in ("title", "description"):
                if not isinstance(value, str):
                    raise ValidationError(f"Field '{key}' must be a string")
                changes[key] = value
            elif key == "date":
                changes["date"] = self._clean_date(value)
            elif key == "time":
                changes["time"] = self._clean_time(value)
            elif key == "tags":
                changes["tags"] = normalize_tags(list(value or []))
            elif key == "cited_dreams":
                changes["cited_dreams"] = normalize_citations(list(value or []), own_id=entry.id)
            elif key == "cited_tags":
                changes["cited_tags"] = normalize_citations(list(value or []))
        return entry.copy(**changes)

    @log_store_operation("add_entry")
    def add_entry(self, partial: Optional[Mapping[str, Any]] = None) -> Entry:
        """
        Create an active entry.

        Missing date defaults to today and missing time to the current time.
        Tags are normalized; citations are de-duplicated.

        Args:
            partial: Editable fields (title, description, date, time, tags,
                cited_dreams, cited_tags)

        Returns:
            The created Entry

        Raises:
            ValidationError: If the partial has protected/unknown keys or a bad date/time
            StorageError: If persisting fails
        """
        partial = dict(partial or {})
        self._check_patch(partial)

        now = now_iso()
        entry_id = generate_id()
        while self.get_entry(entry_id, include_trashed=True) is not None:
            entry_id = generate_id()

        base = Entry(
            id=entry_id,
            date=today_string(),
            time=current_time_string(),
            created_at=now,
            updated_at=now,
        )
        entry = self._apply_patch(base, partial)

        self._commit(entries=self._entries + [entry])
        return entry

    @log_store_operation("update_entry")
    def update_entry(self, entry_id: str, patch: Mapping[str, Any]) -> Optional[Entry]:
        """
        Patch an active entry and bump its updatedAt.

        Returns:
            The updated Entry, or None if no active entry has that id

        Raises:
            ValidationError: If the patch touches id/created_at/deleted_at,
                has unknown keys, or carries a bad date/time
        """
        self._check_patch(patch)
        entry = self.get_entry(entry_id)
        if entry is None:
            safe_logger(self.logger).log_warning("update_entry: unknown id", {"id": entry_id})
            return None

        updated = self._apply_patch(entry, patch)
        updated.updated_at = now_iso()

        self._commit(
            entries=[updated if e.id == entry_id else e for e in self._entries]
        )
        return updated

    @log_store_operation("delete_entry")
    def delete_entry(self, entry_id: str) -> bool:
        """Move an active entry to the trash, stamping deletedAt."""
        entry = self.get_entry(entry_id)
        if entry is None:
            safe_logger(self.logger).log_warning("delete_entry: unknown id", {"id": entry_id})
            return False

        trashed = entry.copy(deleted_at=now_iso())
        self._commit(
            entries=[e for e in self._entries if e.id != entry_id],
            trashed=self._trashed + [trashed],
        )
        return True

    @log_store_operation("restore_entry")
    def restore_entry(self, entry_id: str) -> bool:
        """Move a trashed entry back to the active list, removing deletedAt."""
        entry = next((e for e in self._trashed if e.id == entry_id), None)
        if entry is None:
            safe_logger(self.logger).log_warning("restore_entry: unknown id", {"id": entry_id})
            return False

        restored = entry.copy(deleted_at=None)
        self._commit(
            entries=self._entries + [restored],
            trashed=[e for e in self._trashed if e.id != entry_id],
        )
        return True

    def _prune_citations(self, entries: List[Entry], removed: Set[str]) -> List[Entry]:
        """Drop citations of removed ids, bumping updatedAt where changed."""
        result = []
        for entry in entries:
            if any(cited in removed for cited in entry.cited_dreams):
                entry = entry.copy(
                    cited_dreams=[c for c in entry.cited_dreams if c not in removed],
                    updated_at=now_iso(),
                )
            result.append(entry)
        return result

    @log_store_operation("permanently_delete_entry")
    def permanently_delete_entry(self, entry_id: str) -> bool:
        """
        Remove a trashed entry for good.

        Citations of it held by any remaining entry are removed as well.
        Active entries cannot be permanently deleted.
        """
        if not any(e.id == entry_id for e in self._trashed):
            safe_logger(self.logger).log_warning(
                "permanently_delete_entry: not in trash", {"id": entry_id}
            )
            return False

        removed = {entry_id}
        remaining_trash = [e for e in self._trashed if e.id != entry_id]
        entries = self._prune_citations(self._entries, removed)
        trashed = self._prune_citations(remaining_trash, removed)

        self._commit(
            entries=entries if entries != self._entries else None,
            trashed=trashed,
        )
        return True

    @log_store_operation("clear_trash")
    def clear_trash(self) -> int:
        """
        Remove every trashed entry.

        Returns:
            Number of entries removed
        """
        removed = {e.id for e in self._trashed}
        entries = self._prune_citations(self._entries, removed)
        self._commit(
            entries=entries if entries != self._entries else None,
            trashed=[],
        )
        return len(removed)

    # ----- Categories -----

    @log_store_operation("add_category")
    def add_category(self, name: str, color: Any = None) -> Category:
        """
        Create a category.

        The id is the slug of the name, suffixed -2, -3, ... on collision;
        a name without usable characters gets a generated id.

        Raises:
            ValidationError: If the name is blank
        """
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Category name cannot be empty")

        existing = {c.id for c in self._categories} | {UNCATEGORIZED_CATEGORY_ID}
        base_id = slugify(name) or generate_id()
        category_id = unique_slug(base_id, existing)

        now = now_iso()
        category = Category(
            id=category_id,
            name=name.strip(),
            color=normalize_category_color(color),
            created_at=now,
            updated_at=now,
        )
        self._commit(categories=self._categories + [category])
        return category

    @log_store_operation("update_category")
    def update_category(
        self,
        category_id: str,
        name: Optional[str] = None,
        color: Optional[Any] = None,
    ) -> Optional[Category]:
        """
        Rename and/or recolor a category; its id never changes.

        Returns:
            The updated Category, or None if no category has that id
        """
        category = next((c for c in self._categories if c.id == category_id), None)
        if category is None:
            safe_logger(self.logger).log_warning(
                "update_category: unknown id", {"id": category_id}
            )
            return None
        if name is not None and not name.strip():
            raise ValidationError("Category name cannot be empty")

        updated = Category(
            id=category.id,
            name=name.strip() if name is not None else category.name,
            color=normalize_category_color(color if color is not None else category.color),
            created_at=category.created_at,
            updated_at=now_iso(),
            extras=dict(category.extras),
        )
        self._commit(
            categories=[updated if c.id == category_id else c for c in self._categories]
        )
        return updated

    def _strip_category(self, entries: List[Entry], category_id: str) -> List[Entry]:
        result = []
        for entry in entries:
            if entry.has_category(category_id):
                entry = entry.copy(
                    tags=[t for t in entry.tags if t.category_id != category_id],
                    updated_at=now_iso(),
                )
            result.append(entry)
        return result

    @log_store_operation("delete_category")
    def delete_category(self, category_id: str) -> bool:
        """
        Delete a category and remove its tags from every entry.

        Tags are removed outright from active and trashed entries, not moved
        to uncategorized. Deleting the uncategorized sentinel is a no-op.

        Returns:
            True if the category or any of its tags existed
        """
        if not category_id or category_id == UNCATEGORIZED_CATEGORY_ID:
            return False

        categories = [c for c in self._categories if c.id != category_id]
        entries = self._strip_category(self._entries, category_id)
        trashed = self._strip_category(self._trashed, category_id)

        changed = (
            len(categories) != len(self._categories)
            or entries != self._entries
            or trashed != self._trashed
        )
        if not changed:
            safe_logger(self.logger).log_warning(
                "delete_category: unknown id", {"id": category_id}
            )
            return False

        self._commit(entries=entries, trashed=trashed, categories=categories)
        return True

    # ----- Citations -----

    @log_store_operation("add_citation")
    def add_citation(self, entry_id: str, cited_id: str) -> bool:
        """
        Record that entry_id cites cited_id.

        Both entries must be active; self-citations and duplicates are ignored.

        Returns:
            True if the citation was added
        """
        entry = self.get_entry(entry_id)
        if entry is None or not self.is_active(cited_id):
            return False
        if entry_id == cited_id or cited_id in entry.cited_dreams:
            return False

        updated = entry.copy(
            cited_dreams=entry.cited_dreams + [cited_id], updated_at=now_iso()
        )
        self._commit(entries=[updated if e.id == entry_id else e for e in self._entries])
        return True

    @log_store_operation("remove_citation")
    def remove_citation(self, entry_id: str, cited_id: str) -> bool:
        entry = self.get_entry(entry_id)
        if entry is None or cited_id not in entry.cited_dreams:
            return False

        updated = entry.copy(
            cited_dreams=[c for c in entry.cited_dreams if c != cited_id],
            updated_at=now_iso(),
        )
        self._commit(entries=[updated if e.id == entry_id else e for e in self._entries])
        return True

    def get_cited_entries(self, entry_id: str) -> List[Entry]:
        """Active entries cited by entry_id; dangling ids are skipped."""
        entry = self.get_entry(entry_id)
        if entry is None:
            return []
        cited = set(entry.cited_dreams)
        return [e for e in self._entries if e.id in cited]

    def get_citing_entries(self, entry_id: str) -> List[Entry]:
        """Active entries whose citations include entry_id."""
        return [e for e in self._entries if entry_id in e.cited_dreams]

    # ----- Tags -----

    def _tag_counts(self) -> Dict[str, Dict[str, Any]]:
        counts: Dict[str, Dict[str, Any]] = {}
        for entry in self._entries:
            for tag in entry.tags:
                info = counts.setdefault(
                    tag.id,
                    {"id": tag.id, "label": tag.label, "category_id": tag.category_id, "count": 0},
                )
                info["count"] += 1
        return counts

    def get_all_tags(self) -> List[Dict[str, Any]]:
        """Tags used by active entries as {id, label, count}, most used first."""
        tags = [
            {"id": info["id"], "label": info["label"], "count": info["count"]}
            for info in self._tag_counts().values()
        ]
        return sorted(tags, key=lambda t: t["count"], reverse=True)

    def get_all_tags_with_colors(self) -> List[Dict[str, Any]]:
        """Like get_all_tags, with each tag's category color."""
        tags = [
            {
                "id": info["id"],
                "label": info["label"],
                "count": info["count"],
                "color": resolve_tag_color(info["category_id"], self._categories),
            }
            for info in self._tag_counts().values()
        ]
        return sorted(tags, key=lambda t: t["count"], reverse=True)

    def get_tag_color(self, tag_id_or_category: str) -> CategoryColor:
        return resolve_tag_color(tag_id_or_category, self._categories)

    # ----- Data -----

    def export_data(self) -> Dict[str, List[Dict[str, Any]]]:
        """Serialized snapshot of all three collections."""
        return {
            "dreams": [e.to_dict() for e in self._entries],
            "trashedDreams": [e.to_dict() for e in self._trashed],
            "categories": [c.to_dict() for c in self._categories],
        }

    @log_store_operation("import_data")
    def import_data(
        self,
        dreams: Sequence[Entry],
        trashed: Sequence[Entry] = (),
        categories: Sequence[Category] = (),
    ) -> Dict[str, int]:
        """
        Merge imported records into the store without overwriting anything.

        Any imported id already taken (by an active or trashed entry, or by an
        earlier record of the same batch) is replaced with a fresh id.
        Citations inside the batch that point at a remapped id are rewritten
        to the new id; citations of ids outside the batch are kept as-is.
        Categories whose ids are new are appended.

        Returns:
            Counts: dreams, trashed, categories, remapped
        """
        taken: Set[str] = {e.id for e in self._entries} | {e.id for e in self._trashed}
        mapping: Dict[str, str] = {}
        kept_ids: Set[str] = set()

        staged: List[Entry] = []
        remapped = 0
        for entry in list(dreams) + list(trashed):
            new_id = entry.id
            if new_id in taken:
                remapped += 1
                new_id = generate_id()
                while new_id in taken:
                    new_id = generate_id()
                if entry.id not in kept_ids and entry.id not in mapping:
                    mapping[entry.id] = new_id
            else:
                kept_ids.add(entry.id)
            taken.add(new_id)
            staged.append(entry.copy(id=new_id))

        imported: List[Entry] = []
        for entry in staged:
            cited = [mapping.get(c, c) for c in entry.cited_dreams]
            imported.append(
                entry.copy(cited_dreams=normalize_citations(cited, own_id=entry.id))
            )

        new_entries = [e.copy(deleted_at=None) for e in imported[: len(dreams)]]
        new_trashed = [
            e if e.deleted_at else e.copy(deleted_at=now_iso())
            for e in imported[len(dreams):]
        ]

        existing_categories = {c.id for c in self._categories} | {UNCATEGORIZED_CATEGORY_ID}
        new_categories: List[Category] = []
        for category in categories:
            if category.id not in existing_categories:
                existing_categories.add(category.id)
                new_categories.append(category)

        self._commit(
            entries=self._entries + new_entries,
            trashed=self._trashed + new_trashed,
            categories=self._categories + new_categories,
        )

        summary = {
            "dreams": len(new_entries),
            "trashed": len(new_trashed),
            "categories": len(new_categories),
            "remapped": remapped,
        }
        safe_logger(self.logger).log_info("Data imported", summary)
        return summary

    @log_store_operation("reset_tags")
    def reset_tags(self) -> int:
        """
        Remove every tag from every entry, active and trashed.

        Returns:
            Number of entries that had tags
        """
        now = now_iso()
        changed = 0

        def _clear(entries: List[Entry]) -> List[Entry]:
            nonlocal changed
            result = []
            for entry in entries:
                if entry.tags:
                    changed += 1
                    entry = entry.copy(tags=[], updated_at=now)
                result.append(entry)
            return result

        entries = _clear(self._entries)
        trashed = _clear(self._trashed)
        if changed:
            self._commit(entries=entries, trashed=trashed)
        return changed
