#!/usr/bin/env python3
"""
migration.py
------------
Normalization of persisted records and the one-time schema migration.

Persisted data may come from any earlier version of the application:
tags without ids, citation fields missing, categories never created. Every
record read from storage passes through ``normalize_dream``, which is total:
it recovers malformed input with safe defaults instead of raising.

The migration itself is gated by a ``schema.json`` marker stored beside the
data. While the marker is absent or older than CURRENT_SCHEMA_VERSION,
loading writes both entry collections back in normalized form, seeds the
category list when it is empty, and stamps the marker. Once stamped, seeding
never runs again, even if the user later deletes every category.

Usage:
    from dreamdiary.store.migration import load_state

    state = load_state(storage, logger=logger)
    state.entries, state.trashed_entries, state.categories
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

# --- Local imports ---
from dreamdiary.core.logging_manager import DiaryLogger, safe_logger
from dreamdiary.core.validators import DataValidator, now_iso, today_string
from dreamdiary.models.entry import ENTRY_FIELDS, Entry, generate_id
from dreamdiary.models.taxonomy import (
    UNCATEGORIZED_CATEGORY_ID,
    UNCATEGORIZED_COLOR,
    Category,
    CategoryColor,
    PresetColor,
    Tag,
    build_tag_id,
)

from .storage import CATEGORIES, DREAMS, TRASHED_DREAMS, StorageBackend

CURRENT_SCHEMA_VERSION = 2

# Names and colors used by the first releases, keyed by their category ids
LEGACY_CATEGORY_PRESETS: Dict[str, Dict[str, Any]] = {
    "emotions": {"name": "Emotions & Moods", "color": PresetColor.AMBER},
    "characters": {"name": "Characters & Beings", "color": PresetColor.INDIGO},
    "places": {"name": "Places & Environments", "color": PresetColor.BLUE},
    "actions": {"name": "Actions & Events", "color": PresetColor.ORANGE},
    "objects": {"name": "Objects & Items", "color": PresetColor.TEAL},
    "dreamTypes": {"name": "Dream Types & Styles", "color": PresetColor.PINK},
}

DEFAULT_CATEGORY_PRESETS: List[Dict[str, Any]] = [
    {"id": "emotions", "name": "Emotions", "color": PresetColor.AMBER},
    {"id": "characters", "name": "Characters", "color": PresetColor.INDIGO},
    {"id": "places", "name": "Places", "color": PresetColor.BLUE},
    {"id": "dream-types", "name": "Dream Types", "color": PresetColor.PINK},
]


@dataclass
class SchemaVersion:
    """The persisted migration marker."""

    version: int = 0
    categories_seeded: bool = False
    migrated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> "SchemaVersion":
        if not isinstance(raw, Mapping):
            return cls()
        version = raw.get("version")
        return cls(
            version=version if isinstance(version, int) else 0,
            categories_seeded=bool(raw.get("categoriesSeeded")),
            migrated_at=raw.get("migratedAt") if isinstance(raw.get("migratedAt"), str) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "categoriesSeeded": self.categories_seeded,
            "migratedAt": self.migrated_at,
        }

    @property
    def is_current(self) -> bool:
        return self.version >= CURRENT_SCHEMA_VERSION


@dataclass
class StoreState:
    """The three collections held by the entry store."""

    entries: List[Entry] = field(default_factory=list)
    trashed_entries: List[Entry] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)


# ----- Record normalization -----


def normalize_tag(raw: Any) -> Optional[Tag]:
    """
    Normalize a persisted tag record.

    The id is always rebuilt from category and label, so tags written by
    older versions (or with stale ids) collapse onto their canonical id.

    Returns:
        Tag, or None if raw is not a mapping or has no usable label

    Examples:
        >>> normalize_tag({"label": " Ocean ", "categoryId": "places"}).id
        'places/ocean'
        >>> normalize_tag({"label": "  "}) is None
        True
    """
    if not isinstance(raw, Mapping):
        return None

    label_value = raw.get("label")
    label = str(label_value).strip() if label_value is not None else ""
    if not label:
        return None

    category_value = raw.get("categoryId")
    category_id = str(category_value) if category_value else UNCATEGORIZED_CATEGORY_ID

    return Tag(
        id=build_tag_id(category_id, label),
        label=label,
        category_id=category_id,
        is_custom=bool(raw.get("isCustom")),
    )


def normalize_tags(raw_tags: Any) -> List[Tag]:
    """Normalize a tag list, dropping bad tags and duplicate ids (first wins)."""
    if not isinstance(raw_tags, list):
        return []
    seen: Set[str] = set()
    tags: List[Tag] = []
    for raw in raw_tags:
        tag = raw if isinstance(raw, Tag) else normalize_tag(raw)
        if tag is None or tag.id in seen:
            continue
        seen.add(tag.id)
        tags.append(tag)
    return tags


def normalize_citations(raw: Any, own_id: Optional[str] = None) -> List[str]:
    """Keep string items only, de-duplicated in order, without own_id."""
    if not isinstance(raw, list):
        return []
    seen: Set[str] = set()
    result: List[str] = []
    for item in raw:
        if not isinstance(item, str) or item in seen or item == own_id:
            continue
        seen.add(item)
        result.append(item)
    return result


def normalize_dream(raw: Any) -> Entry:
    """
    Normalize one persisted entry record. Never raises.

    Recovery rules:
        - tags normalized and de-duplicated by id, bad tags dropped
        - citedDreams/citedTags default to [], keep strings only,
          de-duplicated, self-citation removed
        - missing or malformed date becomes today's local date
        - malformed time is dropped
        - missing id is replaced with a fresh id
        - unknown fields are kept in ``extras``

    Args:
        raw: Decoded JSON record; non-mappings produce an empty entry

    Returns:
        Normalized Entry
    """
    if not isinstance(raw, Mapping):
        raw = {}

    entry_id = raw.get("id")
    if not isinstance(entry_id, str) or not entry_id.strip():
        entry_id = generate_id()

    created_at = raw.get("createdAt")
    if not isinstance(created_at, str) or not created_at:
        created_at = now_iso()
    updated_at = raw.get("updatedAt")
    if not isinstance(updated_at, str) or not updated_at:
        updated_at = created_at

    deleted_at = raw.get("deletedAt")

    return Entry(
        id=entry_id,
        title=DataValidator.normalize_string(raw.get("title")),
        description=DataValidator.normalize_string(raw.get("description")),
        date=DataValidator.normalize_date(raw.get("date")) or today_string(),
        time=DataValidator.normalize_time(raw.get("time")),
        tags=normalize_tags(raw.get("tags")),
        cited_dreams=normalize_citations(raw.get("citedDreams"), own_id=entry_id),
        cited_tags=normalize_citations(raw.get("citedTags")),
        created_at=created_at,
        updated_at=updated_at,
        deleted_at=deleted_at if isinstance(deleted_at, str) and deleted_at else None,
        extras={k: v for k, v in raw.items() if k not in ENTRY_FIELDS},
    )


def migrate_dreams(raw_list: Any) -> List[Entry]:
    """Normalize a whole collection; non-list input yields []."""
    if not isinstance(raw_list, list):
        return []
    return [normalize_dream(raw) for raw in raw_list]


def load_categories(raw_list: Any) -> List[Category]:
    """Read persisted categories, dropping unusable records and repeated ids."""
    if not isinstance(raw_list, list):
        return []
    seen: Set[str] = set()
    categories: List[Category] = []
    for raw in raw_list:
        category = Category.from_dict(raw)
        if category is None or category.id in seen:
            continue
        seen.add(category.id)
        categories.append(category)
    return categories


# ----- Category seeding -----


def _make_category(category_id: str, name: str, color: CategoryColor) -> Category:
    now = now_iso()
    return Category(id=category_id, name=name, color=color, created_at=now, updated_at=now)


def seed_categories_from_entries(
    entries: Sequence[Entry], trashed: Sequence[Entry]
) -> List[Category]:
    """
    Build the initial category list from the tags already in use.

    Known legacy ids get their historical names and colors; other ids are
    named after themselves in the default color. When no entry carries a
    categorized tag, the starter set is returned instead.

    Returns:
        Categories in order of first appearance
    """
    ids: List[str] = []
    for entry in list(entries) + list(trashed):
        for tag in entry.tags:
            if tag.category_id and tag.category_id != UNCATEGORIZED_CATEGORY_ID:
                if tag.category_id not in ids:
                    ids.append(tag.category_id)

    if ids:
        seeded = []
        for category_id in ids:
            preset = LEGACY_CATEGORY_PRESETS.get(category_id)
            if preset:
                seeded.append(_make_category(category_id, preset["name"], preset["color"]))
            else:
                seeded.append(_make_category(category_id, category_id, UNCATEGORIZED_COLOR))
        return seeded

    return [
        _make_category(preset["id"], preset["name"], preset["color"])
        for preset in DEFAULT_CATEGORY_PRESETS
    ]


# ----- Loading -----


def _reconcile(
    entries: List[Entry], trashed: List[Entry], logger: Optional[DiaryLogger]
) -> None:
    """
    Enforce one home per entry id and the deletedAt invariant, in place.

    Duplicate ids keep their first occurrence; a trashed record whose id is
    also active is dropped.
    """
    seen: Set[str] = set()
    for collection, is_trash in ((entries, False), (trashed, True)):
        kept = []
        for entry in collection:
            if entry.id in seen:
                safe_logger(logger).log_warning(
                    "Dropping duplicate entry id on load",
                    {"id": entry.id, "trashed": is_trash},
                )
                continue
            seen.add(entry.id)
            if is_trash and entry.deleted_at is None:
                entry.deleted_at = entry.updated_at
            elif not is_trash:
                entry.deleted_at = None
            kept.append(entry)
        collection[:] = kept


def load_state(storage: StorageBackend, logger: Optional[DiaryLogger] = None) -> StoreState:
    """
    Load and normalize all collections, migrating them if the marker is old.

    Args:
        storage: Persistence backend
        logger: Optional logger

    Returns:
        StoreState ready for the entry store

    Raises:
        StorageError: If writing back migrated data fails
    """
    log = safe_logger(logger)
    marker = SchemaVersion.from_dict(storage.load_marker())

    entries = migrate_dreams(storage.load_collection(DREAMS))
    trashed = migrate_dreams(storage.load_collection(TRASHED_DREAMS))
    _reconcile(entries, trashed, logger)
    categories = load_categories(storage.load_collection(CATEGORIES))

    if not marker.is_current:
        log.log_info(
            "Migrating stored data",
            {"from_version": marker.version, "to_version": CURRENT_SCHEMA_VERSION},
        )
        storage.save(DREAMS, [entry.to_dict() for entry in entries])
        storage.save(TRASHED_DREAMS, [entry.to_dict() for entry in trashed])

        if not categories and not marker.categories_seeded:
            categories = seed_categories_from_entries(entries, trashed)
            storage.save(CATEGORIES, [category.to_dict() for category in categories])
            log.log_operation("categories_seeded", {"count": len(categories)})

        storage.save_marker(
            SchemaVersion(
                version=CURRENT_SCHEMA_VERSION,
                categories_seeded=True,
                migrated_at=now_iso(),
            ).to_dict()
        )

    log.log_debug(
        "State loaded",
        {
            "entries": len(entries),
            "trashed": len(trashed),
            "categories": len(categories),
        },
    )
    return StoreState(entries=entries, trashed_entries=trashed, categories=categories)
