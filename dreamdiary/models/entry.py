#!/usr/bin/env python3
"""
entry.py
--------
The dream entry record.

Entries are persisted as camelCase JSON objects shared with the desktop
application. Fields this module does not know about are kept in ``extras``
and written back untouched, so records written by newer versions survive a
round trip through older code.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import secrets
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

# --- Local imports ---
from .taxonomy import Tag

ENTRY_FIELDS = {
    "id": "id",
    "title": "title",
    "description": "description",
    "date": "date",
    "time": "time",
    "tags": "tags",
    "citedDreams": "cited_dreams",
    "citedTags": "cited_tags",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "deletedAt": "deleted_at",
}
"""JSON key -> attribute name for every field the model understands."""

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(number: int) -> str:
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits)) or "0"


def generate_id() -> str:
    """
    Generate an opaque entry id: base36 milliseconds plus random base36 suffix.

    Matches the shape of ids created by the desktop application.
    """
    suffix = "".join(secrets.choice(_BASE36) for _ in range(11))
    return _to_base36(int(time.time() * 1000)) + suffix


@dataclass
class Entry:
    """
    A single dream diary record.

    Attributes:
        id: Opaque unique id, immutable after creation
        title: Free text
        description: Free text
        date: Local calendar date, YYYY-MM-DD
        time: Optional local time, HH:MM:SS
        tags: Tags, unique by tag id
        cited_dreams: Ids of entries this entry cites (no self, no duplicates)
        cited_tags: Tag ids referenced inline
        created_at: ISO timestamp
        updated_at: ISO timestamp, bumped on every mutation
        deleted_at: Set only while the entry is in the trash
        extras: Unknown persisted fields, passed through on save
    """

    id: str
    title: str = ""
    description: str = ""
    date: str = ""
    time: Optional[str] = None
    tags: List[Tag] = field(default_factory=list)
    cited_dreams: List[str] = field(default_factory=list)
    cited_tags: List[str] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""
    deleted_at: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def tag_ids(self) -> List[str]:
        return [tag.id for tag in self.tags]

    def has_tag(self, tag_id: str) -> bool:
        return any(tag.id == tag_id for tag in self.tags)

    def has_category(self, category_id: str) -> bool:
        return any(tag.category_id == category_id for tag in self.tags)

    def copy(self, **changes: Any) -> "Entry":
        """Return a copy with fresh lists, applying any field changes."""
        base = replace(
            self,
            tags=list(self.tags),
            cited_dreams=list(self.cited_dreams),
            cited_tags=list(self.cited_tags),
            extras=dict(self.extras),
        )
        return replace(base, **changes) if changes else base

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted camelCase form."""
        data = dict(self.extras)
        data.update(
            {
                "id": self.id,
                "title": self.title,
                "date": self.date,
                "description": self.description,
                "tags": [tag.to_dict() for tag in self.tags],
                "citedDreams": list(self.cited_dreams),
                "citedTags": list(self.cited_tags),
                "createdAt": self.created_at,
                "updatedAt": self.updated_at,
            }
        )
        if self.time is not None:
            data["time"] = self.time
        if self.deleted_at is not None:
            data["deletedAt"] = self.deleted_at
        return data
