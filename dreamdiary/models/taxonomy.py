#!/usr/bin/env python3
"""
taxonomy.py
-----------
Tag and category taxonomy for dream entries.

Tags are category-scoped labels identified by ``<category-slug>/<label-slug>``.
Categories carry a display color, which is either one of fifteen preset
names or a custom ``#RRGGBB`` value:

    CategoryColor = PresetColor | HexColor

``normalize_category_color`` is the only constructor used on untrusted
input; anything it cannot read becomes the uncategorized default.

The ``uncategorized`` category is implicit. It is never stored, and every
lookup of an unknown category falls back to it.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

# --- Local imports ---
from dreamdiary.utils.slugify import slugify


class PresetColor(str, Enum):
    """Named category colors offered by the color picker."""

    CYAN = "cyan"
    PURPLE = "purple"
    PINK = "pink"
    EMERALD = "emerald"
    AMBER = "amber"
    BLUE = "blue"
    INDIGO = "indigo"
    VIOLET = "violet"
    ROSE = "rose"
    TEAL = "teal"
    LIME = "lime"
    ORANGE = "orange"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all preset color names."""
        return [color.value for color in cls]

    @property
    def hex(self) -> str:
        """Swatch value of this preset as #RRGGBB."""
        return PRESET_HEX[self]


PRESET_HEX: Dict[PresetColor, str] = {
    PresetColor.CYAN: "#06B6D4",
    PresetColor.PURPLE: "#A855F7",
    PresetColor.PINK: "#EC4899",
    PresetColor.EMERALD: "#10B981",
    PresetColor.AMBER: "#F59E0B",
    PresetColor.BLUE: "#3B82F6",
    PresetColor.INDIGO: "#6366F1",
    PresetColor.VIOLET: "#8B5CF6",
    PresetColor.ROSE: "#F43F5E",
    PresetColor.TEAL: "#14B8A6",
    PresetColor.LIME: "#84CC16",
    PresetColor.ORANGE: "#F97316",
    PresetColor.RED: "#EF4444",
    PresetColor.GREEN: "#22C55E",
    PresetColor.YELLOW: "#EAB308",
}

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


@dataclass(frozen=True)
class HexColor:
    """A custom category color, always uppercase ``#RRGGBB``."""

    value: str

    def __post_init__(self) -> None:
        if not re.fullmatch(r"#[0-9A-F]{6}", self.value):
            raise ValueError(f"Not a normalized hex color: {self.value!r}")

    @property
    def hex(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


CategoryColor = Union[PresetColor, HexColor]

UNCATEGORIZED_CATEGORY_ID = "uncategorized"
UNCATEGORIZED_COLOR: CategoryColor = PresetColor.VIOLET

FIXED_CATEGORY_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "emotions": {"name": "Emotions", "color": PresetColor.AMBER},
    "characters": {"name": "Characters", "color": PresetColor.INDIGO},
    "places": {"name": "Places", "color": PresetColor.BLUE},
    "dream-types": {"name": "Dream Types", "color": PresetColor.PINK},
}
"""Reserved ids with default display names; a user category of the same id wins."""


def normalize_hex_color(value: str) -> Optional[str]:
    """
    Parse a 3- or 6-digit hex color, with or without '#'.

    Returns:
        Uppercase '#RRGGBB', or None if value is not hex

    Examples:
        >>> normalize_hex_color("abc")
        '#AABBCC'
        >>> normalize_hex_color("#7c3aed")
        '#7C3AED'
    """
    match = _HEX_RE.match(value.strip())
    if not match:
        return None
    digits = match.group(1).upper()
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"#{digits}"


def normalize_category_color(value: Any) -> CategoryColor:
    """
    Normalize any input into a CategoryColor.

    Preset names match exactly (case-sensitive). Hex strings are expanded and
    uppercased. Everything else becomes UNCATEGORIZED_COLOR. The function is
    idempotent, and already-normalized variants are returned unchanged.

    Examples:
        >>> normalize_category_color("amber")
        <PresetColor.AMBER: 'amber'>
        >>> normalize_category_color("f0a")
        HexColor(value='#FF00AA')
        >>> normalize_category_color("Amber")
        <PresetColor.VIOLET: 'violet'>
    """
    if isinstance(value, (PresetColor, HexColor)):
        return value
    if not isinstance(value, str):
        return UNCATEGORIZED_COLOR

    if value in PresetColor.choices():
        return PresetColor(value)

    hex_value = normalize_hex_color(value)
    if hex_value:
        return HexColor(hex_value)

    return UNCATEGORIZED_COLOR


def resolve_category_color_hex(color: Any) -> str:
    """Resolve a color (variant or raw string) to its '#RRGGBB' swatch."""
    return normalize_category_color(color).hex


def color_to_json(color: CategoryColor) -> str:
    """Serialized form of a color: preset name or '#RRGGBB'."""
    return color.value


@dataclass
class Tag:
    """
    A category-scoped label attached to an entry.

    Attributes:
        id: ``<category-slug>/<label-slug>``; equal ids are the same tag
        label: Display label with original casing
        category_id: Category id or UNCATEGORIZED_CATEGORY_ID
        is_custom: True when typed by the user rather than suggested
    """

    id: str
    label: str
    category_id: str = UNCATEGORIZED_CATEGORY_ID
    is_custom: bool = False

    @classmethod
    def create(cls, category_id: Optional[str], label: str, is_custom: bool = False) -> "Tag":
        """Build a tag with its id derived from category and label."""
        category_id = category_id or UNCATEGORIZED_CATEGORY_ID
        label = label.strip()
        return cls(
            id=build_tag_id(category_id, label),
            label=label,
            category_id=category_id,
            is_custom=is_custom,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "categoryId": self.category_id,
            "isCustom": self.is_custom,
        }


@dataclass
class Category:
    """
    A user-defined grouping for tags.

    Attributes:
        id: Stable slug, unique among categories
        name: Trimmed display name
        color: Preset or custom hex color
        created_at: ISO timestamp
        updated_at: ISO timestamp
    """

    id: str
    name: str
    color: CategoryColor = UNCATEGORIZED_COLOR
    created_at: str = ""
    updated_at: str = ""
    extras: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Optional["Category"]:
        """
        Read a persisted category record.

        Returns:
            Category, or None if the record has no usable id
        """
        if not isinstance(raw, Mapping):
            return None
        category_id = raw.get("id")
        if not isinstance(category_id, str) or not category_id.strip():
            return None
        if category_id == UNCATEGORIZED_CATEGORY_ID:
            return None

        name = raw.get("name")
        known = {"id", "name", "color", "createdAt", "updatedAt"}
        return cls(
            id=category_id,
            name=name.strip() if isinstance(name, str) and name.strip() else category_id,
            color=normalize_category_color(raw.get("color")),
            created_at=raw.get("createdAt") if isinstance(raw.get("createdAt"), str) else "",
            updated_at=raw.get("updatedAt") if isinstance(raw.get("updatedAt"), str) else "",
            extras={k: v for k, v in raw.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extras)
        data.update(
            {
                "id": self.id,
                "name": self.name,
                "color": color_to_json(self.color),
                "createdAt": self.created_at,
                "updatedAt": self.updated_at,
            }
        )
        return data


def build_tag_id(category_id: Optional[str], label: str) -> str:
    """
    Build the stable id of a tag.

    Labels that slug identically within one category collapse to one id,
    which is what de-duplicates tags everywhere.

    Examples:
        >>> build_tag_id("Places", "City ")
        'places/city'
        >>> build_tag_id("", "Falling")
        'uncategorized/falling'
    """
    return f"{slugify(category_id or UNCATEGORIZED_CATEGORY_ID)}/{slugify(label)}"


def _find_category(category_id: str, categories: Sequence[Category]) -> Optional[Category]:
    for category in categories:
        if category.id == category_id:
            return category
    return None


def get_category_color(category_id: Optional[str], categories: Sequence[Category]) -> CategoryColor:
    """
    Color of a category; the uncategorized default for the sentinel or unknown ids.

    Never raises on a missing category.
    """
    if not category_id or category_id == UNCATEGORIZED_CATEGORY_ID:
        return UNCATEGORIZED_COLOR
    category = _find_category(category_id, categories)
    return category.color if category else UNCATEGORIZED_COLOR


def get_category_name(
    category_id: Optional[str],
    categories: Sequence[Category],
    uncategorized_label: str = "Uncategorized",
) -> str:
    """
    Display name of a category.

    User categories win over the fixed defaults; unknown ids display as-is.
    """
    if not category_id or category_id == UNCATEGORIZED_CATEGORY_ID:
        return uncategorized_label
    category = _find_category(category_id, categories)
    if category:
        return category.name
    fixed = FIXED_CATEGORY_DEFAULTS.get(category_id)
    if fixed:
        return fixed["name"]
    return category_id


def resolve_tag_color(tag_id_or_category: str, categories: Sequence[Category]) -> CategoryColor:
    """
    Color for a tag id (``category/label``) or a bare category id.

    Tag ids carry the category slug, not the raw category id, so ids whose
    category is not itself a slug resolve to the default color.
    """
    category_id = (tag_id_or_category or "").split("/", 1)[0]
    return get_category_color(category_id, categories)
