"""
models package
--------------
Plain data records for the dream diary: entries, tags and categories.

    from dreamdiary.models import Entry, Tag, Category, build_tag_id
"""
from dreamdiary.models.entry import Entry, generate_id
from dreamdiary.models.taxonomy import (
    UNCATEGORIZED_CATEGORY_ID,
    UNCATEGORIZED_COLOR,
    Category,
    CategoryColor,
    HexColor,
    PresetColor,
    Tag,
    build_tag_id,
    get_category_color,
    get_category_name,
    normalize_category_color,
    resolve_category_color_hex,
    resolve_tag_color,
)

__all__ = [
    "Entry",
    "generate_id",
    "UNCATEGORIZED_CATEGORY_ID",
    "UNCATEGORIZED_COLOR",
    "Category",
    "CategoryColor",
    "HexColor",
    "PresetColor",
    "Tag",
    "build_tag_id",
    "get_category_color",
    "get_category_name",
    "normalize_category_color",
    "resolve_category_color_hex",
    "resolve_tag_color",
]
