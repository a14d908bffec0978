#!/usr/bin/env python3
"""
analytics.py
------------
Tag usage statistics for dream entries.

Provides pure functions over a list of entries plus the TagAnalytics class,
which bundles them for a store and adds an overview.

Statistics:
    - compute_tag_stats: Usage count, percentage and co-occurrence per tag
    - compute_tag_relationships: Pairwise co-occurrence strength
    - compute_category_summaries: Per-category totals and top tags

Co-occurrence is counted once per entry for each unordered pair of distinct
tag ids, so the map is symmetric. Relationship strength is the co-occurrence
count divided by the smaller of the two tag counts, which lies in [0, 1].
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

# --- Local imports ---
from dreamdiary.core.logging_manager import DiaryLogger, safe_logger
from dreamdiary.models.entry import Entry
from dreamdiary.models.taxonomy import (
    UNCATEGORIZED_CATEGORY_ID,
    UNCATEGORIZED_COLOR,
    Category,
    CategoryColor,
    color_to_json,
    get_category_color,
    get_category_name,
)


@dataclass
class TagStats:
    """Usage of one tag across a set of entries."""

    id: str
    label: str
    category_id: str
    category_name: str
    color: CategoryColor
    is_custom: bool
    count: int = 0
    percentage: float = 0.0
    co_occurrences: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "categoryId": self.category_id,
            "categoryName": self.category_name,
            "color": color_to_json(self.color),
            "isCustom": self.is_custom,
            "count": self.count,
            "percentage": self.percentage,
            "coOccurrences": dict(self.co_occurrences),
        }


@dataclass
class TagRelationship:
    """Two tags that appear together; reported once per unordered pair."""

    source: str
    target: str
    source_label: str
    target_label: str
    source_category: str
    target_category: str
    count: int
    strength: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "sourceLabel": self.source_label,
            "targetLabel": self.target_label,
            "sourceCategory": self.source_category,
            "targetCategory": self.target_category,
            "count": self.count,
            "strength": self.strength,
        }


@dataclass
class CategorySummary:
    """Totals and most used tags of one category."""

    category_id: str
    category_name: str
    color: CategoryColor
    total_tags: int = 0
    total_usage: int = 0
    most_used_tags: List[TagStats] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categoryId": self.category_id,
            "categoryName": self.category_name,
            "color": color_to_json(self.color),
            "totalTags": self.total_tags,
            "totalUsage": self.total_usage,
            "mostUsedTags": [tag.to_dict() for tag in self.most_used_tags],
        }


def compute_tag_stats(
    entries: Sequence[Entry],
    categories: Sequence[Category],
    uncategorized_label: str = "Uncategorized",
) -> List[TagStats]:
    """
    Count tag usage and co-occurrence.

    Args:
        entries: Entries to analyze
        categories: User categories, for names and colors
        uncategorized_label: Display name of the uncategorized sentinel

    Returns:
        Stats sorted by count descending; ties keep first-encounter order
    """
    stats: Dict[str, TagStats] = {}

    for entry in entries:
        seen: List[str] = []
        for tag in entry.tags:
            if tag.id in seen:
                continue
            seen.append(tag.id)
            if tag.id not in stats:
                stats[tag.id] = TagStats(
                    id=tag.id,
                    label=tag.label,
                    category_id=tag.category_id,
                    category_name=get_category_name(
                        tag.category_id, categories, uncategorized_label
                    ),
                    color=get_category_color(tag.category_id, categories),
                    is_custom=tag.is_custom,
                )
            stats[tag.id].count += 1

        for index, source in enumerate(seen):
            for target in seen[index + 1:]:
                source_map = stats[source].co_occurrences
                target_map = stats[target].co_occurrences
                source_map[target] = source_map.get(target, 0) + 1
                target_map[source] = target_map.get(source, 0) + 1

    total = len(entries)
    for tag_stats in stats.values():
        tag_stats.percentage = (tag_stats.count / total) * 100 if total else 0.0

    return sorted(stats.values(), key=lambda s: s.count, reverse=True)


def compute_tag_relationships(stats: Sequence[TagStats]) -> List[TagRelationship]:
    """
    Pairwise relationships between co-occurring tags.

    Returns:
        One relationship per unordered pair with co-occurrence > 0,
        sorted by strength descending
    """
    relationships: List[TagRelationship] = []
    for index, left in enumerate(stats):
        for right in stats[index + 1:]:
            count = left.co_occurrences.get(right.id, 0)
            if count <= 0:
                continue
            relationships.append(
                TagRelationship(
                    source=left.id,
                    target=right.id,
                    source_label=left.label,
                    target_label=right.label,
                    source_category=left.category_id,
                    target_category=right.category_id,
                    count=count,
                    strength=count / min(left.count, right.count),
                )
            )
    return sorted(relationships, key=lambda r: r.strength, reverse=True)


def compute_category_summaries(
    stats: Sequence[TagStats],
    categories: Sequence[Category],
    top_n: int = 5,
    uncategorized_label: str = "Uncategorized",
) -> List[CategorySummary]:
    """
    Summarize tag usage per category.

    The uncategorized sentinel and every user category appear even when
    unused. Tags of categories no longer in the list get their own summary
    in the default color.

    Returns:
        Summaries sorted by total usage descending
    """
    summaries: Dict[str, CategorySummary] = {
        UNCATEGORIZED_CATEGORY_ID: CategorySummary(
            category_id=UNCATEGORIZED_CATEGORY_ID,
            category_name=uncategorized_label,
            color=UNCATEGORIZED_COLOR,
        )
    }
    for category in categories:
        summaries[category.id] = CategorySummary(
            category_id=category.id,
            category_name=category.name,
            color=category.color,
        )

    for tag_stats in stats:
        summary = summaries.get(tag_stats.category_id)
        if summary is None:
            summary = summaries[tag_stats.category_id] = CategorySummary(
                category_id=tag_stats.category_id,
                category_name=get_category_name(
                    tag_stats.category_id, categories, uncategorized_label
                ),
                color=UNCATEGORIZED_COLOR,
            )
        summary.total_tags += 1
        summary.total_usage += tag_stats.count
        summary.most_used_tags.append(tag_stats)

    for summary in summaries.values():
        ranked = sorted(summary.most_used_tags, key=lambda s: s.count, reverse=True)
        summary.most_used_tags = ranked[:top_n]

    return sorted(summaries.values(), key=lambda s: s.total_usage, reverse=True)


class TagAnalytics:
    """
    Tag analytics over a fixed snapshot of entries and categories.

    Results are computed on first access and cached, since the inputs are
    not expected to change during the object's lifetime.
    """

    def __init__(
        self,
        entries: Sequence[Entry],
        categories: Sequence[Category],
        logger: Optional[DiaryLogger] = None,
        top_n: int = 5,
        uncategorized_label: str = "Uncategorized",
    ) -> None:
        """
        Initialize tag analytics.

        Args:
            entries: Entries to analyze (usually the active entries)
            categories: User categories
            logger: Optional logger
            top_n: Tags kept per category summary
            uncategorized_label: Display name of the sentinel category
        """
        self.entries = list(entries)
        self.categories = list(categories)
        self.logger = logger
        self.top_n = top_n
        self.uncategorized_label = uncategorized_label
        self._stats: Optional[List[TagStats]] = None
        self._relationships: Optional[List[TagRelationship]] = None

    @property
    def tag_stats(self) -> List[TagStats]:
        if self._stats is None:
            self._stats = compute_tag_stats(
                self.entries, self.categories, self.uncategorized_label
            )
        return self._stats

    @property
    def relationships(self) -> List[TagRelationship]:
        if self._relationships is None:
            self._relationships = compute_tag_relationships(self.tag_stats)
        return self._relationships

    def category_summaries(self) -> List[CategorySummary]:
        return compute_category_summaries(
            self.tag_stats,
            self.categories,
            top_n=self.top_n,
            uncategorized_label=self.uncategorized_label,
        )

    def get_overview(self) -> Dict[str, Any]:
        """
        Headline numbers for the analytics view.

        Returns:
            Dictionary with total_entries, total_tags, total_relationships,
            tagged_entries and most_used_tag (id or None)
        """
        stats = self.tag_stats
        overview = {
            "total_entries": len(self.entries),
            "total_tags": len(stats),
            "total_relationships": len(self.relationships),
            "tagged_entries": sum(1 for entry in self.entries if entry.tags),
            "most_used_tag": stats[0].id if stats else None,
        }
        safe_logger(self.logger).log_debug("Computed tag analytics overview", overview)
        return overview

    def to_dict(self) -> Dict[str, Any]:
        """Everything at once, in JSON-ready form."""
        return {
            "overview": self.get_overview(),
            "tags": [s.to_dict() for s in self.tag_stats],
            "relationships": [r.to_dict() for r in self.relationships],
            "categories": [c.to_dict() for c in self.category_summaries()],
        }
