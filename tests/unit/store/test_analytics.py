"""
test_analytics.py
-----------------
Unit tests for dreamdiary.store.analytics.

Tests tag counts, co-occurrence, relationship strength and category
summaries over the sample entries:

    a: ocean, fear
    b: ocean
    c: fear, flying
    d: (no tags)
"""
import pytest
from unittest.mock import MagicMock

from dreamdiary.core.logging_manager import DiaryLogger
from dreamdiary.models import Category, PresetColor, Tag
from dreamdiary.store.analytics import (
    TagAnalytics,
    compute_category_summaries,
    compute_tag_relationships,
    compute_tag_stats,
)


@pytest.fixture
def categories():
    return [
        Category(id="places", name="Places", color=PresetColor.BLUE),
        Category(id="characters", name="Characters", color=PresetColor.INDIGO),
    ]


@pytest.fixture
def stats(sample_entries, categories):
    return {s.id: s for s in compute_tag_stats(sample_entries, categories)}


class TestTagStats:
    """Test compute_tag_stats."""

    def test_counts_and_percentages(self, stats):
        """Test usage counts and share of entries."""
        assert stats["places/ocean"].count == 2
        assert stats["emotions/fear"].count == 2
        assert stats["uncategorized/flying"].count == 1
        assert stats["places/ocean"].percentage == pytest.approx(50.0)
        assert stats["uncategorized/flying"].percentage == pytest.approx(25.0)

    def test_sorted_by_count(self, sample_entries, categories):
        """Test most used first, ties in first-encounter order."""
        result = compute_tag_stats(sample_entries, categories)
        assert [s.id for s in result] == ["places/ocean", "emotions/fear", "uncategorized/flying"]

    def test_co_occurrence_symmetric(self, stats):
        """Test co-occurrence counts agree in both directions."""
        assert stats["places/ocean"].co_occurrences == {"emotions/fear": 1}
        assert stats["emotions/fear"].co_occurrences == {
            "places/ocean": 1,
            "uncategorized/flying": 1,
        }
        for source in stats.values():
            for target_id, count in source.co_occurrences.items():
                assert stats[target_id].co_occurrences[source.id] == count

    def test_names_and_colors(self, stats):
        """Test names and colors come from the tag's category."""
        assert stats["places/ocean"].category_name == "Places"
        assert stats["places/ocean"].color is PresetColor.BLUE
        # emotions is not a user category here: fixed name, default color
        assert stats["emotions/fear"].category_name == "Emotions"
        assert stats["emotions/fear"].color is PresetColor.VIOLET
        assert stats["uncategorized/flying"].category_name == "Uncategorized"

    def test_repeated_tag_counted_once(self, entry_factory, categories):
        """Test a tag listed twice on one entry counts once."""
        ocean = Tag.create("places", "Ocean")
        result = compute_tag_stats([entry_factory("x", tags=[ocean, ocean])], categories)
        assert result[0].count == 1
        assert result[0].co_occurrences == {}

    def test_no_entries(self, categories):
        """Test empty input."""
        assert compute_tag_stats([], categories) == []


class TestRelationships:
    """Test compute_tag_relationships."""

    def test_one_per_pair(self, sample_entries, categories):
        """Test each co-occurring pair appears once."""
        relationships = compute_tag_relationships(compute_tag_stats(sample_entries, categories))

        pairs = {frozenset((r.source, r.target)) for r in relationships}
        assert pairs == {
            frozenset(("places/ocean", "emotions/fear")),
            frozenset(("emotions/fear", "uncategorized/flying")),
        }
        assert len(relationships) == 2

    def test_strength_uses_smaller_count(self, sample_entries, categories):
        """Test strength is co-occurrence over the smaller count."""
        relationships = compute_tag_relationships(compute_tag_stats(sample_entries, categories))
        by_pair = {frozenset((r.source, r.target)): r for r in relationships}

        assert by_pair[frozenset(("emotions/fear", "uncategorized/flying"))].strength == 1.0
        assert by_pair[frozenset(("places/ocean", "emotions/fear"))].strength == 0.5
        assert relationships[0].strength >= relationships[1].strength
        assert all(0 < r.strength <= 1 for r in relationships)

    def test_strength_symmetric(self, sample_entries, categories):
        """Test strength does not depend on input order."""
        forward = compute_tag_relationships(compute_tag_stats(sample_entries, categories))
        backward = compute_tag_relationships(
            compute_tag_stats(list(reversed(sample_entries)), categories)
        )

        def as_map(rels):
            return {frozenset((r.source, r.target)): r.strength for r in rels}

        assert as_map(forward) == as_map(backward)


class TestCategorySummaries:
    """Test compute_category_summaries."""

    def test_summaries(self, sample_entries, categories):
        """Test totals, sentinel presence and unknown categories."""
        summaries = {
            s.category_id: s
            for s in compute_category_summaries(
                compute_tag_stats(sample_entries, categories), categories
            )
        }

        assert summaries["places"].total_tags == 1
        assert summaries["places"].total_usage == 2
        assert summaries["characters"].total_usage == 0
        assert summaries["uncategorized"].total_usage == 1
        assert summaries["emotions"].category_name == "Emotions"
        assert summaries["emotions"].color is PresetColor.VIOLET

    def test_top_n(self, entry_factory, categories):
        """Test most_used_tags is capped and ranked."""
        entries = [
            entry_factory(str(i), tags=[Tag.create("places", f"P{j}") for j in range(i + 1)])
            for i in range(4)
        ]
        summaries = compute_category_summaries(
            compute_tag_stats(entries, categories), categories, top_n=2
        )

        places = next(s for s in summaries if s.category_id == "places")
        assert places.total_tags == 4
        assert [t.label for t in places.most_used_tags] == ["P0", "P1"]

    def test_sorted_by_usage(self, sample_entries, categories):
        """Test summaries are ordered by total usage."""
        summaries = compute_category_summaries(
            compute_tag_stats(sample_entries, categories), categories
        )
        usages = [s.total_usage for s in summaries]
        assert usages == sorted(usages, reverse=True)


class TestTagAnalytics:
    """Test the TagAnalytics facade."""

    def test_overview(self, sample_entries, categories):
        """Test headline numbers."""
        mock_logger = MagicMock(spec=DiaryLogger)
        analytics = TagAnalytics(sample_entries, categories, logger=mock_logger)

        overview = analytics.get_overview()

        assert overview == {
            "total_entries": 4,
            "total_tags": 3,
            "total_relationships": 2,
            "tagged_entries": 3,
            "most_used_tag": "places/ocean",
        }
        mock_logger.log_debug.assert_called_once()

    def test_results_cached(self, sample_entries, categories):
        """Test stats are computed once."""
        analytics = TagAnalytics(sample_entries, categories)
        assert analytics.tag_stats is analytics.tag_stats

    def test_to_dict(self, sample_entries, categories):
        """Test the JSON form."""
        data = TagAnalytics(sample_entries, categories, uncategorized_label="Misc").to_dict()

        assert set(data) == {"overview", "tags", "relationships", "categories"}
        flying = next(t for t in data["tags"] if t["id"] == "uncategorized/flying")
        assert flying["categoryName"] == "Misc"
        assert flying["color"] == "violet"

    def test_empty_overview(self, categories):
        """Test no entries."""
        overview = TagAnalytics([], categories).get_overview()
        assert overview["most_used_tag"] is None
        assert overview["total_entries"] == 0
