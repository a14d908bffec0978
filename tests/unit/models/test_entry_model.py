"""
test_entry_model.py
-------------------
Unit tests for dreamdiary.models.entry.
"""
import re

from dreamdiary.models.entry import Entry, generate_id
from dreamdiary.models.taxonomy import Tag


class TestGenerateId:
    """Test generate_id."""

    def test_shape(self):
        """Test ids are lowercase base36."""
        assert re.fullmatch(r"[0-9a-z]{12,}", generate_id())

    def test_unique(self):
        """Test ids do not repeat."""
        assert len({generate_id() for _ in range(200)}) == 200


class TestEntry:
    """Test Entry helpers and serialization."""

    def test_tag_queries(self):
        """Test has_tag, has_category and tag_ids."""
        entry = Entry(id="a", tags=[Tag.create("places", "Ocean")])

        assert entry.tag_ids == ["places/ocean"]
        assert entry.has_tag("places/ocean")
        assert not entry.has_tag("places/city")
        assert entry.has_category("places")
        assert not entry.has_category("emotions")

    def test_copy_is_independent(self):
        """Test copy() does not share lists with the original."""
        entry = Entry(id="a", cited_dreams=["b"])
        clone = entry.copy()
        clone.cited_dreams.append("c")

        assert entry.cited_dreams == ["b"]

    def test_copy_applies_changes(self):
        """Test copy() with field changes."""
        entry = Entry(id="a", title="Old")
        assert entry.copy(title="New").title == "New"
        assert entry.title == "Old"

    def test_to_dict_optional_fields(self):
        """Test time and deletedAt are only written when set."""
        data = Entry(id="a", date="2024-01-01").to_dict()
        assert "time" not in data
        assert "deletedAt" not in data

        data = Entry(id="a", time="07:00:00", deleted_at="2024-02-01T00:00:00.000Z").to_dict()
        assert data["time"] == "07:00:00"
        assert data["deletedAt"] == "2024-02-01T00:00:00.000Z"

    def test_to_dict_keeps_extras(self):
        """Test unknown persisted fields are written back."""
        data = Entry(id="a", extras={"mood": 3}).to_dict()
        assert data["mood"] == 3
        assert data["citedDreams"] == []
        assert data["citedTags"] == []

    def test_known_fields_win_over_extras(self):
        """Test extras cannot shadow model fields."""
        data = Entry(id="a", title="Real", extras={"title": "stale"}).to_dict()
        assert data["title"] == "Real"
