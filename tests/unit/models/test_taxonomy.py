"""
test_taxonomy.py
----------------
Unit tests for dreamdiary.models.taxonomy.

Tests tag ids, color normalization and category lookups.
"""
import pytest

from dreamdiary.models.taxonomy import (
    FIXED_CATEGORY_DEFAULTS,
    UNCATEGORIZED_COLOR,
    Category,
    HexColor,
    PresetColor,
    Tag,
    build_tag_id,
    color_to_json,
    get_category_color,
    get_category_name,
    normalize_category_color,
    normalize_hex_color,
    resolve_category_color_hex,
    resolve_tag_color,
)


@pytest.fixture
def categories():
    return [
        Category(id="places", name="My Places", color=PresetColor.TEAL),
        Category(id="symbols", name="Symbols", color=HexColor("#7C3AED")),
    ]


class TestBuildTagId:
    """Test build_tag_id."""

    def test_slugs_both_parts(self):
        """Test category and label are slugged."""
        assert build_tag_id("Places", "City ") == "places/city"

    def test_missing_category_is_uncategorized(self):
        """Test None or empty category uses the sentinel."""
        assert build_tag_id(None, "Falling") == "uncategorized/falling"
        assert build_tag_id("", "Falling") == "uncategorized/falling"

    def test_equivalent_labels_collapse(self):
        """Test labels with the same slug share an id."""
        assert build_tag_id("emotions", "Fear & Dread") == build_tag_id("emotions", "fear dread")


class TestTag:
    """Test Tag construction and serialization."""

    def test_create_trims_label(self):
        """Test Tag.create trims and derives the id."""
        tag = Tag.create("places", "  Old House ")
        assert tag.id == "places/old-house"
        assert tag.label == "Old House"
        assert tag.category_id == "places"
        assert tag.is_custom is False

    def test_create_without_category(self):
        """Test Tag.create defaults to uncategorized."""
        tag = Tag.create(None, "Flying", is_custom=True)
        assert tag.category_id == "uncategorized"
        assert tag.is_custom is True

    def test_to_dict_uses_camel_case(self):
        """Test persisted keys."""
        assert Tag.create("places", "Ocean").to_dict() == {
            "id": "places/ocean",
            "label": "Ocean",
            "categoryId": "places",
            "isCustom": False,
        }


class TestColors:
    """Test color normalization."""

    def test_preset_names_exact(self):
        """Test preset names are matched case-sensitively."""
        assert normalize_category_color("amber") is PresetColor.AMBER
        assert normalize_category_color("Amber") is UNCATEGORIZED_COLOR

    @pytest.mark.parametrize(
        "value,expected",
        [("#7c3aed", "#7C3AED"), ("7c3aed", "#7C3AED"), ("f0a", "#FF00AA"), ("#ABC", "#AABBCC")],
    )
    def test_hex_values(self, value, expected):
        """Test hex inputs normalize to uppercase #RRGGBB."""
        assert normalize_category_color(value) == HexColor(expected)

    @pytest.mark.parametrize("value", [None, 42, "", "#12345", "not-a-color", ["amber"]])
    def test_garbage_falls_back(self, value):
        """Test anything unreadable becomes the uncategorized color."""
        assert normalize_category_color(value) is UNCATEGORIZED_COLOR

    def test_idempotent(self):
        """Test normalizing a normalized color returns it unchanged."""
        color = HexColor("#112233")
        assert normalize_category_color(color) is color
        assert normalize_category_color(PresetColor.RED) is PresetColor.RED

    def test_hex_color_rejects_unnormalized(self):
        """Test HexColor only holds normalized values."""
        with pytest.raises(ValueError):
            HexColor("#abc")

    def test_normalize_hex_color(self):
        """Test the raw hex parser."""
        assert normalize_hex_color(" abc ") == "#AABBCC"
        assert normalize_hex_color("xyz") is None

    def test_json_and_hex_forms(self):
        """Test serialized and swatch forms."""
        assert color_to_json(PresetColor.BLUE) == "blue"
        assert color_to_json(HexColor("#010203")) == "#010203"
        assert resolve_category_color_hex("blue") == "#3B82F6"
        assert resolve_category_color_hex("#010203") == "#010203"

    def test_every_preset_has_swatch(self):
        """Test the preset table is complete."""
        assert len(PresetColor.choices()) == 15
        assert all(PresetColor(name).hex.startswith("#") for name in PresetColor.choices())


class TestCategoryLookups:
    """Test category color and name lookups."""

    def test_color_of_known_category(self, categories):
        """Test a known category's color."""
        assert get_category_color("places", categories) is PresetColor.TEAL

    def test_color_of_unknown_or_sentinel(self, categories):
        """Test unknown ids and the sentinel use the default color."""
        assert get_category_color("missing", categories) is UNCATEGORIZED_COLOR
        assert get_category_color("uncategorized", categories) is UNCATEGORIZED_COLOR
        assert get_category_color(None, categories) is UNCATEGORIZED_COLOR

    def test_name_user_category_wins(self, categories):
        """Test user categories win over fixed defaults."""
        assert get_category_name("places", categories) == "My Places"

    def test_name_fixed_default(self, categories):
        """Test fixed ids display their default names when absent."""
        assert get_category_name("dream-types", categories) == FIXED_CATEGORY_DEFAULTS[
            "dream-types"
        ]["name"]

    def test_name_unknown_and_sentinel(self, categories):
        """Test unknown ids display raw, the sentinel its label."""
        assert get_category_name("mystery", categories) == "mystery"
        assert get_category_name("uncategorized", categories) == "Uncategorized"
        assert get_category_name(None, categories, "Misc") == "Misc"

    def test_resolve_tag_color(self, categories):
        """Test tag ids resolve through their category prefix."""
        assert resolve_tag_color("symbols/snake", categories) == HexColor("#7C3AED")
        assert resolve_tag_color("places", categories) is PresetColor.TEAL
        assert resolve_tag_color("", categories) is UNCATEGORIZED_COLOR


class TestCategoryRecords:
    """Test Category persistence."""

    def test_round_trip_keeps_extras(self):
        """Test unknown fields survive from_dict/to_dict."""
        raw = {
            "id": "symbols",
            "name": " Symbols ",
            "color": "teal",
            "createdAt": "2024-01-01T00:00:00.000Z",
            "updatedAt": "2024-01-01T00:00:00.000Z",
            "icon": "snake",
        }
        category = Category.from_dict(raw)

        assert category.name == "Symbols"
        assert category.color is PresetColor.TEAL
        assert category.to_dict()["icon"] == "snake"

    def test_from_dict_rejects_unusable(self):
        """Test records without an id, or the sentinel id, are dropped."""
        assert Category.from_dict({"name": "x"}) is None
        assert Category.from_dict({"id": "  "}) is None
        assert Category.from_dict({"id": "uncategorized"}) is None
        assert Category.from_dict("places") is None

    def test_from_dict_defaults(self):
        """Test missing name falls back to id and bad color to default."""
        category = Category.from_dict({"id": "misc", "color": 12})
        assert category.name == "misc"
        assert category.color is UNCATEGORIZED_COLOR
