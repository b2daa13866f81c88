"""Unit tests for emoji lookups."""

import pytest

from recipe2shop.plan.lookups import (
    OTHER_EMOJI,
    CategoryEmojiLookup,
    IngredientEmojiLookup,
    load_ingredient_emojis,
)


class TestCategoryEmojiLookup:
    """Tests for CategoryEmojiLookup."""

    def test_case_insensitive(self):
        lookup = CategoryEmojiLookup()
        assert lookup.get_emoji("Viandes") == "🥩"
        assert lookup.get_emoji("  POISSONS ") == "🐟"
        assert lookup.get_emoji("Dairy") == "🥛"

    def test_fallback(self):
        lookup = CategoryEmojiLookup()
        assert lookup.get_emoji("Unknown aisle") == OTHER_EMOJI
        assert lookup.get_emoji("") == OTHER_EMOJI
        assert lookup.get_emoji(None) == OTHER_EMOJI

    def test_format_category(self):
        lookup = CategoryEmojiLookup()
        assert lookup.format_category("Fromages") == "🧀 Fromages"
        assert lookup.format_category("") == "📦 Other"

    def test_custom_mapping(self):
        lookup = CategoryEmojiLookup({"Snacks": "🍿"})
        assert lookup.get_emoji("snacks") == "🍿"
        assert lookup.get_emoji("Viandes") == OTHER_EMOJI


class TestIngredientEmojiLookup:
    """Tests for IngredientEmojiLookup."""

    @pytest.fixture
    def lookup(self) -> IngredientEmojiLookup:
        return IngredientEmojiLookup({"tomato": "🍅", "Garlic": "🧄", "cheese": "🧀"})

    def test_emoji_for(self, lookup):
        assert lookup.emoji_for("Garlic ") == "🧄"
        assert lookup.emoji_for("onion") is None

    def test_suggestions_word_matches_first(self, lookup):
        assert lookup.suggestions("Cheese and tomato") == ["🧀", "🍅", "🧄"]

    def test_suggestions_blank(self, lookup):
        assert lookup.suggestions("  ") == []

    def test_emoji_for_name(self, lookup):
        assert lookup.emoji_for_name("Cherry tomato") == "🍅"
        assert lookup.emoji_for_name("Bread") is None

    def test_json_round_trip(self, lookup):
        restored = IngredientEmojiLookup.from_json(lookup.to_json())
        assert restored.as_dict() == lookup.as_dict()

    def test_from_json_rejects_lists(self):
        with pytest.raises(ValueError):
            IngredientEmojiLookup.from_json("[1, 2]")


class TestLoadIngredientEmojis:
    """Tests for load_ingredient_emojis function."""

    def test_bundled_dictionary(self):
        lookup = load_ingredient_emojis()
        assert lookup.emoji_for_name("Cherry tomatoes") == "🍅"
        assert lookup.emoji_for_name("Eggs") == "🥚"
        assert lookup.emoji_for("Lardons") == "🥓"

    def test_custom_file(self, tmp_path):
        path = tmp_path / "emojis.json"
        path.write_text('{"kale": "🥬"}', encoding="utf-8")

        lookup = load_ingredient_emojis(str(path))

        assert lookup.as_dict() == {"kale": "🥬"}
        assert lookup.emoji_for_name("Tomato") is None
