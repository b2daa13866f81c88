"""Unit tests for shopping list presentation."""

import datetime as dt

import pytest

from recipe2shop.plan.formatting import (
    build_printable,
    display_quantity,
    format_date_range,
    format_item_line,
    group_items_for_display,
    has_fractional_sources,
    render_text,
    source_breakdown,
)
from recipe2shop.plan.lookups import CategoryEmojiLookup, IngredientEmojiLookup
from recipe2shop.schemas import MealSource, ShoppingListEntry, ShoppingListItem

MONDAY = dt.date(2025, 1, 6)


def _source(quantity: float, day: dt.date = MONDAY, slot: str = "dinner") -> MealSource:
    return MealSource(date=day, meal_slot=slot, recipe_name="Pasta", quantity_needed=quantity)


def _item(name: str, category: str = "Veg", quantity: float = 1, **kwargs) -> ShoppingListItem:
    return ShoppingListItem(name=name, category=category, quantity=quantity, **kwargs)


class TestGrouping:
    """Tests for group_items_for_display function."""

    def test_sorted_case_insensitive(self):
        items = [_item("Milk", "dairy"), _item("Apple", "Fruit"), _item("Bread", "Bakery")]
        groups = group_items_for_display(items)
        assert [g.label for g in groups] == ["Bakery", "dairy", "Fruit"]

    def test_case_variants_share_group(self):
        items = [_item("Carrot", "veg"), _item("Leek", "Veg")]
        [group] = group_items_for_display(items)
        assert group.label == "veg"
        assert [i.name for i in group.items] == ["Carrot", "Leek"]

    def test_canceled_group_last(self):
        """Canceled items come last even when their label sorts first."""
        items = [
            _item("Zucchini", "Zoo"),
            _item("Apple", "Aisle", canceled=True),
            _item("Milk", "Dairy"),
        ]
        groups = group_items_for_display(items, canceled_label="Annulés")
        assert [g.label for g in groups] == ["Dairy", "Zoo", "Annulés"]
        assert groups[-1].canceled is True
        assert [i.name for i in groups[-1].items] == ["Apple"]

    def test_no_canceled_group_when_empty(self):
        groups = group_items_for_display([_item("Milk", "Dairy")])
        assert [g.canceled for g in groups] == [False]

    def test_default_canceled_label(self):
        groups = group_items_for_display([_item("Milk", canceled=True)])
        assert groups[0].label == "Canceled"

    def test_emoji_headings(self):
        groups = group_items_for_display(
            [_item("Steak", "Viandes"), _item("Thing", "Misc")],
            category_emojis=CategoryEmojiLookup(),
        )
        assert [g.heading for g in groups] == ["📦 Misc", "🥩 Viandes"]


class TestDisplayQuantity:
    """Tests for the rounding asymmetry between recipe and manual items."""

    def test_recipe_items_round_up(self):
        item = _item("Tomato", quantity=2.25, meal_sources=[_source(2.25)])
        assert display_quantity(item) == "3"

    def test_recipe_items_float_noise(self):
        item = _item("Tomato", quantity=2.00003, meal_sources=[_source(2.00003)])
        assert display_quantity(item) == "2"

    def test_manual_items_not_rounded(self):
        assert display_quantity(_item("Cheese", quantity=2.5)) == "2.5"
        assert display_quantity(_item("Cheese", quantity=2.00003)) == "2"

    def test_item_line(self):
        item = _item("Tomato", quantity=1.5, unit="pc", meal_sources=[_source(1.5)])
        assert format_item_line(item) == "☐ Tomato : 2 pc"
        item.checked = True
        assert format_item_line(item, emoji="🍅") == "☑ 🍅 Tomato : 2 pc"


class TestSourceBreakdown:
    """Tests for per-meal breakdowns."""

    def test_lines(self):
        item = _item(
            "Tomato",
            quantity=2.5,
            unit="pc",
            meal_sources=[_source(1.3333), _source(1.1667, MONDAY + dt.timedelta(days=1), "lunch")],
        )
        assert source_breakdown(item) == [
            "1.3 pc - Pasta (Monday 06-01, Dinner)",
            "1.2 pc - Pasta (Tuesday 07-01, Lunch)",
        ]

    def test_fractional_sources(self):
        assert has_fractional_sources(_item("A", meal_sources=[_source(1.5)])) is True
        assert has_fractional_sources(_item("A", meal_sources=[_source(2)])) is False
        assert has_fractional_sources(_item("A")) is False

    def test_date_range(self):
        assert (
            format_date_range(MONDAY, MONDAY + dt.timedelta(days=6))
            == "Monday 06-01-2025 - Sunday 12-01-2025"
        )


class TestPrintable:
    """Tests for the print and text export model."""

    @pytest.fixture
    def entry(self) -> ShoppingListEntry:
        return ShoppingListEntry(
            start_date=MONDAY,
            end_date=MONDAY + dt.timedelta(days=6),
            items=[
                _item("Tomato", "Veg", 3.5, unit="pc", meal_sources=[_source(3.5)]),
                _item("Bread", "Bakery", 1, unit="loaf", checked=True),
                _item("Milk", "Dairy", 2, unit="l", canceled=True),
            ],
        )

    def test_sections(self, entry):
        printable = build_printable(entry, title="Groceries")
        assert printable.title == "Groceries"
        assert printable.subtitle == "Monday 06-01-2025 - Sunday 12-01-2025"
        assert [s.heading for s in printable.sections] == ["Bakery", "Veg", "Canceled"]
        assert printable.sections[0].lines[0].checked is True
        assert printable.sections[1].lines[0].text == "☐ Tomato : 4 pc"
        assert printable.sections[2].lines[0].struck is True

    def test_ingredient_emojis(self, entry):
        emojis = IngredientEmojiLookup({"tomato": "🍅"})
        printable = build_printable(entry, ingredient_emojis=emojis)
        assert printable.sections[1].lines[0].text == "☐ 🍅 Tomato : 4 pc"

    def test_render_text(self, entry):
        text = render_text(entry, title="Groceries")
        assert text.splitlines() == [
            "Groceries",
            "Monday 06-01-2025 - Sunday 12-01-2025",
            "",
            "Bakery",
            "☑ Bread : 1 loaf",
            "",
            "Veg",
            "☐ Tomato : 4 pc",
            "",
            "Canceled",
            "~~☐ Milk : 2 l~~",
        ]
