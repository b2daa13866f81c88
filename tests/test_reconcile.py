"""Unit tests for user corrections on shopping lists."""

import datetime as dt

import pytest

from recipe2shop.plan.reconcile import (
    add_manual_item,
    apply_remaining_at_home,
    cancel,
    find_items,
    restore,
    set_checked,
)
from recipe2shop.schemas import MealSource, ShoppingListEntry, ShoppingListItem


@pytest.fixture
def source() -> MealSource:
    return MealSource(
        date=dt.date(2025, 1, 6), meal_slot="dinner", recipe_name="Pasta", quantity_needed=3
    )


@pytest.fixture
def entry(source) -> ShoppingListEntry:
    return ShoppingListEntry(
        start_date=dt.date(2025, 1, 6),
        end_date=dt.date(2025, 1, 12),
        items=[
            ShoppingListItem(
                name="Tomato", quantity=3, unit="pc", category="Veg", meal_sources=[source]
            ),
            ShoppingListItem(name="Bread", quantity=1, unit="loaf", category="Bakery"),
        ],
    )


class TestFindItems:
    """Tests for locating items by id or snapshot."""

    def test_by_id(self, entry):
        tomato = entry.items[0]
        assert find_items(entry, tomato.id) == [tomato]

    def test_unknown_id(self, entry):
        assert find_items(entry, "nope") == []

    def test_snapshot_without_known_id(self, entry, source):
        """A snapshot with a foreign id falls back to attribute matching."""
        snapshot = ShoppingListItem(
            name="Tomato", quantity=99, unit="pc", category="Veg", meal_sources=[source]
        )
        assert find_items(entry, snapshot) == [entry.items[0]]

    def test_snapshot_needs_same_sources(self, entry):
        """A manual item never matches a recipe-derived one."""
        snapshot = ShoppingListItem(name="Tomato", quantity=3, unit="pc", category="Veg")
        assert find_items(entry, snapshot) == []


class TestFlags:
    """Tests for check, cancel and restore."""

    def test_check(self, entry):
        item = set_checked(entry, entry.items[0].id, True)
        assert item.checked is True
        assert set_checked(entry, entry.items[0].id, False).checked is False

    def test_check_ignored_on_canceled(self, entry):
        tomato = entry.items[0]
        cancel(entry, tomato.id)
        set_checked(entry, tomato.id, True)
        assert tomato.checked is False
        assert tomato.canceled is True

    def test_cancel_unchecks(self, entry):
        tomato = entry.items[0]
        set_checked(entry, tomato.id, True)
        cancel(entry, tomato.id)
        assert tomato.canceled is True
        assert tomato.checked is False

    def test_restore(self, entry):
        tomato = entry.items[0]
        cancel(entry, tomato.id)
        restored = restore(entry, tomato.id)
        assert restored.canceled is False
        assert restored.checked is False

    def test_unknown_target(self, entry):
        assert set_checked(entry, "missing", True) is None
        assert cancel(entry, "missing") is None
        assert restore(entry, "missing") is None

    def test_snapshot_updates_all_matches(self, entry):
        duplicate = entry.items[1].model_copy(update={"id": "other"})
        entry.items.append(duplicate)
        snapshot = entry.items[1].model_copy(update={"id": "unknown"})

        cancel(entry, snapshot)

        assert entry.items[1].canceled is True
        assert entry.items[2].canceled is True


class TestAddManualItem:
    """Tests for add_manual_item function."""

    def test_defaults(self, entry):
        item = add_manual_item(entry, "  Coffee ")
        assert item.name == "Coffee"
        assert item.quantity == 1.0
        assert item.unit == "piece"
        assert item.category == "Other"
        assert item.is_manual
        assert entry.items[-1] is item

    def test_blank_unit_and_category(self, entry):
        item = add_manual_item(entry, "Salt", 2, unit=" ", category="")
        assert item.unit == "piece"
        assert item.category == "Other"

    def test_negative_quantity_clamped(self, entry):
        assert add_manual_item(entry, "Salt", -3).quantity == 0.0

    def test_blank_name_rejected(self, entry):
        with pytest.raises(ValueError):
            add_manual_item(entry, "   ")
        assert len(entry.items) == 2


class TestRemainingAtHome:
    """Tests for apply_remaining_at_home function."""

    def test_more_at_home_cancels(self, entry):
        """3 needed, 5 at home: nothing to buy, item canceled."""
        tomato = entry.items[0]
        tomato.checked = True

        result = apply_remaining_at_home(entry, tomato.id, 5)

        assert result.auto_canceled is True
        assert tomato.quantity == 0.0
        assert tomato.canceled is True
        assert tomato.checked is False
        assert "canceled" in result.message

    def test_exact_amount_cancels(self, entry):
        result = apply_remaining_at_home(entry, entry.items[0].id, 3)
        assert result.auto_canceled is True
        assert result.item.quantity == 0.0

    def test_partial(self, entry):
        result = apply_remaining_at_home(entry, entry.items[0].id, 1)
        assert result.auto_canceled is False
        assert result.item.quantity == 2.0
        assert result.item.canceled is False
        assert "2 pc" in result.message

    def test_negative_remaining_is_zero(self, entry):
        result = apply_remaining_at_home(entry, entry.items[0].id, -4)
        assert result.item.quantity == 3.0

    def test_canceled_item_still_reduced(self, entry):
        """The quantity is recomputed even when the item is already canceled."""
        tomato = entry.items[0]
        tomato.quantity = 5.0
        cancel(entry, tomato.id)

        result = apply_remaining_at_home(entry, tomato.id, 2)

        assert tomato.quantity == 3.0
        assert tomato.canceled is True
        assert result.auto_canceled is False

    def test_canceled_item_emptied(self, entry):
        tomato = entry.items[0]
        cancel(entry, tomato.id)
        result = apply_remaining_at_home(entry, tomato.id, 10)
        assert result.auto_canceled is True
        assert tomato.quantity == 0.0
        assert tomato.checked is False

    def test_unknown_target(self, entry):
        assert apply_remaining_at_home(entry, "missing", 1) is None


class TestInvariants:
    """Properties that hold after any sequence of corrections."""

    def test_cancel_implies_unchecked_and_non_negative(self, entry):
        tomato, bread = entry.items
        set_checked(entry, tomato.id, True)
        apply_remaining_at_home(entry, bread.id, 10)
        cancel(entry, tomato.id)
        set_checked(entry, tomato.id, True)
        restore(entry, bread.id)
        apply_remaining_at_home(entry, bread.id, 10)

        for item in entry.items:
            assert item.quantity >= 0
            if item.canceled:
                assert item.checked is False
