"""User corrections applied to a shopping list."""

from dataclasses import dataclass

from recipe2shop.logging_config import get_logger
from recipe2shop.normalize.names import normalize_category, normalize_unit
from recipe2shop.normalize.units import format_quantity
from recipe2shop.schemas import ShoppingListEntry, ShoppingListItem

logger = get_logger(__name__)

ItemTarget = str | ShoppingListItem


@dataclass
class RemainingAtHomeResult:
    """Outcome of telling the list how much of an item is already at home."""

    item: ShoppingListItem
    auto_canceled: bool
    message: str | None = None


def find_items(entry: ShoppingListEntry, target: ItemTarget) -> list[ShoppingListItem]:
    """
    Locate the items a user action refers to.

    A target is an item id or an item snapshot. Snapshots are matched by id
    first, then by (name, category, unit, meal_sources), which can match
    several items.
    """
    if isinstance(target, str):
        return [item for item in entry.items if item.id == target]

    by_id = [item for item in entry.items if item.id == target.id]
    if by_id:
        return by_id
    return [item for item in entry.items if item.matches(target)]


def set_checked(
    entry: ShoppingListEntry, target: ItemTarget, checked: bool
) -> ShoppingListItem | None:
    """Check or uncheck an item. Canceled items can't be checked."""
    matches = find_items(entry, target)
    for item in matches:
        if not item.canceled:
            item.checked = checked
    return matches[0] if matches else None


def cancel(entry: ShoppingListEntry, target: ItemTarget) -> ShoppingListItem | None:
    matches = find_items(entry, target)
    for item in matches:
        item.canceled = True
        item.checked = False
    return matches[0] if matches else None


def restore(entry: ShoppingListEntry, target: ItemTarget) -> ShoppingListItem | None:
    matches = find_items(entry, target)
    for item in matches:
        item.canceled = False
        item.checked = False
    return matches[0] if matches else None


def add_manual_item(
    entry: ShoppingListEntry,
    name: str,
    quantity: float = 1.0,
    unit: str | None = None,
    category: str | None = None,
) -> ShoppingListItem:
    """
    Append an item typed by the user.

    Raises:
        ValueError: If the name is blank.
    """
    if not name or not name.strip():
        raise ValueError("Item name must not be blank")

    item = ShoppingListItem(
        name=name.strip(),
        quantity=max(0.0, quantity),
        unit=normalize_unit(unit).strip(),
        category=normalize_category(category).strip(),
    )
    entry.items.append(item)
    logger.debug(f"Added manual item {item.name!r} to list {entry.id}")
    return item


def apply_remaining_at_home(
    entry: ShoppingListEntry, target: ItemTarget, remaining: float
) -> RemainingAtHomeResult | None:
    """
    Reduce an item by the quantity already at home.

    When nothing is left to buy the item is also canceled and unchecked, and
    the message says so.
    """
    matches = find_items(entry, target)
    if not matches:
        return None

    remaining = max(0.0, remaining)
    results: list[RemainingAtHomeResult] = []
    for item in matches:
        left_to_buy = item.quantity - remaining
        item.quantity = max(0.0, left_to_buy)
        if left_to_buy <= 0:
            item.canceled = True
            item.checked = False
            message = f"{item.name} canceled: enough at home"
            results.append(RemainingAtHomeResult(item, auto_canceled=True, message=message))
        else:
            message = f"{item.name}: {format_quantity(item.quantity)} {item.unit} left to buy"
            results.append(RemainingAtHomeResult(item, auto_canceled=False, message=message))

    return results[0]
