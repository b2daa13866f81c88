"""Presentation of shopping lists: grouping, display quantities and text export."""

import datetime as dt
from dataclasses import dataclass, field

from recipe2shop.config import settings
from recipe2shop.normalize.names import DEFAULT_CATEGORY, normalize_unit
from recipe2shop.normalize.units import (
    format_quantity,
    format_quantity_one_decimal,
    is_whole,
    round_up_quantity,
)
from recipe2shop.plan.lookups import CategoryEmojiLookup, IngredientEmojiLookup
from recipe2shop.schemas import ShoppingListEntry, ShoppingListItem

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
SLOT_LABELS = {"lunch": "Lunch", "dinner": "Dinner"}
DATE_FORMAT = "%d-%m-%Y"
SHORT_DATE_FORMAT = "%d-%m"

CHECKED_BOX = "☑"
UNCHECKED_BOX = "☐"


@dataclass
class CategoryGroup:
    """Items shown under one category heading."""

    label: str
    items: list[ShoppingListItem] = field(default_factory=list)
    emoji: str | None = None
    canceled: bool = False

    @property
    def heading(self) -> str:
        return f"{self.emoji} {self.label}" if self.emoji else self.label


def group_items_for_display(
    items: list[ShoppingListItem],
    category_emojis: CategoryEmojiLookup | None = None,
    canceled_label: str | None = None,
) -> list[CategoryGroup]:
    """
    Group items by category for display.

    Active items are grouped by category, sorted case-insensitively. Canceled
    items always come last in their own group, whatever its label.
    """
    if canceled_label is None:
        canceled_label = settings.canceled_group_label

    groups: dict[str, CategoryGroup] = {}
    canceled: list[ShoppingListItem] = []

    for item in items:
        if item.canceled:
            canceled.append(item)
            continue
        category = item.category if item.category.strip() else DEFAULT_CATEGORY
        group = groups.get(category.lower())
        if group is None:
            group = CategoryGroup(label=category)
            groups[category.lower()] = group
        group.items.append(item)

    ordered = [groups[key] for key in sorted(groups)]
    if canceled:
        ordered.append(CategoryGroup(label=canceled_label, items=canceled, canceled=True))

    if category_emojis is not None:
        for group in ordered:
            group.emoji = category_emojis.get_emoji(group.label)

    return ordered


def display_quantity(item: ShoppingListItem) -> str:
    """
    Headline quantity of an item.

    Recipe-derived items are rounded up to whole units, since that's what gets
    bought. Manual items show what the user typed.
    """
    if item.meal_sources:
        return str(round_up_quantity(item.quantity))
    return format_quantity(item.quantity)


def format_item_line(item: ShoppingListItem, emoji: str | None = None) -> str:
    """Checklist line, e.g. "☐ Tomato : 4 pc"."""
    box = CHECKED_BOX if item.checked else UNCHECKED_BOX
    name = f"{emoji} {item.name}" if emoji else item.name
    return f"{box} {name} : {display_quantity(item)} {normalize_unit(item.unit)}"


def format_day(day: dt.date) -> str:
    return f"{WEEKDAYS[day.weekday()]} {day.strftime(DATE_FORMAT)}"


def format_date_range(start: dt.date, end: dt.date) -> str:
    """E.g. "Monday 06-01-2025 - Sunday 12-01-2025"."""
    return f"{format_day(start)} - {format_day(end)}"


def has_fractional_sources(item: ShoppingListItem) -> bool:
    """Check if any meal needs a fraction of a unit, which makes rounding visible."""
    return any(not is_whole(source.quantity_needed, 1e-6) for source in item.meal_sources)


def source_breakdown(item: ShoppingListItem) -> list[str]:
    """One line per meal: exact quantity, recipe, day and slot."""
    unit = normalize_unit(item.unit)
    lines = []
    for source in item.meal_sources:
        qty = format_quantity_one_decimal(source.quantity_needed)
        weekday = WEEKDAYS[source.date.weekday()]
        slot = SLOT_LABELS.get(source.meal_slot, source.meal_slot)
        lines.append(
            f"{qty} {unit} - {source.recipe_name} "
            f"({weekday} {source.date.strftime(SHORT_DATE_FORMAT)}, {slot})"
        )
    return lines


# =============================================================================
# Print / text export
# =============================================================================


@dataclass
class PrintLine:
    text: str
    checked: bool = False
    struck: bool = False


@dataclass
class PrintSection:
    heading: str
    lines: list[PrintLine] = field(default_factory=list)


@dataclass
class PrintableShoppingList:
    """Layout-free model of a printed list, rendered to PDF elsewhere."""

    title: str
    subtitle: str
    sections: list[PrintSection] = field(default_factory=list)


def build_printable(
    entry: ShoppingListEntry,
    category_emojis: CategoryEmojiLookup | None = None,
    ingredient_emojis: IngredientEmojiLookup | None = None,
    title: str | None = None,
    canceled_label: str | None = None,
) -> PrintableShoppingList:
    """Build the printable model of a list, grouped like the on-screen list."""
    printable = PrintableShoppingList(
        title=title or settings.shopping_list_title,
        subtitle=format_date_range(entry.start_date, entry.end_date),
    )

    for group in group_items_for_display(entry.items, category_emojis, canceled_label):
        section = PrintSection(heading=group.heading)
        for item in group.items:
            emoji = ingredient_emojis.emoji_for_name(item.name) if ingredient_emojis else None
            section.lines.append(
                PrintLine(
                    text=format_item_line(item, emoji),
                    checked=item.checked,
                    struck=item.canceled,
                )
            )
        printable.sections.append(section)

    return printable


def render_text(entry: ShoppingListEntry, **kwargs) -> str:
    """Render a list as plain text. Canceled lines are wrapped in ~~."""
    printable = build_printable(entry, **kwargs)
    out = [printable.title, printable.subtitle]
    for section in printable.sections:
        out.append("")
        out.append(section.heading)
        for line in section.lines:
            out.append(f"~~{line.text}~~" if line.struck else line.text)
    return "\n".join(out) + "\n"
