"""Shopping list engine: aggregation, user corrections and presentation."""

from recipe2shop.plan.formatting import (
    CategoryGroup,
    PrintableShoppingList,
    PrintLine,
    PrintSection,
    build_printable,
    display_quantity,
    format_date_range,
    format_item_line,
    group_items_for_display,
    has_fractional_sources,
    render_text,
    source_breakdown,
)
from recipe2shop.plan.lookups import (
    CategoryEmojiLookup,
    IngredientEmojiLookup,
    load_ingredient_emojis,
)
from recipe2shop.plan.reconcile import (
    RemainingAtHomeResult,
    add_manual_item,
    apply_remaining_at_home,
    cancel,
    find_items,
    restore,
    set_checked,
)
from recipe2shop.plan.scaler import ScaledQuantity, scale_ingredient
from recipe2shop.plan.service import (
    ItemNotFoundError,
    ShoppingListNotFoundError,
    ShoppingListService,
)
from recipe2shop.plan.shopping_list import (
    AggregationResult,
    GenerationResult,
    ShoppingListGenerator,
    SkippedAssignment,
)

__all__ = [
    "AggregationResult",
    "CategoryEmojiLookup",
    "CategoryGroup",
    "GenerationResult",
    "IngredientEmojiLookup",
    "ItemNotFoundError",
    "PrintLine",
    "PrintSection",
    "PrintableShoppingList",
    "RemainingAtHomeResult",
    "ScaledQuantity",
    "ShoppingListGenerator",
    "ShoppingListNotFoundError",
    "ShoppingListService",
    "SkippedAssignment",
    "add_manual_item",
    "apply_remaining_at_home",
    "build_printable",
    "cancel",
    "display_quantity",
    "find_items",
    "format_date_range",
    "format_item_line",
    "group_items_for_display",
    "has_fractional_sources",
    "load_ingredient_emojis",
    "render_text",
    "restore",
    "scale_ingredient",
    "set_checked",
    "source_breakdown",
]
