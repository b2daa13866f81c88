"""Normalize ingredient names, units and quantities."""

from recipe2shop.normalize.names import (
    DEFAULT_CATEGORY,
    DEFAULT_UNIT,
    merge_key,
    merge_unit,
    normalize_category,
    normalize_name,
    normalize_unit,
)
from recipe2shop.normalize.units import (
    InvalidQuantityError,
    format_quantity,
    format_quantity_one_decimal,
    is_whole,
    parse_quantity_input,
    round_up_quantity,
)

__all__ = [
    "DEFAULT_CATEGORY",
    "DEFAULT_UNIT",
    "InvalidQuantityError",
    "format_quantity",
    "format_quantity_one_decimal",
    "is_whole",
    "merge_key",
    "merge_unit",
    "normalize_category",
    "normalize_name",
    "normalize_unit",
    "parse_quantity_input",
    "round_up_quantity",
]
