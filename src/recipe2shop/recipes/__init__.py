"""Recipe document format and repair."""

from recipe2shop.recipes.format import (
    FORMAT_VERSION,
    dump_recipe_document,
    load_recipe_document,
    recipe_from_dict,
    recipe_to_dict,
)
from recipe2shop.recipes.repair import RepairResult, repair_recipe

__all__ = [
    "FORMAT_VERSION",
    "RepairResult",
    "dump_recipe_document",
    "load_recipe_document",
    "recipe_from_dict",
    "recipe_to_dict",
    "repair_recipe",
]
