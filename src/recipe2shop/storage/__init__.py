"""Stores for recipes, meal assignments and shopping lists."""

from recipe2shop.storage.base import AssignmentStore, RecipeStore, ShoppingListStore
from recipe2shop.storage.sql import (
    SqlAisleStore,
    SqlAssignmentStore,
    SqlRecipeStore,
    SqlShoppingListStore,
)

__all__ = [
    "AssignmentStore",
    "RecipeStore",
    "ShoppingListStore",
    "SqlAisleStore",
    "SqlAssignmentStore",
    "SqlRecipeStore",
    "SqlShoppingListStore",
]
