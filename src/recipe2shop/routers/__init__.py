"""API routers for the recipe2shop application."""

from recipe2shop.routers.aisles import router as aisles_router
from recipe2shop.routers.meal_plans import router as meal_plans_router
from recipe2shop.routers.recipes import router as recipes_router
from recipe2shop.routers.shopping_lists import router as shopping_lists_router

__all__ = [
    "aisles_router",
    "meal_plans_router",
    "recipes_router",
    "shopping_lists_router",
]
