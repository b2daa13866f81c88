"""Scaling recipe quantities to the number of portions planned."""

from dataclasses import dataclass

from recipe2shop.normalize.names import normalize_category, normalize_unit
from recipe2shop.schemas import IngredientSpec, Recipe


@dataclass(frozen=True)
class ScaledQuantity:
    """Ingredient amount for a planned meal."""

    amount: float
    unit: str
    category: str


def scale_factor(recipe: Recipe, portions_needed: int) -> float:
    """Ratio between planned portions and the recipe's servings."""
    return portions_needed / max(1, recipe.servings)


def scale_ingredient(
    ingredient: IngredientSpec,
    recipe: Recipe,
    portions_needed: int,
) -> ScaledQuantity | None:
    """
    Scale an ingredient to the planned number of portions.

    Only the first quantity alternative counts. Negative amounts from
    unrepaired data are treated as zero.

    Args:
        ingredient: Ingredient line of the recipe.
        recipe: Recipe the ingredient belongs to (for its servings).
        portions_needed: Portions planned for the meal.

    Returns:
        The scaled quantity, or None if the ingredient has no quantity at all.
    """
    alternative = ingredient.first_alternative
    if alternative is None:
        return None

    return ScaledQuantity(
        amount=max(0.0, alternative.amount) * scale_factor(recipe, portions_needed),
        unit=normalize_unit(alternative.unit),
        category=normalize_category(ingredient.category),
    )
