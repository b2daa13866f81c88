"""Repair pass for malformed recipe data."""

from dataclasses import dataclass

from recipe2shop.logging_config import get_logger
from recipe2shop.normalize.names import DEFAULT_CATEGORY, DEFAULT_UNIT
from recipe2shop.schemas import (
    IngredientSpec,
    QuantityAlternative,
    Recipe,
    RecipeMetadata,
    now_millis,
)

logger = get_logger(__name__)


@dataclass
class RepairResult:
    """Outcome of repairing one recipe."""

    recipe: Recipe
    source_fixed: bool = False
    ingredients_fixed: int = 0

    @property
    def changed(self) -> bool:
        return self.source_fixed or self.ingredients_fixed > 0


def _repair_ingredient(ingredient: IngredientSpec) -> IngredientSpec | None:
    """Return a fixed copy of the ingredient, or None if it was already valid."""
    fixed = False

    category = ingredient.category
    if not category.strip():
        category = DEFAULT_CATEGORY
        fixed = True

    alternatives: list[QuantityAlternative] = []
    for alt in ingredient.quantity_alternatives:
        if alt.amount < 0:
            fixed = True
            continue
        if not alt.unit.strip():
            alternatives.append(alt.model_copy(update={"unit": DEFAULT_UNIT}))
            fixed = True
        else:
            alternatives.append(alt)

    if not alternatives:
        alternatives = [QuantityAlternative(amount=1.0, unit=DEFAULT_UNIT)]
        fixed = True

    if not fixed:
        return None

    return ingredient.model_copy(
        update={"category": category, "quantity_alternatives": alternatives}
    )


def repair_recipe(recipe: Recipe) -> RepairResult:
    """
    Sanitize a recipe instead of rejecting it.

    - Negative quantity alternatives are dropped
    - Blank units become "piece"
    - Ingredients left without any alternative get a "1 piece" placeholder
    - Blank categories become "Other"
    - Unknown metadata sources become "manual_entry"
    """
    ingredients_fixed = 0
    ingredients: list[IngredientSpec] = []
    for ingredient in recipe.ingredients:
        repaired = _repair_ingredient(ingredient)
        if repaired is None:
            ingredients.append(ingredient)
        else:
            ingredients.append(repaired)
            ingredients_fixed += 1

    metadata = recipe.metadata
    source_fixed = metadata is not None and not metadata.has_valid_source

    if not source_fixed and ingredients_fixed == 0:
        return RepairResult(recipe=recipe)

    updated_metadata = (metadata or RecipeMetadata()).model_copy(
        update={
            "source": "manual_entry" if source_fixed else (metadata or RecipeMetadata()).source,
            "updated_at": now_millis(),
        }
    )

    logger.info(
        f"Repaired recipe {recipe.id}: {ingredients_fixed} ingredient(s) fixed, "
        f"source fixed={source_fixed}"
    )

    return RepairResult(
        recipe=recipe.model_copy(
            update={"ingredients": ingredients, "metadata": updated_metadata}
        ),
        source_fixed=source_fixed,
        ingredients_fixed=ingredients_fixed,
    )
