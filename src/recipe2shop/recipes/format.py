"""JSON import/export of recipe documents."""

import json
from typing import Any

from recipe2shop.schemas import Recipe, RecipeDocument

FORMAT_VERSION = "1.0"


def recipe_to_dict(recipe: Recipe) -> dict[str, Any]:
    """Serialize a recipe to its JSON-shaped dict (camelCase keys, no null fields)."""
    return recipe.model_dump(mode="json", by_alias=True, exclude_none=True)


def recipe_from_dict(data: dict[str, Any]) -> Recipe:
    return Recipe.model_validate(data)


def load_recipe_document(text: str | bytes) -> RecipeDocument:
    """
    Parse a recipe document.

    Raises:
        pydantic.ValidationError: If the document does not follow the format.
    """
    return RecipeDocument.model_validate_json(text)


def dump_recipe_document(document: RecipeDocument) -> str:
    """Serialize a recipe document as 2-space indented JSON."""
    data = {
        "version": document.version,
        "recipes": [recipe_to_dict(recipe) for recipe in document.recipes],
    }
    return json.dumps(data, indent=2, ensure_ascii=False)
