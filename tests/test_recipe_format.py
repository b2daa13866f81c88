"""Unit tests for the recipe document format and repair pass."""

import json

import pytest
from pydantic import ValidationError

from recipe2shop.recipes import (
    dump_recipe_document,
    load_recipe_document,
    repair_recipe,
)
from recipe2shop.schemas import Recipe, RecipeDocument


class TestRecipeDocument:
    """Tests for loading and dumping recipe documents."""

    def test_load(self, sample_document):
        document = load_recipe_document(json.dumps(sample_document))
        [recipe] = document.recipes

        assert recipe.name == "Quiche lorraine"
        assert recipe.servings == 4
        assert recipe.work_time == 20
        assert recipe.ingredients[1].quantity_alternatives[1].unit == "pack"
        assert recipe.ingredients[1].first_alternative.amount == 200
        assert recipe.metadata.rating == 2

    def test_steps_sorted(self, sample_document):
        recipe = load_recipe_document(json.dumps(sample_document)).recipes[0]
        assert [step.step_order for step in recipe.steps] == [1, 2]
        assert [s.sub_step_order for s in recipe.steps[0].sub_steps] == [1, 2]
        assert recipe.steps[0].sub_steps[0].instruction_falc is not None

    def test_round_trip(self, sample_document):
        """Export, import and export again gives the same structure."""
        first = dump_recipe_document(load_recipe_document(json.dumps(sample_document)))
        second = dump_recipe_document(load_recipe_document(first))
        assert json.loads(first) == json.loads(second)

    def test_dump_uses_document_keys(self, sample_document):
        data = json.loads(dump_recipe_document(load_recipe_document(json.dumps(sample_document))))
        recipe = data["recipes"][0]
        assert data["version"] == "1.0"
        assert recipe["ingredients"][0]["quantity"] == [{"nb": 3.0, "unit": "piece"}]
        assert recipe["steps"][0]["subSteps"][0]["instructionFalc"]
        assert recipe["metadata"]["favorite"] is True
        assert "imageUrl" not in recipe
        assert "exportedAt" not in recipe["metadata"]

    def test_dump_is_indented(self, sample_document):
        text = dump_recipe_document(load_recipe_document(json.dumps(sample_document)))
        assert text.startswith('{\n  "version"')

    def test_coercions(self):
        recipe = Recipe.model_validate(
            {
                "id": "r",
                "name": "R",
                "servings": 0,
                "prepTime": 0,
                "cookTime": -5,
                "ingredients": [{"name": "Salt", "category": "", "quantity": []}],
                "metadata": {"rating": 9},
            }
        )
        assert recipe.servings == 1
        assert recipe.prep_time is None
        assert recipe.cook_time is None
        assert recipe.ingredients[0].category == "Other"
        assert recipe.metadata.rating == 3

    def test_invalid_document(self):
        with pytest.raises(ValidationError):
            load_recipe_document('{"version": "1.0", "recipes": [{"name": "no id"}]}')


class TestRepairRecipe:
    """Tests for repair_recipe function."""

    def _recipe(self, ingredients, metadata=None) -> Recipe:
        data = {"id": "r", "name": "R", "servings": 2, "ingredients": ingredients}
        if metadata is not None:
            data["metadata"] = metadata
        return Recipe.model_validate(data)

    def test_valid_recipe_unchanged(self, sample_document):
        recipe = RecipeDocument.model_validate(sample_document).recipes[0]
        result = repair_recipe(recipe)
        assert result.changed is False
        assert result.recipe is recipe

    def test_negative_quantities_dropped(self):
        recipe = self._recipe(
            [{"name": "Egg", "quantity": [{"nb": -1, "unit": "piece"}, {"nb": 60, "unit": "g"}]}]
        )
        result = repair_recipe(recipe)
        [alternative] = result.recipe.ingredients[0].quantity_alternatives
        assert (alternative.amount, alternative.unit) == (60, "g")
        assert result.ingredients_fixed == 1

    def test_blank_unit_defaulted(self):
        recipe = self._recipe([{"name": "Egg", "quantity": [{"nb": 2, "unit": " "}]}])
        result = repair_recipe(recipe)
        assert result.recipe.ingredients[0].quantity_alternatives[0].unit == "piece"

    def test_placeholder_when_nothing_left(self):
        recipe = self._recipe(
            [
                {"name": "Egg", "quantity": [{"nb": -2, "unit": "piece"}]},
                {"name": "Salt", "quantity": []},
            ]
        )
        result = repair_recipe(recipe)
        for ingredient in result.recipe.ingredients:
            [alternative] = ingredient.quantity_alternatives
            assert (alternative.amount, alternative.unit) == (1.0, "piece")
        assert result.ingredients_fixed == 2

    def test_invalid_source(self):
        recipe = self._recipe(
            [{"name": "Egg", "quantity": [{"nb": 1, "unit": "piece"}]}],
            metadata={"source": "scanner", "updatedAt": 1000},
        )
        result = repair_recipe(recipe)
        assert result.source_fixed is True
        assert result.recipe.metadata.source == "manual_entry"
        assert result.recipe.metadata.updated_at > 1000

    def test_debug_pack_tolerated(self):
        recipe = self._recipe(
            [{"name": "Egg", "quantity": [{"nb": 1, "unit": "piece"}]}],
            metadata={"source": "debug_pack"},
        )
        assert repair_recipe(recipe).changed is False

    def test_original_not_mutated(self):
        recipe = self._recipe([{"name": "Egg", "quantity": [{"nb": -1, "unit": "piece"}]}])
        repair_recipe(recipe)
        assert recipe.ingredients[0].quantity_alternatives[0].amount == -1
