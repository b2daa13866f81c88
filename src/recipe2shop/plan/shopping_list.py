"""Shopping list generation from meal plans."""

import datetime as dt
from dataclasses import dataclass, field

from recipe2shop.config import settings
from recipe2shop.logging_config import get_logger
from recipe2shop.normalize.names import merge_key
from recipe2shop.plan.scaler import scale_ingredient
from recipe2shop.schemas import (
    MEAL_SLOTS,
    MealAssignment,
    MealSource,
    MissingMeal,
    Recipe,
    ShoppingListEntry,
    ShoppingListItem,
)
from recipe2shop.storage.base import AssignmentStore, RecipeStore, ShoppingListStore

logger = get_logger(__name__)


@dataclass
class SkippedAssignment:
    """A planned meal that contributed nothing to the list."""

    assignment: MealAssignment
    reason: str  # no_recipe, recipe_not_found, recipe_error


@dataclass
class AggregationResult:
    """Items rebuilt for a date range, plus the assignments that were skipped."""

    items: list[ShoppingListItem] = field(default_factory=list)
    skipped: list[SkippedAssignment] = field(default_factory=list)


@dataclass
class GenerationResult:
    """Outcome of a regeneration."""

    entry: ShoppingListEntry
    created: bool
    skipped: list[SkippedAssignment] = field(default_factory=list)


def iter_dates(start: dt.date, end: dt.date):
    """Yield every date from start to end inclusive."""
    day = start
    while day <= end:
        yield day
        day += dt.timedelta(days=1)


class ShoppingListGenerator:
    """
    Generates shopping lists from meal plans with:
    - Quantity scaling to the planned portions
    - Merging of the same ingredient across recipes and days
    - Preservation of user edits (checked, canceled, manual items) on regeneration
    """

    def __init__(
        self,
        recipe_store: RecipeStore,
        assignment_store: AssignmentStore,
        list_store: ShoppingListStore,
        unit_case_sensitive: bool | None = None,
    ):
        self.recipe_store = recipe_store
        self.assignment_store = assignment_store
        self.list_store = list_store
        if unit_case_sensitive is None:
            unit_case_sensitive = settings.unit_merge_case_sensitive
        self.unit_case_sensitive = unit_case_sensitive

    def _key(self, name: str, unit: str, category: str) -> str:
        return merge_key(name, unit, category, case_sensitive_units=self.unit_case_sensitive)

    def find_missing_meals(self, start: dt.date, end: dt.date) -> list[MissingMeal]:
        """
        List the meal slots in range with nothing planned.

        Lets callers warn the user before generating a list for a partly
        planned period.
        """
        planned = {
            (assignment.date, assignment.meal_slot)
            for assignment in self.assignment_store.get_assignments_between(start, end)
        }
        return [
            MissingMeal(date=day, meal_slot=slot)
            for day in iter_dates(start, end)
            for slot in MEAL_SLOTS
            if (day, slot) not in planned
        ]

    def _resolve_recipe(
        self,
        assignment: MealAssignment,
        skipped: list[SkippedAssignment],
    ) -> Recipe | None:
        """Fetch the assignment's recipe, recording why when it can't be used."""
        if assignment.recipe_id is None:
            skipped.append(SkippedAssignment(assignment, "no_recipe"))
            logger.info(
                f"Skipping {assignment.date} {assignment.meal_slot}: dish has no linked recipe"
            )
            return None

        try:
            recipe = self.recipe_store.get(assignment.recipe_id)
        except Exception as e:
            skipped.append(SkippedAssignment(assignment, "recipe_error"))
            logger.warning(f"Failed to load recipe {assignment.recipe_id}: {e}")
            return None

        if recipe is None:
            skipped.append(SkippedAssignment(assignment, "recipe_not_found"))
            logger.warning(
                f"Recipe {assignment.recipe_id} planned for {assignment.date} "
                f"{assignment.meal_slot} no longer exists, skipping"
            )
        return recipe

    def _seed(
        self, prior_items: list[ShoppingListItem]
    ) -> tuple[dict[str, ShoppingListItem], set[str]]:
        """
        Seed the item mapping from a prior list.

        Manual items are kept as they are. Recipe-derived items are emptied
        (quantity 0, no sources) but keep their id and flags.
        """
        items: dict[str, ShoppingListItem] = {}
        manual_keys: set[str] = set()

        for prior in prior_items:
            key = self._key(prior.name, prior.unit, prior.category)

            if prior.is_manual:
                if key in manual_keys:
                    # Duplicate manual entry, keep it in its own slot
                    slot = 2
                    while f"{key}#{slot}" in items:
                        slot += 1
                    key = f"{key}#{slot}"
                # Replaces a recipe seed at the same key, keeping its position
                items[key] = prior.model_copy(deep=True)
                manual_keys.add(key)
            elif key not in items:
                items[key] = prior.model_copy(update={"quantity": 0.0, "meal_sources": []})

        return items, manual_keys

    def build_items(
        self,
        start: dt.date,
        end: dt.date,
        assignments: list[MealAssignment],
        prior_items: list[ShoppingListItem] | None = None,
    ) -> AggregationResult:
        """
        Rebuild the items of a list from the meal plan.

        Args:
            start: First day of the list.
            end: Last day of the list.
            assignments: Planned meals. Those outside the range are ignored.
            prior_items: Items of the existing list for the same range.

        Returns:
            Items in order of first appearance, and the skipped assignments.
        """
        items, manual_keys = self._seed(prior_items or [])
        contributed: set[str] = set()
        skipped: list[SkippedAssignment] = []

        for assignment in assignments:
            if not start <= assignment.date <= end:
                continue

            recipe = self._resolve_recipe(assignment, skipped)
            if recipe is None:
                continue

            for ingredient in recipe.ingredients:
                scaled = scale_ingredient(ingredient, recipe, assignment.portions)
                if scaled is None:
                    continue

                key = self._key(ingredient.name, scaled.unit, scaled.category)
                if key in manual_keys:
                    # Manual items take precedence over recipe quantities
                    continue

                source = MealSource(
                    date=assignment.date,
                    meal_slot=assignment.meal_slot,
                    recipe_name=recipe.name,
                    quantity_needed=scaled.amount,
                )

                item = items.get(key)
                if item is None:
                    items[key] = ShoppingListItem(
                        name=ingredient.name.strip(),
                        quantity=scaled.amount,
                        unit=scaled.unit,
                        category=scaled.category,
                        meal_sources=[source],
                    )
                    contributed.add(key)
                    continue

                if key not in contributed:
                    # Seeded item: take the spelling of this regeneration
                    item.name = ingredient.name.strip()
                    item.unit = scaled.unit
                    contributed.add(key)
                item.quantity += scaled.amount
                item.meal_sources.append(source)

        # Seeded recipe items without contributions left the plan
        rebuilt = [
            item for key, item in items.items() if key in manual_keys or key in contributed
        ]
        return AggregationResult(items=rebuilt, skipped=skipped)

    def regenerate(self, start: dt.date, end: dt.date) -> GenerationResult:
        """
        Generate or refresh the shopping list for a date range.

        The list for the same (start, end) pair is updated in place. Running
        this twice with an unchanged meal plan gives the same items.

        Raises:
            ValueError: If end is before start.
        """
        if end < start:
            raise ValueError(f"End date {end} is before start date {start}")

        prior = self.list_store.find_by_range(start, end)
        assignments = self.assignment_store.get_assignments_between(start, end)
        logger.info(
            f"Regenerating shopping list for {start} to {end}: "
            f"{len(assignments)} assignments, prior list: {prior.id if prior else None}"
        )

        result = self.build_items(start, end, assignments, prior.items if prior else None)

        if prior is not None:
            prior.items = result.items
            entry = self.list_store.update(prior)
            created = False
        else:
            entry = self.list_store.create(start, end, result.items)
            created = True

        logger.info(
            f"Shopping list {entry.id}: {len(entry.items)} items, "
            f"{len(result.skipped)} assignments skipped"
        )
        return GenerationResult(entry=entry, created=created, skipped=result.skipped)
