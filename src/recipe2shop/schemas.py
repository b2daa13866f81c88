"""Common data schemas: recipe documents, meal plans and shopping lists."""

import datetime as dt
import time
import uuid
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from recipe2shop.normalize.names import DEFAULT_CATEGORY, DEFAULT_UNIT

MealSlot = Literal["lunch", "dinner"]
MEAL_SLOTS: tuple[str, ...] = ("lunch", "dinner")

RECIPE_SOURCES = {"manual_entry", "website", "book", "r2sl_recipes_pack"}
TOLERATED_RECIPE_SOURCES = {"debug_pack"}


def now_millis() -> int:
    """Current time as epoch milliseconds, the unit used in recipe metadata."""
    return int(time.time() * 1000)


def new_item_id() -> str:
    return uuid.uuid4().hex


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, constructed with snake_case names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _positive_or_none(v: Any) -> int | None:
    if v is None:
        return None
    try:
        value = int(v)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


# =============================================================================
# Recipe Document Format
# =============================================================================


class QuantityAlternative(CamelModel):
    """One way of expressing an ingredient amount ("3 pieces" or "300 g")."""

    amount: float = Field(alias="nb")
    unit: str = ""


class IngredientSpec(CamelModel):
    """Ingredient line of a recipe, with one or more quantity alternatives."""

    name: str
    category: str = DEFAULT_CATEGORY
    quantity_alternatives: list[QuantityAlternative] = Field(
        default_factory=list, alias="quantity"
    )
    notes: str | None = None
    emoji: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: Any) -> str:
        """Blank or missing categories fall back to "Other"."""
        if v is None or not str(v).strip():
            return DEFAULT_CATEGORY
        return str(v)

    @field_validator("notes", "emoji", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        return v

    @property
    def first_alternative(self) -> QuantityAlternative | None:
        """The alternative used for shopping-list math."""
        return self.quantity_alternatives[0] if self.quantity_alternatives else None


class StepIngredient(CamelModel):
    """Ingredient quantity used in a single step."""

    ingredient_name: str
    quantity: float
    unit: str
    notes: str | None = None


class SubStep(CamelModel):
    """Instruction within a step, with an optional easy-to-read version."""

    sub_step_order: int
    instruction: str
    instruction_falc: str | None = None

    @field_validator("instruction_falc", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> str | None:
        return v or None


class RecipeStep(CamelModel):
    """Recipe step with its sub-steps."""

    step_order: int
    title: str | None = None
    duration: int | None = None
    temperature: str | None = None
    notes: str | None = None
    ingredients: list[StepIngredient] | None = None
    sub_steps: list[SubStep] = Field(default_factory=list)

    @field_validator("duration", mode="before")
    @classmethod
    def positive_duration(cls, v: Any) -> int | None:
        return _positive_or_none(v)

    @field_validator("title", "temperature", "notes", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> str | None:
        return v or None

    @field_validator("sub_steps")
    @classmethod
    def sort_sub_steps(cls, v: list[SubStep]) -> list[SubStep]:
        return sorted(v, key=lambda sub_step: sub_step.sub_step_order)


class RecipeMetadata(CamelModel):
    """Tracking metadata stored alongside a recipe."""

    created_at: int = Field(default_factory=now_millis)
    updated_at: int = Field(default_factory=now_millis)
    exported_at: int | None = None
    source: str = "manual_entry"
    author: str = "unknown"
    favorite: bool = False
    rating: int = 0

    @field_validator("exported_at", mode="before")
    @classmethod
    def positive_timestamp(cls, v: Any) -> int | None:
        return _positive_or_none(v)

    @field_validator("rating", mode="before")
    @classmethod
    def clamp_rating(cls, v: Any) -> int:
        """Ratings are 0 to 3 stars."""
        try:
            rating = int(v)
        except (TypeError, ValueError):
            return 0
        return min(max(rating, 0), 3)

    @property
    def has_valid_source(self) -> bool:
        return self.source in RECIPE_SOURCES or self.source in TOLERATED_RECIPE_SOURCES


class Recipe(CamelModel):
    """Recipe with ingredients and steps."""

    id: str
    name: str
    description: str | None = None
    servings: int = 1
    work_time: int | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    total_time: int | None = None
    types: list[str] | None = None
    tags: list[str] | None = None
    image_url: str | None = None
    ingredients: list[IngredientSpec] = Field(default_factory=list)
    steps: list[RecipeStep] = Field(default_factory=list)
    metadata: RecipeMetadata | None = None

    @field_validator("servings", mode="before")
    @classmethod
    def at_least_one_serving(cls, v: Any) -> int:
        """Recipes always serve at least one person."""
        try:
            servings = int(v)
        except (TypeError, ValueError):
            return 1
        return max(servings, 1)

    @field_validator("work_time", "prep_time", "cook_time", "total_time", mode="before")
    @classmethod
    def positive_minutes(cls, v: Any) -> int | None:
        return _positive_or_none(v)

    @field_validator("description", "image_url", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> str | None:
        return v or None

    @field_validator("steps")
    @classmethod
    def sort_steps(cls, v: list[RecipeStep]) -> list[RecipeStep]:
        return sorted(v, key=lambda step: step.step_order)


class RecipeDocument(CamelModel):
    """Portable recipe export/import document."""

    version: str = "1.0"
    recipes: list[Recipe] = Field(default_factory=list)


# =============================================================================
# Meal Plan
# =============================================================================


class MealAssignment(CamelModel):
    """A recipe planned for a date and meal slot."""

    date: dt.date
    meal_slot: MealSlot = Field(
        validation_alias=AliasChoices("mealSlot", "mealType", "meal_slot"),
        serialization_alias="mealSlot",
    )
    recipe_id: str | None = Field(None, description="None for a dish without a linked recipe")
    portions: int = Field(gt=0)


class MissingMeal(CamelModel):
    """A date and meal slot with nothing planned."""

    date: dt.date
    meal_slot: MealSlot


# =============================================================================
# Shopping List
# =============================================================================


class MealSource(CamelModel):
    """Which planned meal contributed how much of a shopping item."""

    date: dt.date
    meal_slot: MealSlot = Field(
        validation_alias=AliasChoices("mealSlot", "mealType", "meal_slot"),
        serialization_alias="mealSlot",
    )
    recipe_name: str
    quantity_needed: float = 0.0

    @field_validator("quantity_needed", mode="before")
    @classmethod
    def missing_quantity(cls, v: Any) -> float:
        return 0.0 if v is None else v


class ShoppingListItem(CamelModel):
    """
    Single line of a shopping list.

    Items without meal sources were added by hand. Items with sources are
    rebuilt from the meal plan on every regeneration.
    """

    id: str = Field(default_factory=new_item_id)
    name: str
    quantity: float = 0.0
    unit: str = DEFAULT_UNIT
    category: str = DEFAULT_CATEGORY
    checked: bool = False
    canceled: bool = False
    meal_sources: list[MealSource] = Field(default_factory=list)

    @field_validator("quantity", mode="before")
    @classmethod
    def non_negative_quantity(cls, v: Any) -> float:
        if v is None:
            return 0.0
        return max(float(v), 0.0)

    @property
    def is_manual(self) -> bool:
        """Check if the item was added by hand rather than derived from recipes."""
        return not self.meal_sources

    def identity(self) -> tuple[str, str, str, list[MealSource]]:
        """Attribute tuple used to find "the same item" without an id."""
        return (self.name, self.category, self.unit, self.meal_sources)

    def matches(self, other: "ShoppingListItem") -> bool:
        """Check value identity, ignoring the synthetic id and the flags."""
        return self.identity() == other.identity()


class ShoppingListEntry(CamelModel):
    """Shopping list for a date range."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    start_date: dt.date
    end_date: dt.date
    created_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))
    items: list[ShoppingListItem] = Field(default_factory=list)
