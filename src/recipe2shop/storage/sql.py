"""SQLAlchemy-backed store implementations."""

import datetime as dt
import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from recipe2shop.logging_config import get_logger
from recipe2shop.models import (
    AisleRecord,
    MealAssignmentRecord,
    RecipeRecord,
    ShoppingListRecord,
)
from recipe2shop.recipes.format import FORMAT_VERSION, recipe_from_dict, recipe_to_dict
from recipe2shop.recipes.repair import repair_recipe
from recipe2shop.schemas import (
    MealAssignment,
    Recipe,
    RecipeDocument,
    RecipeMetadata,
    ShoppingListEntry,
    ShoppingListItem,
    now_millis,
)
from recipe2shop.storage.base import AssignmentStore, RecipeStore, ShoppingListStore

logger = get_logger(__name__)


# =============================================================================
# Recipes
# =============================================================================


class SqlRecipeStore(RecipeStore):
    """Recipe catalog stored as JSON documents."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, recipe_id: str) -> Recipe | None:
        record = self.session.get(RecipeRecord, recipe_id)
        if record is None:
            return None
        return recipe_from_dict(record.document)

    def list_all(self) -> list[Recipe]:
        records = self.session.scalars(select(RecipeRecord).order_by(RecipeRecord.name))
        return [recipe_from_dict(record.document) for record in records]

    def _upsert(self, recipe: Recipe) -> Recipe:
        repaired = repair_recipe(recipe).recipe
        document = recipe_to_dict(repaired)

        record = self.session.get(RecipeRecord, repaired.id)
        if record is None:
            record = RecipeRecord(id=repaired.id)
            self.session.add(record)

        record.name = repaired.name
        record.servings = repaired.servings
        record.document = document
        return repaired

    def save(self, recipe: Recipe) -> Recipe:
        """
        Insert or replace a recipe.

        The recipe goes through the repair pass first, so stored recipes always
        have at least one non-negative quantity alternative per ingredient.
        """
        saved = self._upsert(recipe)
        self.session.commit()
        return saved

    def delete(self, recipe_id: str) -> bool:
        record = self.session.get(RecipeRecord, recipe_id)
        if record is None:
            return False
        self.session.delete(record)
        self.session.commit()
        logger.info(f"Deleted recipe {recipe_id}")
        return True

    def import_document(self, document: RecipeDocument) -> list[Recipe]:
        """Store every recipe of an imported document in one transaction."""
        saved = [self._upsert(recipe) for recipe in document.recipes]
        self.session.commit()
        logger.info(f"Imported {len(saved)} recipes (format version {document.version})")
        return saved

    def list_categories(self) -> list[str]:
        """
        Distinct ingredient categories across the catalog.

        Spellings differing only by case count once, under the first one seen.
        Sorted case-insensitively.
        """
        categories: dict[str, str] = {}
        for recipe in self.list_all():
            for ingredient in recipe.ingredients:
                label = ingredient.category.strip()
                categories.setdefault(label.lower(), label)
        return sorted(categories.values(), key=str.lower)

    def reassign_category(self, old: str, new: str) -> int:
        """
        Move every ingredient of a category to another one, in all recipes.

        The old category is matched case-insensitively. All changed recipes are
        written in one transaction.

        Returns:
            Number of ingredients moved.

        Raises:
            ValueError: If the new category is blank.
        """
        target = new.strip()
        if not target:
            raise ValueError("Category must not be blank")
        old_key = old.strip().lower()

        moved = 0
        for recipe in self.list_all():
            ingredients = []
            changed = False
            for ingredient in recipe.ingredients:
                if ingredient.category.strip().lower() == old_key:
                    ingredient = ingredient.model_copy(update={"category": target})
                    changed = True
                    moved += 1
                ingredients.append(ingredient)
            if changed:
                self._upsert(recipe.model_copy(update={"ingredients": ingredients}))

        self.session.commit()
        logger.info(f"Reassigned {moved} ingredients from category {old!r} to {target!r}")
        return moved

    def export_document(self, recipe_ids: list[str] | None = None) -> RecipeDocument:
        """
        Build an export document, stamping each recipe's exported_at.

        Args:
            recipe_ids: Recipes to export. All recipes when None.
        """
        recipes = self.list_all()
        if recipe_ids is not None:
            wanted = set(recipe_ids)
            recipes = [recipe for recipe in recipes if recipe.id in wanted]

        exported_at = now_millis()
        stamped = [
            recipe.model_copy(
                update={
                    "metadata": (recipe.metadata or RecipeMetadata()).model_copy(
                        update={"exported_at": exported_at}
                    )
                }
            )
            for recipe in recipes
        ]
        return RecipeDocument(version=FORMAT_VERSION, recipes=stamped)


# =============================================================================
# Meal Plan
# =============================================================================


def _to_assignment(record: MealAssignmentRecord) -> MealAssignment:
    return MealAssignment(
        date=record.date,
        meal_slot=record.meal_slot,
        recipe_id=record.recipe_id,
        portions=record.portions,
    )


class SqlAssignmentStore(AssignmentStore):
    """Planned meals, several dishes allowed per slot."""

    def __init__(self, session: Session):
        self.session = session

    def get_assignments_between(self, start: dt.date, end: dt.date) -> list[MealAssignment]:
        records = self.session.scalars(
            select(MealAssignmentRecord)
            .where(MealAssignmentRecord.date >= start, MealAssignmentRecord.date <= end)
            .order_by(MealAssignmentRecord.date, MealAssignmentRecord.id)
        )
        return [_to_assignment(record) for record in records]

    def get_assignments(self, date: dt.date, meal_slot: str) -> list[MealAssignment]:
        records = self.session.scalars(
            select(MealAssignmentRecord)
            .where(
                MealAssignmentRecord.date == date,
                MealAssignmentRecord.meal_slot == meal_slot,
            )
            .order_by(MealAssignmentRecord.id)
        )
        return [_to_assignment(record) for record in records]

    def _clear_slot(self, date: dt.date, meal_slot: str):
        return delete(MealAssignmentRecord).where(
            MealAssignmentRecord.date == date,
            MealAssignmentRecord.meal_slot == meal_slot,
        )

    def assign(self, assignment: MealAssignment) -> MealAssignment:
        """Replace whatever was planned in the slot with this assignment."""
        self.session.execute(self._clear_slot(assignment.date, assignment.meal_slot))
        self.session.add(
            MealAssignmentRecord(
                date=assignment.date,
                meal_slot=assignment.meal_slot,
                recipe_id=assignment.recipe_id,
                portions=assignment.portions,
            )
        )
        self.session.commit()
        return assignment

    def add(self, assignment: MealAssignment) -> MealAssignment:
        """Add another dish to a slot, keeping what is already there."""
        self.session.add(
            MealAssignmentRecord(
                date=assignment.date,
                meal_slot=assignment.meal_slot,
                recipe_id=assignment.recipe_id,
                portions=assignment.portions,
            )
        )
        self.session.commit()
        return assignment

    def remove(self, date: dt.date, meal_slot: str, recipe_id: str | None = None) -> int:
        """
        Remove dishes from a slot.

        Args:
            date: Day of the slot.
            meal_slot: "lunch" or "dinner".
            recipe_id: Only remove this recipe. Clears the whole slot when None.

        Returns:
            Number of removed assignments.
        """
        statement = self._clear_slot(date, meal_slot)
        if recipe_id is not None:
            statement = statement.where(MealAssignmentRecord.recipe_id == recipe_id)
        result = self.session.execute(statement)
        self.session.commit()
        return result.rowcount


# =============================================================================
# Shopping Lists
# =============================================================================


def _to_entry(record: ShoppingListRecord) -> ShoppingListEntry:
    return ShoppingListEntry(
        id=record.id,
        start_date=record.start_date,
        end_date=record.end_date,
        created_at=record.created_at,
        items=[ShoppingListItem.model_validate(item) for item in record.items or []],
    )


def _dump_items(items: list[ShoppingListItem]) -> list[dict]:
    return [item.model_dump(mode="json", by_alias=True) for item in items]


class SqlShoppingListStore(ShoppingListStore):
    """Shopping lists with their items stored as a JSON column."""

    def __init__(self, session: Session):
        self.session = session

    def load(self, list_id: str) -> ShoppingListEntry | None:
        record = self.session.get(ShoppingListRecord, list_id)
        return _to_entry(record) if record else None

    def find_by_range(self, start: dt.date, end: dt.date) -> ShoppingListEntry | None:
        record = self.session.scalar(
            select(ShoppingListRecord).where(
                ShoppingListRecord.start_date == start,
                ShoppingListRecord.end_date == end,
            )
        )
        return _to_entry(record) if record else None

    def list_all(self) -> list[ShoppingListEntry]:
        records = self.session.scalars(
            select(ShoppingListRecord).order_by(
                ShoppingListRecord.start_date.desc(), ShoppingListRecord.created_at.desc()
            )
        )
        return [_to_entry(record) for record in records]

    def create(
        self, start: dt.date, end: dt.date, items: list[ShoppingListItem]
    ) -> ShoppingListEntry:
        record = ShoppingListRecord(
            id=str(uuid.uuid4()),
            start_date=start,
            end_date=end,
            items=_dump_items(items),
        )
        self.session.add(record)
        self.session.commit()
        logger.info(f"Created shopping list {record.id} for {start} to {end}")
        return _to_entry(record)

    def update(self, entry: ShoppingListEntry) -> ShoppingListEntry:
        """
        Replace the items of an existing list in a single commit.

        Raises:
            LookupError: If no list has the entry's id.
        """
        record = self.session.get(ShoppingListRecord, entry.id)
        if record is None:
            raise LookupError(f"Shopping list {entry.id} not found")

        # JSON columns are not mutation-tracked, assign a new list
        record.items = _dump_items(entry.items)
        self.session.commit()
        return _to_entry(record)

    def delete(self, list_id: str) -> bool:
        record = self.session.get(ShoppingListRecord, list_id)
        if record is None:
            return False
        self.session.delete(record)
        self.session.commit()
        logger.info(f"Deleted shopping list {list_id}")
        return True


# =============================================================================
# Aisles
# =============================================================================

DEFAULT_AISLES = (
    "Other",
    "Bakery",
    "Dairy",
    "Pantry",
    "Sweets",
    "Fruit and vegetables",
    "Fish",
    "Meat",
    "Drinks",
    "Frozen",
    "Canned",
    "Oils and condiments",
)


class SqlAisleStore:
    """Editable list of store aisles, the categories offered for ingredients."""

    def __init__(self, session: Session):
        self.session = session

    def _find(self, name: str) -> AisleRecord | None:
        return self.session.scalar(
            select(AisleRecord).where(func.lower(AisleRecord.name) == name.strip().lower())
        )

    def list_all(self) -> list[str]:
        """Aisle names sorted case-insensitively. Seeds the defaults on first use."""
        names = list(self.session.scalars(select(AisleRecord.name)))
        if not names:
            self.session.add_all(AisleRecord(name=name) for name in DEFAULT_AISLES)
            self.session.commit()
            logger.info(f"Seeded {len(DEFAULT_AISLES)} default aisles")
            names = list(DEFAULT_AISLES)
        return sorted(names, key=str.lower)

    def _insert(self, names: list[str]) -> list[str]:
        added: list[str] = []
        for name in names:
            label = name.strip()
            if not label or self._find(label) is not None:
                continue
            self.session.add(AisleRecord(name=label))
            added.append(label)
        return added

    def add(self, name: str) -> bool:
        """Add an aisle. Blank names and case-insensitive duplicates are ignored."""
        self.list_all()
        added = self._insert([name])
        self.session.commit()
        return bool(added)

    def remove(self, name: str) -> bool:
        record = self._find(name)
        if record is None:
            return False
        self.session.delete(record)
        self.session.commit()
        return True

    def load_from_recipes(self, recipe_store: SqlRecipeStore) -> list[str]:
        """Add every ingredient category used in the catalog. Returns the new aisles."""
        self.list_all()
        added = self._insert(recipe_store.list_categories())
        self.session.commit()
        logger.info(f"Added {len(added)} aisles from recipe categories")
        return added
