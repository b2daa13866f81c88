"""Shopping list operations on top of the stores."""

import datetime as dt

from recipe2shop.logging_config import LoggingContext, get_logger
from recipe2shop.plan import reconcile
from recipe2shop.plan.reconcile import ItemTarget, RemainingAtHomeResult
from recipe2shop.plan.shopping_list import GenerationResult, ShoppingListGenerator
from recipe2shop.schemas import MissingMeal, ShoppingListEntry, ShoppingListItem
from recipe2shop.storage.base import AssignmentStore, RecipeStore, ShoppingListStore

logger = get_logger(__name__)


class ShoppingListNotFoundError(LookupError):
    """Raised when no shopping list has the requested id."""

    def __init__(self, list_id: str):
        super().__init__(f"Shopping list {list_id} not found")
        self.list_id = list_id


class ItemNotFoundError(LookupError):
    """Raised when a shopping list has no item matching the target."""

    def __init__(self, list_id: str, item_id: str):
        super().__init__(f"Item {item_id} not found in shopping list {list_id}")
        self.list_id = list_id
        self.item_id = item_id


class ShoppingListService:
    """
    Loads lists from the stores, applies the engine and persists the result.

    Every mutating call ends with a single store write.
    """

    def __init__(
        self,
        recipe_store: RecipeStore,
        assignment_store: AssignmentStore,
        list_store: ShoppingListStore,
        unit_case_sensitive: bool | None = None,
    ):
        self.list_store = list_store
        self.generator = ShoppingListGenerator(
            recipe_store,
            assignment_store,
            list_store,
            unit_case_sensitive=unit_case_sensitive,
        )

    # -------------------------------------------------------------------------
    # Lists
    # -------------------------------------------------------------------------

    def precheck(self, start: dt.date, end: dt.date) -> list[MissingMeal]:
        return self.generator.find_missing_meals(start, end)

    def generate(self, start: dt.date, end: dt.date) -> GenerationResult:
        return self.generator.regenerate(start, end)

    def get(self, list_id: str) -> ShoppingListEntry:
        entry = self.list_store.load(list_id)
        if entry is None:
            raise ShoppingListNotFoundError(list_id)
        return entry

    def list_all(self) -> list[ShoppingListEntry]:
        return self.list_store.list_all()

    def delete(self, list_id: str) -> None:
        if not self.list_store.delete(list_id):
            raise ShoppingListNotFoundError(list_id)

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    def _target_label(self, target: ItemTarget) -> str:
        return target if isinstance(target, str) else target.id

    def _save_item(
        self, entry: ShoppingListEntry, target: ItemTarget, item: ShoppingListItem | None
    ) -> ShoppingListItem:
        if item is None:
            raise ItemNotFoundError(entry.id, self._target_label(target))
        self.list_store.update(entry)
        return item

    def set_checked(self, list_id: str, target: ItemTarget, checked: bool) -> ShoppingListItem:
        with LoggingContext(list_id=list_id):
            entry = self.get(list_id)
            item = reconcile.set_checked(entry, target, checked)
            return self._save_item(entry, target, item)

    def cancel(self, list_id: str, target: ItemTarget) -> ShoppingListItem:
        with LoggingContext(list_id=list_id):
            entry = self.get(list_id)
            item = reconcile.cancel(entry, target)
            saved = self._save_item(entry, target, item)
            logger.info(f"Canceled item {saved.name!r}")
            return saved

    def restore(self, list_id: str, target: ItemTarget) -> ShoppingListItem:
        with LoggingContext(list_id=list_id):
            entry = self.get(list_id)
            item = reconcile.restore(entry, target)
            saved = self._save_item(entry, target, item)
            logger.info(f"Restored item {saved.name!r}")
            return saved

    def add_manual_item(
        self,
        list_id: str,
        name: str,
        quantity: float = 1.0,
        unit: str | None = None,
        category: str | None = None,
    ) -> ShoppingListItem:
        with LoggingContext(list_id=list_id):
            entry = self.get(list_id)
            item = reconcile.add_manual_item(entry, name, quantity, unit, category)
            self.list_store.update(entry)
            logger.info(f"Added manual item {item.name!r}")
            return item

    def apply_remaining_at_home(
        self, list_id: str, target: ItemTarget, remaining: float
    ) -> RemainingAtHomeResult:
        with LoggingContext(list_id=list_id):
            entry = self.get(list_id)
            result = reconcile.apply_remaining_at_home(entry, target, remaining)
            if result is None:
                raise ItemNotFoundError(list_id, self._target_label(target))
            self.list_store.update(entry)
            if result.auto_canceled:
                logger.info(f"Item {result.item.name!r} canceled, enough at home")
            return result
