"""Store interfaces consumed by the shopping list engine."""

from abc import ABC, abstractmethod
from datetime import date

from recipe2shop.schemas import MealAssignment, Recipe, ShoppingListEntry, ShoppingListItem


class RecipeStore(ABC):
    """Read access to the recipe catalog."""

    @abstractmethod
    def get(self, recipe_id: str) -> Recipe | None:
        """
        Fetch a recipe by id.

        Returns:
            The recipe, or None if it does not exist (e.g. deleted after planning).
        """
        pass


class AssignmentStore(ABC):
    """Read access to planned meals."""

    @abstractmethod
    def get_assignments_between(self, start: date, end: date) -> list[MealAssignment]:
        """
        Fetch meal assignments whose date falls in the inclusive range.

        Args:
            start: First day of the range.
            end: Last day of the range.

        Returns:
            Assignments ordered by date.
        """
        pass


class ShoppingListStore(ABC):
    """Persistence for shopping lists. Every write is atomic."""

    @abstractmethod
    def load(self, list_id: str) -> ShoppingListEntry | None:
        """Load a list by id."""
        pass

    @abstractmethod
    def find_by_range(self, start: date, end: date) -> ShoppingListEntry | None:
        """Find the list for an exact (start, end) date pair."""
        pass

    @abstractmethod
    def list_all(self) -> list[ShoppingListEntry]:
        """All lists, most recent start date first."""
        pass

    @abstractmethod
    def create(
        self, start: date, end: date, items: list[ShoppingListItem]
    ) -> ShoppingListEntry:
        """Create and persist a new list."""
        pass

    @abstractmethod
    def update(self, entry: ShoppingListEntry) -> ShoppingListEntry:
        """Replace the stored items of an existing list."""
        pass

    @abstractmethod
    def delete(self, list_id: str) -> bool:
        """
        Delete a list.

        Returns:
            True if a list was deleted, False if none had that id.
        """
        pass
