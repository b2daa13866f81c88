"""Pytest configuration and shared fixtures."""

import datetime as dt
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from recipe2shop.database import Base, get_db
from recipe2shop.main import app
from recipe2shop.schemas import (
    MealAssignment,
    Recipe,
    ShoppingListEntry,
    ShoppingListItem,
)
from recipe2shop.storage.base import AssignmentStore, RecipeStore, ShoppingListStore

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "api: marks tests that go through the HTTP API")
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# In-memory Stores
# =============================================================================


class InMemoryRecipeStore(RecipeStore):
    def __init__(self, recipes: list[Recipe] | None = None):
        self.recipes = {recipe.id: recipe for recipe in recipes or []}

    def get(self, recipe_id: str) -> Recipe | None:
        return self.recipes.get(recipe_id)


class InMemoryAssignmentStore(AssignmentStore):
    def __init__(self, assignments: list[MealAssignment] | None = None):
        self.assignments = list(assignments or [])

    def get_assignments_between(self, start: dt.date, end: dt.date) -> list[MealAssignment]:
        return sorted(
            (a for a in self.assignments if start <= a.date <= end),
            key=lambda a: a.date,
        )


class InMemoryShoppingListStore(ShoppingListStore):
    """Stores deep copies, like a real store that serializes on write."""

    def __init__(self):
        self.entries: dict[str, ShoppingListEntry] = {}
        self.update_count = 0

    def load(self, list_id: str) -> ShoppingListEntry | None:
        entry = self.entries.get(list_id)
        return entry.model_copy(deep=True) if entry else None

    def find_by_range(self, start: dt.date, end: dt.date) -> ShoppingListEntry | None:
        for entry in self.entries.values():
            if entry.start_date == start and entry.end_date == end:
                return entry.model_copy(deep=True)
        return None

    def list_all(self) -> list[ShoppingListEntry]:
        return sorted(
            (entry.model_copy(deep=True) for entry in self.entries.values()),
            key=lambda entry: entry.start_date,
            reverse=True,
        )

    def create(
        self, start: dt.date, end: dt.date, items: list[ShoppingListItem]
    ) -> ShoppingListEntry:
        entry = ShoppingListEntry(
            id=str(uuid.uuid4()),
            start_date=start,
            end_date=end,
            items=[item.model_copy(deep=True) for item in items],
        )
        self.entries[entry.id] = entry
        return entry.model_copy(deep=True)

    def update(self, entry: ShoppingListEntry) -> ShoppingListEntry:
        if entry.id not in self.entries:
            raise LookupError(entry.id)
        self.entries[entry.id] = entry.model_copy(deep=True)
        self.update_count += 1
        return entry.model_copy(deep=True)

    def delete(self, list_id: str) -> bool:
        return self.entries.pop(list_id, None) is not None


# =============================================================================
# Recipe Fixtures
# =============================================================================


def make_recipe(
    recipe_id: str,
    name: str,
    servings: int,
    ingredients: list[tuple[str, str, float, str]],
) -> Recipe:
    """Build a recipe from (name, category, amount, unit) tuples."""
    return Recipe.model_validate(
        {
            "id": recipe_id,
            "name": name,
            "servings": servings,
            "ingredients": [
                {"name": n, "category": c, "quantity": [{"nb": amount, "unit": unit}]}
                for n, c, amount, unit in ingredients
            ],
        }
    )


@pytest.fixture
def pasta_recipe() -> Recipe:
    """Pasta, serves 2, two tomatoes."""
    return make_recipe("pasta", "Pasta", 2, [("Tomato", "Veg", 2, "pc")])


@pytest.fixture
def salad_recipe() -> Recipe:
    """Salad, serves 1."""
    return make_recipe(
        "salad",
        "Salad",
        1,
        [("tomatoes ", "Veg", 1, "pc"), ("Lettuce", "Veg", 0.5, "piece"), ("Oil", "", 1, "")],
    )


@pytest.fixture
def monday() -> dt.date:
    return dt.date(2025, 1, 6)


@pytest.fixture
def recipe_store(pasta_recipe, salad_recipe) -> InMemoryRecipeStore:
    return InMemoryRecipeStore([pasta_recipe, salad_recipe])


@pytest.fixture
def list_store() -> InMemoryShoppingListStore:
    return InMemoryShoppingListStore()


@pytest.fixture
def sample_document() -> dict:
    """Recipe document in the JSON export format."""
    return {
        "version": "1.0",
        "recipes": [
            {
                "id": "r-quiche",
                "name": "Quiche lorraine",
                "description": "Classic quiche",
                "servings": 4,
                "workTime": 20,
                "prepTime": 15,
                "cookTime": 40,
                "totalTime": 75,
                "types": ["main"],
                "tags": ["oven"],
                "ingredients": [
                    {
                        "name": "Eggs",
                        "category": "Dairy",
                        "quantity": [{"nb": 3, "unit": "piece"}],
                    },
                    {
                        "name": "Lardons",
                        "category": "Meat",
                        "quantity": [{"nb": 200, "unit": "g"}, {"nb": 1, "unit": "pack"}],
                        "notes": "smoked",
                    },
                ],
                "steps": [
                    {
                        "stepOrder": 2,
                        "title": "Bake",
                        "duration": 40,
                        "temperature": "180C",
                        "subSteps": [
                            {"subStepOrder": 1, "instruction": "Bake until golden."},
                        ],
                    },
                    {
                        "stepOrder": 1,
                        "title": "Filling",
                        "ingredients": [
                            {"ingredientName": "Eggs", "quantity": 3, "unit": "piece"},
                        ],
                        "subSteps": [
                            {"subStepOrder": 2, "instruction": "Add the lardons."},
                            {
                                "subStepOrder": 1,
                                "instruction": "Beat the eggs.",
                                "instructionFalc": "Break the eggs in a bowl and mix.",
                            },
                        ],
                    },
                ],
                "metadata": {
                    "createdAt": 1700000000000,
                    "updatedAt": 1700000000000,
                    "source": "book",
                    "author": "someone",
                    "favorite": True,
                    "rating": 2,
                },
            }
        ],
    }


# =============================================================================
# SQLite Test Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite engine shared across connections.

    Creates all tables and drops them after each test.
    """
    from recipe2shop import models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(test_db_engine):
    """Create a test database session."""
    with Session(test_db_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def test_session_factory(test_db_engine):
    return sessionmaker(bind=test_db_engine, expire_on_commit=False)


@pytest.fixture
def client(test_session_factory):
    """API client using the test database."""

    def override_get_db():
        with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
