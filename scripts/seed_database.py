#!/usr/bin/env python
"""
Database seeding script for local development.

It will:

1. Create the database tables if they don't exist
2. Check if recipes already exist (skip if already seeded)
3. Import a recipe document (JSON export format)
4. Optionally plan every imported recipe over the coming days

Run with: python scripts/seed_database.py

Environment Variables:
    SEED_RECIPES_FILE: Path to a recipe document (default: built-in demo recipes)
    SEED_SKIP_IF_EXISTS: Skip seeding if recipes exist (default: true)
    SEED_PLAN_DAYS: Days of dinners to plan from today, 0 to skip (default: 7)
    SEED_PORTIONS: Portions per planned meal (default: 2)
    DATABASE_URL: Database connection string
"""

import datetime as dt
import os
import sys
from pathlib import Path

from sqlalchemy import func, select

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from recipe2shop.database import SessionLocal, init_db
from recipe2shop.logging_config import configure_logging, get_logger
from recipe2shop.models import RecipeRecord
from recipe2shop.recipes.format import load_recipe_document
from recipe2shop.schemas import MealAssignment, RecipeDocument
from recipe2shop.storage.sql import SqlAssignmentStore, SqlRecipeStore

# Configure logging
configure_logging(log_level=os.getenv("LOG_LEVEL", "INFO"))
logger = get_logger(__name__)

# Configuration from environment
SEED_RECIPES_FILE = os.getenv("SEED_RECIPES_FILE")
SEED_SKIP_IF_EXISTS = os.getenv("SEED_SKIP_IF_EXISTS", "true").lower() == "true"
SEED_PLAN_DAYS = int(os.getenv("SEED_PLAN_DAYS", "7"))
SEED_PORTIONS = int(os.getenv("SEED_PORTIONS", "2"))

DEMO_RECIPES = {
    "version": "1.0",
    "recipes": [
        {
            "id": "demo-pasta-tomato",
            "name": "Pasta with tomato sauce",
            "servings": 2,
            "totalTime": 25,
            "ingredients": [
                {"name": "Pasta", "category": "Pantry", "quantity": [{"nb": 200, "unit": "g"}]},
                {"name": "Tomatoes", "category": "Vegetables", "quantity": [{"nb": 4, "unit": "piece"}]},
                {"name": "Garlic", "category": "Vegetables", "quantity": [{"nb": 1, "unit": "clove"}]},
                {"name": "Olive oil", "category": "Oils", "quantity": [{"nb": 2, "unit": "tbsp"}]},
            ],
            "steps": [
                {
                    "stepOrder": 1,
                    "title": "Sauce",
                    "subSteps": [
                        {"subStepOrder": 1, "instruction": "Chop the tomatoes and garlic."},
                        {"subStepOrder": 2, "instruction": "Simmer in olive oil for 15 minutes."},
                    ],
                },
                {
                    "stepOrder": 2,
                    "title": "Pasta",
                    "subSteps": [{"subStepOrder": 1, "instruction": "Cook the pasta and mix."}],
                },
            ],
            "metadata": {"source": "manual_entry", "author": "demo"},
        },
        {
            "id": "demo-omelette",
            "name": "Cheese omelette",
            "servings": 1,
            "totalTime": 10,
            "ingredients": [
                {"name": "Eggs", "category": "Dairy", "quantity": [{"nb": 3, "unit": "piece"}]},
                {"name": "Grated cheese", "category": "Cheese", "quantity": [{"nb": 30, "unit": "g"}]},
                {"name": "Tomato", "category": "Vegetables", "quantity": [{"nb": 1, "unit": "piece"}]},
            ],
            "steps": [
                {
                    "stepOrder": 1,
                    "subSteps": [
                        {"subStepOrder": 1, "instruction": "Beat the eggs, add the cheese."},
                        {"subStepOrder": 2, "instruction": "Cook in a hot pan."},
                    ],
                }
            ],
            "metadata": {"source": "manual_entry", "author": "demo"},
        },
    ],
}


def load_document() -> RecipeDocument:
    """Read the seed document from SEED_RECIPES_FILE, or use the demo recipes."""
    if SEED_RECIPES_FILE:
        logger.info(f"Loading recipes from {SEED_RECIPES_FILE}")
        return load_recipe_document(Path(SEED_RECIPES_FILE).read_text(encoding="utf-8"))
    logger.info("Using built-in demo recipes")
    return RecipeDocument.model_validate(DEMO_RECIPES)


def seed_database() -> dict:
    """Run the seeding process."""
    results = {"status": "unknown", "recipes_imported": 0, "meals_planned": 0}

    init_db()

    with SessionLocal() as session:
        existing_count = session.scalar(select(func.count()).select_from(RecipeRecord)) or 0
        logger.info(f"Found {existing_count} existing recipes")

        if SEED_SKIP_IF_EXISTS and existing_count > 0:
            logger.info("Database already has recipes, skipping seed")
            results["status"] = "skipped"
            return results

        recipes = SqlRecipeStore(session).import_document(load_document())
        results["recipes_imported"] = len(recipes)

        if recipes and SEED_PLAN_DAYS > 0:
            assignments = SqlAssignmentStore(session)
            today = dt.date.today()
            for offset in range(SEED_PLAN_DAYS):
                recipe = recipes[offset % len(recipes)]
                assignments.assign(
                    MealAssignment(
                        date=today + dt.timedelta(days=offset),
                        meal_slot="dinner",
                        recipe_id=recipe.id,
                        portions=SEED_PORTIONS,
                    )
                )
            results["meals_planned"] = SEED_PLAN_DAYS

    results["status"] = "completed"
    logger.info(f"Seeding completed: {results}")
    return results


def main():
    """Entry point for the seed script."""
    try:
        results = seed_database()
        for key, value in results.items():
            logger.info(f"  {key}: {value}")
        sys.exit(0 if results["status"] in ("completed", "skipped") else 1)
    except KeyboardInterrupt:
        logger.info("Seeding interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Seeding failed with error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
