"""Celery task regenerating shopping lists in the background."""

import datetime as dt
from typing import Any

from sqlalchemy.orm import Session

from recipe2shop.celery_app import celery_app
from recipe2shop.database import SessionLocal
from recipe2shop.logging_config import LoggingContext, configure_logging, get_logger
from recipe2shop.plan.service import ShoppingListService
from recipe2shop.storage.sql import SqlAssignmentStore, SqlRecipeStore, SqlShoppingListStore

# Configure logging for Celery workers
configure_logging()
logger = get_logger(__name__)


def regenerate_in_session(session: Session, start: dt.date, end: dt.date) -> dict[str, Any]:
    """Regenerate the list for a date range and summarize the result."""
    service = ShoppingListService(
        SqlRecipeStore(session),
        SqlAssignmentStore(session),
        SqlShoppingListStore(session),
    )
    result = service.generate(start, end)
    return {
        "list_id": result.entry.id,
        "created": result.created,
        "items": len(result.entry.items),
        "skipped": [
            {
                "date": skipped.assignment.date.isoformat(),
                "meal_slot": skipped.assignment.meal_slot,
                "recipe_id": skipped.assignment.recipe_id,
                "reason": skipped.reason,
            }
            for skipped in result.skipped
        ],
    }


@celery_app.task(
    bind=True,
    name="recipe2shop.tasks.regeneration.regenerate_shopping_list_task",
    acks_late=True,
    reject_on_worker_lost=True,
)
def regenerate_shopping_list_task(self, start_date: str, end_date: str) -> dict[str, Any]:
    """
    Celery task to regenerate the shopping list of a date range.

    Args:
        start_date: First day, ISO format.
        end_date: Last day, ISO format.

    Returns:
        dict with list_id, created, items count and skipped assignments.
    """
    task_id = self.request.id

    with LoggingContext(task_id=task_id):
        logger.info(f"Starting regeneration task {task_id} ({start_date} to {end_date})")

        start = dt.date.fromisoformat(start_date)
        end = dt.date.fromisoformat(end_date)

        with SessionLocal() as session:
            try:
                summary = regenerate_in_session(session, start, end)
            except Exception as e:
                logger.error(f"Regeneration task {task_id} failed: {e}")
                raise

        logger.info(
            f"Regeneration task {task_id} completed: list {summary['list_id']}, "
            f"{summary['items']} items"
        )
        return summary
