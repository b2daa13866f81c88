"""API routes for planning recipes on dates and meal slots."""

import datetime as dt
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from recipe2shop.database import get_db
from recipe2shop.logging_config import get_logger
from recipe2shop.schemas import CamelModel, MealAssignment, MealSlot
from recipe2shop.storage.sql import SqlAssignmentStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/meal-plans", tags=["meal-plans"])


class RemoveResponse(CamelModel):
    removed: int


def get_assignment_store(db: Session = Depends(get_db)) -> SqlAssignmentStore:
    return SqlAssignmentStore(db)


@router.get("/assignments", response_model=list[MealAssignment])
def list_assignments(
    start_date: Annotated[dt.date, Query(description="First day")],
    end_date: Annotated[dt.date, Query(description="Last day")],
    store: SqlAssignmentStore = Depends(get_assignment_store),
) -> list[MealAssignment]:
    """List planned meals in a date range, by date."""
    if end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="End date must be after start date",
        )
    return store.get_assignments_between(start_date, end_date)


@router.put("/assignments", response_model=MealAssignment)
def assign_meal(
    assignment: MealAssignment,
    store: SqlAssignmentStore = Depends(get_assignment_store),
) -> MealAssignment:
    """Plan a recipe in a slot, replacing what was there."""
    logger.info(
        f"Assigning {assignment.recipe_id} to {assignment.date} {assignment.meal_slot} "
        f"({assignment.portions} portions)"
    )
    return store.assign(assignment)


@router.post(
    "/assignments",
    response_model=MealAssignment,
    status_code=status.HTTP_201_CREATED,
)
def add_meal(
    assignment: MealAssignment,
    store: SqlAssignmentStore = Depends(get_assignment_store),
) -> MealAssignment:
    """Add a dish to a slot, next to what is already planned."""
    return store.add(assignment)


@router.delete("/assignments", response_model=RemoveResponse)
def remove_meal(
    date: Annotated[dt.date, Query(description="Day of the slot")],
    meal_slot: Annotated[MealSlot, Query(description="lunch or dinner")],
    recipe_id: Annotated[str | None, Query(description="Only remove this recipe")] = None,
    store: SqlAssignmentStore = Depends(get_assignment_store),
) -> RemoveResponse:
    """Remove dishes from a slot."""
    removed = store.remove(date, meal_slot, recipe_id)
    return RemoveResponse(removed=removed)
