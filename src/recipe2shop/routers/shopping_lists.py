"""API routes for shopping list generation and user corrections."""

import datetime as dt
from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import PlainTextResponse
from pydantic import Field
from sqlalchemy.orm import Session

from recipe2shop.config import settings
from recipe2shop.database import get_db
from recipe2shop.logging_config import get_logger
from recipe2shop.normalize.units import InvalidQuantityError, parse_quantity_input
from recipe2shop.plan.formatting import (
    display_quantity,
    format_date_range,
    group_items_for_display,
    has_fractional_sources,
    render_text,
    source_breakdown,
)
from recipe2shop.plan.lookups import (
    CategoryEmojiLookup,
    IngredientEmojiLookup,
    load_ingredient_emojis,
)
from recipe2shop.plan.service import (
    ItemNotFoundError,
    ShoppingListNotFoundError,
    ShoppingListService,
)
from recipe2shop.plan.shopping_list import SkippedAssignment
from recipe2shop.schemas import (
    CamelModel,
    MealSlot,
    MissingMeal,
    ShoppingListEntry,
    ShoppingListItem,
)
from recipe2shop.storage.sql import SqlAssignmentStore, SqlRecipeStore, SqlShoppingListStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/shopping-lists", tags=["shopping-lists"])


# =============================================================================
# Request/Response Schemas
# =============================================================================


class GenerateRequest(CamelModel):
    """Date range to generate or refresh a list for."""

    start_date: dt.date
    end_date: dt.date


class SkippedAssignmentSchema(CamelModel):
    """Planned meal that contributed nothing."""

    date: dt.date
    meal_slot: MealSlot
    recipe_id: str | None = None
    reason: str


class GenerateResponse(CamelModel):
    """Generated list, whether it was new, and the skipped meals."""

    shopping_list: ShoppingListEntry
    created: bool
    skipped: list[SkippedAssignmentSchema] = Field(default_factory=list)


class PrecheckResponse(CamelModel):
    """Meal slots with nothing planned in a date range."""

    complete: bool
    missing: list[MissingMeal]


class ShoppingListSummary(CamelModel):
    id: str
    start_date: dt.date
    end_date: dt.date
    created_at: dt.datetime
    item_count: int
    remaining_count: int


class ManualItemRequest(CamelModel):
    """Item typed by the user. Quantity accepts "1,5", "1/2" or a number."""

    name: str
    quantity: str | float | None = None
    unit: str | None = None
    category: str | None = None


class CheckRequest(CamelModel):
    checked: bool = True


class RemainingRequest(CamelModel):
    """Quantity of the item already at home."""

    remaining: str | float


class RemainingResponse(CamelModel):
    item: ShoppingListItem
    auto_canceled: bool
    message: str | None = None


class DisplayItem(CamelModel):
    id: str
    name: str
    emoji: str | None = None
    quantity: float
    display_quantity: str
    unit: str
    checked: bool
    canceled: bool
    manual: bool
    has_fractional_sources: bool
    sources: list[str] = Field(default_factory=list)


class DisplayGroup(CamelModel):
    heading: str
    label: str
    canceled: bool
    items: list[DisplayItem]


class DisplayResponse(CamelModel):
    """List grouped by category, ready to render."""

    id: str
    title: str
    subtitle: str
    groups: list[DisplayGroup]


class TaskTriggerResponse(CamelModel):
    task_id: str
    status: str
    message: str


# =============================================================================
# Dependencies
# =============================================================================


def get_service(db: Session = Depends(get_db)) -> ShoppingListService:
    """Shopping list service bound to the request's session."""
    return ShoppingListService(
        SqlRecipeStore(db),
        SqlAssignmentStore(db),
        SqlShoppingListStore(db),
    )


@lru_cache
def get_category_emojis() -> CategoryEmojiLookup:
    return CategoryEmojiLookup()


@lru_cache
def get_ingredient_emojis() -> IngredientEmojiLookup:
    return load_ingredient_emojis(settings.ingredient_emoji_file)


def _validate_range(start: dt.date, end: dt.date) -> None:
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="End date must be after start date",
        )


def _parse_quantity(raw: str | float | None) -> float:
    try:
        return parse_quantity_input(raw)
    except InvalidQuantityError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _skipped_schema(skipped: SkippedAssignment) -> SkippedAssignmentSchema:
    return SkippedAssignmentSchema(
        date=skipped.assignment.date,
        meal_slot=skipped.assignment.meal_slot,
        recipe_id=skipped.assignment.recipe_id,
        reason=skipped.reason,
    )


def _not_found(e: LookupError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


# =============================================================================
# Lists
# =============================================================================


@router.get("/", response_model=list[ShoppingListSummary])
def list_shopping_lists(
    service: ShoppingListService = Depends(get_service),
) -> list[ShoppingListSummary]:
    """List all shopping lists, most recent first."""
    return [
        ShoppingListSummary(
            id=entry.id,
            start_date=entry.start_date,
            end_date=entry.end_date,
            created_at=entry.created_at,
            item_count=len(entry.items),
            remaining_count=sum(
                1 for item in entry.items if not item.canceled and not item.checked
            ),
        )
        for entry in service.list_all()
    ]


@router.get("/precheck", response_model=PrecheckResponse)
def precheck_shopping_list(
    start_date: Annotated[dt.date, Query(description="First day of the list")],
    end_date: Annotated[dt.date, Query(description="Last day of the list")],
    service: ShoppingListService = Depends(get_service),
) -> PrecheckResponse:
    """
    List the meal slots with nothing planned.

    Call before the first generation to warn the user that some meals are
    missing.
    """
    _validate_range(start_date, end_date)
    missing = service.precheck(start_date, end_date)
    return PrecheckResponse(complete=not missing, missing=missing)


@router.post("/", response_model=GenerateResponse)
def generate_shopping_list(
    request: GenerateRequest,
    service: ShoppingListService = Depends(get_service),
) -> GenerateResponse:
    """
    Generate the shopping list for a date range, or refresh the existing one.

    Refreshing keeps manual items, checked items and cancellations.
    """
    _validate_range(request.start_date, request.end_date)
    logger.info(f"Generating shopping list: {request.start_date} to {request.end_date}")

    result = service.generate(request.start_date, request.end_date)
    return GenerateResponse(
        shopping_list=result.entry,
        created=result.created,
        skipped=[_skipped_schema(skipped) for skipped in result.skipped],
    )


@router.post("/regenerate-async", response_model=TaskTriggerResponse)
def trigger_regeneration(request: GenerateRequest) -> TaskTriggerResponse:
    """Queue the regeneration of a list as a background task."""
    from recipe2shop.tasks.regeneration import regenerate_shopping_list_task

    _validate_range(request.start_date, request.end_date)

    try:
        task = regenerate_shopping_list_task.delay(
            request.start_date.isoformat(),
            request.end_date.isoformat(),
        )
    except Exception as e:
        logger.error(f"Failed to queue regeneration task: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to queue regeneration task",
        )

    return TaskTriggerResponse(
        task_id=task.id,
        status="queued",
        message="Shopping list regeneration has been queued",
    )


@router.get("/{list_id}", response_model=ShoppingListEntry)
def get_shopping_list(
    list_id: str,
    service: ShoppingListService = Depends(get_service),
) -> ShoppingListEntry:
    try:
        return service.get(list_id)
    except ShoppingListNotFoundError as e:
        raise _not_found(e)


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shopping_list(
    list_id: str,
    service: ShoppingListService = Depends(get_service),
) -> Response:
    try:
        service.delete(list_id)
    except ShoppingListNotFoundError as e:
        raise _not_found(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{list_id}/display", response_model=DisplayResponse)
def display_shopping_list(
    list_id: str,
    service: ShoppingListService = Depends(get_service),
    category_emojis: CategoryEmojiLookup = Depends(get_category_emojis),
    ingredient_emojis: IngredientEmojiLookup = Depends(get_ingredient_emojis),
) -> DisplayResponse:
    """Shopping list grouped by category, canceled items last."""
    try:
        entry = service.get(list_id)
    except ShoppingListNotFoundError as e:
        raise _not_found(e)

    groups = [
        DisplayGroup(
            heading=group.heading,
            label=group.label,
            canceled=group.canceled,
            items=[
                DisplayItem(
                    id=item.id,
                    name=item.name,
                    emoji=ingredient_emojis.emoji_for_name(item.name),
                    quantity=item.quantity,
                    display_quantity=display_quantity(item),
                    unit=item.unit,
                    checked=item.checked,
                    canceled=item.canceled,
                    manual=item.is_manual,
                    has_fractional_sources=has_fractional_sources(item),
                    sources=source_breakdown(item),
                )
                for item in group.items
            ],
        )
        for group in group_items_for_display(entry.items, category_emojis)
    ]
    return DisplayResponse(
        id=entry.id,
        title=settings.shopping_list_title,
        subtitle=format_date_range(entry.start_date, entry.end_date),
        groups=groups,
    )


@router.get("/{list_id}/export.txt", response_class=PlainTextResponse)
def export_shopping_list_text(
    list_id: str,
    service: ShoppingListService = Depends(get_service),
    category_emojis: CategoryEmojiLookup = Depends(get_category_emojis),
    ingredient_emojis: IngredientEmojiLookup = Depends(get_ingredient_emojis),
) -> PlainTextResponse:
    """Plain-text export of the list, for sharing or printing."""
    try:
        entry = service.get(list_id)
    except ShoppingListNotFoundError as e:
        raise _not_found(e)

    text = render_text(
        entry,
        category_emojis=category_emojis,
        ingredient_emojis=ingredient_emojis,
    )
    return PlainTextResponse(text)


# =============================================================================
# Items
# =============================================================================


@router.post(
    "/{list_id}/items",
    response_model=ShoppingListItem,
    status_code=status.HTTP_201_CREATED,
)
def add_manual_item(
    list_id: str,
    request: ManualItemRequest,
    service: ShoppingListService = Depends(get_service),
) -> ShoppingListItem:
    """Add an item by hand. Regeneration never changes it."""
    if not request.name.strip():
        raise HTTPException(
            status_code=422,
            detail="Item name must not be blank",
        )
    quantity = _parse_quantity(request.quantity)

    try:
        return service.add_manual_item(
            list_id,
            request.name,
            quantity=quantity,
            unit=request.unit,
            category=request.category,
        )
    except ShoppingListNotFoundError as e:
        raise _not_found(e)


@router.post("/{list_id}/items/{item_id}/check", response_model=ShoppingListItem)
def check_item(
    list_id: str,
    item_id: str,
    request: CheckRequest | None = None,
    service: ShoppingListService = Depends(get_service),
) -> ShoppingListItem:
    """Check or uncheck an item. Canceled items stay unchecked."""
    checked = request.checked if request else True
    try:
        return service.set_checked(list_id, item_id, checked)
    except (ShoppingListNotFoundError, ItemNotFoundError) as e:
        raise _not_found(e)


@router.post("/{list_id}/items/{item_id}/cancel", response_model=ShoppingListItem)
def cancel_item(
    list_id: str,
    item_id: str,
    service: ShoppingListService = Depends(get_service),
) -> ShoppingListItem:
    try:
        return service.cancel(list_id, item_id)
    except (ShoppingListNotFoundError, ItemNotFoundError) as e:
        raise _not_found(e)


@router.post("/{list_id}/items/{item_id}/restore", response_model=ShoppingListItem)
def restore_item(
    list_id: str,
    item_id: str,
    service: ShoppingListService = Depends(get_service),
) -> ShoppingListItem:
    try:
        return service.restore(list_id, item_id)
    except (ShoppingListNotFoundError, ItemNotFoundError) as e:
        raise _not_found(e)


@router.post("/{list_id}/items/{item_id}/remaining", response_model=RemainingResponse)
def apply_remaining(
    list_id: str,
    item_id: str,
    request: RemainingRequest,
    service: ShoppingListService = Depends(get_service),
) -> RemainingResponse:
    """
    Record how much of an item is already at home.

    The item is canceled when nothing is left to buy.
    """
    if isinstance(request.remaining, str) and not request.remaining.strip():
        # Blank only defaults to 1 when adding an item
        raise HTTPException(status_code=422, detail="Remaining quantity must not be blank")
    remaining = _parse_quantity(request.remaining)

    try:
        result = service.apply_remaining_at_home(list_id, item_id, remaining)
    except (ShoppingListNotFoundError, ItemNotFoundError) as e:
        raise _not_found(e)

    return RemainingResponse(
        item=result.item,
        auto_canceled=result.auto_canceled,
        message=result.message,
    )
