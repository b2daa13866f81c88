"""API routes for the recipe catalog: JSON import and export."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from recipe2shop.database import get_db
from recipe2shop.logging_config import get_logger
from recipe2shop.recipes.format import dump_recipe_document
from recipe2shop.schemas import CamelModel, Recipe, RecipeDocument
from recipe2shop.storage.sql import SqlRecipeStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])


# Request/Response schemas
class RecipeSummary(CamelModel):
    id: str
    name: str
    servings: int
    ingredient_count: int


class ImportResponse(CamelModel):
    """Result of a recipe document import."""

    imported: int
    recipe_ids: list[str]


class ReassignRequest(CamelModel):
    """Category to empty and the category receiving its ingredients."""

    old: str
    new: str


class ReassignResponse(CamelModel):
    reassigned: int


def get_recipe_store(db: Session = Depends(get_db)) -> SqlRecipeStore:
    return SqlRecipeStore(db)


@router.get("/", response_model=list[RecipeSummary])
def list_recipes(store: SqlRecipeStore = Depends(get_recipe_store)) -> list[RecipeSummary]:
    """List all recipes by name."""
    return [
        RecipeSummary(
            id=recipe.id,
            name=recipe.name,
            servings=recipe.servings,
            ingredient_count=len(recipe.ingredients),
        )
        for recipe in store.list_all()
    ]


@router.post("/import", response_model=ImportResponse, status_code=status.HTTP_201_CREATED)
def import_recipes(
    document: RecipeDocument,
    store: SqlRecipeStore = Depends(get_recipe_store),
) -> ImportResponse:
    """
    Import a recipe document.

    Recipes with the same id are replaced. Malformed quantities are repaired
    rather than rejected.
    """
    logger.info(f"Importing {len(document.recipes)} recipes")
    saved = store.import_document(document)
    return ImportResponse(imported=len(saved), recipe_ids=[recipe.id for recipe in saved])


@router.get("/export")
def export_recipes(
    ids: Annotated[list[str] | None, Query(description="Recipe IDs, all when omitted")] = None,
    store: SqlRecipeStore = Depends(get_recipe_store),
) -> Response:
    """Export recipes as a recipe document."""
    document = store.export_document(ids)
    return Response(
        content=dump_recipe_document(document),
        media_type="application/json",
    )


@router.get("/categories", response_model=list[str])
def list_categories(store: SqlRecipeStore = Depends(get_recipe_store)) -> list[str]:
    """Distinct ingredient categories used in the catalog."""
    return store.list_categories()


@router.post("/categories/reassign", response_model=ReassignResponse)
def reassign_category(
    request: ReassignRequest,
    store: SqlRecipeStore = Depends(get_recipe_store),
) -> ReassignResponse:
    """
    Move all ingredients of a category to another one, in every recipe.

    Categories are part of the merge key, so the next regeneration merges
    items under the new category.
    """
    try:
        moved = store.reassign_category(request.old, request.new)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return ReassignResponse(reassigned=moved)


@router.get(
    "/{recipe_id}",
    response_model=Recipe,
    response_model_exclude_none=True,
)
def get_recipe(
    recipe_id: str,
    store: SqlRecipeStore = Depends(get_recipe_store),
) -> Recipe:
    recipe = store.get(recipe_id)
    if recipe is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Recipe {recipe_id} not found",
        )
    return recipe


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(
    recipe_id: str,
    store: SqlRecipeStore = Depends(get_recipe_store),
) -> Response:
    """
    Delete a recipe.

    Meals already planned with it are skipped on the next regeneration.
    """
    if not store.delete(recipe_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Recipe {recipe_id} not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
