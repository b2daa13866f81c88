"""API routes for the editable list of store aisles."""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from recipe2shop.database import get_db
from recipe2shop.logging_config import get_logger
from recipe2shop.schemas import CamelModel
from recipe2shop.storage.sql import SqlAisleStore, SqlRecipeStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/aisles", tags=["aisles"])


class AisleRequest(CamelModel):
    name: str


class LoadFromRecipesResponse(CamelModel):
    """Aisles added from the recipe catalog."""

    added: list[str]


def get_aisle_store(db: Session = Depends(get_db)) -> SqlAisleStore:
    return SqlAisleStore(db)


@router.get("/", response_model=list[str])
def list_aisles(store: SqlAisleStore = Depends(get_aisle_store)) -> list[str]:
    """List aisles by name. The default aisles are created on first call."""
    return store.list_all()


@router.post("/", response_model=list[str], status_code=status.HTTP_201_CREATED)
def add_aisle(
    request: AisleRequest,
    store: SqlAisleStore = Depends(get_aisle_store),
) -> list[str]:
    """Add an aisle and return the updated list."""
    if not request.name.strip():
        raise HTTPException(status_code=422, detail="Aisle name must not be blank")
    if not store.add(request.name):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Aisle {request.name.strip()!r} already exists",
        )
    logger.info(f"Added aisle {request.name.strip()!r}")
    return store.list_all()


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
def remove_aisle(
    name: str,
    store: SqlAisleStore = Depends(get_aisle_store),
) -> Response:
    """Remove an aisle from the list. Recipes using it keep their category."""
    if not store.remove(name):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Aisle {name!r} not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/load-from-recipes", response_model=LoadFromRecipesResponse)
def load_aisles_from_recipes(db: Session = Depends(get_db)) -> LoadFromRecipesResponse:
    """Add every ingredient category used in the catalog to the aisle list."""
    added = SqlAisleStore(db).load_from_recipes(SqlRecipeStore(db))
    return LoadFromRecipesResponse(added=added)
