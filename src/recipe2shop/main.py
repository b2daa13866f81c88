"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from recipe2shop.config import settings
from recipe2shop.database import engine, init_db
from recipe2shop.logging_config import LoggingContext, configure_logging, get_logger
from recipe2shop.routers import (
    aisles_router,
    meal_plans_router,
    recipes_router,
    shopping_lists_router,
)

# Configure logging on module load
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    logger.info("Starting Recipe2shop API")

    init_db()
    logger.info("Database tables initialized")

    yield

    # Shutdown
    logger.info("Shutting down Recipe2shop API")
    engine.dispose()


app = FastAPI(
    title="Recipe2shop API",
    description="Meal planning and shopping lists built from recipes",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Tag log lines of a request with its id, echoed in X-Request-ID."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    with LoggingContext(request_id=request_id):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# Include routers
app.include_router(recipes_router)
app.include_router(meal_plans_router)
app.include_router(shopping_lists_router)
app.include_router(aisles_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "recipe2shop-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Recipe2shop API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
