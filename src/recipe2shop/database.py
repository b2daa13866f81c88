"""Database configuration and session management."""

from collections.abc import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from recipe2shop.config import settings

_SQL_ECHO = settings.environment.lower() == "development" and settings.log_level.upper() == "DEBUG"
_CONNECT_ARGS = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


engine = create_engine(settings.database_url, echo=_SQL_ECHO, connect_args=_CONNECT_ARGS)
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)


def init_db() -> None:
    """Create database tables if they don't exist."""
    # Import models so they register on Base.metadata
    from recipe2shop import models  # noqa: F401

    Base.metadata.create_all(engine)


def get_db() -> Iterator[Session]:
    """Dependency for FastAPI endpoints."""
    with SessionLocal() as session:
        yield session
