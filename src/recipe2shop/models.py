"""SQLAlchemy database models."""

import datetime as dt

from sqlalchemy import JSON, Date, DateTime, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from recipe2shop.database import Base


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class RecipeRecord(Base):
    """Recipe catalog entry, stored as its JSON document."""

    __tablename__ = "recipes"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    servings: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    document: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (Index("idx_recipes_name", "name"),)


class MealAssignmentRecord(Base):
    """Recipe planned for a date and meal slot."""

    __tablename__ = "meal_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    meal_slot: Mapped[str] = mapped_column(String(20), nullable=False)  # lunch, dinner
    # Null for a dish with no linked recipe
    recipe_id: Mapped[str | None] = mapped_column(String, nullable=True)
    portions: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=_utcnow)

    __table_args__ = (
        Index("idx_meal_assignments_date", "date"),
        Index("idx_meal_assignments_date_slot", "date", "meal_slot"),
    )


class ShoppingListRecord(Base):
    """Shopping list for a date range, items stored as JSON."""

    __tablename__ = "shopping_lists"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    start_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    end_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    items: Mapped[list] = mapped_column(JSON, default=list)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        UniqueConstraint("start_date", "end_date", name="uq_shopping_list_range"),
        Index("idx_shopping_lists_start_date", "start_date"),
    )


class AisleRecord(Base):
    """Store aisle offered as an ingredient category."""

    __tablename__ = "aisles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=_utcnow)
