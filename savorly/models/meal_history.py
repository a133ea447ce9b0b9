"""Meal history model for cooked/eaten recipes."""

from datetime import datetime

from sqlalchemy import Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class MealHistoryEntry(Base):
    """A recipe the user reports having cooked, with an optional 1-5 rating and notes."""

    __tablename__ = "meal_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("users.id"), nullable=False, index=True
    )
    recipe_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("recipes.id"), nullable=False
    )
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    eaten_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<MealHistoryEntry(id={self.id}, user='{self.user_id}', recipe='{self.recipe_id}')>"
