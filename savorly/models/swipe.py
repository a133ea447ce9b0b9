"""Swipe ledger and saved-recipe set."""

import enum
from datetime import datetime

from sqlalchemy import String, DateTime, Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class SwipeDirection(str, enum.Enum):
    """Direction of a swipe on a recipe card."""

    LEFT = "left"
    RIGHT = "right"


class Swipe(Base):
    """One row per (user, recipe); a later swipe overwrites the direction."""

    __tablename__ = "swipes"

    user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("users.id"), primary_key=True
    )
    recipe_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("recipes.id"), primary_key=True
    )
    direction: Mapped[SwipeDirection] = mapped_column(
        Enum(SwipeDirection, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    swiped_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Swipe(user='{self.user_id}', recipe='{self.recipe_id}', direction={self.direction.value})>"


class SavedRecipe(Base):
    """Recipes a user swiped right on and has not removed."""

    __tablename__ = "saved_recipes"

    user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("users.id"), primary_key=True
    )
    recipe_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("recipes.id"), primary_key=True
    )
    saved_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<SavedRecipe(user='{self.user_id}', recipe='{self.recipe_id}')>"
