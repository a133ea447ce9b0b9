"""SQLAlchemy implementation of the Store contract.

Concurrent writes for the same user rely on database primitives rather
than read-modify-write in Python:

- swipes, saved recipes and unlocks use INSERT ... ON CONFLICT on their
  composite primary keys
- popularity/likes use UPDATE ... SET x = x + 1
- streak updates lock the user row (SELECT ... FOR UPDATE)
"""

import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Generator

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import StoreError
from ..models import (
    AchievementDefinition,
    MealHistoryEntry,
    Recipe,
    SavedRecipe,
    Swipe,
    SwipeDirection,
    User,
    UserAchievement,
)
from .base import Store

logger = logging.getLogger(__name__)


class SQLStore(Store):
    """Store backed by a SQLAlchemy session (PostgreSQL or SQLite)."""

    def __init__(self, db_session: Session):
        self.db = db_session

    def _insert(self, model):
        """Dialect-specific INSERT that supports ON CONFLICT clauses."""
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(model.__table__)
        if dialect == "sqlite":
            return sqlite.insert(model.__table__)
        raise StoreError(f"Unsupported database dialect: {dialect}")

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Transaction rolled back: {e}")
            raise StoreError("Failed to persist changes") from e
        except Exception:
            self.db.rollback()
            raise

    # =========================================================================
    # Users
    # =========================================================================

    def get_user(self, user_id: str) -> User | None:
        return self.db.get(User, user_id)

    def lock_user(self, user_id: str) -> User | None:
        # populate_existing so a stale identity-map copy is not reused
        return self.db.execute(
            select(User)
            .where(User.id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def update_streak(
        self, user: User, current: int, longest: int, last_meal_date: date
    ) -> None:
        user.current_streak = current
        user.longest_streak = longest
        user.last_meal_date = last_meal_date
        self.db.flush()

    # =========================================================================
    # Recipes
    # =========================================================================

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        return self.db.get(Recipe, recipe_id)

    def list_active_recipes(self) -> list[Recipe]:
        return list(
            self.db.scalars(
                select(Recipe)
                .where(Recipe.active.is_(True))
                .order_by(Recipe.popularity.desc(), Recipe.id)
            )
        )

    def similar_recipes(self, recipe: Recipe, limit: int) -> list[Recipe]:
        if not recipe.cuisine:
            return []
        return list(
            self.db.scalars(
                select(Recipe)
                .where(
                    Recipe.active.is_(True),
                    Recipe.cuisine == recipe.cuisine,
                    Recipe.id != recipe.id,
                )
                .order_by(Recipe.popularity.desc(), Recipe.id)
                .limit(limit)
            )
        )

    def increment_popularity(self, recipe_id: str) -> None:
        self.db.execute(
            update(Recipe)
            .where(Recipe.id == recipe_id)
            .values(popularity=Recipe.popularity + 1, likes=Recipe.likes + 1)
            .execution_options(synchronize_session=False)
        )
        # Identity-map copies must not keep the pre-increment counters
        recipe = self.db.get(Recipe, recipe_id)
        if recipe is not None:
            self.db.expire(recipe, ["popularity", "likes"])

    # =========================================================================
    # Swipes and saved recipes
    # =========================================================================

    def get_swipes(self, user_id: str) -> dict[str, SwipeDirection]:
        rows = self.db.execute(
            select(Swipe.recipe_id, Swipe.direction)
            .where(Swipe.user_id == user_id)
            .order_by(Swipe.swiped_at, Swipe.recipe_id)
        )
        return {recipe_id: direction for recipe_id, direction in rows}

    def upsert_swipe(
        self, user_id: str, recipe_id: str, direction: SwipeDirection, at: datetime
    ) -> None:
        stmt = self._insert(Swipe).values(
            user_id=user_id, recipe_id=recipe_id, direction=direction, swiped_at=at
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "recipe_id"],
            set_={"direction": stmt.excluded.direction, "swiped_at": stmt.excluded.swiped_at},
        )
        self.db.execute(stmt)

    def add_saved_recipe(self, user_id: str, recipe_id: str, at: datetime) -> bool:
        stmt = (
            self._insert(SavedRecipe)
            .values(user_id=user_id, recipe_id=recipe_id, saved_at=at)
            .on_conflict_do_nothing(
                index_elements=["user_id", "recipe_id"]
            )
        )
        return self.db.execute(stmt).rowcount == 1

    def remove_saved_recipe(self, user_id: str, recipe_id: str) -> bool:
        result = self.db.execute(
            delete(SavedRecipe).where(
                SavedRecipe.user_id == user_id, SavedRecipe.recipe_id == recipe_id
            )
        )
        return result.rowcount > 0

    def list_saved_recipes(self, user_id: str) -> list[Recipe]:
        return list(
            self.db.scalars(
                select(Recipe)
                .join(SavedRecipe, SavedRecipe.recipe_id == Recipe.id)
                .where(SavedRecipe.user_id == user_id)
                .order_by(SavedRecipe.saved_at.desc(), Recipe.id)
            )
        )

    def count_saved_recipes(self, user_id: str) -> int:
        return self.db.scalar(
            select(func.count()).select_from(SavedRecipe).where(SavedRecipe.user_id == user_id)
        )

    # =========================================================================
    # Meal history
    # =========================================================================

    def add_meal(
        self,
        user_id: str,
        recipe_id: str,
        rating: int | None,
        eaten_at: datetime,
        notes: str | None = None,
    ) -> MealHistoryEntry:
        entry = MealHistoryEntry(
            user_id=user_id, recipe_id=recipe_id, rating=rating, notes=notes, eaten_at=eaten_at
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def recent_meals(self, user_id: str, limit: int) -> list[MealHistoryEntry]:
        entries = list(
            self.db.scalars(
                select(MealHistoryEntry)
                .where(MealHistoryEntry.user_id == user_id)
                .order_by(MealHistoryEntry.eaten_at.desc(), MealHistoryEntry.id.desc())
                .limit(limit)
            )
        )
        return list(reversed(entries))

    def list_meals(self, user_id: str) -> list[MealHistoryEntry]:
        return list(
            self.db.scalars(
                select(MealHistoryEntry)
                .where(MealHistoryEntry.user_id == user_id)
                .order_by(MealHistoryEntry.eaten_at.desc(), MealHistoryEntry.id.desc())
            )
        )

    def count_meals(self, user_id: str) -> int:
        return self.db.scalar(
            select(func.count())
            .select_from(MealHistoryEntry)
            .where(MealHistoryEntry.user_id == user_id)
        )

    # =========================================================================
    # Achievements
    # =========================================================================

    def list_achievement_definitions(self) -> list[AchievementDefinition]:
        return list(
            self.db.scalars(
                select(AchievementDefinition).order_by(
                    AchievementDefinition.type, AchievementDefinition.requirement, AchievementDefinition.id
                )
            )
        )

    def get_achievement_definition(
        self, achievement_id: str
    ) -> AchievementDefinition | None:
        return self.db.get(AchievementDefinition, achievement_id)

    def unlocked_achievements(self, user_id: str) -> dict[str, datetime]:
        rows = self.db.execute(
            select(UserAchievement.achievement_id, UserAchievement.unlocked_at).where(
                UserAchievement.user_id == user_id
            )
        )
        return {achievement_id: unlocked_at for achievement_id, unlocked_at in rows}

    def insert_unlock(self, user_id: str, achievement_id: str, at: datetime) -> bool:
        stmt = (
            self._insert(UserAchievement)
            .values(user_id=user_id, achievement_id=achievement_id, unlocked_at=at)
            .on_conflict_do_nothing(
                index_elements=["user_id", "achievement_id"]
            )
        )
        return self.db.execute(stmt).rowcount == 1
