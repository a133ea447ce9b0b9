"""Repository contract the engine depends on.

The engine never talks to a database client directly. Every read and
write it needs is listed here; `SQLStore` is the production implementation.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date, datetime

from ..models import (
    AchievementDefinition,
    MealHistoryEntry,
    Recipe,
    SwipeDirection,
    User,
)


class Store(ABC):
    """Typed access to the users, recipes and achievements collections."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """All-or-nothing scope for writes.

        Commits on success. On failure rolls back and raises StoreError.
        """

    # --- users ---

    @abstractmethod
    def get_user(self, user_id: str) -> User | None: ...

    @abstractmethod
    def lock_user(self, user_id: str) -> User | None:
        """Load the user row for update within the current transaction."""

    @abstractmethod
    def update_streak(
        self, user: User, current: int, longest: int, last_meal_date: date
    ) -> None: ...

    # --- recipes ---

    @abstractmethod
    def get_recipe(self, recipe_id: str) -> Recipe | None: ...

    @abstractmethod
    def list_active_recipes(self) -> list[Recipe]:
        """Active catalog, most popular first, then by id."""

    @abstractmethod
    def similar_recipes(self, recipe: Recipe, limit: int) -> list[Recipe]: ...

    @abstractmethod
    def increment_popularity(self, recipe_id: str) -> None:
        """Atomically add one to the recipe's popularity and likes."""

    # --- swipes and saved recipes ---

    @abstractmethod
    def get_swipes(self, user_id: str) -> dict[str, SwipeDirection]: ...

    @abstractmethod
    def upsert_swipe(
        self, user_id: str, recipe_id: str, direction: SwipeDirection, at: datetime
    ) -> None: ...

    @abstractmethod
    def add_saved_recipe(self, user_id: str, recipe_id: str, at: datetime) -> bool:
        """Insert-or-ignore. Returns True if the recipe was not saved before."""

    @abstractmethod
    def remove_saved_recipe(self, user_id: str, recipe_id: str) -> bool:
        """Returns True if a saved entry was removed."""

    @abstractmethod
    def list_saved_recipes(self, user_id: str) -> list[Recipe]: ...

    @abstractmethod
    def count_saved_recipes(self, user_id: str) -> int: ...

    # --- meal history ---

    @abstractmethod
    def add_meal(
        self,
        user_id: str,
        recipe_id: str,
        rating: int | None,
        eaten_at: datetime,
        notes: str | None = None,
    ) -> MealHistoryEntry: ...

    @abstractmethod
    def list_meals(self, user_id: str) -> list[MealHistoryEntry]:
        """Full history, newest first."""

    @abstractmethod
    def recent_meals(self, user_id: str, limit: int) -> list[MealHistoryEntry]:
        """Last `limit` entries, oldest first."""

    @abstractmethod
    def count_meals(self, user_id: str) -> int: ...

    # --- achievements ---

    @abstractmethod
    def list_achievement_definitions(self) -> list[AchievementDefinition]: ...

    @abstractmethod
    def get_achievement_definition(
        self, achievement_id: str
    ) -> AchievementDefinition | None: ...

    @abstractmethod
    def unlocked_achievements(self, user_id: str) -> dict[str, datetime]:
        """Achievement id -> unlock time."""

    @abstractmethod
    def insert_unlock(self, user_id: str, achievement_id: str, at: datetime) -> bool:
        """Insert-or-ignore. Returns True only if this call created the unlock."""
