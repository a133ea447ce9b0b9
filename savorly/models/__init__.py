"""Database models for the recommendation engine."""

from .base import Base, TimestampMixin
from .user import User
from .recipe import Recipe
from .swipe import Swipe, SavedRecipe, SwipeDirection
from .meal_history import MealHistoryEntry
from .achievement import AchievementDefinition, AchievementType, UserAchievement

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Models
    "User",
    "Recipe",
    "Swipe",
    "SavedRecipe",
    "SwipeDirection",
    "MealHistoryEntry",
    "AchievementDefinition",
    "AchievementType",
    "UserAchievement",
]
