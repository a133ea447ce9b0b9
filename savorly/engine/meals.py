"""Meal log and cooking streaks."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ..errors import NotFoundError, ValidationError
from ..store import Store

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


@dataclass
class Streak:
    current: int
    longest: int


def next_streak(
    current: int, longest: int, last_meal_date: date | None, meal_date: date
) -> Streak:
    """Streak after logging a meal on `meal_date`.

    Same day as the last meal keeps the streak, the next day extends it,
    anything else starts over at 1. A meal dated before the last one does
    not move the streak.
    """
    if last_meal_date is None:
        current = 1
    elif meal_date <= last_meal_date:
        current = max(current, 1)
    elif meal_date - last_meal_date == timedelta(days=1):
        current += 1
    else:
        current = 1
    return Streak(current=current, longest=max(longest, current))


def log_meal(
    store: Store,
    user_id: str,
    recipe_id: str,
    rating: int | None = None,
    eaten_at: datetime | None = None,
    notes: str | None = None,
) -> Streak:
    """Append a cooked meal to the user's history and update streaks.

    Raises:
        ValidationError: Rating outside 1-5.
        NotFoundError: Unknown user or recipe.
    """
    if rating is not None and not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    if store.get_recipe(recipe_id) is None:
        raise NotFoundError("Recipe not found")

    eaten_at = eaten_at or datetime.utcnow()
    with store.transaction():
        user = store.lock_user(user_id)
        if user is None:
            raise NotFoundError("User not found.")
        store.add_meal(user_id, recipe_id, rating, eaten_at, notes=notes)
        streak = next_streak(
            user.current_streak or 0,
            user.longest_streak or 0,
            user.last_meal_date,
            eaten_at.date(),
        )
        store.update_streak(
            user,
            streak.current,
            streak.longest,
            max(eaten_at.date(), user.last_meal_date or eaten_at.date()),
        )

    logger.info(
        f"Meal logged: user={user_id} recipe={recipe_id} "
        f"streak={streak.current} longest={streak.longest}"
    )
    return streak
