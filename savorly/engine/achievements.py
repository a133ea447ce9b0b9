"""Achievement evaluation and unlocking."""

import logging
from dataclasses import dataclass
from datetime import datetime

from ..errors import NotFoundError, ValidationError
from ..models import AchievementDefinition, AchievementType, SwipeDirection
from ..store import Store
from .recommendations import require_user

logger = logging.getLogger(__name__)


@dataclass
class Progress:
    """Counters achievements are evaluated against."""

    swipes_liked: int
    swipes_disliked: int
    recipes_saved: int
    recipes_cooked: int
    current_streak: int
    longest_streak: int

    @property
    def swipe_total(self) -> int:
        return self.swipes_liked + self.swipes_disliked

    def value_for(self, achievement_type: AchievementType) -> int:
        if achievement_type == AchievementType.SWIPE_COUNT:
            return self.swipe_total
        if achievement_type == AchievementType.RECIPES_SAVED:
            return self.recipes_saved
        if achievement_type == AchievementType.RECIPES_COOKED:
            return self.recipes_cooked
        if achievement_type == AchievementType.STREAK:
            return self.longest_streak
        return 0


@dataclass
class AchievementStatus:
    definition: AchievementDefinition
    unlocked: bool
    unlocked_at: datetime | None


def achievement_progress(store: Store, user_id: str) -> Progress:
    user = require_user(store, user_id)
    swipes = store.get_swipes(user_id)
    liked = sum(1 for d in swipes.values() if d == SwipeDirection.RIGHT)
    return Progress(
        swipes_liked=liked,
        swipes_disliked=len(swipes) - liked,
        recipes_saved=store.count_saved_recipes(user_id),
        recipes_cooked=store.count_meals(user_id),
        current_streak=user.current_streak or 0,
        longest_streak=user.longest_streak or 0,
    )


def list_achievements(store: Store, user_id: str) -> list[AchievementStatus]:
    """Every definition, flagged with the user's unlock state."""
    require_user(store, user_id)
    unlocked = store.unlocked_achievements(user_id)
    return [
        AchievementStatus(
            definition=definition,
            unlocked=definition.id in unlocked,
            unlocked_at=unlocked.get(definition.id),
        )
        for definition in store.list_achievement_definitions()
    ]


def check_and_unlock(
    store: Store, user_id: str, now: datetime | None = None
) -> list[AchievementDefinition]:
    """Unlock every not-yet-earned achievement whose threshold is met.

    All unlocks are written in one transaction. Definitions already unlocked
    are skipped, and an unlock that lost a race with a concurrent check is
    not reported twice.

    Returns:
        The newly unlocked definitions, possibly empty.
    """
    progress = achievement_progress(store, user_id)
    unlocked = store.unlocked_achievements(user_id)

    due = [
        definition
        for definition in store.list_achievement_definitions()
        if definition.id not in unlocked
        and progress.value_for(definition.type) >= definition.requirement
    ]
    if not due:
        return []

    now = now or datetime.utcnow()
    newly_unlocked = []
    with store.transaction():
        for definition in due:
            if store.insert_unlock(user_id, definition.id, now):
                newly_unlocked.append(definition)

    for definition in newly_unlocked:
        logger.info(f"Achievement unlocked: user={user_id} achievement={definition.id}")
    return newly_unlocked


def unlock_achievement(
    store: Store, user_id: str, achievement_id: str, now: datetime | None = None
) -> AchievementDefinition:
    """Unlock one achievement on the client's request.

    Raises:
        NotFoundError: Unknown user or achievement.
        ValidationError: Already unlocked.
    """
    require_user(store, user_id)
    definition = store.get_achievement_definition(achievement_id)
    if definition is None:
        raise NotFoundError("Achievement not found")

    with store.transaction():
        inserted = store.insert_unlock(user_id, achievement_id, now or datetime.utcnow())
    if not inserted:
        raise ValidationError("Achievement already unlocked")

    logger.info(f"Achievement unlocked manually: user={user_id} achievement={achievement_id}")
    return definition
