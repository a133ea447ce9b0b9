"""Swipe recording."""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime

from ..config import get_settings
from ..errors import NotFoundError, ValidationError
from ..models import SwipeDirection
from ..store import Store
from .preferences import PreferenceExtractor
from .ranking import ScoredRecipe
from .recommendations import recommend, require_user

logger = logging.getLogger(__name__)

settings = get_settings()


@dataclass
class SwipeResult:
    direction: SwipeDirection
    saved: bool
    next_recommendations: list[ScoredRecipe] = field(default_factory=list)


def parse_direction(direction) -> SwipeDirection:
    """Coerce a raw direction value, rejecting anything but left/right."""
    if isinstance(direction, SwipeDirection):
        return direction
    try:
        return SwipeDirection(str(direction).strip().lower())
    except ValueError:
        raise ValidationError(
            "Valid recipe ID and swipe direction (left/right) are required"
        ) from None


def record_swipe(
    store: Store,
    extractor: PreferenceExtractor,
    user_id: str,
    recipe_id: str,
    direction,
    rng: random.Random | None = None,
) -> SwipeResult:
    """Record a like/dislike and return the next batch of candidates.

    One transaction:
    - swipes[recipe_id] = direction (overwrites an earlier swipe)
    - right: recipe added to saved recipes (set semantics), popularity and
      likes incremented by one for every call
    - left: recipe removed from saved recipes, so saved recipes stay a
      subset of right swipes

    Raises:
        ValidationError: Bad direction or empty recipe id.
        NotFoundError: Unknown user or recipe.
        StoreError: The write failed and was rolled back.
    """
    direction = parse_direction(direction)
    recipe_id = (recipe_id or "").strip()
    if not recipe_id:
        raise ValidationError("Valid recipe ID and swipe direction (left/right) are required")

    require_user(store, user_id)
    if store.get_recipe(recipe_id) is None:
        raise NotFoundError("Recipe not found")

    now = datetime.utcnow()
    with store.transaction():
        store.upsert_swipe(user_id, recipe_id, direction, now)
        if direction == SwipeDirection.RIGHT:
            store.add_saved_recipe(user_id, recipe_id, now)
            store.increment_popularity(recipe_id)
        else:
            store.remove_saved_recipe(user_id, recipe_id)

    logger.info(f"Swipe recorded: user={user_id} recipe={recipe_id} direction={direction.value}")

    result = recommend(store, extractor, user_id, limit=settings.next_batch_size, rng=rng)
    return SwipeResult(
        direction=direction,
        saved=direction == SwipeDirection.RIGHT,
        next_recommendations=result.recommendations,
    )
