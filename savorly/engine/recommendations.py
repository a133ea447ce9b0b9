"""Recommendation pipeline: preferences -> candidates -> ranking."""

import logging
import random
from dataclasses import dataclass, field

from ..config import get_settings
from ..errors import NotFoundError
from ..models import SwipeDirection, User
from ..schemas import PreferenceProfile
from ..store import Store
from .candidates import filter_candidates
from .preferences import PreferenceExtractor
from .ranking import ScoredRecipe, rank_candidates

logger = logging.getLogger(__name__)

settings = get_settings()


@dataclass
class RecommendationResult:
    recommendations: list[ScoredRecipe] = field(default_factory=list)
    preferences: PreferenceProfile | None = None


def require_user(store: Store, user_id: str) -> User:
    user = store.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found.")
    return user


def recommend(
    store: Store,
    extractor: PreferenceExtractor,
    user_id: str,
    limit: int | None = None,
    rng: random.Random | None = None,
) -> RecommendationResult:
    """Build the ranked, de-duplicated feed for one user.

    Preference extraction failures are absorbed by the extractor; the feed
    is then the unfiltered active, unswiped catalog in popularity order.
    """
    require_user(store, user_id)

    swipes = store.get_swipes(user_id)
    liked = [rid for rid, d in swipes.items() if d == SwipeDirection.RIGHT]
    disliked = [rid for rid, d in swipes.items() if d == SwipeDirection.LEFT]
    recent_meals = store.recent_meals(user_id, settings.recent_meal_window)

    corpus = store.list_active_recipes()
    lookup = {recipe.id: recipe for recipe in corpus}

    profile = extractor.extract(user_id, liked, disliked, recent_meals, lookup)

    candidates = filter_candidates(
        corpus, swipes.keys(), profile, fallback=settings.empty_filter_fallback
    )
    page_size = settings.recommendation_page_size if limit is None else limit
    ranked = rank_candidates(
        candidates, profile, page_size=page_size, tie_band=settings.score_tie_band, rng=rng
    )

    logger.info(
        f"Recommendations for user {user_id}: {len(ranked)} of {len(candidates)} candidates "
        f"(profile={'yes' if profile else 'no'})"
    )
    return RecommendationResult(recommendations=ranked, preferences=profile)
