"""Recommendation feed, swipes, saved recipes and recipe details."""

import logging

from fastapi import APIRouter, Depends

from ..auth import get_current_user_id
from ..config import get_settings
from ..dependencies import get_preference_extractor, get_store
from ..engine import (
    PreferenceExtractor,
    ScoredRecipe,
    check_and_unlock,
    recommend,
    record_swipe,
    require_user,
)
from ..errors import NotFoundError
from ..schemas import (
    AchievementOut,
    MessageResponse,
    RecipeDetailResponse,
    RecipeOut,
    RecommendationsResponse,
    SwipeRequest,
    SwipeResponse,
)
from ..store import Store

router = APIRouter(prefix="/recommendations", tags=["Recommendations"])
logger = logging.getLogger(__name__)

settings = get_settings()


def _scored_out(items: list[ScoredRecipe]) -> list[RecipeOut]:
    return [
        RecipeOut.model_validate(item.recipe).model_copy(update={"match_score": item.score})
        for item in items
    ]


@router.get("", response_model=RecommendationsResponse)
def get_recommendations(
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
    extractor: PreferenceExtractor = Depends(get_preference_extractor),
):
    """Personalized, ranked recipe cards the user has not swiped yet."""
    result = recommend(store, extractor, user_id)
    return RecommendationsResponse(
        recommendations=_scored_out(result.recommendations),
        preferences=result.preferences,
    )


@router.post("/swipe", response_model=SwipeResponse)
def post_swipe(
    body: SwipeRequest,
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
    extractor: PreferenceExtractor = Depends(get_preference_extractor),
):
    """Record a swipe, re-check achievements and return the next cards."""
    result = record_swipe(store, extractor, user_id, body.recipe_id, body.direction)
    new_achievements = check_and_unlock(store, user_id)
    return SwipeResponse(
        message="Swipe recorded successfully",
        next_recommendations=_scored_out(result.next_recommendations),
        new_achievements=[AchievementOut.model_validate(a) for a in new_achievements],
    )


@router.get("/saved", response_model=list[RecipeOut])
def get_saved_recipes(
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
):
    require_user(store, user_id)
    return [RecipeOut.model_validate(r) for r in store.list_saved_recipes(user_id)]


@router.delete("/saved/{recipe_id}", response_model=MessageResponse)
def delete_saved_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
):
    """Remove a recipe from the saved set. The swipe itself is kept."""
    require_user(store, user_id)
    with store.transaction():
        removed = store.remove_saved_recipe(user_id, recipe_id)
    if not removed:
        raise NotFoundError("Saved recipe not found")
    return MessageResponse(message="Recipe removed from saved successfully")


@router.get("/recipe/{recipe_id}", response_model=RecipeDetailResponse)
def get_recipe_details(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
):
    """A recipe plus the most popular active recipes of the same cuisine."""
    require_user(store, user_id)
    recipe = store.get_recipe(recipe_id)
    if recipe is None:
        raise NotFoundError("Recipe not found")
    similar = store.similar_recipes(recipe, settings.similar_recipe_limit)
    return RecipeDetailResponse(
        recipe=RecipeOut.model_validate(recipe),
        similar_recipes=[RecipeOut.model_validate(r) for r in similar],
    )
