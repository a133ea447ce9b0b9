"""Meal history logging."""

from fastapi import APIRouter, Depends

from ..auth import get_current_user_id
from ..dependencies import get_store
from ..engine import check_and_unlock, log_meal, require_user
from ..schemas import AchievementOut, MealHistoryOut, MealLogRequest, MealLogResponse
from ..store import Store

router = APIRouter(prefix="/meals", tags=["Meals"])


@router.get("/history", response_model=list[MealHistoryOut])
def get_meal_history(
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
):
    """The user's logged meals, newest first."""
    require_user(store, user_id)
    return [MealHistoryOut.model_validate(m) for m in store.list_meals(user_id)]


@router.post("/history", response_model=MealLogResponse)
def post_meal(
    body: MealLogRequest,
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
):
    """Log a cooked meal, update streaks and re-check achievements."""
    streak = log_meal(store, user_id, body.recipe_id, body.rating, notes=body.notes)
    new_achievements = check_and_unlock(store, user_id)
    return MealLogResponse(
        message="Meal logged successfully",
        current_streak=streak.current,
        longest_streak=streak.longest,
        new_achievements=[AchievementOut.model_validate(a) for a in new_achievements],
    )
