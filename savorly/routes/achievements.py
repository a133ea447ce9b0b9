"""Achievement catalog, progress and unlocking."""

from fastapi import APIRouter, Depends

from ..auth import get_current_user_id
from ..dependencies import get_store
from ..engine import (
    achievement_progress,
    check_and_unlock,
    list_achievements,
    unlock_achievement,
)
from ..schemas import (
    AchievementOut,
    AchievementView,
    CheckAchievementsResponse,
    ProgressResponse,
    RecipeProgress,
    StreakProgress,
    SwipeProgress,
    UnlockRequest,
    UnlockResponse,
)
from ..store import Store

router = APIRouter(prefix="/achievements", tags=["Achievements"])


@router.get("", response_model=list[AchievementView])
def get_achievements(
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
):
    return [
        AchievementView(
            **AchievementOut.model_validate(status.definition).model_dump(),
            unlocked=status.unlocked,
            unlocked_at=status.unlocked_at,
        )
        for status in list_achievements(store, user_id)
    ]


@router.get("/progress", response_model=ProgressResponse)
def get_progress(
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
):
    progress = achievement_progress(store, user_id)
    return ProgressResponse(
        recipes=RecipeProgress(saved=progress.recipes_saved, cooked=progress.recipes_cooked),
        swipes=SwipeProgress(
            total=progress.swipe_total,
            liked=progress.swipes_liked,
            disliked=progress.swipes_disliked,
        ),
        streaks=StreakProgress(current=progress.current_streak, longest=progress.longest_streak),
    )


@router.post("/check", response_model=CheckAchievementsResponse)
def post_check(
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
):
    """Unlock every achievement whose threshold the user now meets."""
    unlocked = check_and_unlock(store, user_id)
    return CheckAchievementsResponse(
        new_achievements=[AchievementOut.model_validate(a) for a in unlocked]
    )


@router.post("/unlock", response_model=UnlockResponse)
def post_unlock(
    body: UnlockRequest,
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
):
    definition = unlock_achievement(store, user_id, body.achievement_id)
    return UnlockResponse(
        message="Achievement unlocked successfully",
        achievement=AchievementOut.model_validate(definition),
    )
