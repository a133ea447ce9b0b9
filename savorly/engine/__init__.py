"""Recommendation and engagement engine."""

from .achievements import (
    AchievementStatus,
    Progress,
    achievement_progress,
    check_and_unlock,
    list_achievements,
    unlock_achievement,
)
from .candidates import filter_candidates
from .meals import Streak, log_meal
from .preferences import ExtractionResult, PreferenceCache, PreferenceExtractor
from .ranking import ScoredRecipe, rank_candidates, score_recipe
from .recommendations import RecommendationResult, recommend, require_user
from .swipes import SwipeResult, record_swipe

__all__ = [
    "AchievementStatus",
    "ExtractionResult",
    "PreferenceCache",
    "PreferenceExtractor",
    "Progress",
    "RecommendationResult",
    "ScoredRecipe",
    "Streak",
    "SwipeResult",
    "achievement_progress",
    "check_and_unlock",
    "filter_candidates",
    "list_achievements",
    "log_meal",
    "rank_candidates",
    "recommend",
    "record_swipe",
    "require_user",
    "score_recipe",
    "unlock_achievement",
]
