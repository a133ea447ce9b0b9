"""Request/response schemas and the derived preference profile.

All JSON is camelCase on the wire; Python code uses snake_case attributes.
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import AchievementType, SwipeDirection


class CamelModel(BaseModel):
    """Base schema with camelCase aliases that also accepts snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# Preference Profile
# =============================================================================


def _as_string_set(value) -> set[str]:
    """Coerce loosely-typed model output into a set of non-blank strings."""
    if value is None:
        return set()
    if isinstance(value, str):
        value = [value]
    if isinstance(value, dict):
        value = list(value.keys())
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError(f"expected a list of strings, got {type(value).__name__}")
    return {str(v).strip() for v in value if v is not None and str(v).strip()}


class PreferenceProfile(CamelModel):
    """Derived summary of a user's taste signals. Never persisted."""

    preferred_cuisines: set[str] = Field(default_factory=set)
    avoided_ingredients: set[str] = Field(default_factory=set)
    nutritional_focus: set[str] = Field(default_factory=set)
    dietary_patterns: set[str] = Field(default_factory=set)
    preferred_complexity: str | None = None
    preferred_portion_size: str | None = None

    @field_validator(
        "preferred_cuisines",
        "avoided_ingredients",
        "nutritional_focus",
        "dietary_patterns",
        mode="before",
    )
    @classmethod
    def coerce_sets(cls, v):
        return _as_string_set(v)

    @field_validator("preferred_complexity", "preferred_portion_size", mode="before")
    @classmethod
    def coerce_scalar(cls, v):
        """Models sometimes answer with a list; keep the first entry."""
        if isinstance(v, (list, tuple)):
            v = v[0] if v else None
        if isinstance(v, (int, float)):
            v = str(v)
        if isinstance(v, str):
            v = v.strip() or None
        return v

    def is_empty(self) -> bool:
        """True when the profile carries no signal the ranker can use."""
        return not (
            self.preferred_cuisines
            or self.avoided_ingredients
            or self.nutritional_focus
            or self.preferred_complexity
            or self.preferred_portion_size
        )


# =============================================================================
# Recipes
# =============================================================================


class RecipeOut(CamelModel):
    """Recipe card as returned to the client."""

    id: str
    name: str
    description: str | None = None
    cuisine: str | None = None
    nutritional_tags: list[str] = Field(default_factory=list)
    complexity: str | None = None
    portion_size: str | None = None
    ingredients: list[str] = Field(default_factory=list)
    image_url: str | None = None
    popularity: int = 0
    likes: int = 0
    active: bool = True
    match_score: int | None = None


class RecommendationsResponse(CamelModel):
    recommendations: list[RecipeOut]
    preferences: PreferenceProfile | None = None


class RecipeDetailResponse(CamelModel):
    recipe: RecipeOut
    similar_recipes: list[RecipeOut]


class MessageResponse(CamelModel):
    message: str


# =============================================================================
# Swipes
# =============================================================================


class SwipeRequest(CamelModel):
    """Body of POST /recommendations/swipe."""

    recipe_id: str = Field(min_length=1)
    direction: SwipeDirection


# =============================================================================
# Achievements
# =============================================================================


class AchievementOut(CamelModel):
    id: str
    name: str
    description: str | None = None
    type: AchievementType
    requirement: int


class AchievementView(AchievementOut):
    unlocked: bool
    unlocked_at: datetime | None = None


class SwipeResponse(CamelModel):
    message: str
    next_recommendations: list[RecipeOut]
    new_achievements: list[AchievementOut] = Field(default_factory=list)


class CheckAchievementsResponse(CamelModel):
    new_achievements: list[AchievementOut]


class UnlockRequest(CamelModel):
    achievement_id: str = Field(min_length=1)


class UnlockResponse(CamelModel):
    message: str
    achievement: AchievementOut


class RecipeProgress(CamelModel):
    saved: int
    cooked: int


class SwipeProgress(CamelModel):
    total: int
    liked: int
    disliked: int


class StreakProgress(CamelModel):
    current: int
    longest: int


class ProgressResponse(CamelModel):
    recipes: RecipeProgress
    swipes: SwipeProgress
    streaks: StreakProgress


# =============================================================================
# Meal log
# =============================================================================


class MealLogRequest(CamelModel):
    """Body of POST /meals/history. `mealId` is accepted for `recipeId`."""

    recipe_id: str = Field(
        min_length=1, validation_alias=AliasChoices("recipeId", "mealId", "recipe_id")
    )
    rating: int | None = None
    notes: str | None = Field(default=None, max_length=2000)

    @field_validator("recipe_id", mode="before")
    @classmethod
    def strip_id(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("notes", mode="before")
    @classmethod
    def blank_notes(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v


class MealLogResponse(CamelModel):
    message: str
    current_streak: int
    longest_streak: int
    new_achievements: list[AchievementOut] = Field(default_factory=list)


class MealHistoryOut(CamelModel):
    id: int
    recipe_id: str
    rating: int | None = None
    notes: str | None = None
    eaten_at: datetime
