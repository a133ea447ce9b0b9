"""Preference extraction from swipe and meal history.

The extractor turns a user's history into a PreferenceProfile by asking the
language model, with a per-user TTL cache in front of it. Any failure yields
no profile; the recommendation pipeline then runs unfiltered and unscored.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Callable, Mapping, Protocol, Sequence

from pydantic import ValidationError as PydanticValidationError

from ..errors import UpstreamError
from ..inference import load_system_prompt, parse_json_object
from ..models import MealHistoryEntry, Recipe
from ..schemas import PreferenceProfile

logger = logging.getLogger(__name__)


class InferenceClient(Protocol):
    """Anything that can answer a prompt with text, raising UpstreamError."""

    def complete(self, system: str, prompt: str) -> str: ...


@dataclass
class ExtractionResult:
    """Outcome of one extraction: a profile, or the error that prevented one."""

    profile: PreferenceProfile | None = None
    error: UpstreamError | None = None
    cached: bool = False

    @property
    def ok(self) -> bool:
        return self.profile is not None


# =============================================================================
# Cache
# =============================================================================


class PreferenceCache:
    """Per-user profile cache with a fixed time-to-live.

    Entries are written whole and never mutated, so plain dict access is
    enough. Staleness up to the TTL is accepted.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: dict[str, tuple[float, PreferenceProfile]] = {}

    def get(self, user_id: str) -> PreferenceProfile | None:
        entry = self._entries.get(user_id)
        if entry is None:
            return None
        stored_at, profile = entry
        if self.clock() - stored_at >= self.ttl_seconds:
            self._entries.pop(user_id, None)
            return None
        return profile

    def set(self, user_id: str, profile: PreferenceProfile) -> None:
        self._entries[user_id] = (self.clock(), profile)

    def __len__(self) -> int:
        return len(self._entries)


# =============================================================================
# Prompt
# =============================================================================


def _describe(recipe_ids: Sequence[str], recipe_lookup: Mapping[str, Recipe]) -> list[dict]:
    described = []
    for recipe_id in recipe_ids:
        recipe = recipe_lookup.get(recipe_id)
        if recipe is None:
            described.append({"id": recipe_id})
            continue
        described.append({
            "id": recipe.id,
            "name": recipe.name,
            "cuisine": recipe.cuisine,
            "nutritionalTags": list(recipe.nutritional_tags or []),
            "complexity": recipe.complexity,
            "portionSize": recipe.portion_size,
            "ingredients": list(recipe.ingredients or []),
        })
    return described


def build_preference_prompt(
    liked_ids: Sequence[str],
    disliked_ids: Sequence[str],
    recent_meals: Sequence[MealHistoryEntry],
    recipe_lookup: Mapping[str, Recipe] | None = None,
) -> str:
    """Build the user prompt describing the history to analyze."""
    recipe_lookup = recipe_lookup or {}
    meals = [
        {
            "mealId": m.recipe_id,
            "rating": m.rating,
            "eatenAt": m.eaten_at.isoformat() if m.eaten_at else None,
        }
        for m in recent_meals
    ]
    sections = [
        "Analyze these meal preferences:",
        f"Liked Meals (Swiped Right): {json.dumps(_describe(liked_ids, recipe_lookup))}",
        f"Disliked Meals (Swiped Left): {json.dumps(_describe(disliked_ids, recipe_lookup))}",
        f"Recently Eaten: {json.dumps(meals)}",
        "",
        "Return the JSON object described in your instructions.",
    ]
    return "\n".join(sections)


# =============================================================================
# Extractor
# =============================================================================


class PreferenceExtractor:
    """Derives PreferenceProfiles, caching successful results per user."""

    def __init__(self, inference: InferenceClient | None, cache: PreferenceCache):
        self.inference = inference
        self.cache = cache
        self._system_prompt: str | None = None

    @property
    def system_prompt(self) -> str:
        if self._system_prompt is None:
            self._system_prompt = load_system_prompt()
        return self._system_prompt

    def analyze(
        self,
        user_id: str,
        liked_ids: Sequence[str],
        disliked_ids: Sequence[str],
        recent_meals: Sequence[MealHistoryEntry],
        recipe_lookup: Mapping[str, Recipe] | None = None,
    ) -> ExtractionResult:
        """Return the cached profile or compute a fresh one. Never raises."""
        cached = self.cache.get(user_id)
        if cached is not None:
            logger.debug(f"Preference cache hit for user {user_id}")
            return ExtractionResult(profile=cached, cached=True)

        if self.inference is None:
            return ExtractionResult()

        if not liked_ids and not disliked_ids and not recent_meals:
            # Nothing to analyze yet
            return ExtractionResult()

        prompt = build_preference_prompt(liked_ids, disliked_ids, recent_meals, recipe_lookup)

        try:
            text = self.inference.complete(self.system_prompt, prompt)
            data = parse_json_object(text)
            profile = PreferenceProfile.model_validate(data)
        except UpstreamError as e:
            logger.warning(f"Preference analysis failed for user {user_id}: {e.message}")
            return ExtractionResult(error=e)
        except PydanticValidationError as e:
            logger.warning(f"Preference analysis returned an invalid profile for user {user_id}: {e}")
            return ExtractionResult(error=UpstreamError(f"Invalid profile: {e}"))
        except Exception as e:
            logger.exception(f"Unexpected error analyzing preferences for user {user_id}: {e}")
            return ExtractionResult(error=UpstreamError(f"Preference analysis failed: {e}"))

        self.cache.set(user_id, profile)
        logger.info(
            f"Preferences extracted for user {user_id}: "
            f"{len(profile.preferred_cuisines)} cuisines, "
            f"{len(profile.avoided_ingredients)} avoided ingredients"
        )
        return ExtractionResult(profile=profile)

    def extract(
        self,
        user_id: str,
        liked_ids: Sequence[str],
        disliked_ids: Sequence[str],
        recent_meals: Sequence[MealHistoryEntry],
        recipe_lookup: Mapping[str, Recipe] | None = None,
    ) -> PreferenceProfile | None:
        """Profile for the user, or None if none could be derived."""
        return self.analyze(user_id, liked_ids, disliked_ids, recent_meals, recipe_lookup).profile
