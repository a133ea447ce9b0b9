"""Match scoring and ranking of candidate recipes.

Scores are small integers:

    +2  cuisine is a preferred cuisine
    +2  any nutritional tag is in the nutritional focus
    +1  complexity equals the preferred complexity
    +1  portion size equals the preferred portion size
    -3  any ingredient contains an avoided ingredient (case-insensitive substring)

Candidates are sorted by score, then shuffled inside bands of near-equal
scores so the feed varies between requests without losing the preference
signal.
"""

import random
from dataclasses import dataclass
from typing import Sequence

from ..models import Recipe
from ..schemas import PreferenceProfile

CUISINE_WEIGHT = 2
NUTRITION_WEIGHT = 2
COMPLEXITY_WEIGHT = 1
PORTION_WEIGHT = 1
AVOIDED_INGREDIENT_PENALTY = 3


@dataclass
class ScoredRecipe:
    recipe: Recipe
    score: int


def _same(a: str | None, b: str | None) -> bool:
    return bool(a) and bool(b) and a.casefold() == b.casefold()


def contains_avoided_ingredient(recipe: Recipe, avoided: Sequence[str] | set[str]) -> bool:
    needles = [a.casefold() for a in avoided if a and a.strip()]
    if not needles:
        return False
    return any(
        needle in str(ingredient).casefold()
        for ingredient in recipe.ingredients or []
        for needle in needles
    )


def score_recipe(recipe: Recipe, profile: PreferenceProfile | None) -> int:
    """Integer match score of one recipe against a profile (0 without one)."""
    if profile is None:
        return 0

    score = 0
    cuisines = {c.casefold() for c in profile.preferred_cuisines}
    if recipe.cuisine and recipe.cuisine.casefold() in cuisines:
        score += CUISINE_WEIGHT

    focus = {t.casefold() for t in profile.nutritional_focus}
    if any(str(tag).casefold() in focus for tag in recipe.nutritional_tags or []):
        score += NUTRITION_WEIGHT

    if _same(recipe.complexity, profile.preferred_complexity):
        score += COMPLEXITY_WEIGHT
    if _same(recipe.portion_size, profile.preferred_portion_size):
        score += PORTION_WEIGHT

    if contains_avoided_ingredient(recipe, profile.avoided_ingredients):
        score -= AVOIDED_INGREDIENT_PENALTY

    return score


def _shuffle_bands(scored: list[ScoredRecipe], tie_band: int, rng: random.Random) -> list[ScoredRecipe]:
    """Shuffle runs of a descending list whose scores lie within `tie_band`
    of the run's first (highest) score.

    Bands are anchored, not chained: with scores [3, 2, 1] and a band of 1,
    the bands are [3, 2] and [1], so the 1 never moves above the 2. Chaining
    on adjacent scores would let a long run of small steps collapse into one
    band and lose the ordering.
    """
    result: list[ScoredRecipe] = []
    band: list[ScoredRecipe] = []
    for item in scored:
        if band and band[0].score - item.score > tie_band:
            rng.shuffle(band)
            result.extend(band)
            band = []
        band.append(item)
    rng.shuffle(band)
    result.extend(band)
    return result


def rank_candidates(
    candidates: Sequence[Recipe],
    profile: PreferenceProfile | None,
    page_size: int = 10,
    tie_band: int = 1,
    rng: random.Random | None = None,
) -> list[ScoredRecipe]:
    """Score, order and cap the candidate list.

    Without a usable profile every score is 0 and the input order
    (popularity, then catalog order) is kept as is.
    """
    if page_size <= 0:
        return []

    if profile is None or profile.is_empty():
        return [ScoredRecipe(recipe, 0) for recipe in candidates[:page_size]]

    scored = [ScoredRecipe(recipe, score_recipe(recipe, profile)) for recipe in candidates]
    scored.sort(key=lambda s: s.score, reverse=True)
    ranked = _shuffle_bands(scored, tie_band, rng or random.Random())
    return ranked[:page_size]
