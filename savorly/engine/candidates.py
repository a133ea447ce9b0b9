"""Candidate selection for the recommendation feed."""

import logging
from typing import Collection, Iterable

from ..models import Recipe
from ..schemas import PreferenceProfile

logger = logging.getLogger(__name__)


def _folded(values: Iterable[str | None]) -> set[str]:
    return {v.casefold() for v in values if v}


def matches_profile(recipe: Recipe, profile: PreferenceProfile) -> bool:
    """Hard preference constraints: cuisine allow-list and nutritional focus.

    Each constraint only applies when the profile lists at least one value.
    """
    cuisines = _folded(profile.preferred_cuisines)
    if cuisines and (recipe.cuisine or "").casefold() not in cuisines:
        return False

    focus = _folded(profile.nutritional_focus)
    if focus and not focus & _folded(recipe.nutritional_tags or []):
        return False

    return True


def filter_candidates(
    corpus: Iterable[Recipe],
    swiped_ids: Collection[str],
    profile: PreferenceProfile | None = None,
    fallback: bool = True,
) -> list[Recipe]:
    """Active recipes the user has not swiped, narrowed by the profile.

    Corpus order is preserved and each recipe id appears at most once. When
    the profile constraints leave nothing, the unconstrained active and
    unswiped set is returned instead, unless `fallback` is False.
    """
    swiped = set(swiped_ids)
    seen: set[str] = set()
    unswiped = []
    for recipe in corpus:
        if not recipe.active or recipe.id in swiped or recipe.id in seen:
            continue
        seen.add(recipe.id)
        unswiped.append(recipe)

    if profile is None:
        return unswiped

    strict = [r for r in unswiped if matches_profile(r, profile)]
    if strict or not fallback:
        return strict

    if unswiped:
        logger.info(
            f"Preference filter matched none of {len(unswiped)} candidates, "
            "falling back to unfiltered set"
        )
    return unswiped
