from datetime import datetime

import pytest

from savorly.engine import (
    achievement_progress,
    check_and_unlock,
    list_achievements,
    log_meal,
    record_swipe,
    unlock_achievement,
)
from savorly.errors import NotFoundError, ValidationError
from savorly.models import UserAchievement

MEALS = list("ABCDEFGHIJ")


@pytest.fixture
def catalog(add_recipes, user):
    return add_recipes(*MEALS)


@pytest.fixture
def definitions(add_achievements):
    return add_achievements(
        ("10-swipes", "10 Swipes", "swipe_count", 10),
        ("25-swipes", "25 Swipes", "swipe_count", 25),
        ("first-save", "First Favorite", "recipes_saved", 1),
        ("home-cook", "Home Cook", "recipes_cooked", 2),
        ("on-a-roll", "On a Roll", "streak", 2),
    )


def swipe_all(store, extractor, ids, direction):
    for recipe_id in ids:
        record_swipe(store, extractor, "user-1", recipe_id, direction)


def test_ten_swipes_unlocks_once(store, extractor, catalog, definitions):
    swipe_all(store, extractor, MEALS, "left")

    first = check_and_unlock(store, "user-1")
    assert [a.id for a in first] == ["10-swipes"]

    assert check_and_unlock(store, "user-1") == []


def test_nothing_due_writes_nothing(db, store, extractor, catalog, definitions):
    swipe_all(store, extractor, MEALS[:3], "left")
    assert check_and_unlock(store, "user-1") == []
    assert db.query(UserAchievement).count() == 0


def test_multiple_types_unlock_in_one_check(store, extractor, catalog, definitions):
    swipe_all(store, extractor, MEALS[:5], "right")
    swipe_all(store, extractor, MEALS[5:], "left")

    unlocked = check_and_unlock(store, "user-1", now=datetime(2026, 10, 19, 12, 0))
    assert sorted(a.id for a in unlocked) == ["10-swipes", "first-save"]

    dates = store.unlocked_achievements("user-1")
    assert dates == {
        "10-swipes": datetime(2026, 10, 19, 12, 0),
        "first-save": datetime(2026, 10, 19, 12, 0),
    }


def test_unlock_is_monotonic(store, extractor, catalog, definitions):
    record_swipe(store, extractor, "user-1", "A", "right")
    assert [a.id for a in check_and_unlock(store, "user-1")] == ["first-save"]

    # un-saving drops the counter but not the achievement
    record_swipe(store, extractor, "user-1", "A", "left")
    assert achievement_progress(store, "user-1").recipes_saved == 0
    assert check_and_unlock(store, "user-1") == []
    assert "first-save" in store.unlocked_achievements("user-1")


def test_cooked_and_streak_counters(store, catalog, definitions):
    log_meal(store, "user-1", "A", eaten_at=datetime(2026, 10, 1, 19, 0))
    log_meal(store, "user-1", "B", eaten_at=datetime(2026, 10, 2, 19, 0))

    unlocked = check_and_unlock(store, "user-1")
    assert sorted(a.id for a in unlocked) == ["home-cook", "on-a-roll"]


def test_progress(store, extractor, catalog):
    swipe_all(store, extractor, ["A", "B"], "right")
    swipe_all(store, extractor, ["C"], "left")
    log_meal(store, "user-1", "A", rating=5)

    progress = achievement_progress(store, "user-1")
    assert progress.swipe_total == 3
    assert (progress.swipes_liked, progress.swipes_disliked) == (2, 1)
    assert progress.recipes_saved == 2
    assert progress.recipes_cooked == 1
    assert (progress.current_streak, progress.longest_streak) == (1, 1)


def test_list_achievements_flags_unlocked(store, extractor, catalog, definitions):
    record_swipe(store, extractor, "user-1", "A", "right")
    check_and_unlock(store, "user-1")

    statuses = {s.definition.id: s for s in list_achievements(store, "user-1")}
    assert statuses["first-save"].unlocked is True
    assert statuses["first-save"].unlocked_at is not None
    assert statuses["10-swipes"].unlocked is False
    assert statuses["10-swipes"].unlocked_at is None


class TestManualUnlock:
    def test_unlocks(self, store, catalog, definitions):
        definition = unlock_achievement(store, "user-1", "25-swipes")
        assert definition.id == "25-swipes"
        assert "25-swipes" in store.unlocked_achievements("user-1")

    def test_twice_is_rejected(self, store, catalog, definitions):
        unlock_achievement(store, "user-1", "25-swipes")
        with pytest.raises(ValidationError):
            unlock_achievement(store, "user-1", "25-swipes")

    def test_unknown_achievement(self, store, catalog, definitions):
        with pytest.raises(NotFoundError):
            unlock_achievement(store, "user-1", "moon-landing")

    def test_manual_unlock_is_not_reported_by_check(self, store, extractor, catalog, definitions):
        unlock_achievement(store, "user-1", "10-swipes")
        swipe_all(store, extractor, MEALS, "left")
        assert check_and_unlock(store, "user-1") == []


def test_unknown_user(store, definitions):
    with pytest.raises(NotFoundError):
        check_and_unlock(store, "ghost")
