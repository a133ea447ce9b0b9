from datetime import date, datetime

import pytest

from savorly.engine import log_meal
from savorly.engine.meals import next_streak
from savorly.errors import NotFoundError, ValidationError
from savorly.models import MealHistoryEntry, User


@pytest.mark.parametrize(
    "current, longest, last, meal_day, expected",
    [
        (0, 0, None, date(2026, 10, 5), (1, 1)),
        (3, 5, date(2026, 10, 4), date(2026, 10, 5), (4, 5)),
        (5, 5, date(2026, 10, 4), date(2026, 10, 5), (6, 6)),
        (3, 5, date(2026, 10, 5), date(2026, 10, 5), (3, 5)),
        (3, 5, date(2026, 10, 2), date(2026, 10, 5), (1, 5)),
        (3, 5, date(2026, 10, 5), date(2026, 10, 1), (3, 5)),
    ],
)
def test_next_streak(current, longest, last, meal_day, expected):
    streak = next_streak(current, longest, last, meal_day)
    assert (streak.current, streak.longest) == expected


@pytest.fixture
def catalog(add_recipes, user):
    return add_recipes("soup", "bread")


def test_consecutive_days_build_a_streak(db, store, catalog):
    log_meal(store, "user-1", "soup", eaten_at=datetime(2026, 10, 1, 8, 0))
    log_meal(store, "user-1", "bread", eaten_at=datetime(2026, 10, 1, 20, 0))
    log_meal(store, "user-1", "soup", eaten_at=datetime(2026, 10, 2, 20, 0))
    streak = log_meal(store, "user-1", "soup", rating=4, eaten_at=datetime(2026, 10, 3, 20, 0))

    assert (streak.current, streak.longest) == (3, 3)
    user = db.get(User, "user-1")
    assert user.last_meal_date == date(2026, 10, 3)
    assert db.query(MealHistoryEntry).count() == 4


def test_gap_resets_current_but_keeps_longest(db, store, catalog):
    for day in (1, 2, 3):
        log_meal(store, "user-1", "soup", eaten_at=datetime(2026, 10, day, 19, 0))
    streak = log_meal(store, "user-1", "soup", eaten_at=datetime(2026, 10, 7, 19, 0))

    assert (streak.current, streak.longest) == (1, 3)


def test_recent_meals_are_the_latest_oldest_first(store, catalog):
    for day in range(1, 8):
        log_meal(store, "user-1", "soup", rating=day % 5 + 1, eaten_at=datetime(2026, 10, day, 19, 0))

    recent = store.recent_meals("user-1", 5)
    assert [m.eaten_at.day for m in recent] == [3, 4, 5, 6, 7]


@pytest.mark.parametrize("rating", [0, 6, -1])
def test_rating_out_of_range(store, catalog, rating):
    with pytest.raises(ValidationError):
        log_meal(store, "user-1", "soup", rating=rating)


def test_unknown_recipe(store, catalog):
    with pytest.raises(NotFoundError):
        log_meal(store, "user-1", "pizza")


def test_unknown_user_leaves_no_history(db, store, catalog):
    with pytest.raises(NotFoundError):
        log_meal(store, "ghost", "soup")
    assert db.query(MealHistoryEntry).count() == 0


def test_notes_are_stored_and_history_lists_newest_first(store, catalog):
    log_meal(store, "user-1", "soup", rating=3, eaten_at=datetime(2026, 10, 1, 19, 0))
    log_meal(store, "user-1", "bread", notes="Too salty", eaten_at=datetime(2026, 10, 2, 19, 0))

    history = store.list_meals("user-1")
    assert [(m.recipe_id, m.rating, m.notes) for m in history] == [
        ("bread", None, "Too salty"),
        ("soup", 3, None),
    ]
    assert store.list_meals("someone-else") == []
