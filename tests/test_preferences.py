from datetime import datetime

import pytest

from savorly.engine.preferences import (
    PreferenceCache,
    PreferenceExtractor,
    build_preference_prompt,
)
from savorly.errors import UpstreamError
from savorly.inference import parse_json_object
from savorly.models import MealHistoryEntry
from savorly.schemas import PreferenceProfile

from conftest import FakeInference, profile_reply


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return PreferenceCache(ttl_seconds=24 * 60 * 60, clock=clock)


GOOD_REPLY = profile_reply(
    preferredCuisines=["Thai"],
    avoidedIngredients=["peanut"],
    nutritionalFocus="high-protein",
    preferredComplexity=["easy", "medium"],
    preferredPortionSize=None,
    dietaryPatterns=[],
)


class TestPreferenceCache:
    def test_hit_within_ttl(self, cache, clock):
        profile = PreferenceProfile(preferred_cuisines={"Thai"})
        cache.set("u", profile)
        clock.now += 24 * 60 * 60 - 1
        assert cache.get("u") is profile

    def test_expires_at_ttl(self, cache, clock):
        cache.set("u", PreferenceProfile())
        clock.now += 24 * 60 * 60
        assert cache.get("u") is None
        assert len(cache) == 0

    def test_keyed_per_user(self, cache):
        cache.set("u", PreferenceProfile(preferred_cuisines={"Thai"}))
        assert cache.get("other") is None


class TestPreferenceExtractor:
    def test_parses_and_coerces_model_output(self, cache):
        extractor = PreferenceExtractor(FakeInference(reply=GOOD_REPLY), cache)
        profile = extractor.extract("u", ["r1"], ["r2"], [])
        assert profile.preferred_cuisines == {"Thai"}
        assert profile.avoided_ingredients == {"peanut"}
        assert profile.nutritional_focus == {"high-protein"}
        assert profile.preferred_complexity == "easy"
        assert profile.preferred_portion_size is None

    def test_cache_hit_skips_inference(self, cache):
        inference = FakeInference(reply=GOOD_REPLY)
        extractor = PreferenceExtractor(inference, cache)
        first = extractor.analyze("u", ["r1"], [], [])
        second = extractor.analyze("u", ["r1", "r3"], [], [])
        assert len(inference.calls) == 1
        assert not first.cached and second.cached
        assert second.profile == first.profile

    def test_recomputes_after_ttl(self, cache, clock):
        inference = FakeInference(reply=GOOD_REPLY)
        extractor = PreferenceExtractor(inference, cache)
        extractor.extract("u", ["r1"], [], [])
        clock.now += 24 * 60 * 60 + 1
        extractor.extract("u", ["r1"], [], [])
        assert len(inference.calls) == 2

    def test_upstream_failure_yields_none_and_is_not_cached(self, cache):
        inference = FakeInference(error=UpstreamError("APITimeoutError: timed out"))
        extractor = PreferenceExtractor(inference, cache)
        result = extractor.analyze("u", ["r1"], [], [])
        assert result.profile is None
        assert not result.ok
        assert isinstance(result.error, UpstreamError)
        extractor.analyze("u", ["r1"], [], [])
        assert len(inference.calls) == 2

    def test_malformed_json_yields_none(self, cache):
        extractor = PreferenceExtractor(FakeInference(reply="I think they like Thai food."), cache)
        assert extractor.extract("u", ["r1"], [], []) is None

    def test_non_object_json_yields_none(self, cache):
        extractor = PreferenceExtractor(FakeInference(reply="[1, 2, 3]"), cache)
        assert extractor.extract("u", ["r1"], [], []) is None

    def test_invalid_field_type_yields_none(self, cache):
        reply = profile_reply(preferredComplexity={"level": "easy"})
        extractor = PreferenceExtractor(FakeInference(reply=reply), cache)
        result = extractor.analyze("u", ["r1"], [], [])
        assert result.profile is None
        assert isinstance(result.error, UpstreamError)

    @pytest.mark.parametrize("value", [5, True, 3.5])
    def test_scalar_where_list_expected_yields_none(self, cache, value):
        reply = profile_reply(preferredCuisines=value)
        extractor = PreferenceExtractor(FakeInference(reply=reply), cache)
        result = extractor.analyze("u", ["r1"], [], [])
        assert result.profile is None
        assert isinstance(result.error, UpstreamError)
        assert len(cache) == 0

    def test_unexpected_client_error_yields_none(self, cache):
        inference = FakeInference(error=RuntimeError("connection reset"))
        extractor = PreferenceExtractor(inference, cache)
        result = extractor.analyze("u", ["r1"], [], [])
        assert result.profile is None
        assert isinstance(result.error, UpstreamError)

    def test_empty_history_skips_inference(self, cache):
        inference = FakeInference(reply=GOOD_REPLY)
        extractor = PreferenceExtractor(inference, cache)
        assert extractor.extract("u", [], [], []) is None
        assert inference.calls == []

    def test_disabled_without_inference(self, cache):
        extractor = PreferenceExtractor(None, cache)
        assert extractor.extract("u", ["r1"], [], []) is None


def test_prompt_describes_known_recipes(make_recipe):
    lookup = {"r1": make_recipe("r1", name="Green Curry", cuisine="Thai", ingredients=["coconut milk"])}
    meals = [MealHistoryEntry(recipe_id="r9", rating=4, eaten_at=datetime(2026, 10, 1, 19, 0))]
    prompt = build_preference_prompt(["r1"], ["r2"], meals, lookup)
    assert '"name": "Green Curry"' in prompt
    assert '"coconut milk"' in prompt
    assert '[{"id": "r2"}]' in prompt
    assert '"mealId": "r9"' in prompt


class TestParseJsonObject:
    def test_bare(self):
        assert parse_json_object('{"a": 1}') == {"a": 1}

    def test_fenced(self):
        assert parse_json_object('Here you go:\n```json\n{"a": 1}\n```') == {"a": 1}

    def test_prose_around_object(self):
        assert parse_json_object('Sure! {"a": {"b": 2}} Hope it helps.') == {"a": {"b": 2}}

    def test_garbage_raises(self):
        with pytest.raises(UpstreamError):
            parse_json_object("no json here")
