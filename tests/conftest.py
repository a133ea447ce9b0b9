import json
import os

# Settings are read at import time, so the environment must be in place first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["ANTHROPIC_API_KEY"] = ""

import jwt
import pytest
from fastapi.testclient import TestClient

from savorly.database import SessionLocal, engine
from savorly.dependencies import get_preference_extractor
from savorly.engine import PreferenceCache, PreferenceExtractor
from savorly.errors import UpstreamError
from savorly.main import app
from savorly.models import (
    AchievementDefinition,
    AchievementType,
    Base,
    Recipe,
    User,
)
from savorly.store import SQLStore

USER_ID = "user-1"


class FakeInference:
    """Stands in for the Anthropic client; records every prompt it gets."""

    def __init__(self, reply: str | None = None, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[str] = []

    def complete(self, system: str, prompt: str) -> str:
        self.calls.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


def profile_reply(**fields) -> str:
    return json.dumps(fields)


@pytest.fixture
def db():
    Base.metadata.create_all(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture
def store(db):
    return SQLStore(db)


@pytest.fixture
def make_recipe():
    """Build a transient Recipe with every column populated."""

    def _make(recipe_id: str, **fields) -> Recipe:
        values = {
            "name": recipe_id.title(),
            "cuisine": None,
            "nutritional_tags": [],
            "complexity": None,
            "portion_size": None,
            "ingredients": [],
            "popularity": 0,
            "likes": 0,
            "active": True,
        }
        values.update(fields)
        return Recipe(id=recipe_id, **values)

    return _make


@pytest.fixture
def add_recipes(db, make_recipe):
    """Persist recipes given as (id, fields) pairs or bare ids."""

    def _add(*entries) -> list[Recipe]:
        recipes = []
        for entry in entries:
            recipe_id, fields = (entry, {}) if isinstance(entry, str) else entry
            recipes.append(make_recipe(recipe_id, **fields))
        db.add_all(recipes)
        db.commit()
        return recipes

    return _add


@pytest.fixture
def user(db):
    user = User(id=USER_ID, display_name="Sam")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def add_achievements(db):
    def _add(*definitions) -> list[AchievementDefinition]:
        rows = [
            AchievementDefinition(
                id=achievement_id,
                name=name,
                type=AchievementType(achievement_type),
                requirement=requirement,
            )
            for achievement_id, name, achievement_type, requirement in definitions
        ]
        db.add_all(rows)
        db.commit()
        return rows

    return _add


@pytest.fixture
def inference():
    return FakeInference(error=UpstreamError("inference disabled in tests"))


@pytest.fixture
def extractor(inference):
    return PreferenceExtractor(inference=inference, cache=PreferenceCache(ttl_seconds=3600))


@pytest.fixture
def client(db, extractor):
    app.dependency_overrides[get_preference_extractor] = lambda: extractor
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_token(uid: str = USER_ID, secret: str = "test-secret") -> str:
    return jwt.encode({"uid": uid}, secret, algorithm="HS256")


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}
