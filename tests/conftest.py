import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Ensure project root on path for imports when executing from tests dir
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient

from recipeshare.config import Settings
from recipeshare.main import create_app
from recipeshare.models import AuthenticatedUser, Rating, Recipe
from recipeshare.schemas import RecipeCreate
from recipeshare.services.images import ImageStorage
from recipeshare.services.recipes import RecipeService
from recipeshare.store import RecipeStore

T0 = datetime(2025, 1, 1, tzinfo=timezone.utc)

ALICE = AuthenticatedUser(user_id="alice", display_name="Alice")
BOB = AuthenticatedUser(user_id="bob", display_name="Bob")


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        seed_demo_data=False,
        upload_dir=str(tmp_path / "uploads"),
        auth_dev_pin="000000",
        api_keys="alice:alice-key,bob:bob-key",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def alice_headers():
    return {"X-API-Key": "alice-key"}


@pytest.fixture
def bob_headers():
    return {"X-API-Key": "bob-key"}


@pytest.fixture
def make_recipe():
    def _make(title="Tomato Soup", offset_days=0, ratings=(), **overrides):
        created = T0 + timedelta(days=offset_days)
        data = dict(
            title=title,
            description=f"{title} made the simple way.",
            image_url="https://example.com/img.jpg",
            ingredients=["tomatoes", "salt"],
            instructions=["chop", "simmer"],
            category="Soup",
            author_id="alice",
            author_name="Alice",
            created_at=created,
            updated_at=created,
            ratings=[v if isinstance(v, Rating) else Rating(user_id=f"u{i}", value=v) for i, v in enumerate(ratings)],
        )
        data.update(overrides)
        return Recipe(**data)
    return _make


@pytest.fixture
def store():
    return RecipeStore()


@pytest.fixture
def service(store, tmp_path):
    return RecipeService(store, ImageStorage(tmp_path / "uploads"))


@pytest.fixture
def create_payload():
    def _payload(**overrides):
        data = dict(
            title="Fudgy Brownies",
            description="Dense chocolate brownies with a crinkly top.",
            image_url="https://example.com/brownies.jpg",
            ingredients=["butter", "sugar", "cocoa"],
            instructions=["mix", "bake"],
            category="Dessert",
            prep_time=15,
            cook_time=25,
            servings=9,
            difficulty="Easy",
            tags=["Chocolate"],
        )
        data.update(overrides)
        return RecipeCreate(**data)
    return _payload
