"""
Pytest configuration and shared fixtures.

Service tests run against a temporary SQLite file through aiosqlite; HTTP
tests drive the application factory with FastAPI's TestClient.
"""

import os
from decimal import Decimal

# Module-level ``app`` in ordering_api.main is built on import
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from ordering_api.core.config import Settings
from ordering_api.database import create_engine_from_settings, create_session_maker, init_db
from ordering_api.main import create_app
from ordering_api.models import MenuItem, Restaurant

TEST_SECRET = "test-secret-key-for-testing-only"


def make_restaurant() -> Restaurant:
    restaurant = Restaurant(
        restaurant_name="Pizza Palace",
        address="12 Main St",
        phone="555-100-2000",
        menu_description="Wood-fired pizza",
    )
    restaurant.menus = [
        MenuItem(menu_name="Margherita", description="Tomato, mozzarella", price=Decimal("12.35"), category="Pizza"),
        MenuItem(menu_name="Garlic Bread", description=None, price=Decimal("5.00"), category="Sides"),
        MenuItem(menu_name="Espresso", description="Double shot", price=Decimal("0.10"), category="Drinks"),
    ]
    return restaurant


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "ordering.db"


@pytest.fixture
def settings(db_path) -> Settings:
    return Settings(
        env_mode="testing",
        database_url=f"sqlite+aiosqlite:///{db_path}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
    )


# =============================================================================
# SERVICE FIXTURES (async)
# =============================================================================

@pytest_asyncio.fixture
async def session_maker(settings):
    engine = create_engine_from_settings(settings)
    await init_db(engine)
    yield create_session_maker(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def restaurant(db) -> Restaurant:
    """Sample restaurant with three menu items."""
    restaurant = make_restaurant()
    db.add(restaurant)
    await db.commit()
    return restaurant


# =============================================================================
# HTTP FIXTURES
# =============================================================================

@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sync_session(client, db_path):
    """Synchronous session on the same database file, for seeding and inspection."""
    engine = create_engine(f"sqlite:///{db_path}")
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture
def menu_ids(sync_session) -> list[int]:
    restaurant = make_restaurant()
    sync_session.add(restaurant)
    sync_session.flush()
    ids = [m.id for m in restaurant.menus]
    sync_session.commit()
    return ids


def registration(username: str = "jdoe", password: str = "s3cret-pass") -> dict[str, str]:
    return {
        "fullname": "John Doe",
        "address": "350 Fifth Avenue",
        "phone": "555-123-4567",
        "email": f"{username}@example.com",
        "username": username,
        "password": password,
    }


@pytest.fixture
def auth_headers(client) -> dict[str, str]:
    """Register and log in a customer; return bearer headers."""
    body = registration()
    assert client.post("/auth/register", json=body).status_code == 201
    response = client.post("/auth/login", json={"username": body["username"], "password": body["password"]})
    return {"Authorization": f"Bearer {response.json()['token']}"}
