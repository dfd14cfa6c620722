"""Pytest configuration and fixtures."""

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from homestock.database import Base, get_db
from homestock.main import app
from homestock.models.enums import Role
from homestock.models.user import User
from homestock.services.households import HouseholdService
from homestock.services.permissions import Actor
from homestock.services.photo_storage import LocalPhotoStorage
from homestock.services.realtime import RealtimeService


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/homestock", "/homestock_test")
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(autouse=True)
def redis_publisher():
    """Redis client used for publishing; never touches a real server."""
    client = MagicMock()
    with patch("homestock.services.realtime.get_sync_redis", return_value=client):
        yield client


@pytest.fixture(autouse=True)
def restock_queue():
    """Celery ``delay`` for restock triggers."""
    with patch("homestock.tasks.shopping.add_low_stock_item.delay") as mock_delay:
        yield mock_delay


@pytest.fixture(autouse=True)
def realtime_listener():
    """Skip the Redis pattern subscription; fan-out still runs locally."""
    with patch.object(RealtimeService, "ensure_listener", AsyncMock()) as mock_listener:
        yield mock_listener


@pytest.fixture(autouse=True)
def photo_dir(tmp_path, monkeypatch):
    """Store uploaded photos under a temporary directory."""
    from homestock.services import photo_storage

    root = tmp_path / "photos"
    monkeypatch.setattr(photo_storage.settings, "photo_storage_dir", str(root))
    return root


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register(client, email: str, name: str = "Test User") -> AuthHeaders:
    response = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": "testpass123", "name": name},
    )
    assert response.status_code == 201
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['access_token']}"},
        user_id=data["user"]["id"],
        email=email,
    )


@pytest.fixture
def signup(client):
    """Register another account and return its auth headers."""

    def _signup(email: str, name: str = "Test User") -> AuthHeaders:
        return register(client, email, name)

    return _signup


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return register(client, "test@example.com")


@pytest.fixture
def household_id(client, auth_headers):
    """Household owned (admin) by the ``auth_headers`` user."""
    response = client.post("/api/v1/households", headers=auth_headers, json={"name": "Smiths"})
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def kitchen(client, auth_headers, household_id):
    response = client.post(
        f"/api/v1/households/{household_id}/locations",
        headers=auth_headers,
        json={"name": "Kitchen", "is_primary_storage": True},
    )
    assert response.status_code == 201
    return response.json()


# Service-level fixtures


def make_user(db, email: str, name: str | None = None) -> User:
    user = User(email=email, password_hash="not-a-real-hash", name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user_factory(db):
    def _make(email: str, name: str | None = None) -> User:
        return make_user(db, email, name)

    return _make


@pytest.fixture
def owner(db):
    return make_user(db, "owner@example.com", "Owner")


@pytest.fixture
def actor(db, owner) -> Actor:
    """Admin of a fresh "Smiths" household."""
    household = HouseholdService(db).create_household(owner, "Smiths")
    return Actor(user_id=owner.id, household_id=household.id, role=Role.ADMIN)


@pytest.fixture
def other_actor(db) -> Actor:
    """Admin of an unrelated household."""
    neighbour = make_user(db, "neighbour@example.com", "Neighbour")
    household = HouseholdService(db).create_household(neighbour, "Joneses")
    return Actor(user_id=neighbour.id, household_id=household.id, role=Role.ADMIN)


@pytest.fixture
def photo_storage(photo_dir):
    return LocalPhotoStorage(photo_dir, "/media/household-photos")
