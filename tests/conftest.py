"""
Pytest fixtures for testing
"""
import os

# module-level app in subtracker.main must not need PostgreSQL
os.environ.setdefault("STORAGE_BACKEND", "memory")

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from subtracker.infrastructure.db.repository import SqlSubscriptionStorage
from subtracker.infrastructure.db.session import Database
from subtracker.main import create_app
from subtracker.storage.memory import InMemorySubscriptionStorage


@pytest.fixture
def database():
    """In-memory SQLite database; StaticPool keeps one connection for all sessions."""
    db = Database(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    db.create_schema()
    yield db
    db.dispose()


@pytest.fixture
def sql_storage(database) -> SqlSubscriptionStorage:
    return SqlSubscriptionStorage(database.session_factory)


@pytest.fixture
def memory_storage() -> InMemorySubscriptionStorage:
    return InMemorySubscriptionStorage()


@pytest.fixture(params=["sql", "memory"])
def storage(request):
    """Обе реализации SubscriptionStorage — один и тот же контракт"""
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def client(storage):
    """Test client для FastAPI поверх обеих реализаций storage"""
    return TestClient(create_app(storage=storage))


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.UUID("6f9619ff-8b86-d011-b42d-00cf4fc964ff")
