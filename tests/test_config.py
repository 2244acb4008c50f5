"""
Tests for Settings / app factory wiring
"""
import pytest

from subtracker.config import Settings
from subtracker.main import build_storage
from subtracker.infrastructure.db.repository import SqlSubscriptionStorage
from subtracker.storage.memory import InMemorySubscriptionStorage


def _settings(**kwargs) -> Settings:
    fields = {"DATABASE_URL": "", "STORAGE_BACKEND": "sql"}
    fields.update(kwargs)
    return Settings(_env_file=None, **fields)


def test_url_built_from_parts():
    settings = _settings(DB_HOST="db", DB_PORT=6543, DB_USER="subs", DB_PASSWORD="p@ss", DB_NAME="billing")

    assert settings.get_sqlalchemy_url() == "postgresql+psycopg://subs:p%40ss@db:6543/billing"


def test_database_url_overrides_parts():
    settings = _settings(DATABASE_URL="postgresql://u:p@host:5432/other", DB_HOST="ignored")

    assert settings.get_sqlalchemy_url() == "postgresql+psycopg://u:p@host:5432/other"


def test_non_postgres_url_kept():
    assert _settings(DATABASE_URL="sqlite://").get_sqlalchemy_url() == "sqlite://"


def test_build_memory_storage():
    storage, database = build_storage(_settings(STORAGE_BACKEND="memory"))

    assert isinstance(storage, InMemorySubscriptionStorage)
    assert database is None


def test_build_sql_storage():
    storage, database = build_storage(_settings(DATABASE_URL="sqlite://"))

    assert isinstance(storage, SqlSubscriptionStorage)
    database.dispose()


def test_unknown_backend_rejected():
    with pytest.raises(ValueError):
        build_storage(_settings(STORAGE_BACKEND="redis"))
