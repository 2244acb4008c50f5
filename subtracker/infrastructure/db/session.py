"""
Database session management (SQLAlchemy)
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from subtracker.config import Settings


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for all ORM models
    """
    pass


class Database:
    """
    Engine + session factory, created once at startup and passed explicitly
    to the storage layer (no module-level singleton).

    Usage:
        db = Database.from_settings(get_settings())
        db.create_schema()
        storage = SqlSubscriptionStorage(db.session_factory)
    """

    def __init__(self, url: str, **engine_kwargs):
        engine_kwargs.setdefault("pool_pre_ping", True)
        self.engine = create_engine(url, **engine_kwargs)
        self.session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.get_sqlalchemy_url())

    def create_schema(self) -> None:
        """Создать таблицы, если их ещё нет (без миграций)"""
        # models must be imported so their tables are registered on Base.metadata
        from subtracker.infrastructure.db import models  # noqa: F401

        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()
