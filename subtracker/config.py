"""
Application configuration using Pydantic Settings
"""
from functools import lru_cache
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """
    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Database (parts) — используются, если DATABASE_URL не задан
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "password"  # ВАЖНО: Заменить в продакшене!
    DB_NAME: str = "subscriptions"

    # Database (full URL) — имеет приоритет над частями
    DATABASE_URL: str = ""

    # "sql" (PostgreSQL) or "memory" (no database, data lost on restart)
    STORAGE_BACKEND: str = "sql"

    # Application
    LOG_LEVEL: str = "info"
    DEBUG: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Игнорировать дополнительные поля из переменных окружения
    )

    def get_sqlalchemy_url(self) -> str:
        """
        Build the SQLAlchemy URL (postgresql+psycopg://)

        DATABASE_URL wins over the DB_* parts; plain postgresql:// URLs
        are switched to the psycopg driver.
        """
        url = self.DATABASE_URL
        if not url:
            url = (
                f"postgresql://{quote_plus(self.DB_USER)}:{quote_plus(self.DB_PASSWORD)}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            )
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+psycopg://", 1)
        return url


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance
    """
    return Settings()
