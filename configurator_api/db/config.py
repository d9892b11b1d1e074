from __future__ import annotations

import re
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./configurator.db"


class Settings(BaseSettings):
    """
    Settings for the catalog database.

    Reads from environment variables (or .env via pydantic-settings). Either a
    full DATABASE_URL is given, or a PostgreSQL URL is assembled from:
      - POSTGRES_USER
      - POSTGRES_PASSWORD
      - POSTGRES_DB
      - POSTGRES_HOST
      - POSTGRES_PORT
    When neither is configured a local SQLite file is used.
    """

    DATABASE_URL: Optional[str] = Field(
        default=None, description="Full SQLAlchemy connection URL (sqlite or postgresql)."
    )
    POSTGRES_USER: Optional[str] = Field(default=None, description="DB username")
    POSTGRES_PASSWORD: Optional[str] = Field(default=None, description="DB password")
    POSTGRES_DB: Optional[str] = Field(default=None, description="Database name")
    POSTGRES_PORT: Optional[int] = Field(
        default=5432, description="Database port (default 5432)"
    )
    POSTGRES_HOST: Optional[str] = Field(
        default="localhost", description="Database host (default localhost)"
    )

    # SQLAlchemy engine options
    SQL_ECHO: bool = Field(
        default=False, description="Echo SQL statements for debugging (default False)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def database_url(self) -> str:
        """
        Compute the configured database URL. Prefers DATABASE_URL, then the
        POSTGRES_* variables, then the local SQLite default.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if any([self.POSTGRES_USER, self.POSTGRES_PASSWORD, self.POSTGRES_DB]):
            if not all([self.POSTGRES_USER, self.POSTGRES_PASSWORD, self.POSTGRES_DB]):
                raise ValueError(
                    "Database configuration incomplete. Set POSTGRES_USER, POSTGRES_PASSWORD "
                    "and POSTGRES_DB together, or provide DATABASE_URL."
                )
            host = self.POSTGRES_HOST or "localhost"
            port = self.POSTGRES_PORT or 5432
            return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{host}:{port}/{self.POSTGRES_DB}"

        return DEFAULT_DATABASE_URL

    @property
    def async_database_url(self) -> str:
        """
        Convert the base URL to an async driver URL (asyncpg / aiosqlite),
        required for AsyncEngine.
        """
        url = self.database_url
        if url.startswith("sqlite"):
            return re.sub(r"^sqlite(\+\w+)?://", "sqlite+aiosqlite://", url)
        if url.startswith("postgresql+asyncpg://"):
            return url
        return re.sub(r"^postgres(ql)?(\+\w+)?://", "postgresql+asyncpg://", url)

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return a settings object populated from the environment."""
    # Settings is cheap to construct; a new instance picks up env changes.
    return Settings()
