from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application-level settings for the configurator service.

    This is separate from configurator_api.db.config.Settings, which focuses on the database layer.
    """

    # FastAPI metadata
    APP_NAME: str = Field(default="Product Configurator API")
    APP_DESCRIPTION: str = Field(
        default=(
            "Configures products from option catalogs and derives consolidated, "
            "priced Bills of Materials."
        )
    )
    APP_VERSION: str = Field(default="0.1.0")

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Comma-separated list or JSON array of allowed origins. Default: *",
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True)
    CORS_ALLOW_METHODS: List[str] = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_HEADERS: List[str] = Field(default_factory=lambda: ["*"])

    # Startup behavior
    CREATE_SCHEMA_ON_STARTUP: bool = Field(
        default=True,
        description="If true, create missing catalog tables at app startup.",
    )
    AUTO_SEED: bool = Field(
        default=False,
        description="If true, load the sample catalog into an empty database after schema creation.",
    )

    # BOM generation policy
    DEDUPLICATE_SELECTIONS: bool = Field(
        default=False,
        description=(
            "If true, an option id selected several times counts once. "
            "If false, each occurrence adds its module activations again."
        ),
    )

    LOG_LEVEL: str = Field(default="INFO")

    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (dev/test/prod)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        """
        Accept both JSON array format and comma-separated formats for CORS origins.
        """
        if v is None:
            return ["*"]
        if isinstance(v, str):
            parts = [p.strip() for p in v.split(",") if p.strip()]
            return parts or ["*"]
        if isinstance(v, list):
            return v or ["*"]
        return ["*"]


# PUBLIC_INTERFACE
def get_app_settings() -> AppSettings:
    """Return a new AppSettings instance populated from environment variables."""
    return AppSettings()
