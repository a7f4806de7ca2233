"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Calculate project root: config.py is in user_service/, so go up one level
_CONFIG_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _CONFIG_DIR.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / "user_service" / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="User Service", description="Application name")
    app_env: str = Field(default="development", description="Application environment")
    log_level: str = Field(default="INFO", description="Root log level", alias="LOG_LEVEL")
    cors_origins: list[str] = Field(
        default=["http://localhost:4000", "http://127.0.0.1:4000"],
        description="Origins allowed by the CORS middleware",
        alias="CORS_ORIGINS",
    )

    # Security
    secret_key: str = Field(
        default="change-me-in-production",
        description="Secret key for JWT tokens",
        alias="SECRET_KEY",
    )
    algorithm: str = Field(default="HS256", description="JWT algorithm")
    access_token_expire_minutes: int = Field(default=30, description="Access token expiration in minutes")

    # Database
    database_url: str = Field(
        default="sqlite:///./users.db",
        description="SQLAlchemy database connection URL",
        alias="DATABASE_URL",
    )
    database_echo: bool = Field(default=False, description="Log emitted SQL", alias="DATABASE_ECHO")
    db_pool_size: int = Field(default=10, description="Connections kept in the pool", alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(
        default=20,
        description="Connections allowed beyond the pool size",
        alias="DB_MAX_OVERFLOW",
    )
    auto_create_schema: bool = Field(
        default=True,
        description="Create tables and seed roles on startup",
        alias="AUTO_CREATE_SCHEMA",
    )

    # Listing
    max_page_size: int = Field(
        default=100,
        gt=0,
        description="Upper bound applied to the pageSize query parameter",
        alias="MAX_PAGE_SIZE",
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str:
        """Validate and normalize database URL."""
        if v is None or v == "":
            raise ValueError("DATABASE_URL is required")
        return v.strip()

    @field_validator("app_env", mode="before")
    @classmethod
    def normalize_app_env(cls, v: str) -> str:
        """Normalize app environment to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        if isinstance(v, str):
            return v.upper().strip()
        return v


def get_settings() -> Settings:
    """Get application settings instance.

    Returns:
        Settings: Application settings instance

    Example:
        ```python
        from user_service.config import get_settings

        settings = get_settings()
        print(settings.database_url)
        ```
    """
    return Settings()


# Global settings instance
settings = get_settings()
