"""Configuration management"""

from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "Expense Split"
    debug: bool = False
    api_prefix: str = "/api/v1"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Database
    database_url: str

    # Redis (idempotency keys)
    redis_url: str = "redis://localhost:6379/0"
    idempotency_ttl_seconds: int = 86400

    # CORS
    allowed_origins: List[str] = []

    # Splitting
    default_currency: str = "INR"
    strict_split_totals: bool = True

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL is PostgreSQL (or SQLite for local runs)"""
        if not v.startswith(("postgresql", "sqlite")):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL or SQLite connection string"
            )
        return v

    @field_validator("default_currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Currency codes are 3-letter ISO codes"""
        if len(v) != 3 or not v.isalpha():
            raise ValueError("DEFAULT_CURRENCY must be a 3-letter currency code")
        return v.upper()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level name"""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL '{v}'")
        return level


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
