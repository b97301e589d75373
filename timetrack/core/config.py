"""Environment-driven configuration for the Time Tracker API.

Every knob the service reads lives on :class:`Settings`. Values come from the
process environment first and then from an optional ``.env`` file, so the API
boots in development without any setup while production overrides what it
needs.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Time Tracker API"

    DB_URL: str = Field(
        default="sqlite:///./time-tracker.db",
        validation_alias=AliasChoices("DB_URL", "DATABASE_URL"),
    )

    # The Angular front-end is the only browser client allowed to call us.
    CORS_ORIGIN: str = "http://localhost:4200"

    HOST: str = "0.0.0.0"
    PORT: int = 8000

    BCRYPT_ROUNDS: int = 10
    PLACEHOLDER_TOKEN: str = "fake-jwt-token"

    LOG_LEVEL: str = "INFO"

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def check_bcrypt_rounds(cls, value: int) -> int:
        # bcrypt refuses cost factors outside this range
        if not 4 <= value <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return value

    @field_validator("DB_URL", mode="after")
    @classmethod
    def normalize_db_url(cls, value: str) -> str:
        # Hosted Postgres providers still hand out the legacy scheme.
        if value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql://", 1)
        return value

    @field_validator("LOG_LEVEL", mode="after")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
