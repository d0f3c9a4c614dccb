"""Runtime configuration, read from the environment (and an optional .env)."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # Database - PostgreSQL in production, SQLite for local use
    database_url: str = Field(default="sqlite:///./rentals.db", alias="DATABASE_URL")
    sql_echo: bool = Field(default=False, alias="SQL_ECHO")
    # Upper bound on row-lock waits (PostgreSQL only)
    lock_timeout_ms: int = Field(default=5000, alias="LOCK_TIMEOUT_MS")

    # Confirmation channel; an empty token means "log only"
    telegram_bot_token: str = Field(default="", alias="TELEGRAM_BOT_TOKEN")
    telegram_chat_id: str = Field(default="", alias="TELEGRAM_CHAT_ID")
    telegram_api_url: str = Field(default="https://api.telegram.org", alias="TELEGRAM_API_URL")
    telegram_timeout: float = Field(default=10.0, alias="TELEGRAM_TIMEOUT")

    currency: str = Field(default="KGS", alias="CURRENCY")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    @field_validator("database_url")
    @classmethod
    def _normalise_postgres_scheme(cls, value: str) -> str:
        # Some hosts hand out postgres://, SQLAlchemy wants postgresql://
        if value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql://", 1)
        return value

    @property
    def telegram_enabled(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)


@lru_cache
def get_settings() -> Settings:
    return Settings()
