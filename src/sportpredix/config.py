"""Environment-driven configuration helpers for SportPredix."""

from __future__ import annotations

from functools import lru_cache

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or .env files."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: AnyUrl | str = Field(default="sqlite:///./sportpredix.db")

    default_balance: float = Field(default=1000.0, gt=0)
    deposit_amount: float = Field(default=100.0, gt=0)
    matches_per_day: int = Field(default=12, ge=1, le=100)
    scratch_ticket_price: float = Field(default=50.0, gt=0)

    odds_api_key: str = Field(default="", validation_alias="ODDS_API_KEY")
    odds_base_url: str = Field(default="https://api.the-odds-api.com/v4")
    odds_sport_key: str = Field(default="soccer_italy_serie_a")
    odds_regions: str = Field(default="eu")
    odds_timeout_seconds: float = Field(default=15.0, gt=0)
    # Feed times are UTC; matches are keyed and shown in this zone.
    odds_timezone: str = Field(default="Europe/Rome")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()  # type: ignore[call-arg]
