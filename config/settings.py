"""Centralised configuration handling for FoodBank Pulse."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROXY_URL = "http://localhost:54321/functions/v1/donations-proxy"
DEFAULT_STORE_PATH = Path("data") / "saved_scenarios.json"


class Settings(BaseSettings):
    """Application settings sourced from ``FOODBANK_*`` env vars or ``.env``."""

    donations_proxy_url: str = DEFAULT_PROXY_URL
    http_timeout_seconds: float = 10.0
    feed_max_retries: int = 3
    feed_backoff_base_seconds: float = 1.0
    feed_backoff_cap_seconds: float = 30.0
    use_mock_fallback: bool = True

    scenario_debounce_seconds: float = 0.05
    scenario_store_path: Path = DEFAULT_STORE_PATH

    service_name: str = "foodbank-pulse"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="FOODBANK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def http_client_kwargs(self) -> dict[str, Any]:
        return {"timeout": self.http_timeout_seconds}

    def backoff_delay(self, attempt: int) -> float:
        """Return the wait before retry ``attempt`` (0-based), capped."""

        delay = self.feed_backoff_base_seconds * (2**attempt)
        return min(delay, self.feed_backoff_cap_seconds)


@lru_cache
def get_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()
