# mentor_finder/config.py — Pydantic settings (env vars)

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Base URL of the search API used by the web controller. When unset the
    # controller talks to the running app in-process.
    api_url: str | None = None

    # Provider keys. Presence enables the adapter, nothing else is validated.
    serpapi_key: str | None = None
    scrapingbee_key: str | None = None
    rapidapi_key: str | None = None
    apollo_api_key: str | None = None

    # Provider runtime settings
    provider_timeout_seconds: float = 25.0
    provider_http_timeout_seconds: float = 20.0
    serpapi_result_count: int = 20

    # Web controller
    local_store_path: str = ".mentor_finder/local_store.json"
    search_history_limit: int = 20

    log_level: str = "INFO"
    cors_allow_origin: str = "*"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("serpapi_key", "scrapingbee_key", "rapidapi_key", "apollo_api_key")
    @classmethod
    def _blank_key_is_unset(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None


@lru_cache
def get_settings() -> Settings:
    return Settings()
