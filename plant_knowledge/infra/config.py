from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_TREFLE_API_URL = "https://trefle.io/api/v1"


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    trefle_token: Optional[str] = Field(default=None, validation_alias="TREFLE_TOKEN")
    trefle_api_url: str = Field(
        default=DEFAULT_TREFLE_API_URL, validation_alias="TREFLE_API_URL"
    )
    trefle_timeout_seconds: float = Field(
        default=10.0, validation_alias="TREFLE_TIMEOUT_SECONDS"
    )
    trefle_max_retries: int = Field(default=2, validation_alias="TREFLE_MAX_RETRIES")
    trefle_retry_delay_seconds: float = Field(
        default=1.0, validation_alias="TREFLE_RETRY_DELAY_SECONDS"
    )
    rate_limit_window_seconds: float = Field(
        default=60.0, validation_alias="RATE_LIMIT_WINDOW_SECONDS"
    )
    rate_limit_max_requests: int = Field(
        default=100, validation_alias="RATE_LIMIT_MAX_REQUESTS"
    )
    plant_cache_ttl_seconds: float = Field(
        default=300.0, validation_alias="PLANT_CACHE_TTL_SECONDS"
    )
    search_cache_max_items: int = Field(
        default=200, validation_alias="SEARCH_CACHE_MAX_ITEMS"
    )
    species_cache_max_items: int = Field(
        default=300, validation_alias="SPECIES_CACHE_MAX_ITEMS"
    )
    common_name_cache_max_items: int = Field(
        default=300, validation_alias="COMMON_NAME_CACHE_MAX_ITEMS"
    )
    registry_max_plants: int = Field(default=20, validation_alias="REGISTRY_MAX_PLANTS")
    max_plants_to_fetch: int = Field(default=5, validation_alias="MAX_PLANTS_TO_FETCH")
    max_plants_per_request: int = Field(
        default=3, validation_alias="MAX_PLANTS_PER_REQUEST"
    )
    session_store_ttl_seconds: int = Field(
        default=1800, validation_alias="SESSION_STORE_TTL_SECONDS"
    )
    log_path: Optional[str] = Field(default=None, validation_alias="PLANT_LOG_PATH")

    @field_validator("trefle_token", mode="after")
    @classmethod
    def strip_token(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("trefle_api_url", mode="after")
    @classmethod
    def normalize_api_url(cls, value: str) -> str:
        return value.rstrip("/") if value else DEFAULT_TREFLE_API_URL

    @field_validator(
        "rate_limit_max_requests",
        "search_cache_max_items",
        "species_cache_max_items",
        "common_name_cache_max_items",
        "registry_max_plants",
        "max_plants_to_fetch",
        "max_plants_per_request",
        "session_store_ttl_seconds",
        mode="after",
    )
    @classmethod
    def clamp_capacity(cls, value: int) -> int:
        return max(1, int(value))

    @field_validator("trefle_max_retries", mode="after")
    @classmethod
    def clamp_retries(cls, value: int) -> int:
        return max(0, int(value))

    @field_validator(
        "trefle_retry_delay_seconds",
        mode="after",
    )
    @classmethod
    def clamp_delay(cls, value: float) -> float:
        return max(0.0, float(value))


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return AppConfig()
