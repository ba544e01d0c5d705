"""
Configuration for the net-worth service.

Values come from environment variables prefixed with NETWORTH_
(e.g. NETWORTH_DEFAULT_INFLATION_RATE=2.5).
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NETWORTH_", extra="ignore")

    default_inflation_rate: float = Field(
        default=3.5,
        ge=0,
        description="Annual inflation percentage used when a request gives none",
    )
    default_forecast_months: int = Field(default=120, ge=0)
    max_months: int = Field(
        default=480,
        ge=1,
        description="Longest forecast or history horizon a request may ask for",
    )
    log_level: str = "INFO"
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"]
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"log_level must be one of {sorted(valid_levels)}")
        return upper


@lru_cache
def get_settings() -> Settings:
    return Settings()
