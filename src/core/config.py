"""Application configuration and .env loading."""

from __future__ import annotations

import math
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _clamp(value: float, low: float | None = None, high: float | None = None) -> float:
    if low is not None and value < low:
        value = low
    if high is not None and value > high:
        value = high
    return value


class Settings(BaseSettings):
    """Centralized runtime configuration.

    Out-of-range environment values are clamped into their allowed range
    instead of failing the load.
    """

    groq_api_key: str | None = Field(default=None, validation_alias="GROQ_API_KEY")
    groq_default_model: str = Field(
        default="openai/gpt-oss-20b", validation_alias="GROQ_DEFAULT_MODEL"
    )
    groq_default_temperature: float = Field(
        default=0.0, validation_alias="GROQ_DEFAULT_TEMPERATURE"
    )
    groq_max_retries: int = Field(default=2, validation_alias="GROQ_MAX_RETRIES")

    intent_model: str = Field(default="openai/gpt-oss-20b", validation_alias="INTENT_MODEL")
    intent_timeout_ms: int = Field(default=3000, validation_alias="INTENT_TIMEOUT_MS")
    intent_relevancy_threshold: int = Field(
        default=0, validation_alias="INTENT_RELEVANCY_THRESHOLD"
    )
    intent_batch_size: int = Field(default=20, validation_alias="INTENT_BATCH_SIZE")
    intent_tiny_batch_fraction: float = Field(
        default=0.2, validation_alias="INTENT_TINY_BATCH_FRACTION"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("groq_api_key", mode="before")
    @classmethod
    def _blank_key_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator(
        "groq_max_retries",
        "intent_timeout_ms",
        "intent_relevancy_threshold",
        "intent_batch_size",
        mode="before",
    )
    @classmethod
    def _truncate_int(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            try:
                return int(value)
            except ValueError:
                pass
            try:
                parsed = float(value)
            except ValueError as exc:
                raise ValueError(f"must be a valid integer, got {value!r}") from exc
            value = parsed
        if isinstance(value, float):
            if not math.isfinite(value):
                raise ValueError("must be a finite number")
            return math.trunc(value)
        return value

    @field_validator("groq_default_temperature", "intent_tiny_batch_fraction")
    @classmethod
    def _clamp_unit_interval(cls, value: float) -> float:
        return _clamp(value, 0.0, 1.0)

    @field_validator("groq_max_retries")
    @classmethod
    def _clamp_retries(cls, value: int) -> int:
        return int(_clamp(value, 0))

    @field_validator("intent_timeout_ms", "intent_batch_size")
    @classmethod
    def _clamp_positive(cls, value: int) -> int:
        return int(_clamp(value, 1))

    @field_validator("intent_relevancy_threshold")
    @classmethod
    def _clamp_threshold(cls, value: int) -> int:
        return int(_clamp(value, 0, 10))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once from .env/environment."""
    return Settings()


__all__ = ["Settings", "get_settings"]
