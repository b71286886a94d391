import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PLUGIN_SDK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Literal["dev", "test", "staging", "prod"] = Field(default="dev")
    log_level: str = Field(default="INFO", description="Name of the base logging level")
    log_json: bool = Field(default=True, description="Emit single-line JSON log records")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> str:
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        if isinstance(value, int):
            value = logging.getLevelName(value)
        if not isinstance(value, str):
            raise TypeError("PLUGIN_SDK_LOG_LEVEL must be a level name")
        normalized = value.strip().upper()
        if not isinstance(logging.getLevelName(normalized), int):
            raise ValueError(f"PLUGIN_SDK_LOG_LEVEL is not a known logging level: {value!r}")
        return normalized

    @computed_field(return_type=int)
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


@lru_cache
def get_settings() -> Settings:
    return Settings()
