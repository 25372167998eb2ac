"""Lightweight configuration for the quizwar engine."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Minimal application settings."""

    model_config = SettingsConfigDict(
        env_prefix="QUIZWAR_", env_file=".env", env_file_encoding="utf-8"
    )

    rules_version: str = Field(default="1.0", description="Ruleset version used by the domain")
    starting_currency: int = Field(
        default=0,
        ge=0,
        description="Currency a fresh or reset ledger starts with",
    )
    max_officers_per_battle: int = Field(
        default=3,
        ge=0,
        description="How many officers a session may send into a single battle",
    )
    log_level: LogLevel = Field(default="INFO", description="Root logging level for the server")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the HTTP API",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
