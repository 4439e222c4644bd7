"""Configuration for the learning engine.

The nested pydantic models hold tunables that code can also build directly.
``EngineSettings`` loads them from ``COURSE_ENGINE_*`` environment variables
or a ``.env`` file.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_DB_PATH = Path(__file__).parent / "data" / "sessions.db"


class StrategyConfig(BaseModel):
    """Tunables for the built-in strategies."""

    spaced_repetition_stride: int = Field(default=3, ge=1)
    random_seed: int | None = None


class ScoringConfig(BaseModel):
    """Default per-answer scoring."""

    points_per_correct: int = Field(default=10, ge=0)
    hint_penalty: int = Field(default=2, ge=0)


class EngineConfig(BaseModel):
    """Master configuration for the engine."""

    strategy: StrategyConfig = Field(default_factory=StrategyConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)


class EngineSettings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="COURSE_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    db_path: Path = Field(default=DEFAULT_DB_PATH, description="SQLite database file")
    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Empty means every built-in is enabled.
    question_types: Annotated[list[str], NoDecode] = Field(default_factory=list)
    strategies: Annotated[list[str], NoDecode] = Field(default_factory=list)

    engine: EngineConfig = Field(default_factory=EngineConfig)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("question_types", "strategies", mode="before")
    @classmethod
    def _split_csv(cls, value):
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Get cached settings instance."""
    return EngineSettings()
