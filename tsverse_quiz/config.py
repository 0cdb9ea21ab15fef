"""
Configuration settings for the tsverse quiz engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

import sys
from functools import lru_cache
from typing import Literal

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TSVERSE_QUIZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Scoring
    # ========================================
    passing_percentage: float = Field(
        default=70.0,
        ge=0,
        le=100,
        description="Default percentage required to pass a quiz",
    )

    # ========================================
    # Analytics Heuristics
    # ========================================
    analytics_strong_threshold: float = Field(
        default=80.0,
        description="Percentage at or above which overall performance is a strong area",
    )
    analytics_weak_threshold: float = Field(
        default=70.0,
        description="Percentage below which the learner is told to review the material",
    )
    analytics_slow_answer_seconds: float = Field(
        default=120.0,
        description="Average seconds per question above which time management is suggested",
    )

    # ========================================
    # Selection
    # ========================================
    random_seed: int | str | None = Field(
        default=None,
        union_mode="left_to_right",
        description="Seed for question sampling and shuffling; strings are hashed (None for system entropy)",
    )

    # ========================================
    # Bank Export
    # ========================================
    export_indent: int | None = Field(
        default=2,
        description="JSON indentation for question bank exports (None for compact)",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    def get_analytics_config(self) -> dict[str, float]:
        """Get analytics thresholds as a dictionary."""
        return {
            "strong_threshold": self.analytics_strong_threshold,
            "weak_threshold": self.analytics_weak_threshold,
            "slow_answer_seconds": self.analytics_slow_answer_seconds,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """
    Replace loguru's default sink with the configured ones.

    Intended for the host application; the engine itself only emits records.
    """
    settings = settings or get_settings()

    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>",
    )
    if settings.log_file:
        logger.add(
            settings.log_file,
            level=settings.log_level,
            rotation="10 MB",
            retention=5,
        )
