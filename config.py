"""
Configuration settings for learning-steps.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

import math
import re
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_steps(value: str) -> list[float]:
    """
    Parse a step list such as "1, 10" or "1 10 60" into minutes.

    Args:
        value: Comma- or whitespace-separated minutes

    Returns:
        Step lengths in minutes (empty list for a blank string)
    """
    steps = []
    for token in re.split(r"[,\s]+", value.strip()):
        if not token:
            continue
        try:
            minutes = float(token)
        except ValueError:
            raise ValueError(f"Invalid step length: {token!r}") from None
        if math.isnan(minutes) or minutes < 0:
            raise ValueError(f"Invalid step length: {token!r}")
        steps.append(minutes)
    return steps


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Learning Steps
    # ========================================
    learning_steps: str = Field(
        default="1,10",
        description="Learning step lengths in minutes (comma or space separated)",
    )
    relearning_steps: str = Field(
        default="10",
        description="Relearning step lengths in minutes; empty skips relearning",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    def get_learning_steps(self) -> list[float]:
        """Get learning steps as minutes."""
        return parse_steps(self.learning_steps)

    def get_relearning_steps(self) -> list[float]:
        """Get relearning steps as minutes."""
        return parse_steps(self.relearning_steps)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
