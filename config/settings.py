"""Application settings and configuration management."""
from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    INTERVIEW_POLICY_PATH: str = Field(default="config/interview_policy.yaml")
    RAPID_FIRE_CONFIG_PATH: str = Field(default="config/rapid_fire.yaml")

    RAPID_FIRE_ENABLED: bool = True
    RAPID_FIRE_COOLDOWN_SECONDS: float = Field(default=30.0, ge=0.0)
    ACCOUNTABILITY_PROBABILITY: float = Field(default=0.7, ge=0.0, le=1.0)
    MEMORY_REFERENCE_PROBABILITY: float = Field(default=0.6, ge=0.0, le=1.0)
    QUOTE_RECALL_PROBABILITY: float = Field(default=0.3, ge=0.0, le=1.0)
    RANDOM_SEED: Optional[int] = None

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True)


settings = Settings()
