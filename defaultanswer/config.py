"""Engine configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Reserved sentinel scores for analyses that could not be scored
SCORE_UNAVAILABLE = -1
SCORE_SNAPSHOT_INCOMPLETE = -2


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Extraction windows
    direct_answer_window_chars: int = 2500
    schema_context_window_chars: int = 2500
    indirect_faq_link_limit: int = 5

    # Snapshot quality gate
    snapshot_thin_bytes: int = 20_000
    snapshot_thin_text_chars: int = 8_000
    snapshot_empty_body_chars: int = 400

    # Fix plan
    fix_threshold_ratio: float = Field(default=0.7, gt=0, le=1)
    fix_plan_limit: int = Field(default=7, ge=1)
    no_critical_fix_score: int = 82

    # Readiness thresholds
    readiness_strong_score: int = 75
    readiness_weak_score: int = 50
    readiness_max_negative_reasoning: int = Field(default=1, ge=0)

    # Cold summary
    cold_summary_prompt_version: str = "cold-summary-v2"

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env == "production"

    @property
    def is_test(self) -> bool:
        """Check if running tests."""
        return self.env == "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
