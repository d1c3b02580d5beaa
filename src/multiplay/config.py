"""
Configuration for the multiplication drill.

Uses Pydantic Settings so every knob can be overridden from the
environment (MULTIPLAY_*) or a .env file.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

STORAGE_KEY = "net.noserose.multiplay"


class DrillConfig(BaseSettings):
    """Drill settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MULTIPLAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Fact range & choices
    # ========================================
    max_factor: int = Field(
        default=12,
        ge=0,
        description="Largest factor drilled (pairs run 0..max_factor)",
    )
    n_choices: int = Field(
        default=4,
        ge=1,
        description="Number of answer choices offered per problem",
    )

    # ========================================
    # Mastery
    # ========================================
    sufficient: int = Field(
        default=2,
        ge=1,
        description="Net correct answers needed to finish a pair",
    )
    fast_milliseconds: float = Field(
        default=2000.0,
        gt=0,
        description="Correct answers faster than this finish a pair at once",
    )

    # ========================================
    # Timing
    # ========================================
    timing_samples: int = Field(
        default=5,
        ge=1,
        description="Response times remembered per pair",
    )

    # ========================================
    # Runtime
    # ========================================
    state_path: Path = Field(
        default=Path.home() / ".multiplay" / "state.json",
        description="Where tally and timings are saved between sessions",
    )
    log_level: str = Field(
        default="WARNING",
        description="Loguru level for stderr output",
    )
    seed: int | None = Field(
        default=None,
        description="Seed for problem selection (None = nondeterministic)",
    )

    @property
    def dimension(self) -> int:
        """Side length of every per-pair matrix."""
        return self.max_factor + 1

    @property
    def slow_sentinel(self) -> float:
        """Timing placeholder for pairs never answered."""
        return 2 * self.fast_milliseconds


@lru_cache(maxsize=1)
def get_config() -> DrillConfig:
    """Get cached config instance."""
    return DrillConfig()
