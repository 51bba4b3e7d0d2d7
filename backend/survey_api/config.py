"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from datetime import timedelta
from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict

# Project root: terraqua-survey/
PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./survey.db",
        description="Database connection URL"
    )

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Auto-pause ===
    auto_pause_enabled: bool = Field(
        default=True,
        description="Run the inactivity sweep in the background"
    )
    auto_pause_threshold_hours: float = Field(
        default=6,
        gt=0,
        description="Inactivity after which a playing project is paused"
    )
    auto_pause_interval_seconds: int = Field(
        default=15 * 60,
        gt=0,
        description="Interval between inactivity sweeps"
    )

    # === Tracks ===
    max_points_per_batch: int = Field(
        default=1000,
        gt=0,
        description="Maximum GPS points accepted in one batch"
    )
    gpx_creator: str = Field(
        default="TerrAqua Survey Platform",
        description="Creator attribute of exported GPX documents"
    )

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    @property
    def inactivity_threshold(self) -> timedelta:
        """Shared inactivity threshold for the sweep and active-project checks."""
        return timedelta(hours=self.auto_pause_threshold_hours)

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
