"""Configuration settings for the periodization engine."""

import logging
from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


# __file__ = src/periodization_engine/config.py
# .parent.parent.parent = project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PERIODIZATION_",
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Database
    database_path: Path | None = None

    # Logging
    log_level: str = "INFO"

    # Planner tuning
    readiness_threshold: float = 70.0  # recovery score needed to train at full intensity
    fatigued_intensity_pct: float = 70.0
    ready_intensity_pct: float = 85.0

    # Template catalog
    seed_builtin_templates: bool = True

    def model_post_init(self, __context) -> None:
        """Set default database path after initialization."""
        if self.database_path is None:
            self.database_path = PROJECT_ROOT / "periodization.db"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the API and CLI entry points."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
