"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DAILY_DIR = "daily"
RECORD_SUFFIX = ".md"
SETTINGS_FILE = "app-data.json"
PASSWORD_FILE = ".password"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    data_path: Path = Path("~/CalorieTracker")
    app_identity: str = "calorie-tracker"
    kdf_iterations: int = 100_000
    recent_meals_limit: int = 10
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="CALORIE_STORE_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def root(self) -> Path:
        """Return the expanded data root."""
        return self.data_path.expanduser()
