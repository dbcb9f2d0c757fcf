# config/appconfig.py
"""
Application Configuration
Database, snapshot, auth token and logging settings for the clinic service
"""
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic_settings import BaseSettings

# Calculate the project root
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Configuration for the Clinic Front-Desk service"""

    APP_NAME: str = "Clinic Front-Desk Service"
    APP_VERSION: str = "1.0.0"

    # ============================================================================
    # DATABASE
    # ============================================================================
    # "sqlite://" keeps every collection in process memory
    DATABASE_URL: str = "sqlite://"
    SQL_ECHO: bool = False

    # ============================================================================
    # SNAPSHOT / SEEDING
    # ============================================================================
    SNAPSHOT_PATH: Optional[str] = None  # e.g. "data/clinic_snapshot.json"
    SEED_DEMO_DATA: bool = True

    # ============================================================================
    # AUTH TOKENS
    # ============================================================================
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRY: int = 60  # minutes

    # ============================================================================
    # LOGGING
    # ============================================================================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

    # ========================================================================
    # COMPUTED PROPERTIES
    # ========================================================================
    @property
    def resolved_snapshot_path(self) -> Optional[Path]:
        """Get absolute path to the snapshot file, if one is configured."""
        if not self.SNAPSHOT_PATH:
            return None
        path = Path(self.SNAPSHOT_PATH)
        return path if path.is_absolute() else BASE_DIR / path

    @property
    def LOGGING_CONFIG(self) -> Dict[str, Any]:
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "app": {"handlers": ["console"], "level": self.LOG_LEVEL, "propagate": False},
                "sqlalchemy.engine": {"level": "INFO" if self.SQL_ECHO else "WARNING"},
            },
            "root": {"handlers": ["console"], "level": "WARNING"},
        }


settings = Settings()
