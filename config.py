"""
Configuration management for MedicineReminder
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "MedicineReminder"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"

    # Database
    DATABASE_URL: str = "sqlite:///./medicine_reminder.db"
    DATABASE_ECHO: bool = False

    # Alert polling cadence the host should drive tick() at
    POLL_INTERVAL_SECONDS: int = 60

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


class EngineConfig:
    """Fixed rules of the scheduling and adherence engine"""

    # Plan limiter
    FREE_PLAN_MEDICINE_LIMIT: int = 3

    # Inventory tracker
    LOW_STOCK_THRESHOLD: int = 5

    # Adherence ledger
    REPORT_WINDOW_DAYS: int = 7

    # Dose alerts
    VOICE_PLAYBACK_MINUTES: int = 5
    FALLBACK_INSTRUCTION: str = "Please take your medicine"
    DOSE_TIME_FORMAT: str = "%H:%M"


# Record store collection names
class CollectionNames:
    MEDICINES = "medicines"


settings = get_settings()
engine_config = EngineConfig()
