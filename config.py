"""
Configuration management for DoseTrack
"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "DoseTrack"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"

    # API
    API_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./dosetrack.db"
    DATABASE_ECHO: bool = False

    # Clock (IANA zone name, server local time when unset)
    TIMEZONE: Optional[str] = None

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

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


class ScheduleConfig:
    """Constants for dose schedule expansion and classification"""

    # Duration parsing
    DEFAULT_DURATION_DAYS: int = 5  # used when the duration text has no usable number
    DAYS_PER_WEEK: int = 7
    DAYS_PER_MONTH: int = 30  # fixed approximation, not calendar months

    # Expansion
    DEFAULT_SCHEDULED_TIME: str = "09:00:00"

    # Classification
    DUE_WINDOW_MINUTES: int = 60

    # Clients re-poll instead of receiving pushes
    CLIENT_POLL_INTERVAL_SECONDS: int = 30


# Database table names
class TableNames:
    PATIENTS = "patients"
    PRESCRIPTIONS = "prescriptions"
    PRESCRIPTION_MEDICINES = "prescription_medicines"
    DOSE_RECORDS = "dose_records"


settings = get_settings()
schedule_config = ScheduleConfig()
