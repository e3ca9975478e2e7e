"""
Application Configuration - Environment-driven settings
"""

from functools import lru_cache
from typing import List
import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    """
    Application settings loaded from environment variables (and .env file).
    Every field can be overridden, e.g. DATABASE_URL=postgresql://... uvicorn task_tracker.main:app
    """
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application
    APP_NAME: str = "Task Tracker"  # API documentation title
    APP_VERSION: str = "1.0.0"  # Reported by /health
    ENVIRONMENT: str = "development"  # development | testing | production
    DEBUG: bool = False  # Verbose logging and SQL echo

    # Database
    DATABASE_URL: str = "sqlite:///./task_tracker.db"  # Use postgresql://... in production
    DB_POOL_SIZE: int = 5  # Persistent connections (server databases only)
    DB_MAX_OVERFLOW: int = 10  # Extra connections when pool is exhausted
    DB_POOL_TIMEOUT: int = 30  # Seconds to wait for a free connection
    AUTO_CREATE_TABLES: bool = True  # Run create_all() on startup

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Board client
    API_BASE_URL: str = "http://localhost:8000"  # Where the board client sends requests
    REFRESH_INTERVAL_SECONDS: float = 5.0  # Background re-fetch period
    DRAG_GRACE_SECONDS: float = 1.0  # Refresh stays paused this long after a drag ends

@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance (read once per process)"""
    return Settings()

settings = get_settings()

def is_production() -> bool:
    """True when running with ENVIRONMENT=production"""
    return settings.ENVIRONMENT.lower() == "production"

def validate_config() -> None:
    """
    Validate settings at startup - fail fast on values that would break later.

    Raises:
        ValueError: If any setting is out of range
    """
    if settings.ENVIRONMENT.lower() not in ("development", "testing", "production"):
        raise ValueError(f"Unknown ENVIRONMENT: {settings.ENVIRONMENT}")
    if not settings.DATABASE_URL:
        raise ValueError("DATABASE_URL must be set")
    if settings.DB_POOL_SIZE < 1:
        raise ValueError("DB_POOL_SIZE must be at least 1")
    if settings.REFRESH_INTERVAL_SECONDS <= 0:
        raise ValueError("REFRESH_INTERVAL_SECONDS must be positive")
    if settings.DRAG_GRACE_SECONDS < 0:
        raise ValueError("DRAG_GRACE_SECONDS cannot be negative")
    if is_production() and settings.DEBUG:
        logger.warning("⚠️  DEBUG is enabled in production")
    logger.info("✅ Configuration validated")
