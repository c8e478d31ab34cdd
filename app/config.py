"""Application configuration using Pydantic Settings.

This module centralizes all configuration values that may vary between environments.
Values can be overridden via environment variables or .env file.
"""
import os
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # ===== Tour API =====
    TOUR_API_KEY: Optional[str] = os.getenv("TOUR_API_KEY")
    # Legacy frontend variable, still honoured when TOUR_API_KEY is unset
    NEXT_PUBLIC_TOUR_API_KEY: Optional[str] = os.getenv("NEXT_PUBLIC_TOUR_API_KEY")
    TOUR_API_BASE_URL: str = os.getenv("TOUR_API_BASE_URL", "https://apis.data.go.kr/B551011/KorService2")
    TOUR_API_MOBILE_OS: str = os.getenv("TOUR_API_MOBILE_OS", "ETC")
    TOUR_API_MOBILE_APP: str = os.getenv("TOUR_API_MOBILE_APP", "MyTrip")

    # ===== Retry & Timeouts =====
    API_TIMEOUT_SECONDS: float = float(os.getenv("API_TIMEOUT_SECONDS", "30"))
    RETRY_MAX_ATTEMPTS: int = int(os.getenv("RETRY_MAX_ATTEMPTS", "3"))
    RETRY_INITIAL_DELAY_SECONDS: float = float(os.getenv("RETRY_INITIAL_DELAY_SECONDS", "1.0"))
    RETRY_MAX_DELAY_SECONDS: float = float(os.getenv("RETRY_MAX_DELAY_SECONDS", "4.0"))

    # ===== Pagination Defaults =====
    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
    PET_FILTER_PAGE_SIZE: int = int(os.getenv("PET_FILTER_PAGE_SIZE", "100"))
    DEFAULT_AREA_CODE: str = os.getenv("DEFAULT_AREA_CODE", "1")  # Seoul
    DEFAULT_CONTENT_TYPE_ID: str = os.getenv("DEFAULT_CONTENT_TYPE_ID", "12")  # Tourist spot
    PET_IMPLICIT_KEYWORD: str = os.getenv("PET_IMPLICIT_KEYWORD", "반려")
    DETAIL_IMAGE_LIMIT: int = int(os.getenv("DETAIL_IMAGE_LIMIT", "20"))

    # ===== Batch Processing =====
    ALL_REGIONS_BATCH_SIZE: int = int(os.getenv("ALL_REGIONS_BATCH_SIZE", "3"))
    ALL_REGIONS_BATCH_DELAY_SECONDS: float = float(os.getenv("ALL_REGIONS_BATCH_DELAY_SECONDS", "0.3"))
    STATS_BATCH_SIZE: int = int(os.getenv("STATS_BATCH_SIZE", "3"))
    STATS_BATCH_DELAY_SECONDS: float = float(os.getenv("STATS_BATCH_DELAY_SECONDS", "0.5"))

    # ===== Cache TTLs (seconds) =====
    STATS_CACHE_TTL_SECONDS: int = int(os.getenv("STATS_CACHE_TTL_SECONDS", "3600"))  # 1 hour

    # ===== Redis Cache =====
    REDIS_CACHE_ENABLED: bool = os.getenv("REDIS_CACHE_ENABLED", "false").lower() == "true"
    REDIS_CACHE_HOST: str = os.getenv("REDIS_CACHE_HOST", "localhost")
    REDIS_CACHE_PORT: int = int(os.getenv("REDIS_CACHE_PORT", "6379"))
    REDIS_CACHE_DB: int = int(os.getenv("REDIS_CACHE_DB", "2"))
    REDIS_CACHE_PASSWORD: Optional[str] = os.getenv("REDIS_CACHE_PASSWORD") or None

    # ===== Connection Pooling =====
    HTTP_MAX_CONNECTIONS: int = int(os.getenv("HTTP_MAX_CONNECTIONS", "100"))
    HTTP_MAX_KEEPALIVE: int = int(os.getenv("HTTP_MAX_KEEPALIVE", "50"))
    HTTP_ENABLE_HTTP2: bool = os.getenv("HTTP_ENABLE_HTTP2", "true").lower() == "true"

    # ===== Database =====
    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL")
    DATABASE_HOST: str = os.getenv("DATABASE_HOST", "localhost")
    DATABASE_PORT: int = int(os.getenv("DATABASE_PORT", "3306"))
    DATABASE_USER: str = os.getenv("DATABASE_USER", "root")
    DATABASE_PASSWORD: str = os.getenv("DATABASE_PASSWORD", "")
    DATABASE_NAME: str = os.getenv("DATABASE_NAME", "mytrip")
    USE_DB_REPOS: bool = os.getenv("USE_DB_REPOS", "false").lower() == "true"

    # ===== HTTP Surface =====
    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:3001,http://127.0.0.1:3001",
    )

    # ===== Logging & Debug =====
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    RESPONSE_TEXT_PREVIEW_LENGTH: int = int(os.getenv("RESPONSE_TEXT_PREVIEW_LENGTH", "200"))

    # ===== Validation Limits =====
    # Bounding box around the Korean peninsula for displayable coordinates
    KOREA_MIN_LATITUDE: float = 33.0
    KOREA_MAX_LATITUDE: float = 39.0
    KOREA_MIN_LONGITUDE: float = 124.0
    KOREA_MAX_LONGITUDE: float = 132.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        # Allow extra fields from .env that aren't defined here
        extra = "ignore"

    def get_tour_api_key(self) -> Optional[str]:
        """Server-side key first, then the legacy public key."""
        return self.TOUR_API_KEY or self.NEXT_PUBLIC_TOUR_API_KEY or None

    def get_redis_cache_url(self) -> str:
        """Get Redis cache connection URL."""
        if self.REDIS_CACHE_PASSWORD:
            return f"redis://:{self.REDIS_CACHE_PASSWORD}@{self.REDIS_CACHE_HOST}:{self.REDIS_CACHE_PORT}/{self.REDIS_CACHE_DB}"
        return f"redis://{self.REDIS_CACHE_HOST}:{self.REDIS_CACHE_PORT}/{self.REDIS_CACHE_DB}"

    def get_database_url(self) -> str:
        """Explicit DATABASE_URL wins, otherwise build a MySQL URL from parts."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+pymysql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    def get_cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure singleton pattern - settings are loaded once.
    """
    return Settings()


# Global settings instance for easy import
settings = get_settings()
