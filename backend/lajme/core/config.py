"""
Application configuration using Pydantic Settings
"""

from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Lajme News Aggregator"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field(default="development", description="Environment: development, staging, production")
    DEBUG: bool = Field(default=False, description="Debug mode")

    # CORS
    ALLOWED_HOSTS: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    ALLOWED_ORIGIN_REGEX: Optional[str] = Field(default=None, description="Regex for allowed CORS origins")

    @field_validator('ALLOWED_HOSTS', mode='before')
    @classmethod
    def validate_allowed_hosts(cls, v):
        """Validate ALLOWED_HOSTS field to handle JSON string inputs"""
        if isinstance(v, str):
            try:
                import json
                return json.loads(v)
            except json.JSONDecodeError:
                # If not JSON, treat as comma-separated string
                return [host.strip() for host in v.split(',') if host.strip()]
        return v

    @field_validator('DEBUG', 'DAILY_UNFILTERED_FALLBACK', 'RUN_MIGRATIONS', mode='before')
    @classmethod
    def validate_bool_flags(cls, v):
        """Allow boolean flags to be passed as strings"""
        if isinstance(v, str):
            return v.lower() in ('true', '1', 'yes', 'on')
        return bool(v)

    # Database
    DATABASE_URL: str = Field(..., description="Database URL (postgresql+asyncpg://...)")
    RUN_MIGRATIONS: bool = Field(default=True, description="Run alembic upgrade head on startup")

    # Celery
    CELERY_BROKER_URL: str = Field(default="redis://localhost:6379/0", description="Celery broker URL")
    CELERY_RESULT_BACKEND: str = Field(default="redis://localhost:6379/0", description="Celery result backend URL")

    # Duplicate filtering
    SIMILARITY_THRESHOLD_DEFAULT: float = Field(default=0.85, ge=0.0, le=1.0, description="Default title similarity threshold")
    SIMILARITY_THRESHOLD_MIN: float = Field(default=0.5, description="Lowest threshold accepted from clients")
    SIMILARITY_THRESHOLD_MAX: float = Field(default=0.95, description="Highest threshold accepted from clients")
    UNKNOWN_PROVIDER_PRIORITY: int = Field(default=0, description="Ranking priority for unrecognised providers")
    TITLE_CACHE_SIZE: int = Field(default=2048, ge=1, description="Max normalised titles kept per selection pass")

    # all-articles
    ALL_ARTICLES_DEFAULT_LIMIT: int = Field(default=10, ge=1)
    ALL_ARTICLES_MAX_LIMIT: int = Field(default=50, ge=1)
    ALL_ARTICLES_FETCH_MULTIPLIER: float = Field(default=2.5, ge=1.0, description="Over-fetch factor to survive dedup")
    ALL_ARTICLES_FETCH_CAP: int = Field(default=100, ge=1, description="Max rows fetched per all-articles request")

    # daily-articles
    DAILY_ARTICLES_TARGET: int = Field(default=10, ge=1, description="Exact article count for the daily digest")
    DAILY_FETCH_BATCH_SIZE: int = Field(default=30, ge=1)
    DAILY_FETCH_MAX_BATCH_SIZE: int = Field(default=50, ge=1)
    DAILY_FETCH_MAX_ITERATIONS: int = Field(default=5, ge=1)
    DAILY_PER_PROVIDER: int = Field(default=2, ge=1, description="Articles per provider for the per_provider digest")
    DAILY_PER_PROVIDER_POOL: int = Field(default=50, ge=1)
    DAILY_TOP_PROVIDER_CAP: int = Field(default=3, ge=1, description="Slot cap for the highest ranked provider")
    DAILY_PROVIDER_CAP: int = Field(default=2, ge=1, description="Slot cap for every other provider")
    DAILY_UNFILTERED_FALLBACK: bool = Field(
        default=False,
        description="Top up a short daily digest with unfiltered rows",
    )

    # Retention
    CLEANUP_DAYS_OLD: int = Field(default=5, description="Delete articles older than this many days")
    MAX_ARTICLES: int = Field(default=100, description="Maximum number of articles kept")

    # Subscriptions
    FREE_TRIAL_DAYS: int = Field(default=14, ge=0, description="Length of the free trial for new users")

    # Scraping
    SCRAPER_USER_AGENT: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        description="User agent for web scrapers"
    )
    SCRAPER_TIMEOUT: int = Field(default=30, description="Request timeout in seconds")
    SCRAPER_MAX_RETRIES: int = Field(default=3, description="Retry attempts for scraper HTTP requests")
    SCRAPER_RETRY_BACKOFF: float = Field(default=1.0, description="Base delay in seconds between retries")
    SCRAPER_SAVE_BATCH_SIZE: int = Field(default=10, ge=1, description="Articles inserted per batch")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Log level")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


# Create settings instance
settings = Settings()
