"""
Portal Client Configuration
Settings for the API connection, retry policy and cache lifetimes.

All values can be set through environment variables or a `.env` file.
"""
from functools import lru_cache
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class PortalSettings(BaseSettings):
    """Settings for the complaint portal synchronization layer"""

    # API connection
    API_BASE_URL: str = Field(
        default="http://localhost:8000/api",
        description="Base URL of the complaint portal API"
    )
    API_TOKEN: Optional[str] = Field(
        default=None,
        description="Bearer token passed through on every request"
    )
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # Retry policy (transport level)
    QUERY_MAX_RETRIES: int = 2
    MUTATION_MAX_RETRIES: int = 1
    RETRY_BASE_DELAY_SECONDS: float = 1.0
    RETRY_MAX_DELAY_SECONDS: float = 30.0

    # Cache lifetimes
    CACHE_TTL_SECONDS: int = Field(default=300, description="Lists, details, dashboard")
    NOTIFICATIONS_TTL_SECONDS: int = Field(default=120, description="Notifications churn faster")
    ACTIVITY_TTL_SECONDS: int = Field(default=60, description="Comments and assignments to other providers")
    METADATA_TTL_SECONDS: int = Field(default=600, description="Statuses, types, priorities, roles")

    # Overlapping fetches for the same domain
    DISCARD_SUPERSEDED_RESPONSES: bool = Field(
        default=False,
        description="Drop a completion older than the latest issued request for its domain"
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @field_validator('API_BASE_URL')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Endpoint paths are joined with a single slash"""
        v = v.strip()
        if not v:
            raise ValueError("API_BASE_URL must not be empty")
        return v.rstrip("/")

    @field_validator(
        'CACHE_TTL_SECONDS', 'NOTIFICATIONS_TTL_SECONDS', 'ACTIVITY_TTL_SECONDS', 'METADATA_TTL_SECONDS'
    )
    @classmethod
    def validate_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cache TTLs must be positive")
        return v

    @field_validator('QUERY_MAX_RETRIES', 'MUTATION_MAX_RETRIES')
    @classmethod
    def validate_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("retry counts must not be negative")
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        normalized = v.upper()
        if normalized not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return normalized

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_portal_settings() -> PortalSettings:
    """Get cached portal settings"""
    return PortalSettings()
