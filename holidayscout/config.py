"""
Configuration management using Pydantic Settings.
Loads environment variables with validation and type checking.
"""

from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, RedisDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from holidayscout.models.search import normalize_origin


class Settings(BaseSettings):
    """Application settings with environment variable validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="HolidayScout", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Emit JSON formatted logs")
    log_file: Optional[str] = Field(default=None, description="Optional rotating log file path")
    environment: str = Field(default="development", description="Environment name")

    # Redis (optional shared cache backend)
    redis_url: Optional[RedisDsn] = Field(
        default=None,
        description="Redis connection URL; in-process cache is used when unset",
    )

    # Search defaults
    default_origin: str = Field(default="LON", description="Default origin city/airport code")
    search_concurrency: int = Field(
        default=5, ge=1, description="Maximum destinations searched concurrently"
    )
    search_min_results: int = Field(
        default=6, ge=1, description="Minimum packages before over-budget top-up stops"
    )
    search_date_samples: int = Field(
        default=5, ge=1, description="Date samples tried per destination"
    )
    provider_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Timeout for a single provider call in seconds"
    )

    # Cache Settings
    cache_ttl_transport: int = Field(
        default=900, description="Cache TTL for transport prices in seconds"
    )
    cache_ttl_hotels: int = Field(
        default=1800, description="Cache TTL for hotel lookups in seconds"
    )

    # Result filters
    require_hotel_image: bool = Field(
        default=False, description="Ignore hotel offers that have no image"
    )
    require_live_price: bool = Field(
        default=False, description="Ignore transport offers that are estimates"
    )

    # API Keys - Travel Services
    use_amadeus: bool = Field(default=False, description="Use Amadeus for live flight prices")
    amadeus_client_id: Optional[str] = Field(default=None, description="Amadeus client ID")
    amadeus_client_secret: Optional[str] = Field(
        default=None, description="Amadeus client secret"
    )
    amadeus_hostname: str = Field(
        default="test", description="Amadeus environment ('test' or 'production')"
    )

    # Affiliate links
    booking_affiliate_id: str = Field(default="", description="Booking.com affiliate ID")
    klook_affiliate_url: str = Field(
        default="https://klook.tpx.lu/89cfHZHx", description="Klook affiliate base URL"
    )

    # API
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        description="Allowed CORS origins (comma-separated)",
    )

    @field_validator("default_origin")
    @classmethod
    def resolve_default_origin(cls, v: str) -> str:
        """Resolve the default origin through the origin aliases."""
        return normalize_origin(v)

    @field_validator("amadeus_hostname")
    @classmethod
    def validate_amadeus_hostname(cls, v: str) -> str:
        """Only the two Amadeus environments are accepted."""
        if v not in ("test", "production"):
            raise ValueError("amadeus_hostname must be 'test' or 'production'")
        return v

    def get_allowed_origins_list(self) -> list[str]:
        """Get list of allowed origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]


class OrchestratorConfig(BaseModel):
    """
    Tuning knobs for a package search run.

    Defaults: 5 concurrent destinations, 6 minimum results, 5 date samples.
    """

    model_config = ConfigDict(frozen=True)

    concurrency: int = Field(default=5, ge=1)
    min_results: int = Field(default=6, ge=1)
    date_samples: int = Field(default=5, ge=1)
    provider_timeout_seconds: float = Field(default=10.0, gt=0)
    require_hotel_image: bool = False
    require_live_price: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "OrchestratorConfig":
        return cls(
            concurrency=settings.search_concurrency,
            min_results=settings.search_min_results,
            date_samples=settings.search_date_samples,
            provider_timeout_seconds=settings.provider_timeout_seconds,
            require_hotel_image=settings.require_hotel_image,
            require_live_price=settings.require_live_price,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to avoid re-reading environment variables.
    """
    return Settings()


# Global settings instance
settings = get_settings()
