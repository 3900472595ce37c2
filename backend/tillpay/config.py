from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "TillPay"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    database_url: str = "postgresql+asyncpg://tillpay:tillpay@db:5432/tillpay"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]

    # Holiday feed
    holiday_api_base_url: str = "https://date.nager.at/api/v3"
    holiday_country_code: str = Field(default="PH", min_length=2, max_length=2)
    holiday_fetch_timeout_seconds: float = Field(default=10.0, gt=0, le=60)
    holiday_cache_ttl_hours: int = Field(default=24, ge=1)
    business_timezone: str = "Asia/Manila"

    # Cash float
    cash_float_initial_amount: float = Field(default=1000, ge=0)
    cash_float_audit_cap: int = Field(default=100, ge=1)

    worker_interval_seconds: int = Field(default=86400, ge=60)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
