"""Application configuration from environment variables."""

from decimal import Decimal

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = ConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(
        default="sqlite:///./dormitory.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = Field(default=False, description="Log SQL queries")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/server.log", description="Server log file path")

    # API
    api_title: str = Field(default="Dormitory Billing API", description="API title")
    api_version: str = Field(default="0.1.0", description="API version")

    # Billing
    billing_cutover_day: int = Field(
        default=22,
        ge=1,
        le=28,
        description="Day of month on which a new billing period starts",
    )
    default_monthly_rent: Decimal = Field(
        default=Decimal("1500.00"), description="Monthly rent for new occupants"
    )
    default_rate_per_unit: Decimal = Field(
        default=Decimal("13.71"), description="Suggested electricity rate per kWh"
    )
    payment_due_days: int = Field(
        default=0,
        ge=0,
        description="Days after a billing period ends before its obligations are overdue",
    )


# Global settings instance
settings = Settings()
