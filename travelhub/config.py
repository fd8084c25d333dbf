"""Configuration management using Pydantic Settings."""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# Find .env file
# =============================================================================

def find_env_file() -> str:
    """Find the .env file relative to project root."""
    candidates = [
        "config/.env",
        ".env",
        Path(__file__).parent.parent / "config" / ".env",
    ]

    for candidate in candidates:
        path = Path(candidate)
        if path.exists():
            return str(path)

    return "config/.env"  # Default


ENV_FILE = find_env_file()


# =============================================================================
# Settings Classes
# =============================================================================


class PricingSettings(BaseSettings):
    """Booking pricing rules."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        env_prefix="PRICING_",
        extra="ignore",
    )

    # Bundle discount tiers
    small_bundle_rate: Decimal = Decimal("0.05")
    large_bundle_rate: Decimal = Decimal("0.10")
    large_bundle_threshold: int = 3

    # Service orders & cancellations
    service_order_tax_rate: Decimal = Decimal("0.10")
    cancellation_fee_rate: Decimal = Decimal("0.10")

    # Allowed gap between a client-submitted total and the recomputed one
    quote_tolerance: Decimal = Decimal("0.01")

    @field_validator(
        "small_bundle_rate",
        "large_bundle_rate",
        "service_order_tax_rate",
        "cancellation_fee_rate",
    )
    @classmethod
    def validate_rate(cls, v: Decimal) -> Decimal:
        if v < 0 or v > 1:
            raise ValueError("Rates must be between 0 and 1")
        return v

    @field_validator("large_bundle_threshold")
    @classmethod
    def validate_threshold(cls, v: int) -> int:
        if v < 2:
            raise ValueError("Large bundle threshold must be at least 2 services")
        return v


class CurrencySettings(BaseSettings):
    """Exchange rate API settings."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        env_prefix="CURRENCY_",
        extra="ignore",
    )

    api_url: str = "https://open.er-api.com/v6/latest/USD"
    cache_seconds: int = 3600
    timeout_seconds: int = 10


class AppSettings(BaseSettings):
    """Application-level settings."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "console"

    # API server
    api_host: str = "127.0.0.1"
    api_port: int = 8000


class Settings(BaseSettings):
    """Main settings container with lazy loading."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Cache for sub-settings
    _pricing: PricingSettings | None = None
    _currency: CurrencySettings | None = None
    _app: AppSettings | None = None

    @property
    def pricing(self) -> PricingSettings:
        if self._pricing is None:
            self._pricing = PricingSettings()
        return self._pricing

    @property
    def currency(self) -> CurrencySettings:
        if self._currency is None:
            self._currency = CurrencySettings()
        return self._currency

    @property
    def app(self) -> AppSettings:
        if self._app is None:
            self._app = AppSettings()
        return self._app

    # Convenience accessors
    @property
    def service_order_tax_rate(self) -> Decimal:
        return self.pricing.service_order_tax_rate

    @property
    def cancellation_fee_rate(self) -> Decimal:
        return self.pricing.cancellation_fee_rate

    @property
    def quote_tolerance(self) -> Decimal:
        return self.pricing.quote_tolerance


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
