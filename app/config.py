"""
TaxReturn Assessment - Configuration Settings

This module handles all application configuration using Pydantic Settings.
Environment variables are loaded from .env file.

Assessment parameters (slab table, relief caps, withholding rates) are plain
data for a single assessment year. Structured values are read from the
environment as JSON, e.g.

    TAX_SLABS='[{"upper": 1000000, "rate": 0.06}, {"upper": null, "rate": 0.36}]'
"""

from decimal import Decimal
from functools import lru_cache
from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TaxSlabSetting(BaseModel):
    """One progressive slab: income up to `upper` taxed at `rate` (None = unbounded)."""
    upper: Optional[Decimal] = None
    rate: Decimal


def _default_tax_slabs() -> List[TaxSlabSetting]:
    return [
        TaxSlabSetting(upper=Decimal("1000000"), rate=Decimal("0.06")),
        TaxSlabSetting(upper=Decimal("1500000"), rate=Decimal("0.18")),
        TaxSlabSetting(upper=Decimal("2000000"), rate=Decimal("0.24")),
        TaxSlabSetting(upper=Decimal("2500000"), rate=Decimal("0.30")),
        TaxSlabSetting(upper=None, rate=Decimal("0.36")),
    ]


def _default_withholding_rates() -> Dict[str, Decimal]:
    return {
        "Rent": Decimal("0.10"),
        "Interest": Decimal("0.05"),
        "Dividend": Decimal("0.15"),
        "Other": Decimal("0"),
    }


def _default_qualifying_payment_caps() -> Dict[str, Optional[Decimal]]:
    return {
        "Solar": Decimal("600000"),
        "Charity": Decimal("75000"),
        "Government": None,  # uncapped
    }


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ===========================================
    # APPLICATION CONFIGURATION
    # ===========================================
    app_name: str = "TaxReturn Assessment"
    app_env: str = "development"
    debug: bool = True
    api_version: str = "v1"

    # ===========================================
    # ASSESSMENT YEAR PARAMETERS
    # ===========================================
    tax_year: str = "2025-26"
    currency_code: str = "LKR"
    personal_relief_cap: Decimal = Decimal("1800000")
    rental_relief_rate: Decimal = Decimal("0.25")
    tax_slabs: List[TaxSlabSetting] = Field(default_factory=_default_tax_slabs)
    withholding_rates: Dict[str, Decimal] = Field(default_factory=_default_withholding_rates)
    qualifying_payment_caps: Dict[str, Optional[Decimal]] = Field(
        default_factory=_default_qualifying_payment_caps
    )

    # ===========================================
    # CORS SETTINGS
    # ===========================================
    cors_origins: str = "http://localhost:3000,http://localhost:8081,http://127.0.0.1:8000"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string into list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to avoid reading .env file on every call.
    """
    return Settings()


# Export settings instance
settings = get_settings()
