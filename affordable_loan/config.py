"""Application configuration via pydantic-settings.

Policy constants (DTI cap, default rate, term bounds) are configuration,
not code: they can be overridden from the environment or a .env file.
Settings are organized into logical groups and composed into a single Settings object.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PolicySettings(BaseSettings):
    """Lending policy applied by the affordability calculator."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    dti_ratio_cap: Decimal = Field(
        default=Decimal("0.35"),
        description="Share of net monthly income that may go to total debt service",
    )
    default_interest_rate_percent: Decimal = Field(
        default=Decimal("2.5"),
        description="Annual rate used when the household does not know its rate",
    )
    min_term_years: int = Field(default=5, description="Shortest accepted mortgage term")
    max_term_years: int = Field(default=50, description="Longest accepted mortgage term")

    @field_validator("dti_ratio_cap")
    @classmethod
    def validate_ratio_cap(cls, v: Decimal) -> Decimal:
        """The cap is a fraction of income, not a percentage."""
        if not Decimal("0") < v <= Decimal("1"):
            msg = f"Invalid DTI ratio cap: {v}. Must be in (0, 1]"
            raise ValueError(msg)
        return v

    @field_validator("default_interest_rate_percent")
    @classmethod
    def validate_default_rate(cls, v: Decimal) -> Decimal:
        if not Decimal("0") < v <= Decimal("100"):
            msg = f"Invalid default interest rate: {v}. Must be in (0, 100]"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_term_bounds(self) -> PolicySettings:
        if not 0 < self.min_term_years <= self.max_term_years:
            msg = f"Invalid term bounds: {self.min_term_years}..{self.max_term_years}"
            raise ValueError(msg)
        return self


class CostTableSettings(BaseSettings):
    """Location of the versioned region × property-state cost data set."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    cost_table_path: Path | None = Field(
        default=None,
        description="JSON cost table; None uses the data set shipped with the package",
    )


class ApiSettings(BaseSettings):
    """HTTP boundary settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)


class Settings(BaseSettings):
    """Root settings composing all sub-settings.

    Usage:
        settings = Settings()
        settings.policy.dti_ratio_cap
        settings.cost_table.cost_table_path
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Composed settings (loaded from same .env)
    policy: PolicySettings = Field(default_factory=PolicySettings)
    cost_table: CostTableSettings = Field(default_factory=CostTableSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            msg = f"Invalid log level: {v}. Must be one of {valid}"
            raise ValueError(msg)
        return upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


# Module-level singleton; import this wherever settings are needed.
settings = Settings()
