"""
Configuration Management for Finance Engine

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The engine itself never reads settings; callers pass thresholds in
explicitly, so the computations stay pure and easy to test.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Analytics engine thresholds."""

    model_config = SettingsConfigDict(
        env_prefix="ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    at_risk_threshold_percent: Decimal = Field(
        default=Decimal("50"),
        ge=0,
        le=100,
        description="Goals below this progress percentage are flagged at risk"
    )


class StorageSettings(BaseSettings):
    """Local record storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_file: str = Field(
        default="finance_data.json",
        description="Path of the JSON document holding all records"
    )
    export_file: str = Field(
        default="finance_export.json",
        description="Default destination for snapshot exports"
    )


class ValidationSettings(BaseSettings):
    """Thresholds for semantic record validation."""

    model_config = SettingsConfigDict(
        env_prefix="VALIDATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a transaction date can be"
    )
    max_reasonable_amount: Decimal = Field(
        default=Decimal("1000000"),
        gt=0,
        description="Amounts above this are flagged for review"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local logs"
    )
    json_logs: bool = Field(
        default=True,
        description="Render logs as JSON (False gives console output)"
    )

    default_categories: str = Field(
        default="Rent,Food,Groceries,Utilities,Entertainment,Others",
        description="Comma-separated spending categories offered to new budgets"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {allowed}")
        return v.upper()

    @property
    def default_categories_list(self) -> list[str]:
        """Get default categories as a list."""
        return [
            name.strip()
            for name in self.default_categories.split(",")
            if name.strip()
        ]


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def engine(self) -> EngineSettings:
        return EngineSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def validation(self) -> ValidationSettings:
        return ValidationSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings sections load from the current environment.

    Returns a dict of {section_name: is_valid}, plus
    {section_name}_error entries for sections that failed.
    """
    results = {}

    settings = get_settings()

    for section in ("engine", "storage", "validation", "app"):
        try:
            getattr(settings, section)
            results[section] = True
        except ValueError as e:
            results[section] = False
            results[f"{section}_error"] = str(e)

    return results
