"""Configuration package."""

from finance_engine.config.settings import (
    AppSettings,
    EngineSettings,
    Settings,
    StorageSettings,
    ValidationSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "EngineSettings",
    "Settings",
    "StorageSettings",
    "ValidationSettings",
    "get_settings",
    "validate_all_settings",
]
