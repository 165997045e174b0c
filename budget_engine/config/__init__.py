"""Configuration package."""

from budget_engine.config.settings import (
    AppSettings,
    Settings,
    StreakSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "Settings",
    "StreakSettings",
    "get_settings",
]
