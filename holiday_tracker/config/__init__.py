"""
Configuration package for the Holiday Tracker API.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    GeocodingSettings,
    SecuritySettings,
    settings,
    get_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "GeocodingSettings",
    "SecuritySettings",
    "settings",
    "get_settings",
]
