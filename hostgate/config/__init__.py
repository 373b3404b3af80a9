"""Configuration module for HostGate."""

from hostgate.config.settings import (
    APISettings,
    DownloadCheckSettings,
    FilesSettings,
    GeoSettings,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "APISettings",
    "DownloadCheckSettings",
    "FilesSettings",
    "GeoSettings",
]
