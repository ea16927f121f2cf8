"""Configuration module for Wasi Listings."""

from .constants import (
    SUPPORTED_DOMAINS,
    IMAGE_CDN_HOSTS,
    QUALITY_PRESETS,
    MAX_IMAGES,
    MAX_DESCRIPTION_LENGTH,
)
from .settings import (
    ConfigurationError,
    ScraperConfig,
    Settings,
    get_settings,
    settings,
)

__all__ = [
    "SUPPORTED_DOMAINS",
    "IMAGE_CDN_HOSTS",
    "QUALITY_PRESETS",
    "MAX_IMAGES",
    "MAX_DESCRIPTION_LENGTH",
    "ConfigurationError",
    "ScraperConfig",
    "Settings",
    "get_settings",
    "settings",
]
