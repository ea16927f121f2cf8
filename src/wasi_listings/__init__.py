# src/wasi_listings/__init__.py

"""
Wasi Listings - structured property data from Wasi and Remax Habitat listing pages.

This package fetches a listing page, runs heuristic extractors over it and
returns a validated ScrapedProperty record. It also rewrites CDN image URLs
to request other resolutions.
"""

__version__ = "0.1.0"

from .exceptions import ScraperError, FetchError, ExtractionError, UnsupportedURLError
from .models import ScrapedProperty, PropertyType
from .extractors import BaseExtractor, WasiExtractor, get_extractor_for_url, is_supported_url
from .main import scrape_property, process_listing, process_listings
from .utils.image_quality import (
    improve_image_quality,
    get_high_quality_image,
    get_medium_quality_image,
    get_thumbnail_image,
)
from .utils.images import remove_duplicate_images
from .utils.logging_config import configure_logging, get_logger

__all__ = [
    # Main processing functions
    "scrape_property",
    "process_listing",
    "process_listings",
    "get_extractor_for_url",
    "is_supported_url",

    # Records
    "ScrapedProperty",
    "PropertyType",

    # Extractor classes
    "BaseExtractor",
    "WasiExtractor",

    # Errors
    "ScraperError",
    "FetchError",
    "ExtractionError",
    "UnsupportedURLError",

    # Image variants
    "improve_image_quality",
    "get_high_quality_image",
    "get_medium_quality_image",
    "get_thumbnail_image",
    "remove_duplicate_images",

    # Logging
    "configure_logging",
    "get_logger",

    # Version
    "__version__"
]
