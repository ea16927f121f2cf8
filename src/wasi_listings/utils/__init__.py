"""
Utility functions and services for Wasi Listings.
"""

from .browser import fetch_html, parse_html, get_page_content
from .text import TextProcessor, clean_html_text, extract_price, normalize_property_type
from .fallbacks import run_fallbacks
from .location import resolve_location
from .description import DescriptionAssembler, assemble_description
from .images import ImageCollector, collect_images, normalize_image_url, remove_duplicate_images
from .features import extract_features, extract_internal_features, extract_external_features
from .image_quality import (
    improve_image_quality,
    apply_preset,
    get_high_quality_image,
    get_medium_quality_image,
    get_thumbnail_image,
)

__all__ = [
    # Fetching
    "fetch_html",
    "parse_html",
    "get_page_content",

    # Text heuristics
    "TextProcessor",
    "clean_html_text",
    "extract_price",
    "normalize_property_type",
    "run_fallbacks",

    # Page sections
    "resolve_location",
    "DescriptionAssembler",
    "assemble_description",
    "ImageCollector",
    "collect_images",
    "normalize_image_url",
    "remove_duplicate_images",
    "extract_features",
    "extract_internal_features",
    "extract_external_features",

    # Image variants
    "improve_image_quality",
    "apply_preset",
    "get_high_quality_image",
    "get_medium_quality_image",
    "get_thumbnail_image",
]
