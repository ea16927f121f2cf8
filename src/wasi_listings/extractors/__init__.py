# src/wasi_listings/extractors/__init__.py

"""
Property listing extractors for Wasi Listings.
"""

import logging
from typing import Optional
from urllib.parse import urlparse

from .base import BaseExtractor
from .wasi import WasiExtractor
from ..config.constants import SUPPORTED_DOMAINS
from ..config.settings import ScraperConfig

logger = logging.getLogger(__name__)

EXTRACTORS = {
    "Wasi": WasiExtractor,
    # Remax Habitat pages are served by the Wasi platform
    "Remax Habitat": WasiExtractor,
}


def get_platform_for_url(url: str) -> Optional[str]:
    """Return the platform name for a supported listing URL, else None."""
    try:
        parsed = urlparse(url or '')
    except ValueError:
        return None
    if parsed.scheme not in ('http', 'https'):
        return None

    host = (parsed.hostname or '').lower()
    for domain, platform in SUPPORTED_DOMAINS.items():
        if host == domain or host.endswith('.' + domain):
            return platform
    return None


def is_supported_url(url: str) -> bool:
    return get_platform_for_url(url) is not None


def get_extractor_for_url(url: str,
                          config: Optional[ScraperConfig] = None) -> Optional[BaseExtractor]:
    """
    Get the appropriate extractor for a URL.

    Args:
        url: The URL of the listing
        config: Scraper settings passed to the extractor

    Returns:
        An instance of the appropriate extractor, or None if no matching extractor found
    """
    platform = get_platform_for_url(url)
    if platform is None:
        logger.warning(f"No extractor available for URL: {url}")
        return None

    logger.debug(f"Using {platform} extractor for {url}")
    return EXTRACTORS[platform](url, config)


__all__ = [
    "BaseExtractor",
    "WasiExtractor",
    "get_extractor_for_url",
    "get_platform_for_url",
    "is_supported_url",
]
