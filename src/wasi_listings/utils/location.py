"""
Location resolution for listing pages.

Strategies are tried in order and the first non-empty result wins:
structured address, keyword metadata, URL slug, then a fixed default.
"""

import logging
import re
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from ..config.constants import (
    DEFAULT_LOCATION,
    SLUG_LOCATION_DOMAIN,
    SLUG_PREFIX_WORDS,
)
from .fallbacks import run_fallbacks
from .metadata import get_meta_content

logger = logging.getLogger(__name__)

KEYWORD_LOCATION = re.compile(r'\ben\s+([^,]+)', re.I)
MIN_SLUG_LENGTH = 4


def _capitalize_words(words):
    return ' '.join(word[:1].upper() + word[1:] for word in words if word)


def location_from_structured_data(structured: Dict[str, Any]) -> Optional[str]:
    """Read the JSON-LD address: locality, then region, then street."""
    address = (structured or {}).get('address')
    if not address:
        return None
    if isinstance(address, str):
        return address.strip() or None
    if isinstance(address, dict):
        for key in ('addressLocality', 'addressRegion', 'streetAddress'):
            value = address.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return None


def location_from_keywords(soup: BeautifulSoup) -> Optional[str]:
    """Read "en <place>," from the Keywords meta tag."""
    keywords = get_meta_content(soup, name='Keywords')
    if not keywords:
        return None
    match = KEYWORD_LOCATION.search(keywords)
    if match:
        return match.group(1).strip() or None
    return None


def location_from_url(url: str) -> Optional[str]:
    """
    Derive a location from the listing URL's second-to-last path segment.

    On info.wasi.co the segment reads "<type>-<operation>-<place words>", e.g.
    apartamento-alquiler-san-bernardino-caracas-libertador, so the leading
    type and operation words are dropped.
    """
    parsed = urlparse(url or '')
    segments = parsed.path.split('/')
    if len(segments) < 2:
        return None

    slug = segments[-2].replace('-', ' ').strip()
    if not slug:
        return None
    words = slug.split()

    host = (parsed.hostname or '').lower()
    if host == SLUG_LOCATION_DOMAIN or host.endswith('.' + SLUG_LOCATION_DOMAIN):
        if len(words) > SLUG_PREFIX_WORDS:
            return _capitalize_words(words[SLUG_PREFIX_WORDS:])
        return _capitalize_words(words[-2:])

    if len(slug) >= MIN_SLUG_LENGTH:
        return _capitalize_words(words)
    return None


def resolve_location(soup: BeautifulSoup, url: str,
                     structured: Optional[Dict[str, Any]] = None,
                     default: str = DEFAULT_LOCATION) -> str:
    """
    Resolve a human-readable location; never returns an empty string.

    Args:
        soup: Parsed page
        url: Listing URL
        structured: Parsed JSON-LD object, if any
        default: Fallback city name
    """
    location = run_fallbacks([
        lambda: location_from_structured_data(structured),
        lambda: location_from_keywords(soup),
        lambda: location_from_url(url),
    ], default_value=None)

    if not location:
        logger.debug(f"No location found for {url}, using default {default}")
        return default
    return location
