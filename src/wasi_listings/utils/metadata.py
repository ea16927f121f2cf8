"""
Helpers for reading page metadata: meta tags and embedded JSON-LD.
"""

import json
import logging
import re
from typing import Any, Dict, Optional

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Keys that mark the listing itself among several JSON-LD objects
LISTING_KEYS = ("address", "image", "numberOfRooms")


def get_meta_content(soup: BeautifulSoup, name: Optional[str] = None,
                     prop: Optional[str] = None) -> Optional[str]:
    """
    Return the stripped content of a meta tag, matched case-insensitively.

    Args:
        soup: Parsed page
        name: Value of the tag's ``name`` attribute (e.g. "Keywords")
        prop: Value of the tag's ``property`` attribute (e.g. "og:title")
    """
    attrs = {}
    if name:
        attrs['name'] = re.compile(f'^{re.escape(name)}$', re.I)
    if prop:
        attrs['property'] = re.compile(f'^{re.escape(prop)}$', re.I)

    tag = soup.find('meta', attrs=attrs)
    if tag and tag.get('content'):
        content = tag['content'].strip()
        return content or None
    return None


def load_structured_data(soup: BeautifulSoup) -> Dict[str, Any]:
    """
    Parse the first usable JSON-LD object embedded in the page.

    Lists and ``@graph`` wrappers are unwrapped to the first object carrying
    listing data (address, image or room count), else their first object.
    Malformed blocks are skipped; an empty dict means no structured data.
    """
    for script in soup.find_all('script', type='application/ld+json'):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.debug(f"Skipping malformed JSON-LD block: {e}")
            continue

        if isinstance(data, dict) and isinstance(data.get('@graph'), list):
            data = data['@graph']
        if isinstance(data, list):
            objects = [item for item in data if isinstance(item, dict)]
            data = next((item for item in objects
                         if any(key in item for key in LISTING_KEYS)),
                        objects[0] if objects else None)
        if isinstance(data, dict):
            return data

    return {}
