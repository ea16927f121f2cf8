"""
Amenity lists ("Características internas/externas") for listing pages.
"""

import logging
import re
from typing import List, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from ..config.constants import (
    EXTERNAL_FEATURE_KEYWORDS,
    EXTERNAL_FEATURES_LABEL,
    FEATURE_PROSE_MAX_LENGTH,
    FEATURE_PROSE_PHRASES,
    INTERNAL_FEATURE_KEYWORDS,
    INTERNAL_FEATURES_LABEL,
)

logger = logging.getLogger(__name__)

ITEM_TAGS = ['li', 'div', 'span', 'p']
MIN_ITEM_LENGTH = 2
MAX_ITEM_LENGTH = 50
MAX_ANCESTORS = 4


def matches_vocabulary(text: str, keywords: Sequence[str]) -> bool:
    """Loose match: the item contains a keyword or a keyword contains the item."""
    lower = text.lower()
    return any(k.lower() in lower or lower in k.lower() for k in keywords)


def looks_like_prose(text: str) -> bool:
    lower = text.lower()
    return (len(text) > FEATURE_PROSE_MAX_LENGTH
            or any(phrase in lower for phrase in FEATURE_PROSE_PHRASES))


def _section_candidates(label_element: Tag) -> List[Tag]:
    """The element right after the label, then the label's ancestors."""
    candidates = []
    sibling = label_element.find_next_sibling()
    if sibling is not None:
        candidates.append(sibling)
    element = label_element
    for _ in range(MAX_ANCESTORS):
        element = element.parent
        if element is None or element.name == '[document]':
            break
        candidates.append(element)
    return candidates


def features_from_section(soup: BeautifulSoup, label: str, keywords: Sequence[str],
                          exclude_prose: bool = False) -> List[str]:
    """Collect vocabulary-matching items from the section introduced by ``label``."""
    label_pattern = re.compile(re.escape(label), re.I)
    found: List[str] = []

    for text_node in soup.find_all(string=label_pattern):
        label_element = text_node.parent
        if label_element is None:
            continue
        for section in _section_candidates(label_element):
            matches = []
            for item in section.find_all(ITEM_TAGS):
                # wrappers are read through their own items
                if item.find(ITEM_TAGS) is not None:
                    continue
                text = item.get_text().strip()
                if not (MIN_ITEM_LENGTH < len(text) < MAX_ITEM_LENGTH):
                    continue
                if label_pattern.search(text):
                    continue
                if not matches_vocabulary(text, keywords):
                    continue
                if exclude_prose and looks_like_prose(text):
                    continue
                if text not in matches:
                    matches.append(text)
            if matches:
                found.extend(m for m in matches if m not in found)
                break

    return found


def features_from_page_text(soup: BeautifulSoup, keywords: Sequence[str]) -> List[str]:
    """Vocabulary terms that appear anywhere in the page text."""
    page_text = soup.get_text(' ').lower()
    return [keyword for keyword in keywords if keyword.lower() in page_text]


def extract_features(soup: BeautifulSoup, label: str, keywords: Sequence[str],
                     exclude_prose: bool = False) -> Optional[List[str]]:
    """
    Extract one amenity list.

    Args:
        soup: Parsed page
        label: Section label, e.g. "características internas"
        keywords: Amenity vocabulary
        exclude_prose: Drop candidates that read like description sentences

    Returns:
        Matched amenities in page order, or None when there are none
    """
    features = features_from_section(soup, label, keywords, exclude_prose)
    if not features:
        logger.debug(f"No '{label}' section items found, searching page text")
        features = features_from_page_text(soup, keywords)
    return features or None


def extract_internal_features(soup: BeautifulSoup) -> Optional[List[str]]:
    return extract_features(soup, INTERNAL_FEATURES_LABEL, INTERNAL_FEATURE_KEYWORDS)


def extract_external_features(soup: BeautifulSoup) -> Optional[List[str]]:
    return extract_features(soup, EXTERNAL_FEATURES_LABEL, EXTERNAL_FEATURE_KEYWORDS,
                            exclude_prose=True)
