"""
Image URL discovery across the gallery widgets used by listing pages.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup, Tag

from ..config.constants import (
    GALLERY_DATA_ATTRIBUTES,
    GALLERY_SELECTORS,
    IMAGE_CDN_HOSTS,
    IMAGE_SOURCE_ATTRIBUTES,
    MAX_IMAGES,
)

logger = logging.getLogger(__name__)


def is_cdn_image(url: Optional[str]) -> bool:
    """Whether a URL is served by the listing image CDN."""
    if not url:
        return False
    try:
        host = urlparse(url.strip()).hostname
    except ValueError:
        return False
    return host in IMAGE_CDN_HOSTS


def normalize_image_url(url: str) -> str:
    """Drop the query string and fragment so resized variants compare equal."""
    parsed = urlparse(url.strip())
    return urlunparse(parsed._replace(query='', fragment=''))


def remove_duplicate_images(urls: Iterable[str]) -> List[str]:
    """
    Remove images that are the same after normalization, keeping the first.

    Args:
        urls: Image URLs in priority order

    Returns:
        The original URLs, minus later duplicates
    """
    seen = set()
    unique = []
    for url in urls:
        if not url:
            continue
        key = normalize_image_url(url)
        if key not in seen:
            seen.add(key)
            unique.append(url)
    return unique


def _first_source(element: Tag, base_url: str) -> Optional[str]:
    for attribute in IMAGE_SOURCE_ATTRIBUTES:
        value = element.get(attribute)
        if value and value.strip():
            return urljoin(base_url, value.strip())
    return None


class ImageCollector:
    """
    Collect listing image URLs in priority order.

    Every step runs; earlier steps decide the ordering. URLs are deduplicated
    by exact string and the result is capped at ``max_images``.
    """

    def __init__(self, soup: BeautifulSoup, url: str,
                 structured: Optional[Dict[str, Any]] = None,
                 max_images: int = MAX_IMAGES):
        self.soup = soup
        self.url = url
        self.structured = structured or {}
        self.max_images = max_images
        self.images: List[str] = []

    def add(self, candidate: Optional[str]) -> bool:
        if not candidate:
            return False
        candidate = candidate.strip()
        if not candidate or candidate in self.images:
            return False
        self.images.append(candidate)
        return True

    def collect(self) -> List[str]:
        steps = [
            self.from_swiper_slides,
            self.from_social_meta,
            self.from_structured_data,
            self.from_image_src_link,
            self.from_fotorama_frames,
            self.from_fotorama_thumbnails,
            self.from_gallery_data_attributes,
            self.from_all_images,
        ]
        for step in steps:
            try:
                added = sum(1 for candidate in step() if self.add(candidate))
            except Exception as e:
                logger.debug(f"Image step {step.__name__} failed: {e}")
                continue
            if added:
                logger.debug(f"Image step {step.__name__} added {added} images")

        return self.images[:self.max_images]

    def from_swiper_slides(self) -> List[str]:
        found = []
        for slide in self.soup.select(GALLERY_SELECTORS["swiper_slides"]):
            href = slide.get('href')
            if is_cdn_image(href):
                found.append(href)
                continue
            img = slide.find('img')
            if img is not None:
                src = img.get('src') or img.get('data-src')
                if is_cdn_image(src):
                    found.append(src)
        return found

    def from_social_meta(self) -> List[str]:
        tag = self.soup.find('meta', attrs={'property': 'og:image'})
        return [tag['content']] if tag and tag.get('content') else []

    def from_structured_data(self) -> List[str]:
        image = self.structured.get('image')
        if isinstance(image, str):
            return [image]
        if isinstance(image, dict) and isinstance(image.get('url'), str):
            return [image['url']]
        if isinstance(image, list):
            found = []
            for item in image:
                if isinstance(item, str):
                    found.append(item)
                elif isinstance(item, dict) and isinstance(item.get('url'), str):
                    found.append(item['url'])
            return found
        return []

    def from_image_src_link(self) -> List[str]:
        link = self.soup.find('link', rel='image_src')
        return [link['href']] if link and link.get('href') else []

    def _cdn_sources(self, elements: Iterable[Tag]) -> List[str]:
        found = []
        for element in elements:
            src = _first_source(element, self.url)
            if is_cdn_image(src):
                found.append(src)
        return found

    def from_fotorama_frames(self) -> List[str]:
        images = []
        for frame in self.soup.select(GALLERY_SELECTORS["fotorama_frames"]):
            images.extend(frame.find_all('img'))
        return self._cdn_sources(images)

    def from_fotorama_thumbnails(self) -> List[str]:
        return self._cdn_sources(self.soup.select(GALLERY_SELECTORS["fotorama_thumbnails"]))

    def from_gallery_data_attributes(self) -> List[str]:
        found = []
        for container in self.soup.select(GALLERY_SELECTORS["fotorama_containers"]):
            raw = next((container.get(attr) for attr in GALLERY_DATA_ATTRIBUTES
                        if container.get(attr)), None)
            if not raw:
                continue
            try:
                parsed = json.loads(raw)
                candidates = parsed if isinstance(parsed, list) else []
            except ValueError:
                candidates = [part.strip() for part in raw.split(',')]
            found.extend(c for c in candidates if isinstance(c, str) and is_cdn_image(c))
        return found

    def from_all_images(self) -> List[str]:
        found = []
        for img in self.soup.find_all('img'):
            if len(self.images) + len(found) >= self.max_images:
                break
            src = _first_source(img, self.url)
            if is_cdn_image(src) and src not in self.images and src not in found:
                found.append(src)
        return found


def collect_images(soup: BeautifulSoup, url: str,
                   structured: Optional[Dict[str, Any]] = None,
                   max_images: int = MAX_IMAGES) -> List[str]:
    """Return up to ``max_images`` distinct listing image URLs."""
    return ImageCollector(soup, url, structured, max_images).collect()
