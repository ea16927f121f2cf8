"""
Wasi (info.wasi.co) and Remax Habitat listing extractor.
"""

from typing import Any, Dict, Optional
import logging

from .base import BaseExtractor
from ..config.constants import (
    ADDRESS_SELECTORS,
    DEFAULT_TITLE,
    MAX_DESCRIPTION_LENGTH,
    MAX_IMAGES,
)
from ..models.base import ScrapedProperty
from ..utils.description import assemble_description
from ..utils.features import extract_external_features, extract_internal_features
from ..utils.images import collect_images
from ..utils.location import resolve_location
from ..utils.metadata import get_meta_content, load_structured_data

logger = logging.getLogger(__name__)

MIN_ADDRESS_LENGTH = 10


class WasiExtractor(BaseExtractor):
    """Extractor for listing pages rendered by the Wasi real-estate platform."""

    @property
    def platform_name(self) -> str:
        return "Wasi"

    def page_text(self) -> str:
        """Body text with block elements on separate lines."""
        root = self.soup.body or self.soup
        return root.get_text('\n')

    def extract_raw_title(self) -> str:
        return self.extract_with_fallbacks([
            lambda: get_meta_content(self.soup, prop='og:title'),
            lambda: self.soup.title.get_text().strip() if self.soup.title else None,
        ], default_value=DEFAULT_TITLE)

    def extract_address(self) -> Optional[str]:
        for selector in ADDRESS_SELECTORS:
            element = self.soup.select_one(selector)
            if element is None:
                continue
            text = self.text_processor.clean_html_text(element.get_text())
            if len(text) > MIN_ADDRESS_LENGTH:
                return text
        return None

    def extract_description(self) -> Optional[str]:
        limit = min(self.config.max_description_length, MAX_DESCRIPTION_LENGTH)
        description = assemble_description(self.soup).strip()
        if len(description) > limit:
            logger.debug(f"Truncating description from {len(description)} characters")
            description = description[:limit].rstrip()
        return description or None

    def build_property(self) -> ScrapedProperty:
        structured = load_structured_data(self.soup)
        body_text = self.page_text()

        raw_title = self.extract_raw_title()
        title = self.text_processor.clean_title(raw_title) or DEFAULT_TITLE

        location = resolve_location(self.soup, self.url, structured,
                                    default=self.config.default_location)
        description = self.extract_description()

        price = self.text_processor.extract_price(f"{raw_title} {body_text}")
        keywords = get_meta_content(self.soup, name='Keywords') or ''
        property_type = self.text_processor.normalize_property_type(f"{title} {keywords}")
        counts = self.text_processor.extract_room_counts(
            title, description or '', body_text, structured.get('numberOfRooms'))

        images = collect_images(self.soup, self.url, structured,
                                min(self.config.max_images, MAX_IMAGES))

        details: Dict[str, Any] = self.text_processor.extract_detail_fields(body_text, title)
        self.raw_data.update({
            'structured_data': bool(structured),
            'detail_fields': sorted(details),
        })

        return ScrapedProperty(
            title=title,
            price=price,
            property_type=property_type,
            bedrooms=counts['bedrooms'],
            bathrooms=counts['bathrooms'],
            parking=counts['parking'],
            location=location,
            source_url=self.url,
            address=self.extract_address(),
            description=description,
            images=images,
            internal_features=extract_internal_features(self.soup),
            external_features=extract_external_features(self.soup),
            **details,
        )
