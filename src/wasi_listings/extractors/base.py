"""
Base extractor providing the fetch/parse/extract skeleton shared by listing sites.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional
from bs4 import BeautifulSoup
from pydantic import ValidationError
import logging
import traceback
from datetime import datetime

from ..config.settings import ScraperConfig, settings
from ..exceptions import ExtractionError
from ..models.base import ScrapedProperty
from ..utils.browser import get_page_content
from ..utils.fallbacks import run_fallbacks
from ..utils.text import TextProcessor

logger = logging.getLogger(__name__)


class BaseExtractor(ABC):
    """
    Base extractor for listing pages.

    Subclasses implement ``build_property``, reading fields from ``self.soup``
    with per-field fallbacks. Field misses never fail a scrape; only an
    unreachable or unparseable page does.
    """

    def __init__(self, url: str, config: Optional[ScraperConfig] = None):
        """
        Initialize the base extractor.

        Args:
            url (str): The URL of the listing
            config (ScraperConfig): Scraper settings; the global settings by default
        """
        self.url = url
        self.config = config or settings.scraper
        self.soup: Optional[BeautifulSoup] = None
        self.raw_data: Dict[str, Any] = {
            "extraction_source": self.platform_name,
            "url": url,
        }
        self.text_processor = TextProcessor(
            room_count_min=self.config.room_count_min,
            room_count_max=self.config.room_count_max,
        )

    @property
    @abstractmethod
    def platform_name(self) -> str:
        """Return the name of the platform this extractor handles."""
        pass

    def extract_with_fallbacks(self,
                               extraction_methods: List[Callable[[], Any]],
                               default_value: Any = None) -> Any:
        """
        Attempt multiple extraction methods with fallbacks.

        Args:
            extraction_methods (list): List of methods to try in order
            default_value (Any): Value to return if all methods fail

        Returns:
            Extracted data or default value
        """
        return run_fallbacks(extraction_methods, default_value)

    def fetch(self) -> BeautifulSoup:
        """Fetch and parse the listing page (one GET, no retries)."""
        return get_page_content(self.url, self.config.timeout, self.config.user_agent)

    def scrape(self) -> ScrapedProperty:
        """
        Fetch the listing page and extract a property record.

        Raises:
            FetchError: If the page could not be retrieved
            ExtractionError: If the page could not be parsed
        """
        return self.extract(self.fetch())

    def extract(self, soup: BeautifulSoup) -> ScrapedProperty:
        """
        Extract a property record from an already parsed page.

        Args:
            soup (BeautifulSoup): Parsed HTML content

        Returns:
            The validated ScrapedProperty
        """
        logger.info(f"Starting extraction for {self.platform_name}: {self.url}")
        self.soup = soup
        self.raw_data['html_length'] = len(str(soup))

        try:
            record = self.build_property()
        except (ValidationError, ValueError, TypeError, AttributeError) as e:
            stacktrace = traceback.format_exc()
            self.raw_data['extraction_status'] = 'failed'
            self.raw_data['failed_at'] = datetime.now().isoformat()
            logger.error(
                f"Extraction failed for {self.platform_name}\n"
                f"URL: {self.url}\n"
                f"Original Exception: {str(e)}"
            )
            raise ExtractionError(
                message=f"Extraction failed for {self.platform_name}: {e}",
                extractor=self.platform_name,
                raw_data=self.raw_data,
                original_exception=e,
                stacktrace=stacktrace,
            ) from e

        self.raw_data['extraction_status'] = 'success'
        logger.info(
            f"Extracted '{record.title}' ({record.property_type}, "
            f"{len(record.images)} images) from {self.url}")
        return record

    @abstractmethod
    def build_property(self) -> ScrapedProperty:
        """Read every field from ``self.soup`` and assemble the record."""
        pass
