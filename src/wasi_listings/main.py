"""
Main execution module for the Wasi Listings project.
Handles orchestration of the scrape for one or many listing URLs.
"""

import asyncio
import logging
from typing import Dict, Any, List, Optional

from .config.settings import ScraperConfig, settings
from .exceptions import ScraperError, UnsupportedURLError
from .extractors import get_extractor_for_url
from .models.base import ScrapedProperty
from .utils.logging_config import log_extraction_results

logger = logging.getLogger(__name__)


def scrape_property(url: str, config: Optional[ScraperConfig] = None) -> ScrapedProperty:
    """
    Scrape one listing URL into a property record.

    Args:
        url: Listing URL on a supported site
        config: Scraper settings; the global settings by default

    Raises:
        UnsupportedURLError: If the URL is not on a supported site (no fetch is made)
        FetchError: If the page could not be retrieved
        ExtractionError: If the page could not be parsed
    """
    extractor = get_extractor_for_url(url, config)
    if extractor is None:
        raise UnsupportedURLError(url)

    logger.info(f"Using extractor: {extractor.__class__.__name__}")
    try:
        record = extractor.scrape()
    except ScraperError as e:
        log_extraction_results(url, {}, success=False, error=str(e))
        raise

    log_extraction_results(url, record.model_dump(), success=True)
    return record


async def process_listing(url: str, config: Optional[ScraperConfig] = None) -> Dict[str, Any]:
    """
    Scrape a single listing without blocking the event loop.

    Returns:
        The record as a JSON-compatible dictionary

    Raises:
        ScraperError: Any of the scrape_property errors
    """
    logger.info(f"Processing listing: {url}")
    loop = asyncio.get_running_loop()
    record = await loop.run_in_executor(None, scrape_property, url, config)
    return record.model_dump(mode="json")


async def process_listings(urls: List[str], concurrency: Optional[int] = None,
                           config: Optional[ScraperConfig] = None) -> List[Dict[str, Any]]:
    """
    Process multiple listings concurrently.

    Args:
        urls: List of listing URLs
        concurrency: Maximum number of concurrent fetches
        config: Scraper settings; the global settings by default

    Returns:
        One entry per URL, in input order. Failed URLs become
        ``{"url", "error", "error_type", "extraction_status": "failed"}``.
    """
    config = config or settings.scraper
    concurrency = concurrency or config.max_concurrency
    logger.info(f"Processing {len(urls)} listings with concurrency {concurrency}")

    semaphore = asyncio.Semaphore(concurrency)

    async def process_with_semaphore(url):
        async with semaphore:
            try:
                return await process_listing(url, config)
            except ScraperError as e:
                logger.error(f"Failed to process {url}: {str(e)}")
                return {
                    "url": url,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "extraction_status": "failed",
                }

    return list(await asyncio.gather(*(process_with_semaphore(url) for url in urls)))
