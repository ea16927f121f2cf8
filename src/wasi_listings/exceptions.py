"""
Exception hierarchy for the listing scraper.
"""

import traceback
from datetime import datetime
from typing import Any, Dict, Optional


class ScraperError(Exception):
    """Base class for errors surfaced to callers of the scraper."""

    user_message = "Could not process the listing"


class FetchError(ScraperError):
    """The listing page could not be retrieved (network failure or non-2xx)."""

    user_message = "Could not reach the listing source"

    def __init__(self, message: str, url: Optional[str] = None,
                 status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ExtractionError(ScraperError):
    """Custom exception for extraction errors with enhanced tracking."""

    user_message = "Listing page could not be parsed"

    def __init__(self,
                 message: str,
                 extractor: Optional[str] = None,
                 raw_data: Optional[Dict[str, Any]] = None,
                 original_exception: Optional[Exception] = None,
                 stacktrace: Optional[str] = None):
        super().__init__(message)
        self.extractor = extractor
        self.raw_data = raw_data or {}
        self.timestamp = datetime.now()
        self.original_exception = original_exception
        self.stacktrace = stacktrace or (
            traceback.format_exc() if original_exception else None
        )


class UnsupportedURLError(ScraperError, ValueError):
    """The URL does not belong to a listing site the scraper supports."""

    user_message = "Listing URL is not supported"

    def __init__(self, url: str):
        super().__init__(f"No extractor available for URL: {url}")
        self.url = url
