# src/wasi_listings/utils/browser.py
import logging
from typing import Optional

import requests
from bs4 import BeautifulSoup

from ..config.constants import DEFAULT_USER_AGENT
from ..exceptions import ExtractionError, FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15


def fetch_html(url: str, timeout: int = DEFAULT_TIMEOUT,
               user_agent: Optional[str] = None) -> str:
    """
    Fetch a listing page as text with a single GET and a browser User-Agent.

    Raises:
        FetchError: On network failure, timeout or a non-2xx response
    """
    headers = {'User-Agent': user_agent or DEFAULT_USER_AGENT}
    logger.info(f"Starting page fetch for {url}")

    try:
        response = requests.get(url, headers=headers, timeout=timeout)
        response.raise_for_status()
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        logger.error(f"HTTP {status} while fetching {url}")
        raise FetchError(f"Failed to fetch {url}: HTTP {status}",
                         url=url, status_code=status) from e
    except requests.RequestException as e:
        logger.error(f"Request failed for {url}: {e}")
        raise FetchError(f"Failed to fetch {url}: {e}", url=url) from e

    logger.info(f"Fetched {url} ({len(response.text)} characters)")
    return response.text


def parse_html(html: str, url: Optional[str] = None) -> BeautifulSoup:
    """
    Parse page text into a document tree.

    Raises:
        ExtractionError: When the body is empty or yields no elements
    """
    if not html or not html.strip():
        raise ExtractionError(f"Empty response body from {url}",
                              extractor="parse_html", raw_data={"url": url})
    try:
        soup = BeautifulSoup(html, 'html.parser')
    except Exception as e:
        raise ExtractionError(f"Could not parse page from {url}: {e}",
                              extractor="parse_html", raw_data={"url": url},
                              original_exception=e) from e

    if soup.find(True) is None:
        raise ExtractionError(f"No HTML elements found in page from {url}",
                              extractor="parse_html", raw_data={"url": url})
    return soup


def get_page_content(url: str, timeout: int = DEFAULT_TIMEOUT,
                     user_agent: Optional[str] = None) -> BeautifulSoup:
    """Fetch and parse a listing page."""
    return parse_html(fetch_html(url, timeout, user_agent), url)

