"""
Shared pytest fixtures for Wasi Listings tests.
"""
import base64
import json
import pytest
from pathlib import Path
from bs4 import BeautifulSoup
from unittest.mock import MagicMock

from wasi_listings.config.settings import ScraperConfig

# Define test data directory
TEST_DATA_DIR = Path(__file__).parent / "fixtures"

LISTING_URL = "https://info.wasi.co/apartamento-alquiler-san-bernardino-caracas/5541230"
MINIMAL_URL = "https://info.wasi.co/casa-venta-las-mercedes-caracas/8723451"


def make_cdn_url(params, host="image.wasi.co"):
    """Build a CDN image URL whose last path segment encodes ``params``."""
    segment = base64.urlsafe_b64encode(json.dumps(params).encode("utf-8")).decode("ascii")
    return f"https://{host}/{segment}"


def decode_cdn_url(url):
    """Decode the directive in the last path segment of a CDN image URL."""
    segment = url.rsplit("/", 1)[-1]
    segment = segment.replace("-", "+").replace("_", "/")
    return json.loads(base64.b64decode(segment + "=" * (-len(segment) % 4)))


@pytest.fixture(name="make_cdn_url")
def make_cdn_url_fixture():
    return make_cdn_url


@pytest.fixture(name="decode_cdn_url")
def decode_cdn_url_fixture():
    return decode_cdn_url


@pytest.fixture
def listing_url():
    return LISTING_URL


@pytest.fixture
def minimal_url():
    return MINIMAL_URL


@pytest.fixture
def test_data_dir():
    """Get the test data directory path."""
    return TEST_DATA_DIR


@pytest.fixture
def html_samples_dir(test_data_dir):
    """Get the HTML samples directory path."""
    return test_data_dir / "html_samples"


@pytest.fixture
def sample_html_text(html_samples_dir):
    """
    Raw HTML of each sample page.

    Returns:
        dict: Mapping of sample name (file stem) to HTML text
    """
    return {
        html_file.stem: html_file.read_text(encoding="utf-8")
        for html_file in html_samples_dir.glob("*.html")
    }


@pytest.fixture
def sample_html(sample_html_text):
    """
    Parsed sample pages.

    Returns:
        dict: Mapping of sample name to BeautifulSoup objects
    """
    return {
        name: BeautifulSoup(text, "html.parser")
        for name, text in sample_html_text.items()
    }


@pytest.fixture
def listing_soup(sample_html):
    return sample_html["wasi_listing"]


@pytest.fixture
def minimal_soup(sample_html):
    return sample_html["wasi_minimal"]


@pytest.fixture
def scraper_config():
    """Scraper settings independent of the environment."""
    return ScraperConfig()


@pytest.fixture
def make_response():
    """Factory for mock requests.Response objects."""
    def _make(text="", status_code=200):
        response = MagicMock()
        response.text = text
        response.status_code = status_code
        response.raise_for_status = MagicMock()
        if status_code >= 400:
            import requests
            error = requests.HTTPError(f"HTTP Error: {status_code}")
            error.response = response
            response.raise_for_status.side_effect = error
        return response
    return _make


@pytest.fixture
def mock_requests(monkeypatch, sample_html_text, make_response):
    """Serve the sample pages instead of making real HTTP requests."""
    pages = {
        LISTING_URL: sample_html_text["wasi_listing"],
        MINIMAL_URL: sample_html_text["wasi_minimal"],
    }
    calls = []

    def fake_get(url, *args, **kwargs):
        calls.append({"url": url, **kwargs})
        if url in pages:
            return make_response(pages[url])
        return make_response("Not Found", status_code=404)

    monkeypatch.setattr("requests.get", fake_get)
    return calls
