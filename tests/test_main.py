# tests/test_main.py
import asyncio
import logging

import pytest
from unittest.mock import patch

from wasi_listings import main
from wasi_listings.config.settings import ScraperConfig
from wasi_listings.exceptions import ExtractionError, FetchError, UnsupportedURLError


class TestScrapeProperty:
    def test_success(self, mock_requests, minimal_url):
        record = main.scrape_property(minimal_url)
        assert record.title == "Casa 3h/2b/2e en venta en Las Mercedes"
        assert len(mock_requests) == 1

    def test_unsupported_url_makes_no_request(self, mock_requests):
        with pytest.raises(UnsupportedURLError) as exc_info:
            main.scrape_property("https://www.zillow.com/homedetails/123")

        assert exc_info.value.url == "https://www.zillow.com/homedetails/123"
        assert isinstance(exc_info.value, ValueError)
        assert mock_requests == []

    def test_fetch_error_logged_and_raised(self, mock_requests, caplog):
        url = "https://info.wasi.co/casa-venta-chacao/404"
        with caplog.at_level(logging.ERROR, logger="extraction_results"):
            with pytest.raises(FetchError):
                main.scrape_property(url)

        results = [r for r in caplog.records if r.name == "extraction_results"]
        assert results and '"success": false' in results[-1].getMessage()

    def test_success_logged(self, mock_requests, minimal_url, caplog):
        with caplog.at_level(logging.INFO, logger="extraction_results"):
            main.scrape_property(minimal_url)

        results = [r for r in caplog.records if r.name == "extraction_results"]
        assert '"image_count": 2' in results[-1].getMessage()


class TestProcessListing:
    @pytest.mark.asyncio
    async def test_returns_json_dict(self, mock_requests, minimal_url):
        result = await main.process_listing(minimal_url)

        assert isinstance(result, dict)
        assert result["property_type"] == "casa"
        assert result["price"] == 150000
        assert result["source_url"] == minimal_url

    @pytest.mark.asyncio
    async def test_errors_propagate(self, mock_requests):
        with pytest.raises(UnsupportedURLError):
            await main.process_listing("https://example.com/casa/1")


class TestProcessListings:
    @pytest.mark.asyncio
    async def test_input_order_and_error_entries(self, mock_requests, minimal_url, listing_url):
        urls = [
            minimal_url,
            "https://example.com/casa/1",
            "https://info.wasi.co/casa-venta-chacao/404",
            listing_url,
        ]

        results = await main.process_listings(urls, concurrency=2)

        assert len(results) == 4
        assert results[0]["source_url"] == minimal_url
        assert results[1] == {
            "url": "https://example.com/casa/1",
            "error": "No extractor available for URL: https://example.com/casa/1",
            "error_type": "UnsupportedURLError",
            "extraction_status": "failed",
        }
        assert results[2]["error_type"] == "FetchError"
        assert results[3]["source_url"] == listing_url

    @pytest.mark.asyncio
    async def test_extraction_error_entry(self):
        error = ExtractionError("Empty response body", extractor="parse_html")
        with patch("wasi_listings.main.scrape_property", side_effect=error):
            results = await main.process_listings(["https://info.wasi.co/x/1"])

        assert results[0]["error_type"] == "ExtractionError"
        assert results[0]["extraction_status"] == "failed"

    @pytest.mark.asyncio
    async def test_concurrency_bounded(self, monkeypatch):
        active = 0
        peak = 0

        async def fake_process_listing(url, config=None):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return {"source_url": url}

        monkeypatch.setattr(main, "process_listing", fake_process_listing)
        urls = [f"https://info.wasi.co/casa-venta-chacao/{i}" for i in range(8)]

        results = await main.process_listings(urls, concurrency=3)

        assert [r["source_url"] for r in results] == urls
        assert peak == 3

    @pytest.mark.asyncio
    async def test_default_concurrency_from_config(self, monkeypatch):
        peak = 0
        active = 0

        async def fake_process_listing(url, config=None):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return {"source_url": url}

        monkeypatch.setattr(main, "process_listing", fake_process_listing)
        config = ScraperConfig(max_concurrency=1)

        await main.process_listings([f"https://info.wasi.co/x/{i}" for i in range(3)], config=config)

        assert peak == 1

    @pytest.mark.asyncio
    async def test_empty_input(self):
        assert await main.process_listings([]) == []
