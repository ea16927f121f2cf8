# tests/test_cli/test_cli_commands.py
import json

import pytest
from unittest.mock import MagicMock, patch

from wasi_listings.cli import async_main, main, parse_args, summarize

LISTING_URL = "https://info.wasi.co/casa-venta-las-mercedes-caracas/8723451"
BAD_URL = "https://example.com/casa/1"


@pytest.fixture
def no_logging_setup():
    """Keep CLI runs from installing handlers or writing log files."""
    with patch('wasi_listings.cli.setup_logging') as mock:
        yield mock


@pytest.fixture
def mock_process_listings():
    """Mock the process_listings function."""
    with patch('wasi_listings.cli.process_listings') as mock:
        async def mock_process(urls, concurrency=None):
            results = []
            for url in urls:
                if url == BAD_URL:
                    results.append({
                        "url": url,
                        "error": f"No extractor available for URL: {url}",
                        "error_type": "UnsupportedURLError",
                        "extraction_status": "failed",
                    })
                else:
                    results.append({"title": "Casa en Las Mercedes", "source_url": url})
            return results

        mock.side_effect = mock_process
        yield mock


class TestParseArgs:
    def test_scrape_command(self):
        args = parse_args(["scrape", LISTING_URL, "--concurrency", "2", "-o", "out.json"])
        assert args.command == "scrape"
        assert args.urls == [LISTING_URL]
        assert args.concurrency == 2
        assert args.output == "out.json"
        assert args.verbose is False
        assert args.log_dir == "logs"

    def test_global_options(self):
        args = parse_args(["-v", "--log-dir", "/tmp/wasi", "scrape", LISTING_URL, BAD_URL])
        assert args.verbose is True
        assert args.log_dir == "/tmp/wasi"
        assert args.urls == [LISTING_URL, BAD_URL]

    def test_options_after_subcommand(self):
        args = parse_args(["scrape", LISTING_URL, "-v", "--log-dir", "/tmp/wasi"])
        assert args.verbose is True
        assert args.log_dir == "/tmp/wasi"
        assert args.urls == [LISTING_URL]

        args = parse_args(["resize", "https://image.wasi.co/abc", "--verbose"])
        assert args.verbose is True
        assert args.log_dir == "logs"

    def test_options_before_subcommand_kept(self):
        args = parse_args(["--log-dir", "/tmp/wasi", "resize", "https://image.wasi.co/abc"])
        assert args.log_dir == "/tmp/wasi"
        assert args.verbose is False

    def test_resize_command(self):
        args = parse_args(["resize", "https://image.wasi.co/abc", "--preset", "medium"])
        assert args.command == "resize"
        assert args.preset == "medium"
        assert args.width is None

    def test_resize_box(self):
        args = parse_args(["resize", "https://image.wasi.co/abc", "--width", "800", "--height", "600"])
        assert (args.width, args.height) == (800, 600)

    @pytest.mark.parametrize("argv", [
        [],
        ["scrape"],
        ["resize", "https://image.wasi.co/abc", "--width", "800"],
        ["resize", "https://image.wasi.co/abc", "--height", "600"],
        ["resize", "https://image.wasi.co/abc", "--width", "0", "--height", "600"],
        ["resize", "https://image.wasi.co/abc", "--preset", "medium", "--width", "800"],
        ["resize", "https://image.wasi.co/abc", "--preset", "ultra"],
    ])
    def test_invalid_arguments(self, argv):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(argv)
        assert exc_info.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "wasi-listings" in capsys.readouterr().out


class TestSummarize:
    def test_split_results(self):
        results = [
            {"title": "Casa", "source_url": LISTING_URL},
            {"url": BAD_URL, "error": "x", "error_type": "UnsupportedURLError",
             "extraction_status": "failed"},
        ]
        summary = summarize(results)
        assert summary["total"] == 2
        assert summary["successful"] == 1
        assert summary["failed"] == 1
        assert summary["errors"][0]["url"] == BAD_URL


class TestScrapeCommand:
    @pytest.mark.asyncio
    async def test_prints_json(self, capsys, no_logging_setup, mock_process_listings):
        exit_code = await async_main(["scrape", LISTING_URL])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["successful"] == 1
        assert output["results"][0]["source_url"] == LISTING_URL
        no_logging_setup.assert_called_once_with(False, "logs")

    @pytest.mark.asyncio
    async def test_writes_output_file(self, tmp_path, no_logging_setup, mock_process_listings):
        output_file = tmp_path / "results.json"

        exit_code = await async_main(["scrape", LISTING_URL, "--output", str(output_file)])

        assert exit_code == 0
        data = json.loads(output_file.read_text(encoding="utf-8"))
        assert data["total"] == 1

    @pytest.mark.asyncio
    async def test_failed_url_sets_exit_code(self, capsys, no_logging_setup, mock_process_listings):
        exit_code = await async_main(["scrape", LISTING_URL, BAD_URL])

        assert exit_code == 1
        output = json.loads(capsys.readouterr().out)
        assert output["failed"] == 1
        assert output["errors"][0]["error_type"] == "UnsupportedURLError"

    @pytest.mark.asyncio
    async def test_concurrency_forwarded(self, no_logging_setup, mock_process_listings):
        await async_main(["scrape", LISTING_URL, "--concurrency", "5"])
        assert mock_process_listings.call_args.kwargs["concurrency"] == 5


class TestResizeCommand:
    def test_preset_default_high(self, capsys, no_logging_setup, make_cdn_url, decode_cdn_url):
        url = make_cdn_url({"edits": {"resize": {"width": 979, "height": 743}}})

        with pytest.raises(SystemExit) as exc_info:
            main(["resize", url])

        assert exc_info.value.code == 0
        printed = capsys.readouterr().out.strip()
        assert decode_cdn_url(printed)["edits"]["resize"] == {"width": 1423, "height": 1080}

    def test_explicit_box(self, capsys, no_logging_setup, make_cdn_url, decode_cdn_url):
        url = make_cdn_url({"edits": {"resize": {"width": 500, "height": 375}}})

        with pytest.raises(SystemExit):
            main(["resize", url, "--width", "1000", "--height", "750"])

        printed = capsys.readouterr().out.strip()
        assert decode_cdn_url(printed)["edits"]["resize"] == {"width": 1000, "height": 750}

    def test_foreign_url_echoed(self, capsys, no_logging_setup):
        with pytest.raises(SystemExit) as exc_info:
            main(["resize", "https://example.com/foto.jpg"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.strip() == "https://example.com/foto.jpg"


class TestMain:
    def test_keyboard_interrupt(self, capsys):
        with patch('wasi_listings.cli.async_main', new_callable=MagicMock,
                   side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                main(["scrape", LISTING_URL])
        assert exc_info.value.code == 130
        assert "cancelled" in capsys.readouterr().out
