# src/wasi_listings/cli.py

from typing import Any, Dict, List, Optional
import argparse
import asyncio
import json
import logging
import sys

from . import __version__
from .config.constants import QUALITY_PRESETS
from .main import process_listings
from .utils.image_quality import apply_preset, improve_image_quality
from .utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


def summarize(results: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Split process_listings output into successes and errors."""
    errors = [r for r in results if r.get("extraction_status") == "failed"]
    records = [r for r in results if r.get("extraction_status") != "failed"]
    return {
        "results": records,
        "errors": errors,
        "total": len(results),
        "successful": len(records),
        "failed": len(errors),
    }


def setup_logging(verbose: bool = False, log_dir: Optional[str] = "logs"):
    """Configure logging for a CLI run."""
    return configure_logging(
        level=logging.DEBUG if verbose else logging.INFO,
        log_dir=log_dir,
        app_name="wasi_listings",
        context={
            "version": __version__,
            "cli_invocation": " ".join(sys.argv)
        },
        include_console=True
    )


def add_logging_arguments(parser: argparse.ArgumentParser, defaults: bool = True):
    """
    Add --verbose and --log-dir.

    Subcommands add them without defaults so a value given before the
    subcommand name is not reset.
    """
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False if defaults else argparse.SUPPRESS,
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--log-dir",
        default="logs" if defaults else argparse.SUPPRESS,
        help="Directory for log files (default: logs)"
    )


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="wasi-listings",
        description="Scrape Wasi/Remax listing pages into structured property records"
    )
    add_logging_arguments(parser)

    common = argparse.ArgumentParser(add_help=False)
    add_logging_arguments(common, defaults=False)

    subparsers = parser.add_subparsers(dest="command", required=True,
                                       help="Command to run")

    scrape_parser = subparsers.add_parser(
        "scrape", parents=[common], help="Scrape one or more listing pages")
    scrape_parser.add_argument(
        "urls",
        nargs="+",
        help="One or more listing URLs to process"
    )
    scrape_parser.add_argument(
        "--output",
        "-o",
        help="Output file for JSON results (default: print to stdout)"
    )
    scrape_parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum concurrent fetches (default: WASI_MAX_CONCURRENCY or 3)"
    )

    resize_parser = subparsers.add_parser(
        "resize", parents=[common],
        help="Rewrite a CDN image URL to another resolution")
    resize_parser.add_argument("image_url", help="Image URL to rewrite")
    target = resize_parser.add_mutually_exclusive_group()
    target.add_argument(
        "--preset",
        choices=sorted(QUALITY_PRESETS),
        help="Named size preset (default: high)"
    )
    target.add_argument("--width", type=int, help="Target box width")
    resize_parser.add_argument("--height", type=int, help="Target box height")

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    parsed = parser.parse_args(args)

    if parsed.command == "resize":
        if (parsed.width is None) != (parsed.height is None):
            parser.error("--width and --height must be given together")
        if parsed.width is not None and (parsed.width <= 0 or parsed.height <= 0):
            parser.error("--width and --height must be positive")

    return parsed


def run_resize(parsed_args: argparse.Namespace) -> int:
    if parsed_args.width is not None:
        url = improve_image_quality(parsed_args.image_url,
                                    parsed_args.width, parsed_args.height)
    else:
        url = apply_preset(parsed_args.image_url, parsed_args.preset or "high")

    if url == parsed_args.image_url:
        logger.info("Image URL has no resize directive; returned unchanged")
    print(url)
    return 0


async def run_scrape(parsed_args: argparse.Namespace) -> int:
    results = await process_listings(parsed_args.urls,
                                     concurrency=parsed_args.concurrency)
    output = summarize(results)

    for error in output["errors"]:
        logger.error(f"{error['url']}: {error['error_type']}: {error['error']}")

    if parsed_args.output:
        with open(parsed_args.output, 'w', encoding='utf-8') as f:
            json.dump(output, f, indent=2, ensure_ascii=False)
        logger.info(f"Results written to {parsed_args.output}")
    else:
        print(json.dumps(output, indent=2, ensure_ascii=False))

    return 1 if output["errors"] else 0


async def async_main(args: Optional[List[str]] = None) -> int:
    """Async main entry point for the CLI."""
    parsed_args = parse_args(args)
    setup_logging(parsed_args.verbose, parsed_args.log_dir)

    if parsed_args.command == "resize":
        return run_resize(parsed_args)
    return await run_scrape(parsed_args)


def main(args: Optional[List[str]] = None):
    """Main entry point that runs the async event loop."""
    try:
        exit_code = asyncio.run(async_main(args))
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        sys.exit(130)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
