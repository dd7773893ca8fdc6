"""
Education Board Result Scraper - Main Entry Point

Looks up one student's public examination result: validates the request,
loads selectors from the remote config service, drives a browser through
the results form (solving its arithmetic captcha), prints the scraped
fields and saves a screenshot of the result page.

Usage:
    python main.py --exam ssc --year 2020 --board dhaka --roll 123456 --reg 7891011
    python main.py ... --visible            # Force a visible browser window
    python main.py ... --engine camoufox    # Use the hardened Firefox build
    SCRAPER_EXAM=hsc SCRAPER_YEAR=2024 ... python main.py

Exit codes:
    0   result scraped and screenshot saved
    1   config, service, captcha, browser or file error
    2   invalid request fields
    130 interrupted
"""
from dotenv import load_dotenv

# Load environment variables from .env file into os.environ
load_dotenv()

import argparse
import asyncio
import logging
import sys
from typing import Dict, List, Optional

import pydantic
from playwright.async_api import Error as PlaywrightError

from browser.instance import BrowserManager, SUPPORTED_ENGINES
from core.config import ScraperSettings
from core.display import ResultPrinter
from core.errors import (
    BrowserStepError,
    ConfigParseError,
    ScraperError,
    ValidationError,
)
from core.logging_setup import setup_logging
from core.remote_config import RemoteConfigLoader
from core.validation import EXAM_LABELS, VALID_BOARDS, validate_form_inputs
from scrapers.educationboard import EducationBoardScraper
from scrapers.base import ScrapeResult

logger = logging.getLogger(__name__)

REQUEST_FIELDS = ("exam", "year", "board", "roll", "reg")


def build_parser() -> argparse.ArgumentParser:
    exams = ", ".join(f"{code} ({label})" for label, code in EXAM_LABELS.items())
    parser = argparse.ArgumentParser(
        description="Fetch a public examination result from educationboardresults.gov.bd",
    )
    parser.add_argument("--exam", help=f"Exam code: {exams}")
    parser.add_argument("--year", help="Examination year (1996-2025)")
    parser.add_argument("--board", help=f"Board: {', '.join(sorted(VALID_BOARDS))}")
    parser.add_argument("--roll", help="Roll number")
    parser.add_argument("--reg", help="Registration number")

    window = parser.add_mutually_exclusive_group()
    window.add_argument("--visible", action="store_true", help="Show browser (overrides remote config)")
    window.add_argument("--headless", action="store_true", help="Hide browser (overrides remote config)")

    parser.add_argument("--engine", choices=SUPPORTED_ENGINES, help="Browser engine")
    parser.add_argument("--screenshot", help="Screenshot output path (.png or .jpg)")
    parser.add_argument("--config-url", help="Remote config endpoint")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...)")
    parser.add_argument("--no-color", action="store_true", help="Disable coloured output")
    parser.add_argument(
        "--no-remote-scripts", action="store_true",
        help="Do not run the subject script served by the config service",
    )
    return parser


def apply_args(settings: ScraperSettings, args: argparse.Namespace) -> ScraperSettings:
    """Copy CLI overrides onto *settings* (CLI wins over env)."""
    for field in REQUEST_FIELDS:
        value = getattr(args, field)
        if value is not None:
            setattr(settings, field, value)

    if args.visible:
        settings.headless_override = False
    elif args.headless:
        settings.headless_override = True
    if args.engine:
        settings.browser_engine = args.engine
    if args.screenshot:
        settings.screenshot_path = args.screenshot
    if args.config_url:
        settings.config_url = args.config_url
    if args.log_level:
        settings.log_level = args.log_level
    if args.no_color:
        settings.color = False
    if args.no_remote_scripts:
        settings.allow_remote_scripts = False
    return settings


def request_fields(settings: ScraperSettings) -> Dict[str, str]:
    """Collect the five request fields, failing on the first missing one."""
    fields: Dict[str, str] = {}
    for field in REQUEST_FIELDS:
        value = getattr(settings, field)
        if value is None:
            raise ValidationError(
                field, None,
                f"{field} is required (--{field} or SCRAPER_{field.upper()})",
            )
        fields[field] = value
    return fields


async def scrape(settings: ScraperSettings) -> ScrapeResult:
    """Run the whole lookup.

    1. Validates the request (no network before input is known good).
    2. Loads the remote config; a disabled service stops here.
    3. Launches the browser and runs :class:`EducationBoardScraper`.
    4. Closes the browser whatever happened.
    """
    request = validate_form_inputs(**request_fields(settings))

    loader = RemoteConfigLoader(settings.config_url, timeout=settings.config_timeout)
    remote = await loader.load()

    try:
        browser_manager = BrowserManager.from_settings(settings, remote)
    except ValueError as e:
        raise ConfigParseError(str(e)) from e

    try:
        try:
            await browser_manager.launch()
            page = await browser_manager.new_page()
        except PlaywrightError as e:
            raise BrowserStepError("launch", e) from e

        scraper = EducationBoardScraper(page, remote, settings)
        return await scraper.run(request)
    finally:
        logger.info("Cleaning up resources...")
        await browser_manager.close()


def load_settings(args: argparse.Namespace) -> ScraperSettings:
    """Build settings from env/.env and apply CLI overrides.

    Raises:
        ConfigParseError: If an environment value has the wrong type.
    """
    try:
        settings = ScraperSettings()
    except pydantic.ValidationError as e:
        raise ConfigParseError(f"invalid local settings: {e}") from e
    return apply_args(settings, args)


def run(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(args)
    except ConfigParseError as e:
        setup_logging(color=not args.no_color)
        logger.error("[%s] %s", e.error_type.value, e)
        return 1
    setup_logging(settings.log_level, settings.log_file, settings.color)

    try:
        result = asyncio.run(scrape(settings))
    except ValidationError as e:
        logger.error("Validation failed: %s", e)
        return 2
    except ScraperError as e:
        logger.error("[%s] %s", e.error_type.value, e)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        return 130

    ResultPrinter(color=settings.color).print_result(result)
    return 0


if __name__ == "__main__":
    sys.exit(run())
