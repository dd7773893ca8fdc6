"""Tests for the CLI entry point with network and browser mocked out."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from playwright.async_api import Error as PlaywrightError

import main
from core.config import RemoteSettings, ScraperSettings
from core.errors import (
    BrowserStepError,
    ConfigFetchError,
    ConfigParseError,
    ServiceDisabledError,
    ValidationError,
)
from scrapers.base import ScrapeResult

ARGS = ["--exam", "ssc", "--year", "2020", "--board", "dhaka",
        "--roll", "123456", "--reg", "7891011"]


@pytest.fixture
def settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in main.REQUEST_FIELDS:
        monkeypatch.delenv(f"SCRAPER_{name.upper()}", raising=False)
    return ScraperSettings(
        settle_seconds=0,
        result_wait_seconds=0,
        screenshot_path=str(tmp_path / "screenshot.png"),
        log_file=str(tmp_path / "scraper.log"),
        color=False,
    )


@pytest.fixture
def no_logging_setup():
    with patch("main.setup_logging") as setup:
        yield setup


def _remote():
    return RemoteSettings(
        matching_cell_selector="td.black12",
        name_selector="#n",
        gpa_selector="#g",
        result_selector="#r",
        status_api="enabled",
    )


class TestArguments:
    """Test suite for argument parsing and overrides."""

    def test_apply_args(self, settings):
        args = main.build_parser().parse_args(ARGS + [
            "--visible", "--engine", "camoufox", "--screenshot", "out.jpg",
            "--config-url", "http://cfg", "--no-color", "--no-remote-scripts",
            "--log-level", "DEBUG",
        ])
        main.apply_args(settings, args)
        assert main.request_fields(settings) == {
            "exam": "ssc", "year": "2020", "board": "dhaka",
            "roll": "123456", "reg": "7891011",
        }
        assert settings.headless_override is False
        assert settings.browser_engine == "camoufox"
        assert settings.screenshot_path == "out.jpg"
        assert settings.config_url == "http://cfg"
        assert settings.color is False
        assert settings.allow_remote_scripts is False
        assert settings.log_level == "DEBUG"

    def test_headless_flag(self, settings):
        args = main.build_parser().parse_args(["--headless"])
        assert main.apply_args(settings, args).headless_override is True

    def test_visible_and_headless_exclusive(self):
        with pytest.raises(SystemExit):
            main.build_parser().parse_args(["--visible", "--headless"])

    def test_env_fields_used_when_flags_absent(self, settings):
        settings.exam = "hsc"
        args = main.build_parser().parse_args(["--year", "2024"])
        main.apply_args(settings, args)
        assert settings.exam == "hsc"
        assert settings.year == "2024"

    def test_missing_field(self, settings):
        settings.exam = "ssc"
        with pytest.raises(ValidationError) as exc:
            main.request_fields(settings)
        assert exc.value.field == "year"


class TestScrape:
    """Test suite for the scrape() pipeline ordering."""

    @pytest.mark.asyncio
    async def test_invalid_input_stops_before_network(self, settings):
        settings.exam, settings.year, settings.board = "ssc", "1800", "dhaka"
        settings.roll, settings.reg = "1", "2"
        with patch("main.RemoteConfigLoader") as loader_cls:
            with pytest.raises(ValidationError):
                await main.scrape(settings)
        loader_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_disabled_service_never_launches_browser(self, settings):
        main.apply_args(settings, main.build_parser().parse_args(ARGS))
        loader = MagicMock()
        loader.load = AsyncMock(side_effect=ServiceDisabledError("disabled"))
        with patch("main.RemoteConfigLoader", return_value=loader), \
                patch("main.BrowserManager") as manager_cls:
            with pytest.raises(ServiceDisabledError):
                await main.scrape(settings)
        manager_cls.from_settings.assert_not_called()

    @pytest.mark.asyncio
    async def test_browser_closed_after_failure(self, settings):
        main.apply_args(settings, main.build_parser().parse_args(ARGS))
        loader = MagicMock()
        loader.load = AsyncMock(return_value=_remote())
        manager = MagicMock()
        manager.launch = AsyncMock()
        manager.new_page = AsyncMock(return_value=MagicMock())
        manager.close = AsyncMock()
        scraper = MagicMock()
        scraper.run = AsyncMock(side_effect=BrowserStepError("navigate", PlaywrightError("down")))

        with patch("main.RemoteConfigLoader", return_value=loader), \
                patch("main.BrowserManager") as manager_cls, \
                patch("main.EducationBoardScraper", return_value=scraper):
            manager_cls.from_settings.return_value = manager
            with pytest.raises(BrowserStepError):
                await main.scrape(settings)
        manager.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_launch_failure_is_a_step_error(self, settings):
        main.apply_args(settings, main.build_parser().parse_args(ARGS))
        loader = MagicMock()
        loader.load = AsyncMock(return_value=_remote())
        manager = MagicMock()
        manager.launch = AsyncMock(side_effect=PlaywrightError("Executable doesn't exist"))
        manager.close = AsyncMock()

        with patch("main.RemoteConfigLoader", return_value=loader), \
                patch("main.BrowserManager") as manager_cls:
            manager_cls.from_settings.return_value = manager
            with pytest.raises(BrowserStepError) as exc:
                await main.scrape(settings)
        assert exc.value.step == "launch"
        manager.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unsupported_engine_is_a_config_error(self, settings):
        main.apply_args(settings, main.build_parser().parse_args(ARGS))
        settings.browser_engine = "webkit"
        loader = MagicMock()
        loader.load = AsyncMock(return_value=_remote())
        with patch("main.RemoteConfigLoader", return_value=loader):
            with pytest.raises(ConfigParseError) as exc:
                await main.scrape(settings)
        assert "webkit" in str(exc.value)


class TestRun:
    """Test suite for exit codes."""

    def _run(self, settings, side_effect=None, return_value=None):
        scrape = AsyncMock(side_effect=side_effect, return_value=return_value)
        with patch("main.ScraperSettings", return_value=settings), \
                patch("main.scrape", scrape), \
                patch("main.ResultPrinter") as printer_cls:
            code = main.run(ARGS)
        return code, printer_cls

    def test_success(self, settings, no_logging_setup):
        result = ScrapeResult(student_name="A", gpa="5.00", result_text="PASSED")
        code, printer_cls = self._run(settings, return_value=result)
        assert code == 0
        printer_cls.return_value.print_result.assert_called_once_with(result)
        no_logging_setup.assert_called_once_with(settings.log_level, settings.log_file, False)

    def test_validation_error(self, settings, no_logging_setup):
        code, printer_cls = self._run(
            settings, side_effect=ValidationError("exam", "x", "invalid exam value: x"),
        )
        assert code == 2
        printer_cls.return_value.print_result.assert_not_called()

    @pytest.mark.parametrize("error", [
        ConfigFetchError("failed to fetch config: refused"),
        ServiceDisabledError("disabled"),
        BrowserStepError("submit", PlaywrightError("detached")),
    ])
    def test_runtime_errors(self, settings, no_logging_setup, error):
        code, _ = self._run(settings, side_effect=error)
        assert code == 1

    def test_interrupted(self, settings, no_logging_setup):
        code, _ = self._run(settings, side_effect=KeyboardInterrupt())
        assert code == 130

    def test_invalid_env_setting(self, monkeypatch, tmp_path, no_logging_setup):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SCRAPER_TIMEOUT", "abc")
        with patch("main.scrape") as scrape:
            code = main.run(ARGS)
        assert code == 1
        scrape.assert_not_called()
        no_logging_setup.assert_called_once_with(color=True)
