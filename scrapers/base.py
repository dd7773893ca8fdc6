"""Base result scraper and scrape result definitions.

This module defines :class:`ScrapeResult`, the immutable outcome of a run,
and :class:`ResultScraper`, the superclass site-specific scrapers inherit
from.  :class:`ResultScraper` provides:

    * ``_step`` -- runs one browser primitive and converts any Playwright
      error into :class:`core.errors.BrowserStepError` naming the step.
    * ``pause`` -- the fixed settle / render waits.
    * ``capture`` / ``save_screenshot`` -- in-memory screenshots and the
      single file persisted at the end of a run.
"""

import asyncio
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from playwright.async_api import Error as PlaywrightError, Page

from core.config import RemoteSettings, ScraperSettings
from core.errors import BrowserStepError, FileWriteError

logger = logging.getLogger(__name__)

SCREENSHOT_FILE_MODE = 0o644

# Playwright only auto-detects XPath for "//" and ".." prefixes
XPATH_PREFIXES = ("/", "(")


@dataclass(frozen=True)
class ScrapeResult:
    """Outcome of a single result lookup.

    Attributes:
        student_name: Text of the name cell.
        gpa: Text of the GPA cell.
        result_text: Text of the pass/fail cell.
        subjects: One entry per line of the subject script output.
        screenshot: Bytes of the final (post-submit) screenshot.
        captcha_value: The answer injected into the form.
        screenshot_path: Where ``screenshot`` was written, if anywhere.
    """

    student_name: str
    gpa: str
    result_text: str
    subjects: Tuple[str, ...] = ()
    screenshot: bytes = field(default=b"", repr=False)
    captcha_value: str = ""
    screenshot_path: Optional[Path] = None


class ResultScraper:
    """Shared plumbing for result-site scrapers.

    Attributes:
        page: Playwright page driven by the scraper.
        remote: Selectors and scripts from the config service.
        settings: Local settings (waits, output path, trust flags).
    """

    def __init__(
        self,
        page: Page,
        remote: RemoteSettings,
        settings: ScraperSettings,
    ) -> None:
        self.page = page
        self.remote = remote
        self.settings = settings

    async def _step(
        self,
        name: str,
        action: Callable[..., Awaitable[Any]],
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """Await ``action(*args, **kwargs)`` as the step *name*.

        Raises:
            BrowserStepError: If the action raises a Playwright error.
        """
        logger.debug("Step %s", name)
        try:
            return await action(*args, **kwargs)
        except PlaywrightError as e:
            raise BrowserStepError(name, e) from e

    @staticmethod
    def selector(value: str) -> str:
        """Return *value* as a Playwright selector.

        Absolute (``/html/body/...``) and grouped (``(//td)[13]``) XPath
        expressions are prefixed with ``xpath=``; CSS selectors and
        selectors with an explicit engine pass through unchanged.

        >>> ResultScraper.selector("/html/body/table/tr/td")
        'xpath=/html/body/table/tr/td'
        >>> ResultScraper.selector("td.black12")
        'td.black12'
        """
        value = value.strip()
        if value.startswith(XPATH_PREFIXES):
            return f"xpath={value}"
        return value

    async def pause(self, seconds: float) -> None:
        if seconds > 0:
            await asyncio.sleep(seconds)

    def screenshot_options(self) -> Dict[str, Any]:
        """Playwright screenshot options derived from the output path.

        ``.jpg`` / ``.jpeg`` paths produce JPEG at
        ``settings.screenshot_quality``; anything else produces PNG,
        where quality does not apply.
        """
        suffix = Path(self.settings.screenshot_path).suffix.lower()
        if suffix in (".jpg", ".jpeg"):
            return {
                "full_page": True,
                "type": "jpeg",
                "quality": self.settings.screenshot_quality,
            }
        return {"full_page": True, "type": "png"}

    async def capture(self, name: str) -> bytes:
        """Take a full-page screenshot and return its bytes."""
        return await self._step(
            name, self.page.screenshot, **self.screenshot_options()
        )

    def save_screenshot(self, data: bytes) -> Path:
        """Write *data* to ``settings.screenshot_path`` (mode 0644).

        Raises:
            FileWriteError: If the file cannot be written.
        """
        path = Path(self.settings.screenshot_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            os.chmod(path, SCREENSHOT_FILE_MODE)
        except OSError as e:
            raise FileWriteError(path, e) from e
        return path
