"""Scraper for the Bangladesh education board results site.

Flow (linear; any failure aborts the run):

    1. Open the results page and let it settle.
    2. Wait for the exam/year/board/roll fields and the matching cells.
    3. Read the captcha expression from the 13th matching cell.
    4. Type the request fields into the form.
    5. Solve the captcha and assign it to the hidden ``#value_s`` field.
    6. Screenshot the filled form.
    7. Submit and wait for the result page to render.
    8. Screenshot the result page.
    9. Read name / GPA / result and run the subject script.
   10. Persist the final screenshot.

All selectors except the fixed form IDs come from :class:`RemoteSettings`.
The subject script is JavaScript served by the config service and runs
with full page privileges; ``settings.allow_remote_scripts`` gates it and
every execution is logged with the script's digest.
"""

import hashlib
import logging
from typing import Dict, Optional

from playwright.async_api import Page

from core.config import RemoteSettings, RequestInput, ScraperSettings
from core.errors import ConfigParseError, InsufficientCellsError
from core.extractor import DataExtractor
from scrapers.base import ResultScraper, ScrapeResult
from solvers.captcha import ArithmeticCaptchaSolver

logger = logging.getLogger(__name__)

# Form field IDs on the results page, in typing order
FORM_FIELDS: Dict[str, str] = {
    "exam": "#exam",
    "year": "#year",
    "board": "#board",
    "roll": "#roll",
    "reg": "#reg",
}
# Fields that must be visible before the form is touched
READY_FIELDS = ("#exam", "#year", "#board", "#roll")
CAPTCHA_FIELD_ID = "value_s"
SUBMIT_BUTTON = "#button2"

_INJECT_CAPTCHA_JS = (
    "([id, value]) => { document.getElementById(id).value = value; }"
)


class EducationBoardScraper(ResultScraper):
    """Drives one result lookup on educationboardresults.gov.bd."""

    def __init__(
        self,
        page: Page,
        remote: RemoteSettings,
        settings: ScraperSettings,
        solver: Optional[ArithmeticCaptchaSolver] = None,
    ) -> None:
        super().__init__(page, remote, settings)
        self.solver = solver or ArithmeticCaptchaSolver(
            strict=settings.strict_captcha,
        )
        missing = [
            name for name, value in (
                ("matching_cell_01", remote.matching_cell_selector),
                ("students_name_cell", remote.name_selector),
                ("students_gpa_cell", remote.gpa_selector),
                ("student_result_cell", remote.result_selector),
            )
            if not value
        ]
        if missing:
            raise ConfigParseError(
                "remote config is missing selectors: " + ", ".join(missing)
            )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def open_form(self) -> None:
        logger.info("Opening %s", self.settings.results_url)
        await self._step("navigate", self.page.goto, self.settings.results_url)
        await self.pause(self.settings.settle_seconds)

        for selector in READY_FIELDS:
            await self._step(
                f"wait {selector}",
                self.page.wait_for_selector, selector, state="visible",
            )
        await self._step(
            "wait matching cells",
            self.page.wait_for_selector,
            self.selector(self.remote.matching_cell_selector),
            state="visible",
        )

    async def read_captcha_expression(self) -> str:
        """Return the text of the captcha cell.

        Raises:
            InsufficientCellsError: If fewer than
                ``settings.min_matching_cells`` cells match.
        """
        cells = await self._step(
            "query matching cells",
            self.page.query_selector_all,
            self.selector(self.remote.matching_cell_selector),
        )
        required = max(
            self.settings.min_matching_cells,
            self.settings.captcha_cell_index + 1,
        )
        if len(cells) < required:
            raise InsufficientCellsError(len(cells), required)

        cell = cells[self.settings.captcha_cell_index]
        expression = await self._step("read captcha cell", cell.inner_text)
        logger.debug("Captcha expression: %r", expression)
        return expression

    async def fill_form(self, request: RequestInput) -> None:
        values = {
            "exam": request.exam,
            "year": str(request.year),
            "board": request.board,
            "roll": request.roll,
            "reg": request.reg,
        }
        for name, selector in FORM_FIELDS.items():
            await self._step(
                f"type {name}", self.page.type, selector, values[name],
            )

    async def inject_captcha(self, expression: str) -> str:
        answer = self.solver.solve(expression)
        logger.info("Solved captcha: %s", answer)
        await self._step(
            "inject captcha",
            self.page.evaluate,
            _INJECT_CAPTCHA_JS,
            [CAPTCHA_FIELD_ID, answer],
        )
        return answer

    async def submit(self) -> None:
        await self._step("submit", self.page.click, SUBMIT_BUTTON)
        await self.pause(self.settings.result_wait_seconds)

    async def read_subjects(self):
        script = self.remote.subject_script
        if not script:
            logger.warning("No subject script configured; skipping subjects")
            return ()
        if not self.settings.allow_remote_scripts:
            logger.warning(
                "Remote scripts are disabled; skipping subject extraction"
            )
            return ()

        digest = hashlib.sha256(script.encode("utf-8")).hexdigest()[:12]
        logger.info(
            "Running remote subject script (%d chars, sha256 %s)",
            len(script), digest,
        )
        raw = await self._step("subject script", self.page.evaluate, script)
        return DataExtractor.split_subjects(raw)

    async def extract_fields(self) -> Dict[str, object]:
        """Read the four result fields from the rendered result page."""
        name = await self._step(
            "read name", self.page.inner_text,
            self.selector(self.remote.name_selector),
        )
        gpa = await self._step(
            "read gpa", self.page.inner_text,
            self.selector(self.remote.gpa_selector),
        )
        result = await self._step(
            "read result", self.page.inner_text,
            self.selector(self.remote.result_selector),
        )
        return {
            "student_name": DataExtractor.clean_text(name),
            "gpa": DataExtractor.clean_text(gpa),
            "result_text": DataExtractor.clean_text(result),
            "subjects": await self.read_subjects(),
        }

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def run(self, request: RequestInput) -> ScrapeResult:
        """Execute the full lookup for *request*.

        Raises:
            InsufficientCellsError: Too few matching cells on the page.
            CaptchaSolveError: Unsolvable captcha in strict mode.
            BrowserStepError: Any browser step failed.
            FileWriteError: The screenshot could not be saved.
        """
        await self.open_form()
        expression = await self.read_captcha_expression()
        await self.fill_form(request)
        answer = await self.inject_captcha(expression)

        # Kept only until the result page replaces it
        screenshot = await self.capture("screenshot form")
        await self.submit()
        screenshot = await self.capture("screenshot result")

        fields = await self.extract_fields()
        path = self.save_screenshot(screenshot)
        logger.info("Screenshot saved as %s", path)

        return ScrapeResult(
            screenshot=screenshot,
            captcha_value=answer,
            screenshot_path=path,
            **fields,
        )
