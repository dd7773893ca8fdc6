"""Application configuration for the education board result scraper.

Local settings are loaded from environment variables (``SCRAPER_`` prefix,
with ``.env`` file support) via Pydantic v2.  Site selectors and browser
launch flags are *not* local: they come from the remote config service and
are held in :class:`RemoteSettings`, built once per run by
:mod:`core.remote_config`.

Key exports:
    ScraperSettings: Root local settings model (instantiate once).
    RemoteSettings: Immutable selectors / launch flags from the config service.
    RequestInput: Immutable, validated request for a single result lookup.
    BASE_DIR / LOGS_DIR: Canonical project paths.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Base Paths
# ---------------------------------------------------------------------------
BASE_DIR: Path = Path(__file__).parent.parent
"""Project root directory (parent of ``core/``)."""

LOGS_DIR: Path = BASE_DIR / "logs"
"""Directory for log output files."""

DEFAULT_CONFIG_URL = "https://akash-pf.vercel.app/api/eduboard_bd"
DEFAULT_RESULTS_URL = "http://www.educationboardresults.gov.bd/"


class RequestInput(BaseModel):
    """A validated result lookup request.

    Only :func:`core.validation.validate_form_inputs` should build these;
    ``exam`` and ``board`` are stored lower-cased.

    Attributes:
        exam: Exam code (``ssc``, ``hsc``, ...).
        year: Examination year.
        board: Education board code (``dhaka``, ``comilla``, ...).
        roll: Roll number, digits as typed.
        reg: Registration number, digits as typed.
    """

    model_config = ConfigDict(frozen=True)

    exam: str
    year: int
    board: str
    roll: str
    reg: str


class RemoteSettings(BaseModel):
    """Selectors and launch flags supplied by the remote config service.

    The DOM contract of the results site is indirected through these
    values; nothing here is hard-coded in the scraper.  Types are strict
    so a malformed config (e.g. ``"headless": "yes"``) is rejected instead
    of silently coerced.

    Attributes:
        headless: Launch the browser without a window.
        start_maximized: Launch the browser window maximised.
        disable_gpu: Disable GPU acceleration.
        status_api: Raw kill-switch value; only ``"enabled"`` allows a run.
        matching_cell_selector: Selector for the repeated table cells, the
            13th of which holds the captcha expression.
        name_selector: Selector of the student name cell.
        gpa_selector: Selector of the GPA cell.
        result_selector: Selector of the pass/fail cell.
        subject_script: JavaScript expression, evaluated in the page, that
            returns the subject list as newline-separated text.
    """

    model_config = ConfigDict(frozen=True)

    headless: StrictBool = False
    start_maximized: StrictBool = True
    disable_gpu: StrictBool = False
    status_api: Optional[StrictStr] = None
    matching_cell_selector: StrictStr = ""
    name_selector: StrictStr = ""
    gpa_selector: StrictStr = ""
    result_selector: StrictStr = ""
    subject_script: StrictStr = ""

    @property
    def status_enabled(self) -> bool:
        """``True`` only when the kill-switch literally reads ``enabled``."""
        return self.status_api == "enabled"


class ScraperSettings(BaseSettings):
    """Root local configuration.

    Every field can be set through an environment variable named
    ``SCRAPER_<FIELD>`` (e.g. ``SCRAPER_SCREENSHOT_PATH``) or a ``.env``
    file.  The request fields (``exam`` ... ``reg``) are optional here so
    the CLI can supply them instead.

    Section overview:
        * **Logging** -- level, file path, console colour.
        * **Endpoints** -- remote config URL and results site URL.
        * **Browser** -- engine, default timeout, headless override.
        * **Waits** -- settle / result wait intervals in seconds.
        * **Output** -- screenshot path and JPEG quality.
        * **Captcha** -- cell count / index, strict solving.
        * **Trust** -- whether the remote subject script may run.
    """

    # Logging
    log_level: str = "INFO"
    log_file: str = str(LOGS_DIR / "result_scraper.log")
    color: bool = True

    # Endpoints
    config_url: str = DEFAULT_CONFIG_URL
    # Total timeout for the config request, in seconds
    config_timeout: float = 30.0
    results_url: str = DEFAULT_RESULTS_URL

    # Browser
    # Options: chromium, camoufox
    browser_engine: str = "chromium"
    # Default Playwright timeout in ms
    timeout: int = 30000
    # Overrides the remote "headless" flag when set
    headless_override: Optional[bool] = None

    # Waits
    settle_seconds: float = 2.0
    result_wait_seconds: float = 5.0

    # Output
    screenshot_path: str = "screenshot.png"
    # Only used for JPEG output; PNG is lossless
    screenshot_quality: int = 90

    # Captcha
    min_matching_cells: int = 13
    captcha_cell_index: int = 12
    strict_captcha: bool = True

    # Trust
    allow_remote_scripts: bool = True

    # Request (optional; CLI flags take precedence)
    exam: Optional[str] = None
    year: Optional[str] = None
    board: Optional[str] = None
    roll: Optional[str] = None
    reg: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="SCRAPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def resolve_headless(self, remote: RemoteSettings) -> bool:
        """Return the effective headless flag.

        Args:
            remote: Settings loaded from the config service.

        Returns:
            ``headless_override`` when set, else the remote flag.
        """
        if self.headless_override is not None:
            return self.headless_override
        return remote.headless
