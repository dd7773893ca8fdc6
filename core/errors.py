"""Error taxonomy for the result scraper.

Every failure in the pipeline is terminal: nothing here is retried or
downgraded.  ``main.run`` catches :class:`ScraperError`, logs it, and maps
it to a non-zero exit code.
"""

from enum import Enum
from typing import Optional


class ErrorType(Enum):
    """Classification of scraper failures.

    - CONFIG: Remote config could not be fetched or parsed.
    - SERVICE_DISABLED: Remote kill-switch is not ``enabled``.
    - VALIDATION: A request field failed validation.
    - CAPTCHA: The captcha expression could not be solved.
    - BROWSER: A browser automation step failed.
    - IO: The screenshot could not be written.
    """
    CONFIG = "config"
    SERVICE_DISABLED = "service_disabled"
    VALIDATION = "validation"
    CAPTCHA = "captcha"
    BROWSER = "browser"
    IO = "io"


class ScraperError(Exception):
    """Base class for all scraper errors."""

    error_type: ErrorType = ErrorType.BROWSER


class ConfigFetchError(ScraperError):
    """Network, HTTP status, or body-read failure talking to the config service."""

    error_type = ErrorType.CONFIG


class ConfigParseError(ScraperError):
    """Config response is not the expected JSON shape."""

    error_type = ErrorType.CONFIG


class ServiceDisabledError(ScraperError):
    """The remote ``status_api`` flag is not ``enabled``."""

    error_type = ErrorType.SERVICE_DISABLED

    def __init__(self, status: Optional[str]) -> None:
        self.status = status
        super().__init__(
            f"service unavailable (status_api: {status or ''})"
        )


class ValidationError(ScraperError):
    """A request field failed validation.

    Attributes:
        field: Name of the offending field (``exam``, ``year``, ...).
        value: The raw value that was rejected.
    """

    error_type = ErrorType.VALIDATION

    def __init__(self, field: str, value: object, message: str) -> None:
        self.field = field
        self.value = value
        super().__init__(message)


class InsufficientCellsError(ScraperError):
    """Fewer matching cells on the page than the captcha lookup needs."""

    error_type = ErrorType.BROWSER

    def __init__(self, found: int, required: int) -> None:
        self.found = found
        self.required = required
        super().__init__(
            f"insufficient matching cells found: {found} "
            f"(need at least {required})"
        )


class CaptchaSolveError(ScraperError):
    """The captcha text is not a two-operand integer addition."""

    error_type = ErrorType.CAPTCHA

    def __init__(self, expression: str) -> None:
        self.expression = expression
        super().__init__(f"could not solve captcha: {expression!r}")


class BrowserStepError(ScraperError):
    """A browser automation step raised.

    Attributes:
        step: Short name of the failing step (e.g. ``navigate``).
        cause: The underlying Playwright exception.
    """

    error_type = ErrorType.BROWSER

    def __init__(self, step: str, cause: BaseException) -> None:
        self.step = step
        self.cause = cause
        super().__init__(f"browser step '{step}' failed: {cause}")


class FileWriteError(ScraperError):
    """The screenshot could not be persisted."""

    error_type = ErrorType.IO

    def __init__(self, path: object, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"failed to write {path}: {cause}")
