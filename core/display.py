"""Terminal rendering of a scraped result."""

from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.text import Text

if TYPE_CHECKING:
    from scrapers.base import ScrapeResult


class ResultPrinter:
    """Print tagged result lines with per-field colours.

    Output layout::

        [SOLVED CAPTCHA]: 19
        [STUDENT NAME]: ...
        [GPA]: ...
        [RESULT]: ...
        [SUBJECTS]:
        <one subject per line | No subjects found>
    """

    def __init__(
        self, color: bool = True, console: Optional[Console] = None,
    ) -> None:
        self.console = console or Console(
            no_color=not color, highlight=False,
        )

    def _line(self, tag: str, value: str, style: str) -> None:
        self.console.print(Text(f"[{tag}]: {value}", style=style))

    def print_captcha(self, value: str) -> None:
        self._line("SOLVED CAPTCHA", value, "yellow")

    def print_result(self, result: "ScrapeResult") -> None:
        """Render every field of *result*."""
        self.print_captcha(result.captcha_value)
        self._line("STUDENT NAME", result.student_name, "green")
        self._line("GPA", result.gpa, "yellow")
        self._line("RESULT", result.result_text, "magenta")

        self.console.print(Text("[SUBJECTS]:", style="blue"))
        if not result.subjects:
            self.console.print(Text("No subjects found", style="blue"))
            return
        for subject in result.subjects:
            self.console.print(Text(subject, style="blue"))
