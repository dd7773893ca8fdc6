"""Text normalisation for values scraped from the result page."""

import logging
from typing import Any, Tuple

logger = logging.getLogger(__name__)


class DataExtractor:
    """Utility class for turning raw page text into result fields.

    Examples:
        >>> DataExtractor.clean_text("  Passed \\n")
        'Passed'
        >>> DataExtractor.split_subjects("BANGLA A+\\n\\nENGLISH A")
        ('BANGLA A+', 'ENGLISH A')
    """

    @staticmethod
    def clean_text(text: Any) -> str:
        """Collapse ``None`` to ``""`` and strip surrounding whitespace."""
        if text is None:
            return ""
        return str(text).strip()

    @staticmethod
    def split_subjects(text: Any) -> Tuple[str, ...]:
        """Split the subject script output into one entry per line.

        The remote script returns newline-separated text; Windows line
        endings are tolerated and blank lines dropped.

        Args:
            text: Value returned by the subject script (usually ``str``;
                a JS array arrives as a list, ``None`` when the script
                yields nothing).

        Returns:
            Tuple of non-empty, stripped lines.
        """
        if isinstance(text, (list, tuple)):
            text = "\n".join(DataExtractor.clean_text(t) for t in text)
        cleaned = DataExtractor.clean_text(text)
        if not cleaned:
            logger.debug("Subject script returned no text")
            return ()
        return tuple(
            line.strip()
            for line in cleaned.splitlines()
            if line.strip()
        )
