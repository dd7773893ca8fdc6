"""Request field validation.

All five fields run through the same error-returning contract: the first
failing check raises :class:`core.errors.ValidationError` naming the field.
Checks run in a fixed order (exam, year, board, roll, reg).
"""

import logging
import re
from typing import Dict

from core.config import RequestInput
from core.errors import ValidationError

logger = logging.getLogger(__name__)

VALID_EXAMS = frozenset({
    "ssc", "jsc", "ssc_voc",
    "hsc", "hsc_voc", "hsc_hbm", "hsc_dic",
})

VALID_BOARDS = frozenset({
    "barisal", "chittagong", "comilla",
    "dhaka", "dinajpur", "jessore",
    "mymensingh", "rajshahi", "sylhet",
    "madrasah", "tec", "dibs",
})

# Certificate names as printed on the results site -> form code
EXAM_LABELS: Dict[str, str] = {
    "SSC/Dakhil/Equivalent": "ssc",
    "JSC/JDC": "jsc",
    "SSC(Vocational)": "ssc_voc",
    "HSC/Alim": "hsc",
    "HSC(Vocational)": "hsc_voc",
    "HSC(BM)": "hsc_hbm",
    "Diploma in Commerce": "hsc_dic",
    "Diploma in Business Studies": "hsc",
}

MIN_YEAR = 1996
MAX_YEAR = 2025

# Whole-string integer: optional sign, ASCII digits, nothing else
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _is_integer(value: str) -> bool:
    return bool(_INTEGER_RE.fullmatch(value or ""))


def validate_exam(exam: str) -> str:
    """Return the lower-cased exam code or raise ``ValidationError``."""
    code = (exam or "").lower()
    if code not in VALID_EXAMS:
        raise ValidationError("exam", exam, f"invalid exam value: {exam}")
    return code


def validate_year(year: str) -> int:
    """Parse *year* and check it lies in ``[MIN_YEAR, MAX_YEAR]``.

    Args:
        year: Year as typed by the user.

    Returns:
        The year as an integer.

    Raises:
        ValidationError: If *year* is not numeric or out of range.
    """
    if not _is_integer(year):
        raise ValidationError("year", year, f"year must be numeric: {year}")
    value = int(year)
    if value < MIN_YEAR or value > MAX_YEAR:
        raise ValidationError(
            "year", year,
            f"year {value} is out of range ({MIN_YEAR}-{MAX_YEAR})",
        )
    return value


def validate_board(board: str) -> str:
    """Return the lower-cased board code or raise ``ValidationError``."""
    code = (board or "").lower()
    if code not in VALID_BOARDS:
        raise ValidationError("board", board, f"invalid board value: {board}")
    return code


def validate_roll(roll: str) -> str:
    if not _is_integer(roll):
        raise ValidationError("roll", roll, f"roll must be numeric: {roll}")
    return roll


def validate_reg(reg: str) -> str:
    if not _is_integer(reg):
        raise ValidationError("reg", reg, f"reg must be numeric: {reg}")
    return reg


def validate_form_inputs(
    exam: str, year: str, board: str, roll: str, reg: str,
) -> RequestInput:
    """Validate the five request fields and build a :class:`RequestInput`.

    Validation short-circuits: only the first failure is reported.

    Args:
        exam: Exam code, case-insensitive.
        year: Examination year as a string.
        board: Board code, case-insensitive.
        roll: Roll number.
        reg: Registration number.

    Returns:
        An immutable, validated request.

    Raises:
        ValidationError: On the first field that fails.
    """
    request = RequestInput(
        exam=validate_exam(exam),
        year=validate_year(year),
        board=validate_board(board),
        roll=validate_roll(roll),
        reg=validate_reg(reg),
    )
    logger.debug(
        "Validated request: exam=%s year=%d board=%s",
        request.exam, request.year, request.board,
    )
    return request
