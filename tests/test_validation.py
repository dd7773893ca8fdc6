import pytest

from core.config import RequestInput
from core.errors import ValidationError
from core.validation import (
    EXAM_LABELS,
    MAX_YEAR,
    MIN_YEAR,
    VALID_BOARDS,
    VALID_EXAMS,
    validate_board,
    validate_exam,
    validate_form_inputs,
    validate_reg,
    validate_roll,
    validate_year,
)


def _fields(**overrides):
    fields = {
        "exam": "ssc",
        "year": "2020",
        "board": "dhaka",
        "roll": "123456",
        "reg": "7891011",
    }
    fields.update(overrides)
    return fields


class TestExam:
    """Test suite for exam code validation."""

    @pytest.mark.parametrize("code", sorted(VALID_EXAMS))
    def test_accepts_every_code(self, code):
        assert validate_exam(code) == code

    @pytest.mark.parametrize("code", ["SSC", "Hsc_Voc", "JSC"])
    def test_case_insensitive(self, code):
        assert validate_exam(code) == code.lower()

    @pytest.mark.parametrize("code", ["", "ssc ", "alim", "hsc-voc", "dakhil"])
    def test_rejects_unknown(self, code):
        with pytest.raises(ValidationError) as exc:
            validate_exam(code)
        assert exc.value.field == "exam"

    def test_labels_map_to_valid_codes(self):
        assert set(EXAM_LABELS.values()) <= VALID_EXAMS


class TestYear:
    """Test suite for year validation."""

    def test_bounds_inclusive(self):
        assert validate_year(str(MIN_YEAR)) == 1996
        assert validate_year(str(MAX_YEAR)) == 2025

    @pytest.mark.parametrize("year", ["1995", "2026", "0", "-2020"])
    def test_out_of_range(self, year):
        with pytest.raises(ValidationError) as exc:
            validate_year(year)
        assert exc.value.field == "year"
        assert "out of range" in str(exc.value)

    @pytest.mark.parametrize("year", ["twenty", "", "2020a", " 2020", "20.20"])
    def test_non_numeric_is_a_validation_error(self, year):
        with pytest.raises(ValidationError) as exc:
            validate_year(year)
        assert exc.value.field == "year"
        assert "numeric" in str(exc.value)


class TestBoard:
    """Test suite for board validation."""

    @pytest.mark.parametrize("board", sorted(VALID_BOARDS))
    def test_accepts_every_board(self, board):
        assert validate_board(board.upper()) == board

    def test_rejects_unknown(self):
        with pytest.raises(ValidationError) as exc:
            validate_board("cumilla")
        assert exc.value.field == "board"
        assert exc.value.value == "cumilla"


class TestRollAndReg:
    """Test suite for roll / registration numbers."""

    @pytest.mark.parametrize("value", ["1", "123456", "0001234", "99999999999999999999"])
    def test_digits_accepted(self, value):
        assert validate_roll(value) == value
        assert validate_reg(value) == value

    @pytest.mark.parametrize("value", ["", "12a", "abc", "12 34", " 123", "123\n", "1_000"])
    def test_non_numeric_rejected(self, value):
        with pytest.raises(ValidationError) as roll_exc:
            validate_roll(value)
        assert roll_exc.value.field == "roll"
        with pytest.raises(ValidationError) as reg_exc:
            validate_reg(value)
        assert reg_exc.value.field == "reg"


class TestValidateFormInputs:
    """Test suite for the combined validator."""

    def test_builds_request(self):
        request = validate_form_inputs(**_fields(exam="SSC", board="Dhaka"))
        assert request == RequestInput(
            exam="ssc", year=2020, board="dhaka", roll="123456", reg="7891011",
        )

    def test_request_is_immutable(self):
        request = validate_form_inputs(**_fields())
        with pytest.raises(Exception):
            request.roll = "1"

    def test_first_failure_wins(self):
        with pytest.raises(ValidationError) as exc:
            validate_form_inputs(**_fields(exam="bad", year="1800", reg="x"))
        assert exc.value.field == "exam"

    @pytest.mark.parametrize("field,value", [
        ("year", "1800"),
        ("board", "nowhere"),
        ("roll", "12x"),
        ("reg", "x12"),
    ])
    def test_reports_failing_field(self, field, value):
        with pytest.raises(ValidationError) as exc:
            validate_form_inputs(**_fields(**{field: value}))
        assert exc.value.field == field
