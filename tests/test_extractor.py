from core.extractor import DataExtractor


def test_clean_text():
    assert DataExtractor.clean_text("  PASSED \n") == "PASSED"
    assert DataExtractor.clean_text(None) == ""
    assert DataExtractor.clean_text(5.0) == "5.0"


def test_split_subjects_lines():
    text = "101 BANGLA A+\n107 ENGLISH A\n109 MATHEMATICS A+"
    assert DataExtractor.split_subjects(text) == (
        "101 BANGLA A+",
        "107 ENGLISH A",
        "109 MATHEMATICS A+",
    )


def test_split_subjects_drops_blank_lines_and_crlf():
    assert DataExtractor.split_subjects("\r\nBANGLA A+\r\n\r\n  ENGLISH A  \r\n") == (
        "BANGLA A+",
        "ENGLISH A",
    )


def test_split_subjects_empty():
    assert DataExtractor.split_subjects("") == ()
    assert DataExtractor.split_subjects(None) == ()
    assert DataExtractor.split_subjects("   \n  ") == ()


def test_split_subjects_from_array():
    assert DataExtractor.split_subjects(["BANGLA A+", "", "ENGLISH A"]) == (
        "BANGLA A+",
        "ENGLISH A",
    )
