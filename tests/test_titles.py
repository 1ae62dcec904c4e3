"""Unit tests for title extraction."""

from important_dates.titles import extract_title


def test_qualifier_after_keyword():
    """Test the keyword-qualifier tier."""
    assert extract_title("Final Exam: December 15, 2024") == "Exam"
    assert extract_title("Assignment 3 - 10/20/2024") == "3"
    assert extract_title("Project proposal - 11/01/2024") == "proposal"


def test_text_before_date():
    """Test the prefix tier when no keyword qualifier exists."""
    assert extract_title("Spring recess begins March 10, 2025", "March 10, 2025") == "Spring recess begins"


def test_prefix_too_long_falls_through():
    """Test that a 50+ character prefix is not used."""
    text = "x" * 60 + " 10/20/2024"
    assert extract_title(text, "10/20/2024") == "Important Date"


def test_capitalized_keyword():
    """Test the bare keyword tier."""
    assert extract_title("homework: 10/20/2024") == "Homework"
    assert extract_title("Deadline") == "Deadline"


def test_default_title():
    """Test the default title."""
    assert extract_title("") == "Important Date"
    assert extract_title("Classes begin 09/04/2024") == "Important Date"


def test_prefix_drops_trailing_separator():
    """Test that separators between a label and its date are not kept."""
    assert extract_title("drop: November 4, 2024", "November 4, 2024") == "drop"
    assert extract_title("Lab 2 check-in - 10/20/2024", "10/20/2024") == "Lab 2 check-in"


def test_bare_keyword_prefix_uses_keyword_title():
    """Test that "due:" before a date becomes the keyword title."""
    assert extract_title("due: December 15, 2024", "December 15, 2024") == "Due"


def test_qualifier_stops_before_date():
    """Test that the qualifier does not swallow the date."""
    assert extract_title("Homework 2 due March 3", "March 3") == "2 due"
    assert extract_title("Homework 2 due March 3") == "2 due March 3"
