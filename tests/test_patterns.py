"""Unit tests for the pattern cascade."""

from datetime import date

from important_dates.config import ExtractorConfig
from important_dates.models import RawSource
from important_dates.patterns import PatternCascade


def make_cascade(**kwargs):
    return PatternCascade(config=ExtractorConfig(reference_date=date(2024, 9, 1), **kwargs))


def test_contextual_tier_wins():
    """Test that tier 2 is not applied when tier 1 finds something."""
    source = RawSource(text="Final Exam: December 15, 2024\nSee you on 11/02/2024", course_name="CS101")
    candidates = make_cascade().find_candidates(source)
    assert candidates
    assert all(c.tier == 1 for c in candidates)
    assert {c.date_text for c in candidates} == {"December 15, 2024"}


def test_contextual_patterns_are_unioned():
    """Test that every tier 1 pattern contributes."""
    source = RawSource(text="Exam 1 - 10/20/2024 and Homework 2 - 10/25/2024", course_name="CS101")
    candidates = make_cascade().contextual_candidates(source)
    assert sorted(c.parsed_date.day for c in candidates) == [20, 25]


def test_contextual_tier_ignores_unflagged_lines():
    """Test that lines without a keyword are not matched by tier 1."""
    source = RawSource(text="Welcome to the course.\nClasses begin 09/04/2024", course_name="CS101")
    assert make_cascade().contextual_candidates(source) == []


def test_generic_fallback():
    """Test tier 2 when no keyword pattern matches."""
    text = (
        "Welcome to the course.\n"
        "Classes begin September 4, 2024 in room 101.\n"
        "A reunion on January 5, 2030 is planned.\n"
    )
    candidates = make_cascade().find_candidates(RawSource(text=text, course_name="CS101"))
    assert [c.tier for c in candidates] == [2]
    assert candidates[0].parsed_date.date() == date(2024, 9, 4)
    assert "Classes begin" in candidates[0].context_window


def test_generic_fallback_when_keyword_line_has_no_date():
    """Test that a flagged line without a parseable date still falls back."""
    text = "Homework policy is strict.\nTerm starts 09/03/2024."
    candidates = make_cascade().find_candidates(RawSource(text=text, course_name="CS101"))
    assert len(candidates) == 1
    assert candidates[0].tier == 2
    assert candidates[0].has_keyword


def test_generic_year_window():
    """Test that tier 2 keeps only dates within two years."""
    text = "Opening 03/15/2026 and closing 03/15/2027 of the gallery"
    candidates = make_cascade().generic_candidates(RawSource(text=text, course_name="CS101"))
    assert [c.date_text for c in candidates] == ["03/15/2026"]

    wider = make_cascade(year_window=3).generic_candidates(RawSource(text=text, course_name="CS101"))
    assert len(wider) == 2


def test_generic_candidates_with_keyword_come_first():
    """Test that keyword context is prioritized in tier 2."""
    text = "Opening day 09/03/2024" + " " * 80 + "Quiz review 09/01/2024"
    candidates = make_cascade().find_candidates(RawSource(text=text, course_name="CS101"))
    assert [c.date_text for c in candidates] == ["09/01/2024", "09/03/2024"]
    assert [c.has_keyword for c in candidates] == [True, False]


def test_context_window_radius():
    """Test the +/-50 character context window."""
    text = "a" * 100 + " 09/03/2024 " + "b" * 100
    candidates = make_cascade().generic_candidates(RawSource(text=text, course_name="CS101"))
    assert len(candidates[0].context_window) == 50 + len("09/03/2024") + 50


def test_invalid_dates_are_dropped():
    """Test that unparseable matches never become candidates."""
    source = RawSource(text="Exam 1 - 3/45/2024", course_name="CS101")
    assert make_cascade().find_candidates(source) == []


def test_no_content():
    """Test that very short text yields nothing."""
    assert make_cascade().find_candidates(RawSource(text="Exam", course_name="CS101")) == []
    assert make_cascade().find_candidates(RawSource(text="", course_name="CS101")) == []
