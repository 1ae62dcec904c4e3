"""Unit tests for the date parser."""

import re
from datetime import datetime, timezone

import pytest

from important_dates.date_parser import (
    DateGrammar, DateParser, DateparserGrammar, expand_two_digit_year, parse_date
)
from important_dates.models import serialize_timestamp


@pytest.mark.parametrize("text,expected", [
    ("December 15, 2024", (2024, 12, 15)),
    ("10/20/2024", (2024, 10, 20)),
    ("3/5/24", (2024, 3, 5)),
    ("2024-12-15", (2024, 12, 15)),
    ("15 December 2024", (2024, 12, 15)),
    ("Friday, December 13, 2024", (2024, 12, 13)),
    ("Dec. 15th, 2024", (2024, 12, 15)),
    ("Sept 9 2025", (2025, 9, 9)),
])
def test_date_grammars(text, expected):
    """Test each grammar parses its own shape, pinned to noon."""
    parsed = parse_date(text)
    assert (parsed.year, parsed.month, parsed.day) == expected
    assert (parsed.hour, parsed.minute) == (12, 0)


def test_noon_pinning_serializes_to_same_day():
    """Test that a date-only string stays on its calendar day in UTC."""
    assert serialize_timestamp(parse_date("December 15, 2024")) == "2024-12-15T12:00:00.000Z"


def test_local_noon_in_other_timezone():
    """Test noon is local to the configured zone."""
    parser = DateParser(timezone_str="America/Toronto")
    assert serialize_timestamp(parser.parse("December 15, 2024")) == "2024-12-15T17:00:00.000Z"


@pytest.mark.parametrize("text", [
    "3/45/2024",        # invalid day
    "13/01/2024",       # invalid month
    "February 30, 2024",
    "3/5/75",           # 1975
    "1/1/1999",
    "1/1/2100",
    "not a date",
    "Room 101",
    "",
    "December 15, 2024 at 13pm",
])
def test_unparseable_returns_none(text):
    """Test that bad input returns None instead of raising."""
    assert parse_date(text) is None


def test_none_input():
    """Test that non-string input returns None."""
    assert parse_date(None) is None


def test_year_bounds():
    """Test the [2000, 2100) year range."""
    assert parse_date("1/1/2000").year == 2000
    assert parse_date("12/31/2099").year == 2099


def test_two_digit_years():
    """Test two-digit year expansion."""
    assert expand_two_digit_year(24) == 2024
    assert expand_two_digit_year(49) == 2049
    assert expand_two_digit_year(50) == 1950
    assert expand_two_digit_year(2024) == 2024


def test_year_less_date_uses_reference_year():
    """Test that "October 20" falls in the reference year."""
    parsed = parse_date("October 20", reference_year=2025)
    assert (parsed.year, parsed.month, parsed.day) == (2025, 10, 20)


def test_explicit_time():
    """Test that an explicit time is kept instead of noon."""
    parsed = parse_date("December 15, 2024 at 3:30 PM")
    assert (parsed.hour, parsed.minute) == (15, 30)

    parsed = parse_date("10/20/2024 23:59")
    assert (parsed.hour, parsed.minute) == (23, 59)

    parsed = parse_date("10/20/2024 12am")
    assert parsed.hour == 0


def test_iso_timestamps():
    """Test native ISO timestamp parsing keeps the offset."""
    assert serialize_timestamp(parse_date("2024-11-01T23:59:00Z")) == "2024-11-01T23:59:00.000Z"
    assert serialize_timestamp(parse_date("2024-11-01T23:59:00-04:00")) == "2024-11-02T03:59:00.000Z"
    assert serialize_timestamp(parse_date("2024-11-01T23:59:00.5+0000")) == "2024-11-01T23:59:00.500Z"


def test_rfc_2822():
    """Test RFC 2822 dates."""
    parsed = parse_date("Fri, 01 Nov 2024 23:59:00 GMT")
    assert parsed == datetime(2024, 11, 1, 23, 59, tzinfo=timezone.utc)


class FinalsWeekGrammar(DateGrammar):
    """Test grammar for a fixed phrase."""

    name = "finals-week"
    SHAPE = re.compile(r"finals week", re.IGNORECASE)

    def parse(self, text, reference_year, tz):
        return tz.localize(datetime(reference_year, 12, 10, 12, 0))


class NeverGrammar(DateGrammar):
    """Test grammar that accepts everything and parses nothing."""

    name = "never"
    SHAPE = re.compile(r".*")

    def parse(self, text, reference_year, tz):
        return None


def test_custom_grammar_at_head():
    """Test that a grammar can be inserted without changing callers."""
    parser = DateParser()
    parser.insert_grammar(FinalsWeekGrammar())
    assert parser.parse("Finals week", 2024).date() == datetime(2024, 12, 10).date()
    assert parser.parse("December 15, 2024").day == 15


def test_regex_chain_is_fallback():
    """Test that a failing head grammar falls through to the regex chain."""
    parser = DateParser()
    parser.insert_grammar(NeverGrammar())
    assert parser.parse("10/20/2024").day == 20


def test_enhanced_parser():
    """Test the dateparser grammar at the head of the chain."""
    parser = DateParser(enhanced=True)
    assert isinstance(parser.grammars[0], DateparserGrammar)
    parsed = parser.parse("December 15, 2024")
    assert (parsed.year, parsed.month, parsed.day, parsed.hour) == (2024, 12, 15, 12)
