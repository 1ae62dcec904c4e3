"""
Date parsing module.

Turns a free-form date substring into an absolute, timezone-aware datetime.

The parser is a chain of grammars. Each grammar declares the exact shape of
input it accepts and is only asked to parse strings of that shape, so a
"10/20/2024" never reaches the textual month grammar and vice versa. An
optional dateparser-backed grammar can be put at the head of the chain; the
regex grammars always stay behind it as the fallback.

Dates without an explicit time are pinned to noon in the configured zone so
that converting to UTC never moves them to a neighbouring day.
"""

import logging
import re
from datetime import date, datetime
from email.utils import parsedate_to_datetime
from typing import Iterable, List, Optional

import dateparser
import pytz

logger = logging.getLogger(__name__)

MIN_YEAR = 2000
MAX_YEAR = 2100   # exclusive

NOON = (12, 0)

MONTHS = {
    'january': 1, 'jan': 1,
    'february': 2, 'feb': 2,
    'march': 3, 'mar': 3,
    'april': 4, 'apr': 4,
    'may': 5,
    'june': 6, 'jun': 6,
    'july': 7, 'jul': 7,
    'august': 8, 'aug': 8,
    'september': 9, 'sept': 9, 'sep': 9,
    'october': 10, 'oct': 10,
    'november': 11, 'nov': 11,
    'december': 12, 'dec': 12,
}

# Longest names first so "sept" wins over "sep"
MONTH_PATTERN = '|'.join(sorted(MONTHS, key=len, reverse=True))

WEEKDAY_PREFIX = (
    r'(?:(?:mon|tue|tues|wed|wednes|thu|thur|thurs|fri|sat|satur|sun)(?:day)?\.?,?\s+)?'
)

# Optional trailing time: "3:30 PM", "at 3pm", "@ 11:59 p.m.", "23:59"
TIME_SUFFIX = (
    r'(?:,?\s+(?:at\s+|@\s*)?(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?\s*(?P<meridiem>[ap])\.?m\.?'
    r'|,?\s+(?:at\s+|@\s*)?(?P<hour24>\d{1,2}):(?P<minute24>\d{2}))?'
)


def expand_two_digit_year(year: int) -> int:
    """Map a two-digit year to a full year (00-49 -> 2000s, 50-99 -> 1900s)."""
    if year < 100:
        return 2000 + year if year < 50 else 1900 + year
    return year


def _time_of_day(match) -> Optional[tuple]:
    """Return (hour, minute) from a TIME_SUFFIX match, or None if no time was given.

    24-hour values are returned unchecked; _localize rejects "25:00".

    Raises:
        ValueError: if a 12-hour time is out of range (e.g. "13pm")
    """
    if match.group('hour') is not None:
        hour = int(match.group('hour'))
        minute = int(match.group('minute') or 0)
        if not 1 <= hour <= 12:
            raise ValueError(f"hour {hour} out of range for 12-hour clock")
        meridiem = match.group('meridiem').lower()
        if meridiem == 'a':
            hour = 0 if hour == 12 else hour
        else:
            hour = 12 if hour == 12 else hour + 12
        return hour, minute
    if match.group('hour24') is not None:
        return int(match.group('hour24')), int(match.group('minute24'))
    return None


def _localize(tz, year: int, month: int, day: int, clock: Optional[tuple]) -> Optional[datetime]:
    """Build an aware datetime, or None if the calendar fields are invalid."""
    hour, minute = clock or NOON
    try:
        naive = datetime(year, month, day, hour, minute)
    except ValueError:
        return None
    return tz.localize(naive)


class DateGrammar:
    """Base class for one date format.

    Subclasses set SHAPE (matched against the whole candidate) and implement
    parse(). parse() must return None instead of raising.
    """

    name = "grammar"
    SHAPE = None

    def matches(self, text: str) -> bool:
        return bool(self.SHAPE.fullmatch(text))

    def parse(self, text: str, reference_year: int, tz) -> Optional[datetime]:
        raise NotImplementedError


class NativeTimestampGrammar(DateGrammar):
    """ISO 8601 timestamps with a time part, and RFC 2822 dates."""

    name = "native"
    ISO_SHAPE = re.compile(
        r'\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d{1,6})?)?(?:Z|[+-]\d{2}:?\d{2})?',
        re.IGNORECASE
    )
    RFC_SHAPE = re.compile(
        r'(?:(?:mon|tue|wed|thu|fri|sat|sun),\s*)?\d{1,2}\s+(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)'
        r'\s+\d{4}\s+\d{2}:\d{2}(?::\d{2})?\s+(?:gmt|ut|utc|[+-]\d{4})',
        re.IGNORECASE
    )

    def matches(self, text: str) -> bool:
        return bool(self.ISO_SHAPE.fullmatch(text) or self.RFC_SHAPE.fullmatch(text))

    def parse(self, text: str, reference_year: int, tz) -> Optional[datetime]:
        if self.ISO_SHAPE.fullmatch(text):
            return self._parse_iso(text, tz)
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError):
            return None
        if parsed.tzinfo is None:
            parsed = pytz.utc.localize(parsed)
        return parsed

    def _parse_iso(self, text: str, tz) -> Optional[datetime]:
        value = text.upper().replace(' ', 'T', 1)
        if value.endswith('Z'):
            value = value[:-1] + '+00:00'
        # fromisoformat wants "+HH:MM" and 3 or 6 fractional digits on older Pythons
        value = re.sub(r'([+-]\d{2})(\d{2})$', r'\1:\2', value)
        value = re.sub(r'\.(\d{1,6})', lambda m: '.' + m.group(1).ljust(6, '0'), value)
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = tz.localize(parsed)
        return parsed


class NumericSlashGrammar(DateGrammar):
    """M/D/Y and M/D/YY, e.g. "10/20/2024" or "3/5/24"."""

    name = "numeric"
    SHAPE = re.compile(
        r'(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<year>\d{4}|\d{2})' + TIME_SUFFIX,
        re.IGNORECASE
    )

    def parse(self, text: str, reference_year: int, tz) -> Optional[datetime]:
        match = self.SHAPE.fullmatch(text)
        try:
            clock = _time_of_day(match)
        except ValueError:
            return None
        year = expand_two_digit_year(int(match.group('year')))
        return _localize(tz, year, int(match.group('month')), int(match.group('day')), clock)


class MonthDayYearGrammar(DateGrammar):
    """Textual "Month D, Y", e.g. "December 15, 2024" or "Dec. 15th".

    The year is optional; year-less dates fall in the reference year.
    """

    name = "month-day-year"
    SHAPE = re.compile(
        WEEKDAY_PREFIX
        + r'(?P<month>' + MONTH_PATTERN + r')\.?\s+(?P<day>\d{1,2})(?:st|nd|rd|th)?'
        + r'(?:,?\s+(?P<year>\d{4}))?' + TIME_SUFFIX,
        re.IGNORECASE
    )

    def parse(self, text: str, reference_year: int, tz) -> Optional[datetime]:
        match = self.SHAPE.fullmatch(text)
        try:
            clock = _time_of_day(match)
        except ValueError:
            return None
        year = int(match.group('year')) if match.group('year') else reference_year
        month = MONTHS[match.group('month').lower()]
        return _localize(tz, year, month, int(match.group('day')), clock)


class IsoDateGrammar(DateGrammar):
    """Date-only ISO "Y-M-D", e.g. "2024-12-15"."""

    name = "iso-date"
    SHAPE = re.compile(
        r'(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})' + TIME_SUFFIX,
        re.IGNORECASE
    )

    def parse(self, text: str, reference_year: int, tz) -> Optional[datetime]:
        match = self.SHAPE.fullmatch(text)
        try:
            clock = _time_of_day(match)
        except ValueError:
            return None
        return _localize(
            tz, int(match.group('year')), int(match.group('month')), int(match.group('day')), clock
        )


class DayMonthYearGrammar(DateGrammar):
    """Textual "D Month Y", e.g. "15 December 2024"."""

    name = "day-month-year"
    SHAPE = re.compile(
        WEEKDAY_PREFIX
        + r'(?P<day>\d{1,2})(?:st|nd|rd|th)?\s+(?:of\s+)?(?P<month>' + MONTH_PATTERN + r')\.?,?\s+(?P<year>\d{4})'
        + TIME_SUFFIX,
        re.IGNORECASE
    )

    def parse(self, text: str, reference_year: int, tz) -> Optional[datetime]:
        match = self.SHAPE.fullmatch(text)
        try:
            clock = _time_of_day(match)
        except ValueError:
            return None
        month = MONTHS[match.group('month').lower()]
        return _localize(tz, int(match.group('year')), month, int(match.group('day')), clock)


class DateparserGrammar(DateGrammar):
    """Enhanced natural-language parsing backed by the dateparser library.

    Only absolute dates with an explicit day and month are accepted;
    relative phrases ("tomorrow", "in 2 weeks") are left alone.
    """

    name = "dateparser"
    SHAPE = re.compile(r'.*\d.*', re.DOTALL)
    HAS_TIME = re.compile(r'\d{1,2}:\d{2}|\b\d{1,2}\s*[ap]\.?m\b|\bnoon\b|\bmidnight\b', re.IGNORECASE)

    def __init__(self, languages: Optional[List[str]] = None, date_order: str = "MDY"):
        self.languages = languages or ["en"]
        self.date_order = date_order

    def parse(self, text: str, reference_year: int, tz) -> Optional[datetime]:
        settings = {
            "PARSERS": ["custom-formats", "absolute-time"],
            "REQUIRE_PARTS": ["day", "month"],
            "DATE_ORDER": self.date_order,
            "RELATIVE_BASE": datetime(reference_year, 1, 1),
        }
        try:
            parsed = dateparser.parse(text, languages=self.languages, settings=settings)
        except Exception:
            logger.debug("dateparser failed on %r", text, exc_info=True)
            return None
        if parsed is None:
            return None
        if not self.HAS_TIME.search(text):
            parsed = parsed.replace(hour=NOON[0], minute=NOON[1], second=0, microsecond=0)
        if parsed.tzinfo is None:
            parsed = tz.localize(parsed)
        return parsed


def default_grammars() -> List[DateGrammar]:
    """The regex grammar chain, in priority order."""
    return [
        NativeTimestampGrammar(),
        NumericSlashGrammar(),
        MonthDayYearGrammar(),
        IsoDateGrammar(),
        DayMonthYearGrammar(),
    ]


class DateParser:
    """Parses date substrings by walking a chain of grammars."""

    def __init__(self, timezone_str: str = "UTC", enhanced: bool = False,
                 grammars: Optional[Iterable[DateGrammar]] = None):
        """Initialize the parser.

        Args:
            timezone_str: Zone used for dates without an explicit offset
            enhanced: Put a DateparserGrammar at the head of the chain
            grammars: Replace the default regex chain (advanced use)
        """
        self.tz = pytz.timezone(timezone_str)
        self.grammars = list(grammars) if grammars is not None else default_grammars()
        if enhanced:
            self.insert_grammar(DateparserGrammar())

    def insert_grammar(self, grammar: DateGrammar, index: int = 0):
        """Add a grammar to the chain (at the head by default)."""
        self.grammars.insert(index, grammar)

    def parse(self, candidate: str, reference_year: Optional[int] = None) -> Optional[datetime]:
        """Parse a candidate date string.

        Args:
            candidate: Date substring, e.g. "December 15, 2024"
            reference_year: Year for dates written without one (default: this year)

        Returns:
            Aware datetime with a year in [2000, 2100), or None
        """
        if not candidate or not isinstance(candidate, str):
            return None
        text = re.sub(r'\s+', ' ', candidate).strip().rstrip('.,;:')
        if not text:
            return None
        if reference_year is None:
            reference_year = date.today().year

        for grammar in self.grammars:
            if not grammar.matches(text):
                continue
            parsed = grammar.parse(text, reference_year, self.tz)
            if parsed is None:
                continue
            if not MIN_YEAR <= parsed.year < MAX_YEAR:
                logger.debug("Rejected %r: year %d outside [%d, %d)", text, parsed.year, MIN_YEAR, MAX_YEAR)
                continue
            return parsed

        logger.debug("Could not parse date from %r", text)
        return None


_default_parser = DateParser()


def parse_date(candidate: str, reference_year: Optional[int] = None) -> Optional[datetime]:
    """Parse with the default UTC regex chain. See DateParser.parse."""
    return _default_parser.parse(candidate, reference_year)
