"""
Pattern cascade for finding dates in course text.

Two tiers of regular expressions are applied to each course's text:

1. Contextual patterns pair a keyword (exam, assignment, due, ...) with an
   adjacent date token. They only run on keyword-flagged lines.
2. Generic patterns match bare date tokens anywhere in the text. They only
   run when tier 1 found nothing, and only keep dates within a few years of
   the reference date.

Within a tier every pattern is applied and the results are unioned.
"""

import logging
import re
from typing import List, Optional

from .config import ExtractorConfig
from .date_parser import DateParser
from .models import Candidate, RawSource
from .scanner import Line, has_keyword, scan

logger = logging.getLogger(__name__)

TEXT_DATE = r'[A-Za-z]+\s+\d{1,2},?\s+\d{4}'
SLASH_DATE = r'\d{1,2}/\d{1,2}/\d{2,4}'

CONTEXTUAL_PATTERNS = [
    # Exams: "Final Exam: December 15, 2024"
    re.compile(r'(?:final|midterm|exam|test|quiz)\s+(?:exam|test|quiz)?\s*:?\s*(' + TEXT_DATE + r')', re.IGNORECASE),
    # Exams: "Exam 1 - 10/20/2024"
    re.compile(r'(?:exam|test|final|midterm|quiz)\s+\d*\s*[-–]\s*(' + SLASH_DATE + r')', re.IGNORECASE),
    # Dates before exams: "12/15/2024 - Final Exam"
    re.compile(r'(' + SLASH_DATE + r')\s*[-–]\s*(?:final|exam|test|midterm|quiz)', re.IGNORECASE),
    # Assignments: "Assignment 1 due: December 15, 2024"
    re.compile(
        r'(?:assignment|homework|hw|project|paper|essay|report)\s+\d*\s*(?:due|deadline)?\s*:?\s*(' + TEXT_DATE + r')',
        re.IGNORECASE
    ),
    # Assignments: "Assignment 1 - 10/20/2024"
    re.compile(r'(?:assignment|homework|hw|project|paper|essay|report)\s+\d*\s*[-–]\s*(' + SLASH_DATE + r')', re.IGNORECASE),
    # Due dates: "Due: December 15, 2024" or "Deadline: 10/20/2024"
    re.compile(r'(?:due|deadline|submission)\s*:?\s*(' + TEXT_DATE + r'|' + SLASH_DATE + r')', re.IGNORECASE),
    # Presentations: "Presentation: December 15, 2024"
    re.compile(r'(?:presentation|present|demo|demonstration)\s*:?\s*(' + TEXT_DATE + r'|' + SLASH_DATE + r')', re.IGNORECASE),
    # Dates before assignments: "12/15/2024 - Assignment 1"
    re.compile(r'(' + SLASH_DATE + r')\s*[-–]\s*(?:assignment|homework|hw|project|paper|essay|report)', re.IGNORECASE),
    # Other dates: "Last day to drop: November 4, 2024", "Holiday - 11/28/2024"
    re.compile(
        r'(?:drop|withdrawal|registration|holiday|break|no class|class cancelled|lab|workshop)'
        r'[^\n.]{0,30}?[:\-–]\s*(' + TEXT_DATE + r'|' + SLASH_DATE + r')',
        re.IGNORECASE
    ),
    # Keyword anywhere before a "Month D" date, year optional
    re.compile(
        r'(?:final|exam|test|midterm|quiz|assignment|homework|hw|project|paper|essay|report|presentation|due|deadline)'
        r'.*?([A-Za-z]+\s+\d{1,2}(?:,?\s+\d{4})?)',
        re.IGNORECASE
    ),
]

GENERIC_PATTERNS = [
    # MM/DD/YYYY or MM/DD/YY
    re.compile(r'\b(\d{1,2}/\d{1,2}/\d{2,4})\b'),
    # Month DD, YYYY
    re.compile(r'\b([A-Za-z]+\s+\d{1,2},?\s+\d{4})\b'),
    # DD Month YYYY
    re.compile(r'\b(\d{1,2}\s+[A-Za-z]+\s+\d{4})\b'),
    # YYYY-MM-DD
    re.compile(r'\b(\d{4}-\d{1,2}-\d{1,2})\b'),
]


class PatternCascade:
    """Finds date candidates in one course's text."""

    def __init__(self, parser: Optional[DateParser] = None, config: Optional[ExtractorConfig] = None):
        """Initialize the cascade.

        Args:
            parser: Date parser to use (default: built from config)
            config: Extractor settings (default: ExtractorConfig())
        """
        self.config = config or ExtractorConfig()
        self.parser = parser or DateParser(
            timezone_str=self.config.timezone,
            enhanced=self.config.use_enhanced_parser
        )

    def has_content(self, source: RawSource) -> bool:
        return bool(source.text) and len(source.text.strip()) >= self.config.min_text_length

    def find_candidates(self, source: RawSource) -> List[Candidate]:
        """Run tier 1, falling back to tier 2 only if tier 1 found nothing.

        Args:
            source: Course text

        Returns:
            Candidates with a parsed date (possibly empty)
        """
        if not self.has_content(source):
            logger.debug("Text too short (%d chars) for %s", len(source.text or ""), source.course_name)
            return []

        candidates = self.contextual_candidates(source)
        if candidates:
            return candidates

        logger.debug("No dates found with keyword matching for %s, trying general date patterns",
                     source.course_name)
        return self.generic_candidates(source)

    def contextual_candidates(self, source: RawSource, lines: Optional[List[Line]] = None) -> List[Candidate]:
        """Tier 1: keyword patterns on keyword-flagged lines."""
        if not self.has_content(source):
            return []
        if lines is None:
            lines = scan(source.text, source.is_pdf)

        reference_year = self.config.reference_year
        candidates = []
        for line in lines:
            if not line.has_keyword:
                continue
            for pattern in CONTEXTUAL_PATTERNS:
                for match in pattern.finditer(line.content):
                    date_text = match.group(1) or match.group(0)
                    parsed = self.parser.parse(date_text, reference_year)
                    if parsed is None:
                        logger.debug("Could not parse date from: %r", match.group(0))
                        continue
                    candidates.append(Candidate(
                        course_name=source.course_name,
                        raw_match_text=match.group(0),
                        context_window=match.group(0),
                        date_text=date_text,
                        parsed_date=parsed,
                        tier=1,
                        has_keyword=True,
                    ))
                    logger.debug("Found date %s in %r", parsed.date(), match.group(0))
        return candidates

    def generic_candidates(self, source: RawSource) -> List[Candidate]:
        """Tier 2: bare date tokens anywhere in the text, near the reference year only.

        Candidates whose context mentions a keyword are ordered first.
        """
        if not self.has_content(source):
            return []

        text = source.text
        radius = self.config.context_radius
        reference_year = self.config.reference_year
        candidates = []
        for pattern in GENERIC_PATTERNS:
            for match in pattern.finditer(text):
                date_text = match.group(1)
                parsed = self.parser.parse(date_text, reference_year)
                if parsed is None:
                    continue
                if abs(parsed.year - reference_year) > self.config.year_window:
                    logger.debug("Skipping %r: year %d too far from %d", date_text, parsed.year, reference_year)
                    continue
                context = text[max(0, match.start() - radius):min(len(text), match.end() + radius)]
                candidates.append(Candidate(
                    course_name=source.course_name,
                    raw_match_text=match.group(0),
                    context_window=context,
                    date_text=date_text,
                    parsed_date=parsed,
                    tier=2,
                    has_keyword=has_keyword(context),
                ))
                logger.debug("Found date (general pattern) %s in context %r", parsed.date(), context[:50])

        # sorted() is stable, so order within each group is kept
        return sorted(candidates, key=lambda c: not c.has_keyword)
