"""
Title extraction for date events.

Derives a short label such as "3" (from "Assignment 3 - 10/20/2024") or
"Exam" (from "Final Exam: December 15, 2024"), falling back to the bare
keyword and finally to "Important Date".
"""

import re

from .models import DEFAULT_TITLE

TITLE_KEYWORDS = (
    r'final|midterm|exam|test|quiz|assignment|homework|hw|project|paper|essay|'
    r'report|presentation|due|deadline'
)

# Keyword followed by a short qualifier, ending at a separator or end of text
QUALIFIER_PATTERN = re.compile(
    r'(?:' + TITLE_KEYWORDS + r')\s+(\d+|[\w\s]+?)(?:\s*[-–:]|$)',
    re.IGNORECASE
)
KEYWORD_PATTERN = re.compile(r'(' + TITLE_KEYWORDS + r')', re.IGNORECASE)
BARE_KEYWORD = re.compile(r'(?:' + TITLE_KEYWORDS + r')', re.IGNORECASE)

# Separators left over between a label and its date, e.g. "due:" or "Lab 2 -"
TRAILING_SEPARATORS = re.compile(r'[\s\-–:,;]+$')

MAX_PREFIX_LENGTH = 50


def _clean(text: str) -> str:
    return TRAILING_SEPARATORS.sub('', re.sub(r'\s+', ' ', text).strip())


def extract_title(text: str, date_text: str = "") -> str:
    """Derive a human-readable title for a date found in text.

    Priority:
    1. The qualifier after a keyword ("Assignment 3" -> "3", "Final Exam:" -> "Exam")
    2. The text before date_text without trailing separators, if it is
       1-49 characters long and not just a keyword
    3. The capitalized keyword itself
    4. "Important Date"

    Args:
        text: Line, match or context window containing the date
        date_text: The date substring, if known

    Returns:
        Title string (never empty)
    """
    if not text:
        return DEFAULT_TITLE

    date_text = re.sub(r'\s+', ' ', date_text or '').strip()

    match = QUALIFIER_PATTERN.search(text)
    if match:
        qualifier = re.sub(r'\s+', ' ', match.group(1)).strip()
        if date_text and date_text in qualifier:
            qualifier = _clean(qualifier.split(date_text, 1)[0])
        if 0 < len(qualifier) < MAX_PREFIX_LENGTH:
            return qualifier

    if date_text and date_text in re.sub(r'\s+', ' ', text):
        before = _clean(re.sub(r'\s+', ' ', text).split(date_text, 1)[0])
        # A bare keyword ("due:") is handled by the keyword tier below
        if 0 < len(before) < MAX_PREFIX_LENGTH and not BARE_KEYWORD.fullmatch(before):
            return before

    match = KEYWORD_PATTERN.search(text)
    if match:
        keyword = match.group(1)
        return keyword[0].upper() + keyword[1:]

    return DEFAULT_TITLE
