"""
Keyword-gated line scanning.

Splits course text into lines (or sentences) and flags the ones that mention
a domain keyword. Only flagged lines go through the contextual patterns;
the rest of the text is only looked at by the generic fallback tier.
"""

import re
from dataclasses import dataclass
from typing import List

# Matched as case-insensitive substrings, so "lab" also hits "labs" and "syllabus"
KEYWORDS = (
    # Exams and assessments
    'final exam', 'midterm exam', 'exam', 'test', 'quiz', 'final', 'midterm',
    'assessment', 'examination', 'proctored exam',
    # Assignments and projects
    'assignment', 'homework', 'hw', 'project', 'paper', 'essay', 'report',
    'due date', 'due', 'deadline', 'submission',
    # Presentations and activities
    'presentation', 'present', 'demo', 'demonstration',
    # Other important dates
    'lab', 'laboratory', 'workshop', 'discussion', 'recitation',
    'drop date', 'drop', 'withdrawal', 'add/drop', 'registration',
    'holiday', 'no class', 'class cancelled', 'break',
)

# PDF text is only split on line breaks; HTML text also on sentence ends
PDF_SPLIT = re.compile(r'[\r\n]+')
HTML_SPLIT = re.compile(
    r'[\r\n]+|(?<=[.!?])(?<!\b(?:jan|feb|mar|apr|jun|jul|aug|sep|oct|nov|dec)\.)(?<!\bsept\.)\s+',
    re.IGNORECASE
)


@dataclass
class Line:
    """One line or sentence of the source text."""
    content: str
    has_keyword: bool
    offset: int = 0     # Character offset of the line in the source text


def has_keyword(text: str) -> bool:
    """Check if text mentions any domain keyword."""
    lowered = text.lower()
    return any(keyword in lowered for keyword in KEYWORDS)


def split_lines(text: str, is_pdf: bool = False) -> List[tuple]:
    """Split text into (offset, segment) pairs.

    Args:
        text: Source text
        is_pdf: True for PDF-extracted text (newline splitting only)

    Returns:
        List of (offset, segment) for every non-blank segment
    """
    splitter = PDF_SPLIT if is_pdf else HTML_SPLIT
    segments = []
    start = 0
    for match in splitter.finditer(text):
        segments.append((start, text[start:match.start()]))
        start = match.end()
    segments.append((start, text[start:]))
    return [(offset, segment) for offset, segment in segments if segment.strip()]


def scan(text: str, is_pdf: bool = False) -> List[Line]:
    """Split text into lines and flag the ones containing a keyword."""
    if not text:
        return []
    return [
        Line(content=segment, has_keyword=has_keyword(segment), offset=offset)
        for offset, segment in split_lines(text, is_pdf)
    ]
