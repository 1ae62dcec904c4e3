"""
Data models for the important-date extractor.

This module defines the data structures that flow through the extraction
pipeline. All models are plain dataclasses so they can be copied, compared
and serialized without any extra machinery.

These models represent:
- Raw course text handed in by a document collaborator
- Structured assignment records from an LMS API
- Intermediate date candidates found in text
- The final important-date events returned to callers
"""

import re
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bs4 import BeautifulSoup


DEFAULT_TITLE = "Important Date"


@dataclass
class RawSource:
    """Unstructured text for one course.

    The text comes either from an HTML syllabus page or from a PDF that was
    rendered to text. PDF text is noisier, so the scanner treats it
    differently (see scanner.split_lines).
    """
    text: str                   # Full extracted text of the document
    course_name: str            # Label used as ImportantDateEvent.course
    is_pdf: bool = False        # True if the text was extracted from a PDF


@dataclass
class StructuredDateRecord:
    """An assignment-like record that already carries machine-readable dates.

    Each of due_at / unlock_at / lock_at is an ISO 8601 timestamp string or
    None. A record yields up to three events, one per present field.
    """
    course_name: str
    name: Optional[str] = None              # Assignment name, e.g. "HW4"
    due_at: Optional[str] = None            # e.g. "2024-11-01T23:59:00Z"
    unlock_at: Optional[str] = None
    lock_at: Optional[str] = None
    description: Optional[str] = None       # Long description (may contain HTML)
    assignment_id: Optional[str] = None
    course_id: Optional[str] = None

    @classmethod
    def from_api_dict(cls, data: Dict[str, Any], course_name: Optional[str] = None,
                      course_id: Optional[str] = None) -> "StructuredDateRecord":
        """Build a record from an LMS assignment JSON object.

        Args:
            data: Assignment dict with keys like "id", "name", "due_at"
            course_name: Course label; falls back to data["course_name"]
            course_id: Course id; falls back to data["course_id"]

        Returns:
            StructuredDateRecord
        """
        assignment_id = data.get("id", data.get("assignment_id"))
        resolved_course_id = course_id if course_id is not None else data.get("course_id")
        return cls(
            course_name=course_name if course_name is not None else (data.get("course_name") or ""),
            name=data.get("name"),
            due_at=data.get("due_at"),
            unlock_at=data.get("unlock_at"),
            lock_at=data.get("lock_at"),
            description=data.get("description"),
            assignment_id=str(assignment_id) if assignment_id is not None else None,
            course_id=str(resolved_course_id) if resolved_course_id is not None else None,
        )


@dataclass
class Candidate:
    """A date-bearing match found in text, before it becomes an event."""
    course_name: str
    raw_match_text: str         # Full regex match (Tier 1) or the date token (Tier 2)
    context_window: str         # Text used for title/description
    date_text: str              # Substring that was sent to the date parser
    parsed_date: Optional[datetime] = None
    tier: int = 1               # 1 = contextual keyword pattern, 2 = generic date token
    has_keyword: bool = True    # Whether the context mentions a domain keyword


@dataclass
class ImportantDateEvent:
    """A calendar-worthy date for one course.

    `date` is always a UTC ISO 8601 string with millisecond precision,
    e.g. "2024-12-15T12:00:00.000Z".
    """
    course: str
    date: str
    title: str = DEFAULT_TITLE
    description: str = ""
    raw_text: str = ""
    assignment_id: Optional[str] = None
    course_id: Optional[str] = None
    kind: Optional[str] = None  # "due", "available", "locked" for structured records

    @property
    def key(self):
        """Deduplication key."""
        return (self.course, self.date, self.title)

    @property
    def timestamp(self) -> datetime:
        """The event date as an aware datetime."""
        return deserialize_timestamp(self.date)


# Serialization helpers

def serialize_timestamp(dt: datetime) -> str:
    """Convert an aware datetime to a UTC ISO string ending in "Z".

    Naive datetimes are assumed to already be in UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def deserialize_timestamp(s: str) -> datetime:
    """Convert an ISO timestamp string (with or without "Z") to an aware datetime.

    Raises:
        ValueError: if the string is not an ISO timestamp
    """
    value = s.strip()
    if value.endswith("Z") or value.endswith("z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def event_to_dict(event: ImportantDateEvent) -> Dict[str, Any]:
    """Convert an event to a JSON-serializable dict using the public field names."""
    data = asdict(event)
    return {
        "course": data["course"],
        "date": data["date"],
        "title": data["title"],
        "description": data["description"],
        "rawText": data["raw_text"],
        "assignmentId": data["assignment_id"],
        "courseId": data["course_id"],
        "kind": data["kind"],
    }


def event_from_dict(data: Dict[str, Any]) -> ImportantDateEvent:
    """Inverse of event_to_dict."""
    return ImportantDateEvent(
        course=data.get("course", ""),
        date=data.get("date", ""),
        title=data.get("title") or DEFAULT_TITLE,
        description=data.get("description", ""),
        raw_text=data.get("rawText", ""),
        assignment_id=data.get("assignmentId"),
        course_id=data.get("courseId"),
        kind=data.get("kind"),
    )


def truncate(text: Optional[str], limit: int) -> str:
    """Strip and cut text to at most `limit` characters."""
    if not text:
        return ""
    return text.strip()[:limit]


def strip_html(text: Optional[str]) -> str:
    """Reduce an HTML fragment to whitespace-normalized plain text."""
    if not text:
        return ""
    plain = BeautifulSoup(text, "html.parser").get_text(" ")
    return re.sub(r"\s+", " ", plain).strip()
