"""
Structured record normalization.

Converts assignment records that already carry machine-readable timestamps
(due_at / unlock_at / lock_at) straight into ImportantDateEvents, without
any text scanning.
"""

import logging
from typing import Iterable, List, Optional

from .config import ExtractorConfig
from .date_parser import DateParser
from .models import (
    ImportantDateEvent, StructuredDateRecord,
    serialize_timestamp, strip_html, truncate
)

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Assignment"


class RecordNormalizer:
    """Turns StructuredDateRecords into events."""

    def __init__(self, parser: Optional[DateParser] = None, config: Optional[ExtractorConfig] = None):
        self.config = config or ExtractorConfig()
        self.parser = parser or DateParser(timezone_str=self.config.timezone)

    def normalize(self, records: Iterable[StructuredDateRecord]) -> List[ImportantDateEvent]:
        """Normalize a batch of records.

        Args:
            records: Structured records

        Returns:
            Events in record order (due, available, locked per record)
        """
        events = []
        for record in records:
            events.extend(self.normalize_record(record))
        return events

    def normalize_record(self, record: StructuredDateRecord) -> List[ImportantDateEvent]:
        """Emit up to three events for one record.

        Each date field is validated on its own; a bad unlock_at does not
        drop a good due_at.
        """
        name = record.name or DEFAULT_NAME
        description_limit = self.config.description_limit
        events = []

        due = self._parse_field(record, "due_at", record.due_at)
        if due is not None:
            long_description = truncate(strip_html(record.description), description_limit)
            events.append(self._event(
                record, due,
                title=name,
                description=long_description or truncate(record.name or "Assignment due date", description_limit),
                raw_text=f"Assignment: {record.name} due: {record.due_at}",
                kind="due",
            ))
            logger.debug("Due date: %r on %s", record.name, due.date())

        unlock = self._parse_field(record, "unlock_at", record.unlock_at)
        if unlock is not None:
            events.append(self._event(
                record, unlock,
                title=f"{name} - Available",
                description="Assignment becomes available",
                raw_text=f"Assignment available: {record.unlock_at}",
                kind="available",
            ))

        lock = self._parse_field(record, "lock_at", record.lock_at)
        if lock is not None:
            events.append(self._event(
                record, lock,
                title=f"{name} - Locked",
                description="Assignment locks",
                raw_text=f"Assignment locks: {record.lock_at}",
                kind="locked",
            ))

        return events

    def _parse_field(self, record: StructuredDateRecord, field_name: str, value: Optional[str]):
        if not value:
            return None
        parsed = self.parser.parse(value, self.config.reference_year)
        if parsed is None:
            logger.debug("Invalid %s for %r: %r", field_name, record.name, value)
        return parsed

    def _event(self, record: StructuredDateRecord, when, title: str, description: str,
               raw_text: str, kind: str) -> ImportantDateEvent:
        return ImportantDateEvent(
            course=(record.course_name or "").strip(),
            date=serialize_timestamp(when),
            title=title,
            description=truncate(description, self.config.description_limit),
            raw_text=truncate(raw_text, self.config.raw_text_limit),
            assignment_id=record.assignment_id,
            course_id=record.course_id,
            kind=kind,
        )
