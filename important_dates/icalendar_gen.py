"""
iCalendar generation module.

Generates standards-compliant .ics files from extracted important dates.
"""

import uuid
from datetime import datetime, timedelta
from typing import List

import pytz
from icalendar import Calendar, Event

from .models import ImportantDateEvent, deserialize_timestamp

DESCRIPTION_LIMIT = 500
EVENT_DURATION = timedelta(hours=2)


class ICalendarGenerator:
    """Generates iCalendar (.ics) files from important-date events."""

    def __init__(self, timezone_str: str = "UTC"):
        """Initialize calendar generator.

        Args:
            timezone_str: Zone the event times are written in (default: UTC)
        """
        self.tz = pytz.timezone(timezone_str)

    def generate_calendar(self, events: List[ImportantDateEvent]) -> Calendar:
        """Generate a calendar with one VEVENT per important date.

        Events whose date cannot be parsed are skipped.

        Args:
            events: Finalized events

        Returns:
            Calendar object ready for export
        """
        cal = Calendar()
        cal.add('prodid', '-//Important Dates Extractor//EN')
        cal.add('version', '2.0')
        cal.add('calscale', 'GREGORIAN')
        cal.add('method', 'PUBLISH')

        stamp = datetime.now(pytz.utc)
        for event in events:
            try:
                start = deserialize_timestamp(event.date)
            except (TypeError, ValueError):
                continue
            cal.add_component(self._create_event(event, start, stamp))

        return cal

    def _create_event(self, event: ImportantDateEvent, start: datetime, stamp: datetime) -> Event:
        """Create a two-hour event for one important date."""
        start = start.astimezone(self.tz)

        vevent = Event()
        vevent.add('uid', f"{uuid.uuid4()}@important-dates")
        vevent.add('dtstamp', stamp)
        vevent.add('dtstart', start)
        vevent.add('dtend', start + EVENT_DURATION)
        vevent.add('summary', self.summary(event))
        vevent.add('description', self.description(event))
        vevent.add('status', 'CONFIRMED')
        vevent.add('sequence', 0)
        return vevent

    @staticmethod
    def summary(event: ImportantDateEvent) -> str:
        return f"{event.course} - {event.title}" if event.title else event.course

    @staticmethod
    def description(event: ImportantDateEvent) -> str:
        text = event.description or event.raw_text or f"Important date for {event.course}"
        return text[:DESCRIPTION_LIMIT]

    def export_to_file(self, calendar: Calendar, filepath: str):
        """Export calendar to .ics file.

        Args:
            calendar: Calendar object
            filepath: Path to output file
        """
        with open(filepath, 'wb') as f:
            f.write(calendar.to_ical())
