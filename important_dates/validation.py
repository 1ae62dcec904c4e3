"""
Event validation.

An event is valid when its course label is non-empty after trimming and its
date parses to a timestamp with a year in [2000, 2100).
"""

import logging
from typing import Iterable, List

from .date_parser import MAX_YEAR, MIN_YEAR
from .models import ImportantDateEvent, deserialize_timestamp

logger = logging.getLogger(__name__)


def is_valid_event(event: ImportantDateEvent) -> bool:
    """Check a single event."""
    if not event.course or not event.course.strip():
        return False
    if not event.date:
        return False
    try:
        when = deserialize_timestamp(event.date)
    except (TypeError, ValueError):
        return False
    return MIN_YEAR <= when.year < MAX_YEAR


def validate_events(events: Iterable[ImportantDateEvent]) -> List[ImportantDateEvent]:
    """Drop invalid events, keeping the order of the rest."""
    events = list(events)
    valid = [event for event in events if is_valid_event(event)]
    dropped = len(events) - len(valid)
    if dropped:
        logger.info("Dropped %d invalid event(s) out of %d", dropped, len(events))
    return valid
