"""
Deduplication and ordering of extracted events.
"""

from typing import Iterable, List

from .models import ImportantDateEvent


def remove_duplicates(events: Iterable[ImportantDateEvent]) -> List[ImportantDateEvent]:
    """Collapse events sharing (course, date, title); the first one seen wins."""
    seen = set()
    unique = []
    for event in events:
        if event.key in seen:
            continue
        seen.add(event.key)
        unique.append(event)
    return unique


def finalize(events: Iterable[ImportantDateEvent]) -> List[ImportantDateEvent]:
    """Deduplicate, then sort ascending by date.

    Events must already be validated (see validation.validate_events).
    Python's sort is stable, so events with equal timestamps keep their
    relative input order.

    Args:
        events: Events from any number of courses

    Returns:
        New list; the input is not modified
    """
    return sorted(remove_duplicates(events), key=lambda event: event.timestamp)
