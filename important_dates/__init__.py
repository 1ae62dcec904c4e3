"""Extract deduplicated, date-ordered important course dates from syllabi and assignment records."""

from .config import ExtractorConfig
from .date_parser import DateParser, parse_date
from .extractor import ImportantDateExtractor, extract_important_dates, filter_completed
from .finalizer import finalize
from .models import ImportantDateEvent, RawSource, StructuredDateRecord
from .validation import validate_events

__all__ = [
    "DateParser",
    "ExtractorConfig",
    "ImportantDateEvent",
    "ImportantDateExtractor",
    "RawSource",
    "StructuredDateRecord",
    "extract_important_dates",
    "filter_completed",
    "finalize",
    "parse_date",
    "validate_events",
]
