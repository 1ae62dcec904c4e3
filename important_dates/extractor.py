"""
Important-date extraction pipeline.

Feeds each course's text through the pattern cascade, each structured
record through the normalizer, then validates, deduplicates and sorts the
merged result. A failure in one course never aborts the others.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from .config import ExtractorConfig
from .date_parser import DateParser
from .finalizer import finalize
from .models import (
    Candidate, ImportantDateEvent, RawSource, StructuredDateRecord,
    serialize_timestamp, truncate
)
from .normalizer import RecordNormalizer
from .patterns import PatternCascade
from .titles import extract_title
from .validation import validate_events

logger = logging.getLogger(__name__)


class ImportantDateExtractor:
    """Extracts important dates from course text and structured records."""

    def __init__(self, config: Optional[ExtractorConfig] = None, parser: Optional[DateParser] = None):
        """Initialize the extractor.

        Args:
            config: Extractor settings (default: ExtractorConfig())
            parser: Date parser shared by all stages (default: built from config)
        """
        self.config = config or ExtractorConfig()
        self.parser = parser or DateParser(
            timezone_str=self.config.timezone,
            enhanced=self.config.use_enhanced_parser
        )
        self.cascade = PatternCascade(self.parser, self.config)
        self.normalizer = RecordNormalizer(self.parser, self.config)

    def extract(self, sources: Iterable[RawSource] = (),
                records: Iterable[StructuredDateRecord] = ()) -> List[ImportantDateEvent]:
        """Run the full pipeline.

        Args:
            sources: One RawSource per course
            records: Structured assignment records

        Returns:
            Validated, deduplicated events sorted by date
        """
        events = []
        events.extend(self.extract_from_records(records))
        events.extend(self.extract_from_sources(sources))
        return finalize(validate_events(events))

    def extract_from_sources(self, sources: Iterable[RawSource]) -> List[ImportantDateEvent]:
        """Extract unvalidated, unsorted events from course text."""
        sources = [source for source in sources if self._has_course(source.course_name)]
        if self.config.fallback_scope == "batch":
            return self._extract_batch(sources)

        events = []
        for source in sources:
            try:
                found = self.find_important_dates(source)
            except Exception:
                logger.exception("Error processing %s", source.course_name)
                continue
            events.extend(found)
        return events

    def extract_from_records(self, records: Iterable[StructuredDateRecord]) -> List[ImportantDateEvent]:
        """Extract unvalidated, unsorted events from structured records."""
        events = []
        for record in records:
            if not self._has_course(record.course_name):
                continue
            try:
                events.extend(self.normalizer.normalize_record(record))
            except Exception:
                logger.exception("Error normalizing record %r for %s", record.name, record.course_name)
        return events

    def find_important_dates(self, source: RawSource) -> List[ImportantDateEvent]:
        """Extract events from one course's text (per-course fallback)."""
        logger.debug("Searching for dates in %s (%d characters)", source.course_name, len(source.text or ""))
        events = self.candidates_to_events(self.cascade.find_candidates(source))
        logger.info("Total dates found for %s: %d", source.course_name, len(events))
        return events

    def candidates_to_events(self, candidates: Iterable[Candidate]) -> List[ImportantDateEvent]:
        """Convert candidates to events, dropping any without a parsed date."""
        return [
            self._candidate_to_event(candidate)
            for candidate in candidates
            if candidate.parsed_date is not None
        ]

    def _extract_batch(self, sources: List[RawSource]) -> List[ImportantDateEvent]:
        # Tier 2 only runs if no course produced a tier 1 candidate
        per_source = []
        for source in sources:
            try:
                per_source.append((source, self.cascade.contextual_candidates(source)))
            except Exception:
                logger.exception("Error processing %s", source.course_name)

        if not any(candidates for _, candidates in per_source):
            logger.debug("No dates found with keyword matching in any course, trying general date patterns")
            fallback = []
            for source, _ in per_source:
                try:
                    fallback.append((source, self.cascade.generic_candidates(source)))
                except Exception:
                    logger.exception("Error processing %s", source.course_name)
            per_source = fallback

        events = []
        for source, candidates in per_source:
            found = self.candidates_to_events(candidates)
            logger.info("Total dates found for %s: %d", source.course_name, len(found))
            events.extend(found)
        return events

    def _candidate_to_event(self, candidate: Candidate) -> ImportantDateEvent:
        date_text = candidate.date_text if candidate.tier == 1 else ""
        return ImportantDateEvent(
            course=candidate.course_name.strip(),
            date=serialize_timestamp(candidate.parsed_date),
            title=extract_title(candidate.context_window, date_text),
            description=truncate(candidate.context_window, self.config.description_limit),
            raw_text=truncate(candidate.context_window, self.config.raw_text_limit),
        )

    @staticmethod
    def _has_course(course_name: Optional[str]) -> bool:
        if course_name and course_name.strip():
            return True
        logger.debug("Skipping input without a course name")
        return False


def extract_important_dates(sources: Iterable[RawSource] = (),
                            records: Iterable[StructuredDateRecord] = (),
                            config: Optional[ExtractorConfig] = None) -> List[ImportantDateEvent]:
    """Convenience wrapper around ImportantDateExtractor.extract."""
    return ImportantDateExtractor(config).extract(sources, records)


def filter_completed(events: Iterable[ImportantDateEvent],
                     completed: Iterable[Tuple[str, str]]) -> List[ImportantDateEvent]:
    """Drop events for work already completed.

    This is a caller-side policy; the extractor never applies it.

    Args:
        events: Events to filter
        completed: (course_id, assignment_id) pairs that are already submitted

    Returns:
        Events whose (course_id, assignment_id) is not in completed
    """
    done = {(str(course_id), str(assignment_id)) for course_id, assignment_id in completed}
    return [
        event for event in events
        if event.assignment_id is None or (event.course_id, event.assignment_id) not in done
    ]
