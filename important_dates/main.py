"""
Main CLI entry point for the important-date extractor.
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

from .config import FALLBACK_SCOPES, ExtractorConfig
from .extractor import ImportantDateExtractor
from .icalendar_gen import ICalendarGenerator
from .models import event_to_dict
from .sources import SourceError, load_records, load_source


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract important course dates from syllabi and assignment records"
    )
    parser.add_argument(
        "--source",
        nargs=2,
        action="append",
        default=[],
        metavar=("COURSE", "PATH"),
        help="Course name and syllabus file (.pdf, .html or text); repeatable"
    )
    parser.add_argument(
        "--records",
        action="append",
        default=[],
        metavar="PATH",
        help="JSON file with a list of assignment records; repeatable"
    )
    parser.add_argument("--ics", type=str, help="Write events to this .ics file")
    parser.add_argument("--json", type=str, help="Write events to this JSON file")
    parser.add_argument("--timezone", type=str, help="Timezone for dates without an offset (default: UTC)")
    parser.add_argument(
        "--reference-date",
        type=date.fromisoformat,
        help="Date used for year-less dates and the fallback year window (YYYY-MM-DD, default: today)"
    )
    parser.add_argument(
        "--enhanced",
        action="store_true",
        default=None,
        help="Try the dateparser library before the built-in formats"
    )
    parser.add_argument(
        "--fallback-scope",
        choices=FALLBACK_SCOPES,
        help="Run generic date patterns per course (default) or only if the whole batch found nothing"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logging")
    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if not args.source and not args.records:
        print("Error: provide at least one --source or --records")
        sys.exit(1)

    try:
        config = ExtractorConfig.from_env().with_overrides(
            timezone=args.timezone,
            reference_date=args.reference_date,
            use_enhanced_parser=args.enhanced,
            fallback_scope=args.fallback_scope,
        )
    except ValueError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    try:
        sources = [load_source(course, path) for course, path in args.source]
        records = []
        for records_path in args.records:
            records.extend(load_records(records_path))
    except SourceError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    extractor = ImportantDateExtractor(config)
    events = extractor.extract(sources, records)

    if not events:
        print("No important dates found.")
        return

    print(f"\nFound {len(events)} important date(s):")
    for event in events:
        print(f"  {event.date[:10]}  {event.course} - {event.title}")

    if args.json:
        json_path = Path(args.json)
        with open(json_path, 'w') as f:
            json.dump([event_to_dict(event) for event in events], f, indent=2)
        print(f"Saved events to: {json_path}")

    if args.ics:
        cal_gen = ICalendarGenerator(timezone_str=config.timezone)
        calendar = cal_gen.generate_calendar(events)
        cal_gen.export_to_file(calendar, args.ics)
        print(f"Saved calendar to: {args.ics}")


if __name__ == "__main__":
    main()
