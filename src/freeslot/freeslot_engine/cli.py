"""Command-line interface for schedule analysis."""

import argparse
import sys
from typing import List, Optional

from .catalog import CourseCatalog
from .config import get_settings
from .errors import FreeslotError
from .labs import LabAvailability
from .logging import get_logger, setup_logging
from .main import analyze_documents, analyze_friends, load_upload, save_to_json
from .models import AnalysisResult, Enrollment, Friend


def parse_friend(value: str) -> Friend:
    """
    Parse a friend given as 'Name:COURSE-SECTION,COURSE-SECTION'.

    The section is whatever follows the last hyphen of each course.

    Raises:
        argparse.ArgumentTypeError: If the value is malformed
    """
    name, sep, courses = value.partition(':')
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Expected NAME:COURSE-SECTION[,...], got {value!r}")

    friend = Friend(name=name.strip())
    for item in filter(None, (c.strip() for c in courses.split(','))):
        course, dash, section = item.rpartition('-')
        if not dash or not course or not section:
            raise argparse.ArgumentTypeError(f"Expected COURSE-SECTION, got {item!r}")
        friend.courses.append(Enrollment(course=course, section=section))
    return friend


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='freeslot',
        description='Find common free class slots across weekly schedules.',
    )
    parser.add_argument('--output', help='Write the analysis result to this JSON file')
    parser.add_argument('--labs', help='Lab availability table (JSON) to match against free slots')
    parser.add_argument('--json-logs', action='store_true', help='Emit JSON log lines')
    parser.add_argument('--log-level', default=None, help='DEBUG, INFO, WARNING, ERROR')

    sub = parser.add_subparsers(dest='command', required=True)

    docs = sub.add_parser('documents', help='Analyze schedule images or PDFs')
    docs.add_argument('files', nargs='+', help='Schedule files (PNG, JPG, PDF, ...)')

    friends = sub.add_parser('friends', help='Analyze friends via the course catalog')
    friends.add_argument('--catalog', required=True, help='Course catalog JSON file')
    friends.add_argument(
        '--friend',
        dest='friends',
        action='append',
        type=parse_friend,
        required=True,
        help="Friend as 'Name:CSE421-07,MAT110-1' (repeatable)",
    )

    return parser


def print_summary(result: AnalysisResult) -> None:
    """Print free slots grouped by day."""
    print(f"Sources analyzed: {len(result.sources)}")
    print(f"Free slots: {len(result.free_slots)}")

    by_day = {}
    for ref in result.free_slots:
        by_day.setdefault(ref.day, []).append(ref.time)

    for day, times in by_day.items():
        print(f"\n{day}:")
        for time in times:
            print(f"  - {time}")

    if not any(source.busy_slots for source in result.sources):
        print("\nNo busy slots were found; the schedules may not have been read correctly.")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for command-line execution."""
    args = build_parser().parse_args(argv)
    settings = get_settings()

    setup_logging(
        json_output=args.json_logs or settings.log_json,
        log_level=args.log_level or settings.log_level,
    )
    log = get_logger(__name__)

    try:
        if args.command == 'documents':
            uploads = [load_upload(path) for path in args.files]
            result = analyze_documents(uploads, settings=settings)
        else:
            catalog = CourseCatalog.from_json(args.catalog)
            result = analyze_friends(args.friends, catalog)

        extra = None
        if args.labs:
            labs = LabAvailability.from_json(args.labs)
            extra = {'availableLabs': labs.available_labs(result.free_slots)}

    except FreeslotError as e:
        log.error("analysis_failed", error=str(e))
        return 1

    print_summary(result)
    if args.output:
        save_to_json(result, args.output, extra=extra)

    return 0


if __name__ == '__main__':
    sys.exit(main())
