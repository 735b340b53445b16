"""Parser to turn extracted schedule text into busy markers."""

from abc import ABC, abstractmethod
from typing import List, Optional

from .cell_classifier import CellClassifier
from .config import ParserSettings, get_settings
from .logging import get_logger
from .models import BusyMarker, Weekday
from .table_detector import HeaderRow, TableDetector
from .utils import (
    COURSE_CODE_PATTERN,
    LOOSE_DAY_PATTERN,
    STRICT_TIME_PATTERN,
    find_day_names,
    match_canonical_slot,
    merge_duplicate_markers,
)


def split_lines(text: str) -> List[str]:
    """Split extracted text into its non-empty lines."""
    return [line for line in (text or '').split('\n') if line.strip()]


class ScheduleParser(ABC):
    """Produces busy markers from the lines of one document."""

    @abstractmethod
    def parse(self, lines: List[str], source: str = "") -> List[BusyMarker]:
        """
        Parse document lines.

        Args:
            lines: Non-empty lines of extracted text
            source: Identifier recorded on every marker

        Returns:
            Deduplicated busy markers
        """


class TableScheduleParser(ScheduleParser):
    """Reads a timetable laid out as a day-column header plus time rows."""

    def __init__(
        self,
        header: HeaderRow,
        detector: TableDetector,
        classifier: CellClassifier,
        logger=None,
    ):
        self.header = header
        self.detector = detector
        self.classifier = classifier
        self.log = logger or get_logger(__name__)

    def parse(self, lines: List[str], source: str = "") -> List[BusyMarker]:
        markers: List[BusyMarker] = []

        for row in self.detector.find_time_rows(lines, self.header):
            content = self.classifier.build_row_content(lines, row)
            for day in self.classifier.classify_row(content, self.header.days):
                markers.append(BusyMarker(day=day.value, time=row.slot.label, source=source))

        return merge_duplicate_markers(markers)


class FallbackScheduleParser(ScheduleParser):
    """
    Loose co-occurrence parser for text without a recognizable header.

    A line holding a canonical start time marks that slot busy on every day
    named in its context window, provided the window also holds something
    shaped like a course code. Course codes are not paired with days.
    """

    def __init__(self, settings: Optional[ParserSettings] = None, logger=None):
        self.settings = settings or get_settings()
        self.log = logger or get_logger(__name__)

    def parse(self, lines: List[str], source: str = "") -> List[BusyMarker]:
        self.log.info("fallback_parsing_started", lines=len(lines))
        markers: List[BusyMarker] = []

        for idx, line in enumerate(lines):
            slot = match_canonical_slot(line, STRICT_TIME_PATTERN)
            if slot is None:
                continue

            context = ' '.join(lines[idx:idx + self.settings.fallback_context_lines])
            days = [day for day, _ in find_day_names(context, LOOSE_DAY_PATTERN)]
            courses = COURSE_CODE_PATTERN.findall(context)

            self.log.debug(
                "fallback_time_found",
                line_index=idx,
                slot=slot.label,
                days=len(days),
                courses=len(courses),
            )

            if not days or not courses:
                continue

            for day in days:
                markers.append(BusyMarker(day=day.value, time=slot.label, source=source))
                self.log.debug("fallback_busy", day=day.value, slot=slot.label)

        markers = merge_duplicate_markers(markers)
        self.log.info("fallback_parsing_complete", busy_slots=len(markers))
        return markers


class TimetableParser:
    """Parses extracted text, choosing the table or fallback strategy per document."""

    def __init__(self, settings: Optional[ParserSettings] = None, logger=None):
        """
        Initialize the parser.

        Args:
            settings: Heuristic thresholds (defaults to the process settings)
            logger: Structured logger receiving diagnostics
        """
        self.settings = settings or get_settings()
        self.log = logger or get_logger(__name__)
        self.detector = TableDetector(settings=self.settings, logger=self.log)
        self.classifier = CellClassifier(
            detector=self.detector, settings=self.settings, logger=self.log
        )
        self.fallback = FallbackScheduleParser(settings=self.settings, logger=self.log)

    def select_parser(self, lines: List[str]) -> ScheduleParser:
        """Pick the table parser when a header row exists, else the fallback."""
        header = self.detector.find_header(lines)
        if header is None:
            return self.fallback
        return TableScheduleParser(header, self.detector, self.classifier, logger=self.log)

    def parse_text(self, text: str, source: str = "") -> List[BusyMarker]:
        """
        Parse extracted text into busy markers.

        Parsing never fails: a document nothing could be read from yields an
        empty list and still counts as a (fully free) source.

        Args:
            text: Newline-delimited extracted text
            source: Identifier recorded on every marker

        Returns:
            Deduplicated busy markers for the document
        """
        lines = split_lines(text)
        self.log.info("parsing_document", source=source, chars=len(text or ''), lines=len(lines))

        markers = self.select_parser(lines).parse(lines, source)

        if not markers:
            self.log.warning("no_busy_slots", source=source, hint="possible OCR issue")
        else:
            by_day = {day.value: 0 for day in Weekday}
            for marker in markers:
                by_day[marker.day] += 1
            self.log.info("parsing_complete", source=source, busy_slots=len(markers), by_day=by_day)

        return markers
