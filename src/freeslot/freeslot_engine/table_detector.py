"""Table structure detection over extracted schedule text."""

from dataclasses import dataclass, field
from typing import List, Optional

from .config import ParserSettings, get_settings
from .logging import get_logger
from .models import CANONICAL_SLOTS, TimeSlot, Weekday
from .utils import TIME_PATTERN, count_day_names, find_day_names, match_canonical_slot


@dataclass
class HeaderRow:
    """The line naming the day columns of a timetable."""
    line_index: int
    text: str
    days: List[Weekday] = field(default_factory=list)


@dataclass
class TimeRow:
    """A line anchored to one canonical time slot."""
    line_index: int
    slot: TimeSlot
    text: str


class TableDetector:
    """Locates the day-column header and the time-anchor rows of a timetable."""

    def __init__(self, settings: Optional[ParserSettings] = None, logger=None):
        """
        Initialize table detector.

        Args:
            settings: Heuristic thresholds (defaults to the process settings)
            logger: Structured logger receiving diagnostics
        """
        self.settings = settings or get_settings()
        self.log = logger or get_logger(__name__)

    def find_header(self, lines: List[str]) -> Optional[HeaderRow]:
        """
        Find the header row with day names.

        Only the first ``header_search_lines`` lines are scanned; the first line
        with at least ``header_min_days`` whole-word day names wins.

        Args:
            lines: Non-empty lines of extracted text

        Returns:
            HeaderRow with day columns in order of appearance, or None
        """
        window = lines[:self.settings.header_search_lines]

        for idx, line in enumerate(window):
            matches = find_day_names(line)
            if len(matches) < self.settings.header_min_days:
                continue

            days: List[Weekday] = []
            for day, _ in matches:
                if day not in days:
                    days.append(day)

            self.log.info(
                "header_found",
                line_index=idx,
                line=line,
                days=[d.value for d in days],
            )
            return HeaderRow(line_index=idx, text=line, days=days)

        self.log.info("header_not_found", lines_scanned=len(window))
        return None

    def find_time_rows(
        self,
        lines: List[str],
        header: HeaderRow,
        slots=CANONICAL_SLOTS,
    ) -> List[TimeRow]:
        """
        Find lines after the header that start a canonical time slot.

        Args:
            lines: Non-empty lines of extracted text
            header: Detected header row
            slots: Canonical slots in priority order

        Returns:
            List of TimeRow objects in line order
        """
        rows: List[TimeRow] = []

        for idx in range(header.line_index + 1, len(lines)):
            line = lines[idx]
            slot = match_canonical_slot(line, TIME_PATTERN, slots)
            if slot is None:
                continue

            rows.append(TimeRow(line_index=idx, slot=slot, text=line))
            self.log.debug("time_row_found", line_index=idx, slot=slot.label, line=line[:100])

        self.log.info("time_rows_detected", count=len(rows))
        return rows

    def is_row_boundary(self, line: str) -> bool:
        """
        Check whether a line ends the continuation of a time row.

        A new time anchor or a header-like line (several day names) starts a
        different part of the table.
        """
        if TIME_PATTERN.search(line):
            return True
        return count_day_names(line) >= self.settings.header_like_min_days
