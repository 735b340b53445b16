"""Classifies timetable cells as busy or free by content density."""

import re
from typing import List, Optional

from .config import ParserSettings, get_settings
from .logging import get_logger
from .models import Weekday
from .table_detector import TableDetector, TimeRow
from .utils import DAY_PATTERN

# Separator characters ignored when judging a cell
_EDGE_SEPARATORS = re.compile(r'^[\s\-:|,]+|[\s\-:|,]+$')
_ALL_SEPARATORS = re.compile(r'[\s\-:|,]+')


class CellClassifier:
    """Splits a time row into per-day cells and decides occupancy."""

    def __init__(
        self,
        detector: Optional[TableDetector] = None,
        settings: Optional[ParserSettings] = None,
        logger=None,
    ):
        self.settings = settings or get_settings()
        self.log = logger or get_logger(__name__)
        self.detector = detector or TableDetector(settings=self.settings, logger=self.log)

    def build_row_content(self, lines: List[str], row: TimeRow) -> str:
        """
        Join a time row with the continuation lines that belong to it.

        Args:
            lines: Non-empty lines of extracted text
            row: Time-anchor row

        Returns:
            Row content as a single string
        """
        parts = [row.text]
        stop = min(row.line_index + 1 + self.settings.row_continuation_lines, len(lines))

        for idx in range(row.line_index + 1, stop):
            next_line = lines[idx]
            if self.detector.is_row_boundary(next_line):
                break
            parts.append(next_line)

        return ' '.join(parts)

    @staticmethod
    def cell_span(row_content: str, day: Weekday) -> Optional[str]:
        """
        Extract the text belonging to a day within row content.

        The span starts right after the day's first whole-word occurrence and
        runs to the next day name of any day, or to the end of the content.

        Args:
            row_content: Joined row text
            day: Day column to extract

        Returns:
            Raw span text, or None when the day does not occur in the row
        """
        day_re = re.compile(rf'\b{day.value}\b', re.IGNORECASE)
        match = day_re.search(row_content)
        if not match:
            return None

        start = match.end()
        next_day = DAY_PATTERN.search(row_content, start)
        end = next_day.start() if next_day else len(row_content)

        return row_content[start:end]

    @staticmethod
    def clean_span(span: str) -> str:
        """Strip whitespace and separators (-, :, |, comma) from both ends."""
        return _EDGE_SEPARATORS.sub('', span)

    def is_busy(self, span: str) -> bool:
        """
        Decide whether a cell holds a real label.

        Stray punctuation and one- or two-letter OCR noise read as free; any
        longer content, the word 'Free' included, reads as busy.
        """
        meaningful = _ALL_SEPARATORS.sub('', self.clean_span(span))
        return len(meaningful) >= self.settings.busy_min_chars

    def classify_row(self, row_content: str, days: List[Weekday]) -> List[Weekday]:
        """
        Classify every day column of one time row.

        Args:
            row_content: Joined row text
            days: Day columns from the header

        Returns:
            Days whose cell is busy, in column order
        """
        busy: List[Weekday] = []

        for day in days:
            span = self.cell_span(row_content, day)
            if span is None:
                continue

            occupied = self.is_busy(span)
            self.log.debug(
                "cell_classified",
                day=day.value,
                content=self.clean_span(span),
                busy=occupied,
            )
            if occupied:
                busy.append(day)

        return busy
