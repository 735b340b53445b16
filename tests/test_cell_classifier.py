"""Tests for cell spans and busy/free classification."""

import pytest

from freeslot_engine.cell_classifier import CellClassifier
from freeslot_engine.models import CANONICAL_SLOTS, Weekday
from freeslot_engine.table_detector import TimeRow


@pytest.fixture
def classifier(settings, capture):
    return CellClassifier(settings=settings, logger=capture)


def test_row_spans_split_at_next_day():
    content = "Monday CSE421-07 Tuesday Lab Wednesday"

    assert CellClassifier.cell_span(content, Weekday.MONDAY) == " CSE421-07 "
    assert CellClassifier.cell_span(content, Weekday.TUESDAY) == " Lab "
    assert CellClassifier.cell_span(content, Weekday.WEDNESDAY) == ""
    assert CellClassifier.cell_span(content, Weekday.FRIDAY) is None


def test_classify_row_three_columns(classifier):
    content = "Monday CSE421-07 Tuesday Lab Wednesday"
    days = [Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY]

    assert classifier.classify_row(content, days) == [Weekday.MONDAY, Weekday.TUESDAY]


def test_span_ends_at_any_day_name(classifier):
    # Saturday is not a column but still ends Monday's cell
    content = "Monday ab Saturday CSE421"

    assert CellClassifier.cell_span(content, Weekday.MONDAY) == " ab "
    assert classifier.classify_row(content, [Weekday.MONDAY]) == []


@pytest.mark.parametrize("span, busy", [
    (" ab ", False),
    (" abc ", True),
    ("- | : ,", False),
    (" a-b ", False),
    (" a-b-c ", True),
    ("Free", True),
    ("", False),
])
def test_busy_threshold(classifier, span, busy):
    assert classifier.is_busy(span) is busy


def test_threshold_is_configurable(capture):
    from freeslot_engine.config import ParserSettings

    strict = CellClassifier(settings=ParserSettings(_env_file=None, busy_min_chars=5), logger=capture)
    assert not strict.is_busy("Free")
    assert strict.is_busy("CSE421")


def test_clean_span():
    assert CellClassifier.clean_span(" -| CSE421, :") == "CSE421"


def test_row_content_stops_at_next_time_row(classifier):
    lines = ["8:00 AM Monday", "CSE421", "Room 402", "9:30 AM Monday", "MAT110"]
    row = TimeRow(line_index=0, slot=CANONICAL_SLOTS[0], text=lines[0])

    assert classifier.build_row_content(lines, row) == "8:00 AM Monday CSE421 Room 402"


def test_row_content_stops_at_header_like_line(classifier):
    lines = ["8:00 AM Monday", "CSE421", "Monday Tuesday Wednesday", "extra"]
    row = TimeRow(line_index=0, slot=CANONICAL_SLOTS[0], text=lines[0])

    assert classifier.build_row_content(lines, row) == "8:00 AM Monday CSE421"


def test_row_content_takes_at_most_four_more_lines(classifier):
    lines = ["8:00 AM Monday", "a", "b", "c", "d", "e"]
    row = TimeRow(line_index=0, slot=CANONICAL_SLOTS[0], text=lines[0])

    assert classifier.build_row_content(lines, row) == "8:00 AM Monday a b c d"
