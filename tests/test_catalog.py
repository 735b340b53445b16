"""Tests for course catalog lookup and friend schedules."""

import json

import pytest

from freeslot_engine.catalog import CourseCatalog
from freeslot_engine.errors import CatalogError
from freeslot_engine.models import SLOT_LABELS, BusyMarker, Enrollment, Friend

RECORDS = [
    {
        "course_name": "CSE421",
        "section": "07",
        "schedule": [
            {"day": "Monday", "start_time": "8:00 AM", "end_time": "9:20 AM", "room": "UB1001"},
            {"day": "Wednesday", "start_time": "8:00 AM", "end_time": "9:20 AM", "room": "UB1001"},
        ],
    },
    {
        "course_name": "CSE421L",
        "section": "07",
        "schedule": [
            {"day": "Tuesday", "start_time": "11:00 AM", "end_time": "1:50 PM", "room": "Lab 3"},
        ],
    },
]


@pytest.fixture
def catalog(capture):
    return CourseCatalog.from_records(RECORDS, logger=capture)


def test_find_section_name_ignores_case(catalog):
    assert catalog.find_section("cse421", "07").course_name == "CSE421"


def test_find_section_requires_exact_section(catalog):
    assert catalog.find_section("CSE421", "7") is None


def test_build_schedule_marks_overlapping_slots(catalog):
    friend = Friend("Rafi", [Enrollment("cse421", "07"), Enrollment("CSE421L", "07")])

    schedule = catalog.build_schedule(friend)

    assert schedule.name == "Rafi"
    assert schedule.busy_slots == [
        BusyMarker("Monday", SLOT_LABELS[0], "Rafi"),
        BusyMarker("Wednesday", SLOT_LABELS[0], "Rafi"),
        BusyMarker("Tuesday", SLOT_LABELS[2], "Rafi"),
        BusyMarker("Tuesday", SLOT_LABELS[3], "Rafi"),
    ]
    assert schedule.meetings[2] == {
        "day": "Tuesday",
        "time": "11:00 AM - 1:50 PM",
        "startTime": "11:00 AM",
        "endTime": "1:50 PM",
        "room": "Lab 3",
    }


def test_missing_enrollment_is_skipped(catalog, capture, events):
    friend = Friend("Nila", [Enrollment("MAT999", "1"), Enrollment("CSE421", "07")])

    schedule = catalog.build_schedule(friend)

    assert len(schedule.busy_slots) == 2
    assert "course_not_found" in events(capture)


def test_unreadable_meeting_time_is_skipped(capture, events):
    catalog = CourseCatalog.from_records(
        [{"course_name": "X", "section": "1",
          "schedule": [{"day": "Monday", "start_time": "TBA", "end_time": "TBA"}]}],
        logger=capture,
    )

    schedule = catalog.build_schedule(Friend("A", [Enrollment("X", "1")]))

    assert schedule.busy_slots == []
    assert "meeting_time_unreadable" in events(capture)


def test_from_json(tmp_path, capture):
    path = tmp_path / "classes.json"
    path.write_text(json.dumps(RECORDS), encoding="utf-8")

    catalog = CourseCatalog.from_json(path, logger=capture)

    assert len(catalog.sections) == 2


def test_from_json_errors(tmp_path):
    with pytest.raises(CatalogError):
        CourseCatalog.from_json(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text('[{"course_name": "CSE421"}]', encoding="utf-8")
    with pytest.raises(CatalogError):
        CourseCatalog.from_json(bad)
