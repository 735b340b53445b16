"""Shared fixtures for freeslot tests."""

import pytest
from structlog.testing import CapturingLogger

from freeslot_engine.config import ParserSettings
from freeslot_engine.parser import TimetableParser


@pytest.fixture
def settings():
    return ParserSettings(_env_file=None)


@pytest.fixture
def capture():
    return CapturingLogger()


@pytest.fixture
def events():
    """Return a helper listing the event names a capturing logger recorded."""
    def _events(logger):
        return [call.args[0] for call in logger.calls if call.args]
    return _events


@pytest.fixture
def parser(settings, capture):
    return TimetableParser(settings=settings, logger=capture)


@pytest.fixture
def table_schedule():
    return (
        "Student Schedule - Fall 2025\n"
        "Time | Sunday | Monday | Tuesday | Wednesday | Thursday\n"
        "8:00 AM - 9:20 AM Sunday CSE421-07 Monday - Tuesday MAT110 Wednesday | Thursday\n"
        "9:30 AM - 10:50 AM Sunday Monday PHY101-2 Tuesday Wednesday ENG102 Thursday\n"
        "room 402\n"
        "11:00 AM - 12:20 PM Sunday Monday Tuesday Wednesday Thursday\n"
    )
