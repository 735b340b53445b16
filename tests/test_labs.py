"""Tests for lab availability lookup."""

import json

import pytest

from freeslot_engine.errors import CatalogError
from freeslot_engine.labs import LabAvailability
from freeslot_engine.models import SLOT_LABELS, SlotRef


@pytest.fixture
def labs():
    return LabAvailability({"Monday": {SLOT_LABELS[0]: ["Lab 1", "Lab 4"]}})


def test_known_cell(labs):
    assert labs.rooms_for("Monday", SLOT_LABELS[0]) == ["Lab 1", "Lab 4"]


def test_unknown_cells_are_empty(labs):
    result = labs.available_labs([SlotRef("Monday", SLOT_LABELS[1]), SlotRef("Friday", SLOT_LABELS[0])])

    assert result == {"Monday": {SLOT_LABELS[1]: []}, "Friday": {SLOT_LABELS[0]: []}}


def test_from_json(tmp_path):
    path = tmp_path / "lab_free.json"
    path.write_text(json.dumps({"Sunday": {SLOT_LABELS[6]: ["Lab 2"]}}), encoding="utf-8")

    labs = LabAvailability.from_json(path)

    assert labs.available_labs([SlotRef("Sunday", SLOT_LABELS[6])]) == {"Sunday": {SLOT_LABELS[6]: ["Lab 2"]}}


def test_from_json_malformed(tmp_path):
    path = tmp_path / "lab_free.json"
    path.write_text('{"Sunday": ["Lab 2"]}', encoding="utf-8")

    with pytest.raises(CatalogError):
        LabAvailability.from_json(path)
