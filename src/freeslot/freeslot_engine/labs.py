"""Lab room availability for free time slots."""

from pathlib import Path
from typing import Dict, Iterable, List, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import CatalogError
from .models import SlotRef

LabTable = Dict[str, Dict[str, List[str]]]

_LAB_TABLE = TypeAdapter(LabTable)


class LabAvailability:
    """Static day -> slot label -> free lab rooms table."""

    def __init__(self, table: LabTable):
        self.table = table

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> 'LabAvailability':
        try:
            table = _LAB_TABLE.validate_json(Path(path).read_text(encoding='utf-8'))
        except OSError as e:
            raise CatalogError(f"Cannot read lab table {path}: {e}") from e
        except PydanticValidationError as e:
            raise CatalogError(f"Malformed lab table {path}: {e}") from e
        return cls(table)

    def rooms_for(self, day: str, time: str) -> List[str]:
        """Rooms free during one cell; unknown cells have none."""
        return list(self.table.get(day, {}).get(time, []))

    def available_labs(self, free_slots: Iterable[SlotRef]) -> LabTable:
        """
        Look up free lab rooms for every free cell.

        Args:
            free_slots: Cells to look up

        Returns:
            Mapping day -> slot label -> room identifiers
        """
        available: LabTable = {}
        for ref in free_slots:
            available.setdefault(ref.day, {})[ref.time] = self.rooms_for(ref.day, ref.time)
        return available
