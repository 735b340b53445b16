"""Data models for weekly schedule analysis."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Weekday(Enum):
    """Enumeration for days of the week, Sunday first."""
    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"

    @classmethod
    def from_string(cls, day_str: str) -> Optional['Weekday']:
        """
        Parse weekday from various string formats.

        Args:
            day_str: String representation of weekday (e.g., "Mon", "monday", "TUESDAY")

        Returns:
            Weekday enum or None if not matched
        """
        if not day_str or not isinstance(day_str, str):
            return None

        day_str = day_str.strip().upper()

        if not day_str:
            return None

        day_mapping = {
            'SUN': cls.SUNDAY, 'SUNDAY': cls.SUNDAY,
            'MON': cls.MONDAY, 'MONDAY': cls.MONDAY,
            'TUE': cls.TUESDAY, 'TUES': cls.TUESDAY, 'TUESDAY': cls.TUESDAY,
            'WED': cls.WEDNESDAY, 'WEDNESDAY': cls.WEDNESDAY,
            'THU': cls.THURSDAY, 'THUR': cls.THURSDAY, 'THURS': cls.THURSDAY, 'THURSDAY': cls.THURSDAY,
            'FRI': cls.FRIDAY, 'FRIDAY': cls.FRIDAY,
            'SAT': cls.SATURDAY, 'SATURDAY': cls.SATURDAY,
        }

        return day_mapping.get(day_str)


@dataclass(frozen=True)
class TimeSlot:
    """One of the fixed class periods of a day."""
    start: str  # e.g. "8:00 AM"
    end: str    # e.g. "9:20 AM"

    @property
    def label(self) -> str:
        return f"{self.start} - {self.end}"

    def __str__(self) -> str:
        return self.label


CANONICAL_SLOTS: Tuple[TimeSlot, ...] = (
    TimeSlot('8:00 AM', '9:20 AM'),
    TimeSlot('9:30 AM', '10:50 AM'),
    TimeSlot('11:00 AM', '12:20 PM'),
    TimeSlot('12:30 PM', '1:50 PM'),
    TimeSlot('2:00 PM', '3:20 PM'),
    TimeSlot('3:30 PM', '4:50 PM'),
    TimeSlot('5:00 PM', '6:20 PM'),
)

SLOT_LABELS: Tuple[str, ...] = tuple(slot.label for slot in CANONICAL_SLOTS)


@dataclass(frozen=True)
class BusyMarker:
    """Asserts that one source occupies one (day, time slot) cell."""
    day: str
    time: str  # canonical slot label
    source: str = ""

    @property
    def key(self) -> Tuple[str, str]:
        return (self.day, self.time)


@dataclass
class Upload:
    """An uploaded schedule document."""
    file_name: str
    data: bytes
    mime_type: Optional[str] = None


@dataclass
class Enrollment:
    """A course section a friend is enrolled in."""
    course: str
    section: str

    def __str__(self) -> str:
        return f"{self.course}-{self.section}"


@dataclass
class Friend:
    """A person whose schedule comes from the course catalog."""
    name: str
    courses: List[Enrollment] = field(default_factory=list)


@dataclass
class SourceSchedule:
    """Busy markers contributed by one document or one friend."""
    name: str
    busy_slots: List[BusyMarker] = field(default_factory=list)
    raw_text: Optional[str] = None

    # Catalog meetings behind the busy slots (friend mode only)
    meetings: List[Dict[str, str]] = field(default_factory=list)

    def add_marker(self, day: str, time: str) -> None:
        """Add a busy marker for this source, ignoring repeats."""
        marker = BusyMarker(day=day, time=time, source=self.name)
        if marker not in self.busy_slots:
            self.busy_slots.append(marker)

    def __len__(self) -> int:
        return len(self.busy_slots)


@dataclass
class GridCell:
    """Occupancy of a single (day, slot) cell."""
    occupants: List[str] = field(default_factory=list)

    @property
    def is_busy(self) -> bool:
        return len(self.occupants) > 0

    def occupy(self, name: str) -> None:
        if name not in self.occupants:
            self.occupants.append(name)


@dataclass
class SlotRef:
    """A (day, slot) reference emitted in free/busy lists."""
    day: str
    time: str
    occupants: List[str] = field(default_factory=list)

    @property
    def slot(self) -> TimeSlot:
        return CANONICAL_SLOTS[SLOT_LABELS.index(self.time)]


@dataclass
class AnalysisResult:
    """Outcome of one analysis run."""
    mode: str  # "documents" or "friends"
    weekly_grid: Dict[str, Dict[str, GridCell]]
    free_slots: List[SlotRef] = field(default_factory=list)
    busy_slots: List[SlotRef] = field(default_factory=list)
    fully_busy_slots: List[SlotRef] = field(default_factory=list)
    sources: List[SourceSchedule] = field(default_factory=list)

    def cell(self, day: str, time: str) -> GridCell:
        return self.weekly_grid[day][time]

    def to_dict(self) -> Dict[str, object]:
        """Serialize to the camelCase shape consumed by rendering layers."""
        def _ref(ref: SlotRef) -> Dict[str, object]:
            slot = ref.slot
            data: Dict[str, object] = {
                'day': ref.day,
                'time': ref.time,
                'startTime': slot.start,
                'endTime': slot.end,
            }
            if ref.occupants:
                data['occupants'] = list(ref.occupants)
            return data

        data: Dict[str, object] = {
            'mode': self.mode,
            'freeSlots': [_ref(r) for r in self.free_slots],
            'busySlots': [_ref(r) for r in self.busy_slots],
            'weeklyGrid': {
                day: {
                    label: {'isBusy': cell.is_busy, 'occupants': list(cell.occupants)}
                    for label, cell in slots.items()
                }
                for day, slots in self.weekly_grid.items()
            },
            'perSourceBreakdown': [
                {
                    'name': source.name,
                    'busySlots': source.meetings or [
                        {'day': m.day, 'time': m.time} for m in source.busy_slots
                    ],
                    **({'rawText': source.raw_text} if source.raw_text is not None else {}),
                }
                for source in self.sources
            ],
        }
        if self.mode == 'friends':
            data['fullyBusySlots'] = [_ref(r) for r in self.fully_busy_slots]
        return data
