"""Course catalog lookup for friend schedules."""

from pathlib import Path
from typing import Iterable, List, Optional, Union

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import CatalogError
from .logging import get_logger
from .models import CANONICAL_SLOTS, Friend, SourceSchedule
from .utils import format_time_range, times_overlap


class Meeting(BaseModel):
    """One scheduled class meeting of a course section."""

    day: str  # "Monday"
    start_time: str  # "8:00 AM"
    end_time: str  # "9:20 AM"
    room: str = ""


class CourseSection(BaseModel):
    """A course section with its weekly meetings."""

    course_name: str
    section: str
    schedule: List[Meeting] = []


_SECTIONS = TypeAdapter(List[CourseSection])


class CourseCatalog:
    """Static catalog of course sections keyed by (course name, section)."""

    def __init__(self, sections: Iterable[CourseSection], logger=None):
        self.sections = list(sections)
        self.log = logger or get_logger(__name__)

    @classmethod
    def from_json(cls, path: Union[str, Path], logger=None) -> 'CourseCatalog':
        """
        Load a catalog from a JSON file (list of course sections).

        Raises:
            CatalogError: If the file cannot be read or does not match the schema
        """
        try:
            raw = Path(path).read_text(encoding='utf-8')
            sections = _SECTIONS.validate_json(raw)
        except OSError as e:
            raise CatalogError(f"Cannot read course catalog {path}: {e}") from e
        except PydanticValidationError as e:
            raise CatalogError(f"Malformed course catalog {path}: {e}") from e

        catalog = cls(sections, logger=logger)
        catalog.log.info("catalog_loaded", path=str(path), sections=len(catalog.sections))
        return catalog

    @classmethod
    def from_records(cls, records: Iterable[dict], logger=None) -> 'CourseCatalog':
        """Build a catalog from already-decoded JSON records."""
        try:
            sections = _SECTIONS.validate_python(list(records))
        except PydanticValidationError as e:
            raise CatalogError(f"Malformed course catalog: {e}") from e
        return cls(sections, logger=logger)

    def find_section(self, course_name: str, section: str) -> Optional[CourseSection]:
        """Exact lookup: course name ignores case, section does not."""
        for entry in self.sections:
            if entry.course_name.upper() == course_name.upper() and entry.section == section:
                return entry
        return None

    def build_schedule(self, friend: Friend) -> SourceSchedule:
        """
        Turn a friend's enrollments into a source schedule.

        Every meeting marks each canonical slot its time range overlaps on that
        day. Enrollments missing from the catalog are skipped with a warning.

        Args:
            friend: Friend with course enrollments

        Returns:
            SourceSchedule named after the friend
        """
        schedule = SourceSchedule(name=friend.name)

        for enrollment in friend.courses:
            section = self.find_section(enrollment.course, enrollment.section)
            if section is None:
                self.log.warning("course_not_found", friend=friend.name, course=str(enrollment))
                continue

            self.log.debug("course_found", friend=friend.name, course=str(enrollment))
            for meeting in section.schedule:
                schedule.meetings.append({
                    'day': meeting.day,
                    'time': format_time_range(meeting.start_time, meeting.end_time),
                    'startTime': meeting.start_time,
                    'endTime': meeting.end_time,
                    'room': meeting.room,
                })
                self._mark_meeting(schedule, meeting)

        self.log.info("friend_schedule_built", friend=friend.name, busy_slots=len(schedule.busy_slots))
        return schedule

    def _mark_meeting(self, schedule: SourceSchedule, meeting: Meeting) -> None:
        try:
            overlapping = [
                slot for slot in CANONICAL_SLOTS
                if times_overlap(slot.start, slot.end, meeting.start_time, meeting.end_time)
            ]
        except ValueError:
            self.log.warning(
                "meeting_time_unreadable",
                friend=schedule.name,
                start=meeting.start_time,
                end=meeting.end_time,
            )
            return

        for slot in overlapping:
            schedule.add_marker(meeting.day, slot.label)
