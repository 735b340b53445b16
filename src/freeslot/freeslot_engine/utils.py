"""Text patterns, time helpers and validation functions for schedule processing."""

import mimetypes
import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .errors import ValidationError
from .models import CANONICAL_SLOTS, BusyMarker, TimeSlot, Weekday

# Whole-word day names, any case
DAY_PATTERN = re.compile(
    r'\b(sunday|monday|tuesday|wednesday|thursday|friday|saturday)\b',
    re.IGNORECASE,
)

# Day names anywhere, for run-together OCR text such as 'MondayCSE421'
LOOSE_DAY_PATTERN = re.compile(
    r'(sunday|monday|tuesday|wednesday|thursday|friday|saturday)',
    re.IGNORECASE,
)

# Time anchors: '8 AM', '8:00 am', '08:00AM'
TIME_PATTERN = re.compile(r'\b(\d{1,2})(?::(\d{2}))?\s*([ap]m)\b', re.IGNORECASE)

# Stricter anchor used by the fallback parser: minutes required, may run into
# the next token ('8:00 AMCSE421')
STRICT_TIME_PATTERN = re.compile(r'(\d{1,2}):(\d{2})\s*([ap]m)', re.IGNORECASE)

# Course codes such as 'CSE421', 'CSE421-07', 'MAT110L'
COURSE_CODE_PATTERN = re.compile(r'[A-Z]{3}\d{3}[A-Z0-9\-]*')

SUPPORTED_IMAGE_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.bmp', '.tiff', '.tif', '.webp'}
SUPPORTED_EXTENSIONS = SUPPORTED_IMAGE_EXTENSIONS | {'.pdf'}


def find_day_names(text: str, pattern: re.Pattern = DAY_PATTERN) -> List[Tuple[Weekday, re.Match]]:
    """
    Find every day name in text.

    Args:
        text: Text to scan
        pattern: Day regex; whole words by default

    Returns:
        List of (weekday, match) pairs in order of appearance
    """
    return [(Weekday.from_string(m.group(1)), m) for m in pattern.finditer(text)]


def count_day_names(text: str) -> int:
    """Count whole-word day name occurrences in text."""
    return len(DAY_PATTERN.findall(text))


def normalize_time(hour: str, minute: Optional[str], period: str) -> str:
    """
    Normalize time components to a compact comparable form.

    '08', '00', 'AM' -> '8:00am'; a missing minute part reads as ':00'.
    """
    return f"{int(hour)}:{minute or '00'}{period.lower()}"


def normalize_time_text(text: str) -> str:
    """Normalize a time string such as '08:00 AM' to '8:00am'."""
    match = TIME_PATTERN.search(text)
    if not match:
        return re.sub(r'\s+', '', text.lower()).lstrip('0')
    return normalize_time(*match.groups())


def match_canonical_slot(
    line: str,
    pattern: re.Pattern = TIME_PATTERN,
    slots: Iterable[TimeSlot] = CANONICAL_SLOTS,
) -> Optional[TimeSlot]:
    """
    Find the canonical slot whose start time appears as a time anchor in line.

    Canonical slots are tried in declared order and the first hit wins, so a
    line such as '8:00 AM - 9:20 AM' tags the 8:00 slot only.

    Args:
        line: Line of extracted text
        pattern: Regex used to find time anchors (groups: hour, minute, period)
        slots: Candidate slots in priority order

    Returns:
        Matching TimeSlot or None
    """
    anchors = {normalize_time(*m.groups()) for m in pattern.finditer(line)}
    if not anchors:
        return None

    for slot in slots:
        if normalize_time_text(slot.start) in anchors:
            return slot
    return None


def time_to_minutes(value: str) -> int:
    """
    Convert a 12-hour time string to minutes since midnight.

    Args:
        value: Time such as '9:30 AM' or '12:20 PM'

    Returns:
        Minutes since midnight

    Raises:
        ValueError: If the string is not a recognizable time
    """
    match = TIME_PATTERN.search(value or '')
    if not match:
        raise ValueError(f"Unrecognized time: {value!r}")

    hours = int(match.group(1))
    minutes = int(match.group(2) or 0)
    period = match.group(3).upper()

    if period == 'PM' and hours != 12:
        hours += 12
    elif period == 'AM' and hours == 12:
        hours = 0

    return hours * 60 + minutes


def times_overlap(start1: str, end1: str, start2: str, end2: str) -> bool:
    """Check whether two half-open time ranges overlap."""
    return (
        time_to_minutes(start1) < time_to_minutes(end2)
        and time_to_minutes(end1) > time_to_minutes(start2)
    )


def format_time_range(start_time: str, end_time: str) -> str:
    """Format a time range for display."""
    return f"{start_time} - {end_time}"


def sanitize_text(text: str) -> str:
    """
    Sanitize extracted text by removing unwanted characters.

    Args:
        text: Text to sanitize

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    # Remove excessive whitespace
    text = re.sub(r'[ \t\r\f\v]+', ' ', text)

    # Remove special characters that might cause issues
    text = text.replace('\x00', '')

    return text.strip()


def merge_duplicate_markers(markers: Iterable[BusyMarker]) -> List[BusyMarker]:
    """
    Drop repeated (day, time) markers, keeping first-seen order.

    Args:
        markers: Markers to deduplicate

    Returns:
        Deduplicated list of markers
    """
    unique: List[BusyMarker] = []
    seen = set()

    for marker in markers:
        if marker.key not in seen:
            seen.add(marker.key)
            unique.append(marker)

    return unique


def guess_mime_type(file_name: str) -> Optional[str]:
    """Guess an upload's MIME type from its file name."""
    mime_type, _ = mimetypes.guess_type(file_name)
    if mime_type is None and Path(file_name).suffix.lower() == '.webp':
        return 'image/webp'
    return mime_type


def validate_file_path(file_path: str, supported_extensions: set = SUPPORTED_EXTENSIONS) -> Path:
    """
    Validate file path and extension.

    Args:
        file_path: Path to validate
        supported_extensions: Set of supported file extensions

    Returns:
        Validated Path object

    Raises:
        ValidationError: If validation fails
    """
    path = Path(file_path)

    if not path.exists():
        raise ValidationError(f"File not found: {path}")

    if not path.is_file():
        raise ValidationError(f"Path is not a file: {path}")

    if path.suffix.lower() not in supported_extensions:
        raise ValidationError(
            f"Unsupported file format: {path.suffix}. "
            f"Supported formats: {', '.join(sorted(supported_extensions))}"
        )

    return path


def is_supported_file(file_path: str) -> bool:
    """
    Quick check if file is supported.

    Args:
        file_path: Path to check

    Returns:
        True if file extension is supported
    """
    return Path(file_path).suffix.lower() in SUPPORTED_EXTENSIONS
