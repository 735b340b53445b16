"""Free slot finder for weekly class schedules."""

__version__ = "0.1.0"

from .aggregator import DOCUMENT_MODE, FRIEND_MODE, WeeklyAggregator
from .catalog import CourseCatalog, CourseSection, Meeting
from .config import ParserSettings, get_settings
from .errors import CatalogError, ExtractionError, FreeslotError, UnsupportedFileError
from .labs import LabAvailability
from .main import (
    analyze_documents,
    analyze_documents_async,
    analyze_friends,
    load_upload,
    save_to_json,
)
from .models import (
    CANONICAL_SLOTS,
    AnalysisResult,
    BusyMarker,
    Enrollment,
    Friend,
    SourceSchedule,
    TimeSlot,
    Upload,
    Weekday,
)
from .parser import FallbackScheduleParser, TableScheduleParser, TimetableParser
from .text_extractor import TextExtractor

__all__ = [
    'analyze_documents',
    'analyze_documents_async',
    'analyze_friends',
    'load_upload',
    'save_to_json',
    'AnalysisResult',
    'BusyMarker',
    'CANONICAL_SLOTS',
    'Enrollment',
    'Friend',
    'SourceSchedule',
    'TimeSlot',
    'Upload',
    'Weekday',
    'CourseCatalog',
    'CourseSection',
    'Meeting',
    'LabAvailability',
    'ParserSettings',
    'get_settings',
    'TimetableParser',
    'TableScheduleParser',
    'FallbackScheduleParser',
    'TextExtractor',
    'WeeklyAggregator',
    'DOCUMENT_MODE',
    'FRIEND_MODE',
    'FreeslotError',
    'ExtractionError',
    'UnsupportedFileError',
    'CatalogError',
]
