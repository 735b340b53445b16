"""Core execution logic for schedule analysis."""

import asyncio
import json
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from .aggregator import DOCUMENT_MODE, FRIEND_MODE, WeeklyAggregator
from .catalog import CourseCatalog
from .config import ParserSettings, get_settings
from .errors import ExtractionError
from .logging import get_logger
from .models import AnalysisResult, Friend, SourceSchedule, Upload
from .parser import TimetableParser
from .text_extractor import TextExtractor
from .utils import guess_mime_type, validate_file_path

log = get_logger(__name__)


def load_upload(file_path: Union[str, Path]) -> Upload:
    """
    Read a schedule file from disk as an upload.

    Raises:
        ValidationError: If the path is missing or has an unsupported extension
        ExtractionError: If the file cannot be read
    """
    path = validate_file_path(str(file_path))
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ExtractionError(path.name, f"Cannot read file: {e}") from e
    return Upload(file_name=path.name, data=data, mime_type=guess_mime_type(path.name))


def process_upload(
    upload: Upload,
    extractor: TextExtractor,
    parser: TimetableParser,
) -> SourceSchedule:
    """
    Extract and parse one document into a source schedule.

    Args:
        upload: Uploaded document
        extractor: Text extractor
        parser: Timetable parser

    Returns:
        SourceSchedule keeping the raw text for diagnostics
    """
    text = extractor.extract(upload)
    markers = parser.parse_text(text, source=upload.file_name)
    return SourceSchedule(name=upload.file_name, busy_slots=markers, raw_text=text)


def analyze_documents(
    uploads: Sequence[Upload],
    settings: Optional[ParserSettings] = None,
    extractor: Optional[TextExtractor] = None,
    parser: Optional[TimetableParser] = None,
    logger=None,
) -> AnalysisResult:
    """
    Find common free slots across uploaded schedule documents.

    Documents are processed one at a time. The first extraction failure aborts
    the whole batch; documents that parse to nothing count as fully free.

    Args:
        uploads: Schedule images or PDFs
        settings: Heuristic thresholds and engine options
        extractor: Text extractor (built from settings when omitted)
        parser: Timetable parser (built from settings when omitted)
        logger: Structured logger receiving diagnostics

    Returns:
        AnalysisResult in document mode

    Raises:
        ExtractionError: If any file cannot be read or decoded
    """
    settings = settings or get_settings()
    logger = logger or log
    extractor = extractor or TextExtractor(settings=settings, logger=logger)
    parser = parser or TimetableParser(settings=settings, logger=logger)

    logger.info("analyzing_documents", count=len(uploads))

    sources: List[SourceSchedule] = []
    for upload in uploads:
        source = process_upload(upload, extractor, parser)
        logger.info("source_added", source=source.name, busy_slots=len(source.busy_slots))
        sources.append(source)

    return WeeklyAggregator(logger=logger).analyze(sources, mode=DOCUMENT_MODE)


async def analyze_documents_async(
    uploads: Sequence[Upload],
    settings: Optional[ParserSettings] = None,
    extractor: Optional[TextExtractor] = None,
    parser: Optional[TimetableParser] = None,
    logger=None,
) -> AnalysisResult:
    """
    Like analyze_documents, but runs each document in a worker thread.

    Documents share no state until aggregation, so they run concurrently;
    results keep submission order and the first failure propagates.
    """
    settings = settings or get_settings()
    logger = logger or log
    extractor = extractor or TextExtractor(settings=settings, logger=logger)
    parser = parser or TimetableParser(settings=settings, logger=logger)

    logger.info("analyzing_documents", count=len(uploads), concurrent=True)

    sources = await asyncio.gather(
        *(asyncio.to_thread(process_upload, upload, extractor, parser) for upload in uploads)
    )

    return WeeklyAggregator(logger=logger).analyze(list(sources), mode=DOCUMENT_MODE)


def analyze_friends(
    friends: Iterable[Friend],
    catalog: CourseCatalog,
    logger=None,
) -> AnalysisResult:
    """
    Find slots when all friends are free, using catalog course sections.

    Args:
        friends: Friends with their course enrollments
        catalog: Course catalog to look enrollments up in
        logger: Structured logger receiving diagnostics

    Returns:
        AnalysisResult in friend mode (partially and fully busy slots split)
    """
    logger = logger or log
    friends = list(friends)
    logger.info("analyzing_friends", count=len(friends))

    sources = [catalog.build_schedule(friend) for friend in friends]
    return WeeklyAggregator(logger=logger).analyze(sources, mode=FRIEND_MODE)


def save_to_json(result: AnalysisResult, output_path: Union[str, Path], extra: Optional[dict] = None) -> None:
    """
    Save an analysis result to a JSON file.

    Args:
        result: AnalysisResult to save
        output_path: Path to output JSON file
        extra: Additional top-level keys (e.g. available labs)
    """
    data = result.to_dict()
    if extra:
        data.update(extra)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    log.info("result_saved", path=str(output_path))
