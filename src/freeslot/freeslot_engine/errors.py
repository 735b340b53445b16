"""Error hierarchy for schedule analysis.

Extraction errors are fatal to the whole batch: a single unreadable upload
aborts the run instead of producing a grid built from incomplete sources.
Parsing never raises; a document nothing could be read from simply
contributes no busy slots.
"""


class FreeslotError(Exception):
    """Base exception for all schedule analysis errors."""

    pass


class ExtractionError(FreeslotError):
    """Text could not be extracted from an uploaded file.

    Examples: corrupt image, undecodable PDF, I/O failure.
    """

    def __init__(self, file_name: str, message: str):
        self.file_name = file_name
        super().__init__(f"{file_name}: {message}")


class UnsupportedFileError(ExtractionError):
    """The upload is neither an image nor a PDF."""

    pass


class CatalogError(FreeslotError):
    """Course catalog or lab table could not be loaded."""

    pass


class ValidationError(FreeslotError):
    """Invalid input path or argument."""

    pass
