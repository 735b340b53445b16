"""Parser and extractor settings loaded from environment variables.

The heuristics behind table parsing are tuning knobs rather than fixed rules,
so every threshold is exposed here and can be overridden per run or via
``FREESLOT_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class ParserSettings(BaseSettings):
    """Heuristic thresholds and engine options."""

    # Table locator
    header_search_lines: int = Field(
        default=30,
        description="Number of leading non-empty lines scanned for the day-name header",
    )
    header_min_days: int = Field(
        default=4,
        description="Day names a line needs to count as the header row",
    )
    header_like_min_days: int = Field(
        default=3,
        description="Day names that end a time row's continuation lines",
    )
    row_continuation_lines: int = Field(
        default=4,
        description="Lines after a time anchor that may belong to the same row",
    )

    # Cell classifier
    busy_min_chars: int = Field(
        default=3,
        description="Meaningful characters a cell needs to be considered busy",
    )

    # Fallback parser
    fallback_context_lines: int = Field(
        default=3,
        description="Lines (anchor line included) searched for days and course codes",
    )

    # Extraction
    row_tolerance: float = Field(
        default=5.0,
        description="Vertical bucket size used to merge PDF fragments into rows",
    )
    ocr_lang: str = Field(default="en", description="PaddleOCR language code")
    use_gpu: bool = Field(default=False, description="Use GPU acceleration for OCR")
    preprocess_images: bool = Field(
        default=True,
        description="Denoise and enhance contrast before OCR",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "FREESLOT_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


_settings: ParserSettings | None = None


def get_settings() -> ParserSettings:
    """Get the settings singleton.

    Returns:
        ParserSettings: Settings instance
    """
    global _settings
    if _settings is None:
        _settings = ParserSettings()
    return _settings
