"""structlog setup for the CLI: JSON lines or a console renderer on stderr.

Components take an optional ``logger`` argument and fall back to get_logger(),
so tests can inject a structlog.testing.CapturingLogger and assert on events.
"""

import logging
import sys

import structlog


def setup_logging(json_output: bool = False, log_level: str = "INFO") -> None:
    """
    Route structured events to stderr.

    Args:
        json_output: One JSON object per event instead of colored console lines
        log_level: Events below this level are dropped
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    processors = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Bridge stdlib logging (pdfminer, paddle) to the same stream
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=max(numeric_level, logging.WARNING),
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Return the default logger for a module."""
    return structlog.get_logger(name)
