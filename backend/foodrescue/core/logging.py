"""
Logging setup for the API process.

Format: 2026-01-06T14:05:52Z [foodrescue] LEVEL logger: message

Usage:
    from foodrescue.core.logging import configure_logging, get_logger

    configure_logging("INFO")
    logger = get_logger(__name__)
"""
import logging
import sys
from datetime import datetime, timezone

SOURCE = "foodrescue"


class ISO8601Formatter(logging.Formatter):
    """UTC ISO-8601 timestamps, source tag, level, logger name."""

    def __init__(self, source: str = SOURCE):
        self.source = source
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f"{timestamp} [{self.source}] {record.levelname} {record.name}: {message}"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # idempotent under uvicorn --reload and repeated app construction in tests
    for h in root.handlers:
        if isinstance(h.formatter, ISO8601Formatter):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ISO8601Formatter())
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
