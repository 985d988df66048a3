"""Structured logging configuration.

Provides JSON-formatted logs with:
- Category detection (engine, io, cli, system)
- Extra fields passed via ``logger.debug(..., extra={...})``
- A human-readable fallback for interactive use
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import TextIO


class StructuredFormatter(logging.Formatter):
    """JSON formatter with a category derived from the logger name."""

    # Map logger names to categories
    CATEGORY_MAP = {
        "anchorpoint.simplify": "engine",
        "anchorpoint.smooth": "engine",
        "anchorpoint.normalize": "engine",
        "anchorpoint.fitting": "engine",
        "anchorpoint.interpolation": "engine",
        "anchorpoint.document": "engine",
        "anchorpoint.svg": "io",
        "anchorpoint.parsing": "io",
        "anchorpoint.cli": "cli",
        "typer": "cli",
        "anchorpoint.config": "system",
    }

    # Standard LogRecord fields to exclude from 'extra'
    STANDARD_FIELDS = {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }

    def _get_category(self, logger_name: str) -> str:
        """Determine category from logger name."""
        for prefix, cat in self.CATEGORY_MAP.items():
            if logger_name.startswith(prefix):
                return cat
        return "system"

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_record: dict = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "category": self._get_category(record.name),
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Collect extra fields
        extra = {}
        for key, value in record.__dict__.items():
            if key not in self.STANDARD_FIELDS and not key.startswith("_"):
                # Try to serialize, fall back to str
                try:
                    json.dumps(value)
                    extra[key] = value
                except (TypeError, ValueError):
                    extra[key] = str(value)
        if extra:
            log_record["extra"] = extra

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record)


class ErrorFilter(logging.Filter):
    """Filter that only allows ERROR and CRITICAL level logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def configure_logging(
    *,
    json_format: bool = False,
    log_level: int | str = logging.INFO,
    log_file: str | None = None,
    error_log_file: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure application logging.

    Args:
        json_format: Use JSON formatting instead of the human-readable one
        log_level: Minimum log level
        log_file: Path to main log file (None for stream only)
        error_log_file: Path to error-only log file (None to skip)
        stream: Stream to write to (default: sys.stderr)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter: logging.Formatter
    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)5s [%(name)s] %(message)s",
            datefmt="%H:%M:%S",
        )

    stream_handler = logging.StreamHandler(stream or sys.stderr)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if error_log_file:
        Path(error_log_file).parent.mkdir(parents=True, exist_ok=True)
        error_handler = RotatingFileHandler(
            error_log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=3,
            encoding="utf-8",
        )
        error_handler.setFormatter(formatter)
        error_handler.addFilter(ErrorFilter())
        root_logger.addHandler(error_handler)


def setup_logging_from_settings() -> None:
    """Configure logging from the ANCHORPOINT_ logging settings."""
    from anchorpoint.config import settings

    configure_logging(
        json_format=settings.log_json,
        log_level=settings.log_level.upper(),
        log_file=settings.log_file,
        error_log_file=settings.error_log_file,
    )
