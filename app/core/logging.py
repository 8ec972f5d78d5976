"""
Logging setup for the API and the CLI.

Event records carry their fields in ``record.extra_fields``; both
formatters render them, as JSON keys or as trailing ``key=value`` pairs.
"""
import json
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from .config import LoggingSettings, get_settings

EVENT_FIELDS_ATTR = "extra_fields"


def event_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, EVENT_FIELDS_ATTR, None) or {}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, event fields merged at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_entry.update(event_fields(record))

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class EventFormatter(logging.Formatter):
    """Plain-text formatter that appends event fields as ``key=value``."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = event_fields(record)
        if not fields:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in fields.items())
        # keep a traceback, if any, after the fields
        head, sep, tail = line.partition("\n")
        return f"{head} | {pairs}{sep}{tail}"


def build_formatter(settings: LoggingSettings) -> logging.Formatter:
    if settings.json_format:
        return JSONFormatter()
    return EventFormatter(fmt=settings.format, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging() -> None:
    """Configure the root logger from ``LOG_*`` settings."""
    settings = get_settings()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.logging.level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = build_formatter(settings.logging)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.logging.file_path:
        file_path = Path(settings.logging.file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=file_path,
            maxBytes=settings.logging.max_bytes,
            backupCount=settings.logging.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # driver SQL would otherwise echo row values at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database.echo else logging.WARNING
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger (usually ``get_logger(__name__)``)."""
    return logging.getLogger(name)


class StructuredLogger:
    """
    Event logger with fixed fields.

    Used where one record per decision is wanted: row accepted or rejected,
    row inserted, upload summary, request completed.
    """

    def __init__(self, name: str, **default_fields):
        self.logger = logging.getLogger(name)
        self.default_fields = default_fields

    def bind(self, **fields) -> "StructuredLogger":
        """Return a child logger carrying additional default fields."""
        return StructuredLogger(self.logger.name, **{**self.default_fields, **fields})

    def _log(self, level: int, message: str, **fields):
        extra = {EVENT_FIELDS_ATTR: {**self.default_fields, **fields}}
        self.logger.log(level, message, extra=extra)

    def debug(self, message: str, **fields):
        self._log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields):
        self._log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields):
        self._log(logging.WARNING, message, **fields)

    def error(self, message: str, **fields):
        self._log(logging.ERROR, message, **fields)


def audit_log(
    action: str,
    resource: str,
    user_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    success: bool = True,
):
    """
    Record who did what to which party type.

    Args:
        action: ``LOGIN``, ``REGISTER``, ``BULK_UPLOAD`` or ``PASSWORD_RESET``
        resource: ``USER``, ``RETAILER`` or ``EMPLOYEE``
        user_id: Acting user, or the party the action applied to
        details: Counts or identifiers; never passwords or OTP codes
        success: Whether the action went through
    """
    StructuredLogger("audit").info(
        "Audit event",
        action=action,
        resource=resource,
        user_id=user_id,
        success=success,
        details=details or {},
    )
