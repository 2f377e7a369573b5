"""
Centralized logging configuration for the Blog Generator service.

This module provides a function to set up application-wide logging,
including JSON-line formatting, log levels, and handlers for console and file output.
"""

import logging
import logging.handlers
import sys
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

SERVICE_NAME = 'blog-generator-backend'

# LOG_LEVEL accepts the short "warn" spelling as well as the stdlib names
LEVEL_ALIASES = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warn': logging.WARNING,
    'warning': logging.WARNING,
    'error': logging.ERROR,
}


class StructuredLogFormatter(logging.Formatter):
    """
    Custom formatter that renders every record as a single JSON object.

    Features:
    - ISO-8601 UTC timestamp, level, logger name and message
    - Service name and environment name on every line
    - Structured fields passed via `extra=` (traceId, code, durationMs, ...)
    - Exception text when the record carries exc_info
    """

    def __init__(self, env: str = 'development'):
        super().__init__()
        self.env = env

    def format(self, record):
        # Create base log structure
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname.lower(),
            'logger': record.name,
            'message': record.getMessage(),
        }

        # Add any extra fields from record
        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        log_data['service'] = SERVICE_NAME
        log_data['env'] = self.env

        # Add exception info if present
        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that folds keyword `extra=` fields into `extra_fields`.

    Call sites write `logger.info("Blog generated", extra={"traceId": tid})`
    and the formatter receives the fields as one mapping, merged on top of any
    context bound when the adapter was created.
    """

    def process(self, msg, kwargs):
        fields: Dict[str, Any] = dict(self.extra or {})
        fields.update(kwargs.pop('extra', None) or {})
        kwargs['extra'] = {'extra_fields': fields}
        return msg, kwargs

    def bind(self, **context: Any) -> 'StructuredLoggerAdapter':
        """Return a new adapter with additional context fields."""
        merged = dict(self.extra or {})
        merged.update(context)
        return StructuredLoggerAdapter(self.logger, merged)


def get_logger(name: str, **context: Any) -> StructuredLoggerAdapter:
    """
    Get a logger with the structured adapter.

    Args:
        name (str): Logger name (usually __name__)
        **context: Fields attached to every record emitted through the adapter

    Returns:
        StructuredLoggerAdapter: Configured logger instance
    """
    return StructuredLoggerAdapter(logging.getLogger(name), context)


def resolve_level(level_name: str, default_level: int = logging.INFO) -> int:
    """Map a LOG_LEVEL string onto a numeric logging level."""
    return LEVEL_ALIASES.get(str(level_name).strip().lower(), default_level)


def setup_app_logging(config: Optional[dict] = None, default_level=logging.INFO) -> None:
    """
    Install JSON-line logging on the root logger.

    Every module logs through `get_logger(__name__)`, so configuring the root logger once at
    startup covers the whole service. Records go to stdout, and additionally to a size-rotated file
    when `file_path` is set. Calling this again replaces the previous handlers.

    Args:
        config (dict, optional): Logging section as produced by `Settings.logging_config()`:
                                - 'level': "debug", "info", "warn" or "error".
                                - 'env': Environment name stamped on every line.
                                - 'file_path': Log file path; empty or None keeps stdout only.
                                - 'max_bytes': Rotation threshold for the file handler.
                                - 'backup_count': Rotated files to keep.
        default_level (int, optional): Level used when 'level' is missing or unknown.
    """
    config = config or {}

    numeric_log_level = resolve_level(config.get('level', ''), default_level)
    formatter = StructuredLogFormatter(env=config.get('env', 'development'))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)

    log_file_path = config.get('file_path')
    if log_file_path:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                log_file_path,
                maxBytes=int(config.get('max_bytes', 5 * 1024 * 1024)),
                backupCount=int(config.get('backup_count', 3)),
                encoding='utf-8',
            )
        except OSError as e:
            print(f"Cannot open log file {log_file_path}: {e}. Logging to stdout only.", file=sys.stderr)
        else:
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    # uvicorn installs its own handlers; route its records through ours instead
    for name in ('uvicorn', 'uvicorn.error'):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers = []
        uv_logger.propagate = True
    # Access lines are produced by the access log middleware
    logging.getLogger('uvicorn.access').disabled = True

    get_logger(__name__).debug(
        "Logging configured",
        extra={'configuredLevel': logging.getLevelName(numeric_log_level), 'fileLogging': bool(log_file_path)},
    )
