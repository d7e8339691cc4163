"""Logging for asmdups: plain or coloured stderr, plus an optional JSONL file."""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, TextIO

PACKAGE_LOGGER = 'asmdups'

# Rotate the JSONL file at 10MB, keeping five old files
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def _resolve_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for the ``--log-file`` output."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        operation = getattr(record, 'operation', None)
        if operation is not None:
            entry['operation'] = operation
        entry.update(getattr(record, 'extra_fields', {}))

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Prefixes each line with its level, coloured when writing to a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str = '%(levelname)s: %(message)s', use_color: bool = False):
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname) if self.use_color else None
        if color is None:
            return super().format(record)

        # Other handlers share the record, so the plain name is put back
        levelname = record.levelname
        record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def _is_terminal(stream: TextIO) -> bool:
    isatty = getattr(stream, 'isatty', None)
    return bool(isatty and isatty())


def setup_logging(
    name: str = PACKAGE_LOGGER,
    level: str = 'WARNING',
    log_file: Optional[Path] = None,
    console: bool = True,
) -> logging.Logger:
    """
    Configure the package logger.

    Module loggers (``asmdups.core.loader`` and friends) propagate to it, so
    calling this once from the entry point covers the whole package. Calling
    it again replaces the handlers of the previous call.

    Args:
        name: Logger name
        level: Console level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional JSON-lines file; it records DEBUG and up whatever
            the console level
        console: Enable output on stderr

    Returns:
        Configured logger instance

    Raises:
        ValueError: If level is not a logging level name
    """
    console_level = _resolve_level(level)

    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False
    logger.setLevel(console_level)

    if console:
        stream = sys.stderr
        console_handler = logging.StreamHandler(stream)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(ConsoleFormatter(use_color=_is_terminal(stream)))
        logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding='utf-8',
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter())
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; pass ``__name__``."""
    return logging.getLogger(name)


def log_operation(logger: logging.Logger, operation: str, **context) -> None:
    """
    Record the start of an operation.

    The context keys become top-level fields in the JSONL file; the console
    only shows the message.
    """
    logger.info(f"Starting operation: {operation}", extra={'operation': operation, 'extra_fields': context})
