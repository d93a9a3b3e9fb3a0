"""
Logging setup for SML Cars Backend.

Console output is colored when attached to a terminal; a rotating log file is
added when ``LOG_FILE`` is set.
"""

import copy
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional
from .config import get_settings

# Chatty third-party loggers (the Supabase client logs every call through httpx)
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "hpack")


class ColoredFormatter(logging.Formatter):
    """Wraps the level name in an ANSI color."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        # Other handlers format the same record
        painted = copy.copy(record)
        color = self.LEVEL_COLORS.get(record.levelno)
        if color:
            painted.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(painted)


def _console_handler(level: int, format_string: str) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    formatter_class = ColoredFormatter if sys.stdout.isatty() else logging.Formatter
    handler.setFormatter(formatter_class(format_string))
    return handler


def _file_handler(file_path: str, level: int, format_string: str) -> logging.Handler:
    settings = get_settings()
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        file_path,
        maxBytes=settings.log_max_bytes,
        backupCount=settings.log_backup_count,
        encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string))
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None
) -> None:
    """
    Replace the root logger's handlers with the application's.

    Arguments override the matching ``LOG_*`` settings.
    """
    settings = get_settings()

    level_name = (log_level or settings.log_level).upper()
    level = logging.getLevelName(level_name)
    format_string = log_format or settings.log_format
    file_path = log_file or settings.log_file

    handlers = [_console_handler(level, format_string)]
    if file_path:
        handlers.append(_file_handler(file_path, level, format_string))

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).info(
        f"Logging at {level_name} to console{f' and {file_path}' if file_path else ''}"
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LoggerMixin:
    """Gives a class a ``logger`` named after its module and class."""

    @property
    def logger(self) -> logging.Logger:
        cls = type(self)
        return get_logger(f"{cls.__module__}.{cls.__name__}")
