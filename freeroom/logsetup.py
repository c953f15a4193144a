"""Logging to the console and to a size-rotated, compressed log file."""

from __future__ import annotations

import gzip
import json
import logging
import os
import shutil
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "freeroom"
DEFAULT_LOG_FILE = "./logs/api_server1.log"
DEFAULT_MAX_MEGABYTES = 128
DEFAULT_BACKUPS = 5


class _ConsoleFormatter(logging.Formatter):
    """Tab-separated lines: time, level, logger, caller, message, fields."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).astimezone().isoformat(
            timespec="milliseconds"
        )
        parts = [
            stamp,
            record.levelname.lower(),
            record.name,
            f"{record.pathname}:{record.lineno}",
            record.getMessage(),
        ]
        fields = getattr(record, "fields", None)
        if fields:
            parts.append(json.dumps(fields, ensure_ascii=False, default=str))
        line = "\t".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _gzip_namer(name: str) -> str:
    return name + ".gz"


def _gzip_rotator(source: str, dest: str) -> None:
    with open(source, "rb") as src, gzip.open(dest, "wb") as dst:
        shutil.copyfileobj(src, dst)
    os.remove(source)


def get_logger() -> logging.Logger:
    """Return the service logger."""
    return logging.getLogger(LOGGER_NAME)


def setup_logging(log_file: str | os.PathLike[str] = DEFAULT_LOG_FILE,
                  max_megabytes: float = DEFAULT_MAX_MEGABYTES,
                  backups: int = DEFAULT_BACKUPS) -> logging.Logger:
    """Send the service logger's INFO and above to stdout and a rotating file.

    Structured values go in ``extra={"fields": {...}}``. Calling this again
    replaces the previous handlers.
    """
    logger = get_logger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    formatter = _ConsoleFormatter()

    file_handler = RotatingFileHandler(
        path,
        maxBytes=max(1, int(max_megabytes * 1024 * 1024)),
        backupCount=backups,
        encoding="utf-8",
    )
    file_handler.namer = _gzip_namer
    file_handler.rotator = _gzip_rotator
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)
    logger.addHandler(file_handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger