"""Structured JSON logging for itsm_tools.

stdout carries the protocol, so records go to stderr as JSONL. When a log
directory is configured they are also written to itsm_tools.log with rotation
(5MB, 3 backups).
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import IO, Any

LOGGER_NAME = "itsm_tools"
_LOG_FILENAME = "itsm_tools.log"
_setup_lock = threading.Lock()
_MAX_BYTES = 5 * 1024 * 1024  # 5MB
_BACKUP_COUNT = 3


class _JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "msg": record.getMessage(),
        }
        if hasattr(record, "tool"):
            entry["tool"] = record.tool
        if hasattr(record, "args_data"):
            entry["args"] = record.args_data
        if hasattr(record, "duration_ms"):
            entry["duration_ms"] = record.duration_ms
        if hasattr(record, "error"):
            entry["error"] = record.error
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = str(record.exc_info[1])
        return json.dumps(entry, default=str)


class _StderrHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Writes to the current ``sys.stderr`` at emit time unless pinned to a stream."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        super().__init__(stream if stream is not None else sys.stderr)
        self.pinned = stream is not None

    def emit(self, record: logging.LogRecord) -> None:
        if not self.pinned:
            self.stream = sys.stderr
        super().emit(record)


def setup_logging(
    log_dir: Path | None = None,
    *,
    level: str | int = logging.INFO,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Attach JSON handlers to the ``itsm_tools`` logger and return it.

    Safe to call repeatedly: one stderr handler at most, and one file handler
    for the most recent *log_dir*.
    """
    logger = logging.getLogger(LOGGER_NAME)

    with _setup_lock:
        stream_handlers = [h for h in logger.handlers if isinstance(h, _StderrHandler)]
        if stream_handlers:
            if stream is not None:
                stream_handlers[0].setStream(stream)
                stream_handlers[0].pinned = True
        else:
            handler = _StderrHandler(stream)
            handler.setFormatter(_JsonFormatter())
            logger.addHandler(handler)

        if log_dir is not None:
            _attach_file_handler(logger, log_dir)

        logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


def _attach_file_handler(logger: logging.Logger, log_dir: Path) -> None:
    """Caller must hold ``_setup_lock``."""
    log_path = log_dir / _LOG_FILENAME
    target_filename = os.path.abspath(str(log_path))

    for h in logger.handlers[:]:
        if not isinstance(h, RotatingFileHandler):
            continue
        if h.baseFilename == target_filename:
            return
        # Different path: remove stale handler to avoid leaks / duplicates.
        logger.removeHandler(h)
        h.close()

    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        str(log_path),
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
    )
    handler.setFormatter(_JsonFormatter())
    logger.addHandler(handler)
