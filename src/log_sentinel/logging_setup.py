"""Diagnostic logging for Log Sentinel.

Alerts own stdout, so every diagnostic handler configured here writes to
stderr or to a rotating file:

- ``LOG_SENTINEL_LOG_LEVEL``: root level when none is passed (default INFO)
- ``LOG_SENTINEL_LOG_JSON=1``: one JSON object per record
- ``LOG_SENTINEL_LOG_FILE=...``: also write to a size-rotated file

Usage
-----
from .logging_setup import setup_logging, get_logger
setup_logging()  # once, at process start
log = get_logger("log_sentinel.readers")
"""
from __future__ import annotations

import json
import logging
import logging.config
import os
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """Render a record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def env_flag(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _stderr_handler(level: str | int, formatter: str) -> Dict[str, Any]:
    return {
        "class": "logging.StreamHandler",
        "level": level,
        "formatter": formatter,
        "stream": "ext://sys.stderr",
    }


def _rotating_handler(
    level: str | int, formatter: str, path: Path, max_bytes: int, backups: int
) -> Dict[str, Any]:
    path.parent.mkdir(parents=True, exist_ok=True)
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": str(path),
        "maxBytes": max_bytes,
        "backupCount": backups,
        "encoding": "utf-8",
    }


def setup_logging(
    *,
    level: str | int | None = None,
    json_logs: Optional[bool] = None,
    log_file: str | Path | None = None,
    file_max_bytes: int = 5 * 1024 * 1024,
    file_backup_count: int = 3,
) -> None:
    """Configure root logging; explicit arguments beat ``LOG_SENTINEL_*`` env vars.

    Calling it again replaces the previous handlers.
    """
    if level is None:
        level = os.getenv("LOG_SENTINEL_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = level.upper()
    if json_logs is None:
        json_logs = env_flag("LOG_SENTINEL_LOG_JSON", False)
    if log_file is None:
        log_file = os.getenv("LOG_SENTINEL_LOG_FILE")

    formatter = "json" if json_logs else "console"
    handlers: Dict[str, Any] = {"stderr": _stderr_handler(level, formatter)}
    if log_file:
        handlers["file"] = _rotating_handler(
            level, formatter, Path(log_file), file_max_bytes, file_backup_count
        )

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": DEFAULT_FMT, "datefmt": DEFAULT_DATEFMT},
            "json": {"()": JsonFormatter},
        },
        "handlers": handlers,
        "root": {"level": level, "handlers": list(handlers)},
    })


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``log_sentinel`` namespace by default."""
    return logging.getLogger(name if name else "log_sentinel")
