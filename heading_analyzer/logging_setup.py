"""Logging configuration for the heading analyzer service."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
# requests logs every connection through urllib3 at DEBUG.
QUIET_LOGGERS = ("urllib3",)


def _level_from(value: Optional[str | int]) -> int:
    if isinstance(value, int):
        return value
    name = (value or "").strip().upper()
    if name.isdigit():
        return int(name)
    level = logging.getLevelName(name) if name else None
    return level if isinstance(level, int) else logging.INFO


def log_file_path() -> Path:
    directory = Path(os.getenv("APP_LOG_DIR", "logs"))
    return directory / os.getenv("APP_LOG_FILENAME", "heading-analyzer.log")


def configure_logging(level: Optional[str | int] = None) -> Path:
    """Route root logging to stderr and to a log file rewritten on every start."""

    log_path = log_file_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
        handler.close()

    logging.basicConfig(
        level=_level_from(level),
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_path, mode="w", encoding="utf-8"),
        ],
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, logging.root.level))
    return log_path


def log_settings(logger: logging.Logger, **settings: object) -> None:
    """Record the effective runtime settings once, in a stable order."""
    rendered = ", ".join(f"{key}={settings[key]!r}" for key in sorted(settings))
    logger.info("Heading analyzer settings: %s", rendered)
