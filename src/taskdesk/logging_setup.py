"""Logging configuration for the task desk client."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def resolve_level(value: Optional[str]) -> int:
    """Map a level name such as ``"debug"`` to its numeric value."""

    level = logging.getLevelName((value or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    level: Optional[str] = None, log_file: Optional[str | Path] = None
) -> int:
    """Configure logging from arguments, falling back to LOG_LEVEL / LOG_FILE."""
    # Load .env file first to ensure LOG_FILE is available
    load_dotenv()

    log_level = resolve_level(level or os.getenv("LOG_LEVEL"))
    log_file = log_file or os.getenv("LOG_FILE")

    formatter = logging.Formatter(_FORMAT, datefmt=_DATEFMT)
    handlers: list[logging.Handler] = []

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)
    logging.getLogger("taskdesk").setLevel(log_level)

    # Quiet the HTTP stack unless we are debugging
    http_level = log_level if log_level <= logging.DEBUG else logging.WARNING
    logging.getLogger("httpx").setLevel(http_level)
    logging.getLogger("httpcore").setLevel(http_level)
    return log_level


__all__ = ["configure_logging", "resolve_level"]
