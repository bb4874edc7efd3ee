"""Logging configuration using Loguru.

- Console sink: level is configurable per process via ``LOG_LEVEL`` (default INFO)
- File sink: when ``LOG_DIR`` is set, captures ALL logs (DEBUG+) to
  ``<LOG_DIR>/YYYY-MM-DD.log`` with daily rotation
"""

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger as _loguru_logger


_CONFIGURED: bool = False

_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} - {name} - {level} - {message}"


def _configure_loguru(
    console_level: Optional[str] = None, log_dir: Optional[str] = None
) -> None:
    """Configure Loguru sinks once per process."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    level = console_level or os.getenv("LOG_LEVEL", "INFO")
    directory = log_dir or os.getenv("LOG_DIR")

    # Remove default sink to avoid duplicate outputs
    _loguru_logger.remove()

    _loguru_logger.add(
        sys.stdout,
        level=level,
        format=_FORMAT,
        enqueue=True,
        diagnose=False,
        backtrace=False,
    )

    if directory:
        logs_dir = Path(directory)
        logs_dir.mkdir(parents=True, exist_ok=True)
        log_filepath = logs_dir / f"{datetime.now().strftime('%Y-%m-%d')}.log"
        _loguru_logger.add(
            str(log_filepath),
            level="DEBUG",
            format=_FORMAT,
            rotation="00:00",
            encoding="utf-8",
            enqueue=True,
            diagnose=False,
            backtrace=False,
        )

    _CONFIGURED = True


def setup_logger(name: str, log_level: Optional[str] = None):
    """Return a Loguru logger bound for module usage.

    Note: ``name`` is not required by Loguru to display the module name; the
    format uses ``{name}`` from the call site.
    """
    _configure_loguru(console_level=log_level)
    return _loguru_logger


def get_logger(name: str):
    """Get configured Loguru logger."""
    return setup_logger(name)
