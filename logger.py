"""
logger.py

Responsibility: Configures process-wide logging — console output plus a
daily-rotated log file that keeps the last week of history.
Does NOT: decide what gets logged; modules log through logging.getLogger(__name__).
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler

LOG_DIR = "logs"
LOG_FILE_NAME = "ddns.log"
DAYS_TO_KEEP = 7

_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO", log_dir: str | None = LOG_DIR) -> None:
    """
    Installs console and file handlers on the root logger.

    Safe to call more than once; previously installed handlers are replaced.

    Args:
        level: Root log level name, e.g. "DEBUG" or "INFO".
        log_dir: Directory for ddns.log; None disables file logging.

    Returns:
        None
    """
    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)
    handlers: list[logging.Handler] = []

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    handlers.append(console)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        # Rotate at midnight; older files beyond DAYS_TO_KEEP are deleted
        file_handler = TimedRotatingFileHandler(
            os.path.join(log_dir, LOG_FILE_NAME),
            when="midnight",
            backupCount=DAYS_TO_KEEP,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level.upper())

    # httpx logs every request at INFO; keep it for debugging only
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
