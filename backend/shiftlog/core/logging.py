# shiftlog/core/logging.py
"""
Application-wide logging configuration.

One stream handler to stdout with a readable, consistent format.
Verbosity is controlled by LOG_LEVEL without code changes.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging for the application.

    Args:
        level: Logging level as a string (e.g. "INFO", "DEBUG", "WARNING").

    Safe to call more than once: existing root handlers are replaced.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # gspread/google-auth are chatty at DEBUG; keep them at WARNING unless asked.
    if log_level > logging.DEBUG:
        for name in ("urllib3", "google.auth"):
            logging.getLogger(name).setLevel(logging.WARNING)
