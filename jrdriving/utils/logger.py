# jrdriving/utils/logger.py
"""
Centralised logging configuration for the entire application.
Logs to console and, when LOG_FILE is set, to a rotating file.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

_configured = False


def configure_logging(level: str = "INFO", log_file: str | None = None):
    """Install root handlers once. Later calls are ignored."""
    global _configured
    if _configured:
        return
    _configured = True

    level = level.upper()
    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(console)

    if log_file:
        # Keeps last 10 × 5MB log files
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=10,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    return logging.getLogger(name)
