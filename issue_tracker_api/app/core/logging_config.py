"""
Basic logging configuration for the application.

The ``setup_logging`` function configures the root logger with a
console and, optionally, a file handler.  Log format includes the
timestamp, logger name, log level and message.  This module ensures
that logging is set up exactly once, and keeps the uvicorn server
loggers at the same level as the application.
"""

import logging
from pathlib import Path
from typing import Optional


SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure root logger.

    If no handlers are attached to the root logger, attach a
    console handler and optionally a file handler.  The root
    logger's level is set based on the provided ``level``.  The
    uvicorn loggers always follow ``level``, even when the root logger
    was configured elsewhere.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted, no file
        handler is added.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    for name in SERVER_LOGGERS:
        logging.getLogger(name).setLevel(numeric_level)

    logger = logging.getLogger()
    if logger.handlers:
        # Already configured, e.g. by a test runner or a second
        # ``create_app`` call.
        return

    logger.setLevel(numeric_level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
