"""
Logging configuration for the calendar service.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger.  The scheduling core logs gesture
transitions at ``DEBUG``; those records are chatty during a drag, so
the ``event_calendar_api.app.calendar`` logger can be given its own
level independently of the root.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CORE_LOGGER = "event_calendar_api.app.calendar"


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    core_level: Optional[str] = None,
) -> None:
    """Configure the root logger exactly once.

    Parameters
    ----------
    level : str
        Logging level name for the root logger (e.g. ``"DEBUG"``).
        Case insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted, no file
        handler is added.
    core_level : Optional[str]
        Separate level for the scheduling core.  When omitted the core
        inherits the root level.
    """
    logger = logging.getLogger()
    if logger.handlers:
        # Already configured (tests, repeated create_app calls).
        return

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if core_level:
        logging.getLogger(CORE_LOGGER).setLevel(
            getattr(logging, core_level.upper(), logging.INFO)
        )
