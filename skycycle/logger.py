"""
Centralized logging configuration for SkyCycle.

Routine simulation output (ticks, phase changes, storm events) goes to stdout,
WARNING and above go to stderr. Each component logs through a child of the
"skycycle" logger so lines show where they came from:

    2025-01-15 14:30:45 - skycycle.storm - INFO - Storm started (duration=120s)
"""

import logging
import sys
from skycycle.config import LOG_LEVEL

ROOT_LOGGER_NAME = "skycycle"


class MaxLevelFilter(logging.Filter):
    """Pass only records at or below a level."""

    def __init__(self, level_max: int):
        super().__init__()
        self.level_max = level_max

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self.level_max


def setup_logging(level: str = LOG_LEVEL) -> logging.Logger:
    """
    Configure the simulation logger hierarchy.

    Args:
        level: Level name for the "skycycle" logger

    Returns:
        The "skycycle" logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)

    # uvicorn owns the root logger, keep our handlers separate
    root.propagate = False
    root.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(MaxLevelFilter(logging.INFO))
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)

    root.addHandler(stdout_handler)
    root.addHandler(stderr_handler)

    return root


def get_logger(component: str) -> logging.Logger:
    """Return the child logger for a simulation component (e.g. "storm")."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}")


# Global logger instance
logger = setup_logging()
