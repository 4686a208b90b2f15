"""Process-wide logging setup.

The terminal belongs to the TUI, so log records go to a daily file in the
per-user log directory instead of stderr.
"""

import logging
from datetime import date
from pathlib import Path

LOGGER_NAME = "gail"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_level(name: str) -> int:
    """Map a level name such as "warn" to its logging constant, INFO if unknown."""
    return LEVELS.get(name.lower(), logging.INFO)


def setup_logging(level: str, log_dir: Path) -> Path:
    """Send records of the 'gail' logger to log_dir/gail_YYYY-MM-DD.log.

    Args:
        level: One of debug, info, warn, error (unknown values mean info)
        log_dir: Directory for log files, created if missing

    Returns:
        Path of the log file

    Raises:
        OSError: If the directory or file cannot be created
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"gail_{date.today():%Y-%m-%d}.log"

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(parse_level(level))
    for existing in list(logger.handlers):
        if isinstance(existing, logging.FileHandler):
            logger.removeHandler(existing)
            existing.close()
    logger.addHandler(handler)
    logger.propagate = False
    return log_file
