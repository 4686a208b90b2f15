"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""

import logging

from ..log import parse_level


class LogLevel:
    """Log level constants with numeric values for comparison.

    Mirrors the standard logging hierarchy: DEBUG < INFO < WARNING < ERROR.
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARN",
        ERROR: "ERROR",
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns INFO if invalid."""
        return parse_level(level_str)


# Status bar
STATUS_CLEAR_SECONDS = 10.0  # Delay before the default help text returns
DEFAULT_STATUS = (
    "ctrl+q quit | ctrl+s send | ctrl+r role | ctrl+e skill | "
    "ctrl+d save | ctrl+o open in editor | ctrl+l log"
)
LOADING_STATUS = "thinking..."

# Input history configuration
INPUT_HISTORY_MAX_SIZE = 100  # Maximum entries in input history

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages
