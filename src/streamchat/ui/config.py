"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""

from enum import IntEnum


class LogLevel(IntEnum):
    """Log levels for the debug panel.

    Standard logging hierarchy: DEBUG < INFO < WARNING < ERROR.
    A message is shown when its level is at or above the panel threshold.
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    @classmethod
    def from_string(cls, level_str: str) -> "LogLevel":
        """Convert string to log level. Returns DEBUG if invalid."""
        try:
            return cls[level_str.upper()]
        except KeyError:
            return cls.DEBUG


# Scroll-follow tolerance in terminal rows
SCROLL_FOLLOW_TOLERANCE_ROWS = 2

# Code block configuration
CODE_THEME = "monokai"
COPY_FEEDBACK_SECONDS = 2.0  # How long "Copied" stays on a copy button

# Input history configuration
INPUT_HISTORY_MAX_SIZE = 100

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages

# Chat display configuration
HEADER_TIME_FORMAT = "%H:%M"  # Message header timestamp
INPUT_PLACEHOLDER = "Ask Gemini"
