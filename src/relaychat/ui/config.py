"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""


class LogLevel:
    """Severity thresholds shared by the log panel and console logging.

    Levels arrive from debug callbacks as lowercase names and are compared
    numerically against the active threshold.
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _levels = {"debug": DEBUG, "info": INFO, "warning": WARNING, "error": ERROR}

    @classmethod
    def name(cls, level: int) -> str:
        for label, value in cls._levels.items():
            if value == level:
                return label.upper()
        return "UNKNOWN"

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Map a level name to its threshold; unknown names map to DEBUG."""
        return cls._levels.get(level_str.lower(), cls.DEBUG)

    @classmethod
    def is_valid(cls, level_str: str) -> bool:
        return level_str.lower() in cls._levels


# Input history configuration
INPUT_HISTORY_MAX_SIZE = 100  # Maximum entries in input history

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages

# Chat display configuration
MESSAGE_TIMESTAMP_FORMAT = "%H:%M:%S"
THINKING_TEXT = "Thinking..."

# Toast durations (seconds)
ERROR_TOAST_TIMEOUT = 5
NOTICE_TOAST_TIMEOUT = 3

# Where users obtain a key
API_KEY_URL = "https://platform.openai.com/api-keys"
