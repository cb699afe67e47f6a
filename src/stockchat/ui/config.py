"""UI configuration constants.

Centralizes magic numbers and labels for the UI module.
"""


class LogLevel:
    """Log level constants with numeric values for comparison.

    DEBUG < INFO < WARNING < ERROR; a panel shows messages at or above
    its threshold.
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARN",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


# Input history configuration
INPUT_HISTORY_MAX_SIZE = 100

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500

# Chat display configuration
MESSAGE_TIMESTAMP_FORMAT = "%H:%M"
PENDING_TEXT = "Thinking"

# Sheet panel configuration
SHEET_LOADING_TEXT = "Loading sheet..."
SHEET_UNCONFIGURED_TEXT = "No sheet configured (set STOCKCHAT_SHEET_ID)"

# Server status labels, keyed by HealthStatus value
STATUS_LABELS = {
    "idle": "[dim]○ idle[/]",
    "checking": "[yellow]◌ checking...[/]",
    "online": "[green]● online[/]",
    "offline": "[red]● offline[/]",
}
