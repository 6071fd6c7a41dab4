"""Log levels and event identities."""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity of a log call, ordered from most verbose to silent.

    ``NONE`` is the sentinel meaning "do not log".
    """

    TRACE = 0
    DEBUG = 1
    INFORMATION = 2
    WARNING = 3
    ERROR = 4
    CRITICAL = 5
    NONE = 6

    @property
    def label(self) -> str:
        """Name used in rendered output, e.g. ``"Information"``."""
        return self.name.capitalize()

    @classmethod
    def parse(cls, text: str) -> "LogLevel":
        """Look a level up by its name, case-insensitively."""
        key = text.strip().upper()
        if key == "WARN":
            key = "WARNING"
        elif key == "INFO":
            key = "INFORMATION"
        return cls[key]


@dataclass(frozen=True)
class EventId:
    """Identity of a kind of log call: an optional number plus an optional name."""

    id: int = 0
    name: str | None = None

    def __str__(self) -> str:
        return self.name or str(self.id)
