"""Core error types for :mod:`scopelog`."""


class ScopeLogError(Exception):
    """Base class for all scopelog exceptions."""

    def __init__(self, exception: Exception | str, source: str = "Unknown", note: str = ""):
        super().__init__(f"<{source}> {note}: {exception}")
        self.exception = exception
        self.source = source
        self.note = note

    def __str__(self):
        return f"<{self.source}> {self.note}: {self.exception}"


class ConfigurationError(ScopeLogError, ValueError):
    """A configuration value could not be parsed.

    Raised while options are being built, before any logger exists.
    """

    def __init__(self, key: str, value: object, expected: str):
        super().__init__(
            f"{value!r} is not a valid {expected}",
            source="LoggerOptions",
            note=f"Invalid value for '{key}'",
        )
        self.key = key
        self.value = value
