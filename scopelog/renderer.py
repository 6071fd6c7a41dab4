"""Renderers turning a populated record into the string handed to the sink."""

import json
import math
from abc import ABC, abstractmethod
from collections.abc import Mapping, Set
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from .options import LoggerOptions
from .utils import get_full_error_info, safe_str


class LogRenderer(ABC):
    """
    The abstract class for record renderers.

    ``render`` must be pure: the same record always yields the same string.
    """

    @abstractmethod
    def render(self, record: Mapping[str, Any] | None, options: LoggerOptions) -> str: ...


class JsonRenderer(LogRenderer):
    """
    Render records as one JSON object per call.

    - Keys keep the record's insertion order; ``None`` values are dropped.
    - Enums render by name (``LogLevel`` by its label, e.g. ``"Information"``).
    - Exceptions render as their full traceback text rather than as objects.
    - Datetimes render as ISO-8601; anything else JSON cannot express renders
      through ``str()``. Rendering never raises because of a value.

    Parameters
    - indent: Optional[int]
        Pretty-print with this indentation. ``None`` (default) keeps the
        output on a single line.
    """

    def __init__(self, indent: int | None = None):
        self.indent = indent

    def render(self, record: Mapping[str, Any] | None, options: LoggerOptions) -> str:
        data = self._convert(record or {}, ())
        try:
            return self._dumps(data)
        except (TypeError, ValueError):
            # e.g. NaN with allow_nan off or a str subclass misbehaving
            return self._dumps(self._stringify(data))

    def _dumps(self, data: Any) -> str:
        if self.indent is None:
            return json.dumps(data, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
        return json.dumps(data, ensure_ascii=False, allow_nan=False, indent=self.indent)

    def _convert(self, value: Any, path: tuple[int, ...]) -> Any:
        """Convert ``value`` into plain JSON types. ``path`` holds ids of enclosing containers."""
        if isinstance(value, Enum):
            return getattr(value, "label", value.name)
        if value is None or isinstance(value, (bool, str)):
            return value
        if isinstance(value, int):
            return int(value)
        if isinstance(value, float):
            return value if math.isfinite(value) else str(value)
        if isinstance(value, BaseException):
            return get_full_error_info(value)
        if isinstance(value, (datetime, date, time)):
            return value.isoformat()

        if isinstance(value, (Mapping, list, tuple, Set)):
            if id(value) in path:
                return safe_str(value)
            inner = path + (id(value),)
            try:
                if isinstance(value, Mapping):
                    return {
                        safe_str(k): self._convert(v, inner)
                        for k, v in value.items()
                        if v is not None
                    }
                return [self._convert(v, inner) for v in value]
            except Exception:
                return safe_str(value)

        return safe_str(value)

    def _stringify(self, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: self._stringify(v) for k, v in data.items()}
        if isinstance(data, list):
            return [self._stringify(v) for v in data]
        if data is None or isinstance(data, (bool, int, str)):
            return data
        return safe_str(data)
