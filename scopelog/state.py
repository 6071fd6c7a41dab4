"""Message-template state: a structured log state built from a template.

``FormattedState("Log in scope, {step}", 2)`` behaves as the mapping
``{"step": 2, "{OriginalFormat}": "Log in scope, {step}"}`` and renders as
``"Log in scope, 2"``. Being a :class:`~collections.abc.Mapping`, it is picked
up as structured data both as a log state (``semantics``) and as a scope frame.
"""

import re
from collections.abc import Iterator, Mapping
from typing import Any

ORIGINAL_FORMAT_KEY = "{OriginalFormat}"
NULL_VALUE = "(null)"

_TOKEN = re.compile(r"\{\{|\}\}|\{([^{}]*)\}")


def _parse(template: str) -> list[str | tuple[str, str]]:
    """Split a template into literal text and ``(name, format_spec)`` holes."""
    segments: list[str | tuple[str, str]] = []
    pos = 0
    for match in _TOKEN.finditer(template):
        if match.start() > pos:
            segments.append(template[pos:match.start()])
        token = match.group(0)
        if token == "{{":
            segments.append("{")
        elif token == "}}":
            segments.append("}")
        else:
            hole = match.group(1)
            name, _, spec = hole.partition(":")
            name = name.split(",", 1)[0].strip()
            segments.append((name, spec))
        pos = match.end()
    if pos < len(template):
        segments.append(template[pos:])
    return segments


def _format_value(value: Any, spec: str) -> str:
    if value is None:
        return NULL_VALUE
    if spec:
        try:
            return format(value, spec)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


class FormattedState(Mapping):
    """A template plus positional values, exposed as ordered key/value pairs."""

    def __init__(self, template: str, *args: Any):
        self.template = template
        self.args = args
        self._segments = _parse(template)
        self._names = [seg[0] for seg in self._segments if isinstance(seg, tuple)]

        pairs: dict[str, Any] = {}
        for name, value in zip(self._names, args):
            pairs[name] = value
        pairs[ORIGINAL_FORMAT_KEY] = template
        self._pairs = pairs

    def __getitem__(self, key: str) -> Any:
        return self._pairs[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __str__(self) -> str:
        if not self.args:
            return self.template

        parts: list[str] = []
        index = 0
        for seg in self._segments:
            if isinstance(seg, str):
                parts.append(seg)
                continue
            name, spec = seg
            if index < len(self.args):
                parts.append(_format_value(self.args[index], spec))
            else:
                # no value bound: keep the hole as written
                parts.append("{" + name + (":" + spec if spec else "") + "}")
            index += 1
        return "".join(parts)

    def __repr__(self) -> str:
        return f"FormattedState({', '.join(map(repr, (self.template, *self.args)))})"

    @staticmethod
    def formatter(state: "FormattedState", exception: BaseException | None) -> str:
        """Formatter to pass to :meth:`ScopeLogger.log` alongside this state."""
        return str(state)


def is_structured(value: Any) -> bool:
    """Whether ``value`` is a structured key/value collection."""
    return isinstance(value, Mapping)
