"""Ambient stack of logical-operation scopes.

The active chain is kept in a :class:`contextvars.ContextVar` as an immutable
linked list of frames. Each thread and each asyncio task sees its own chain;
a task starts from a snapshot of the chain active when it was created, and
frames it pushes are never visible to its parent or siblings.
"""

from contextvars import ContextVar
from typing import Any, Callable, TypeVar

StateT = TypeVar("StateT")


class ScopeFrame:
    """One pushed scope value plus a link to the frame it was pushed over."""

    __slots__ = ("value", "parent")

    def __init__(self, value: Any, parent: "ScopeFrame | None"):
        self.value = value
        self.parent = parent


class ScopeHandle:
    """Pops its frame when closed. Usable as a context manager."""

    def __init__(self, provider: "ScopeProvider", frame: ScopeFrame):
        self._provider = provider
        self._frame = frame
        self._closed = False

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._provider._restore(self._frame)

    def __enter__(self) -> "ScopeHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class NullScope:
    """Handle returned when no scope provider is attached."""

    def close(self) -> None:
        pass

    def __enter__(self) -> "NullScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        pass


NULL_SCOPE = NullScope()


class ScopeRef:
    """Mutable slot holding the scope provider shared by a group of loggers."""

    def __init__(self, value: "ScopeProvider | None" = None):
        self.value = value


class ScopeProvider:
    """Pushes scope values and walks the active chain.

    Example:
        >>> scopes = ScopeProvider()
        >>> with scopes.push({"request": "r1"}):
        ...     with scopes.push("inner"):
        ...         scopes.current_values()
        ['inner', {'request': 'r1'}]
    """

    def __init__(self) -> None:
        self._current: ContextVar[ScopeFrame | None] = ContextVar(
            f"scopelog_scope_{id(self):x}", default=None
        )

    def push(self, value: Any) -> ScopeHandle:
        """Push ``value`` as the innermost frame of the current context."""
        frame = ScopeFrame(value, self._current.get())
        self._current.set(frame)
        return ScopeHandle(self, frame)

    def _restore(self, frame: ScopeFrame) -> None:
        self._current.set(frame.parent)

    def for_each_scope(
        self, callback: Callable[[Any, StateT], None], state: StateT
    ) -> None:
        """Invoke ``callback(value, state)`` for every active frame, innermost first."""
        frame = self._current.get()
        while frame is not None:
            callback(frame.value, state)
            frame = frame.parent

    def current_values(self) -> list[Any]:
        """Active scope values, innermost first."""
        values: list[Any] = []
        self.for_each_scope(lambda value, acc: acc.append(value), values)
        return values
