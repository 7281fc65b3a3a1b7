"""
Per-node change notification.

Each ConfigNode owns one ChangeChannel. Delivery is synchronous, in
registration order, inside the call that made the change. Handler
exceptions propagate to the writer.

A handler may itself write to the tree. Nested emissions on the same
channel are delivered up to ``max_reentrant`` levels deep; anything deeper
is dropped with a warning so a handler that keeps rewriting its own node
cannot recurse without bound.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

_logger = _logging.getLogger(__name__)

ChangeHandler = _typing.Callable[[_typing.Any], None]


class ChangeChannel:
    """Listener list for one node."""

    def __init__(self, name: str = "<root>", max_reentrant: int = 1) -> None:
        self.name = name
        self.max_reentrant = max_reentrant
        self._handlers: list[ChangeHandler] = []
        self._depth = 0

    def subscribe(self, handler: ChangeHandler) -> _typing.Callable[[], None]:
        """
        Register ``handler``.

        Returns:
            A callable that removes the handler again.
        """
        self._handlers.append(handler)
        return lambda: self.unsubscribe(handler)

    def unsubscribe(self, handler: ChangeHandler) -> None:
        """Remove one registration of ``handler``; unknown handlers are ignored."""
        try:
            self._handlers.remove(handler)
        except ValueError:
            pass

    def emit(self, payload: _typing.Any) -> bool:
        """
        Call every handler with ``payload``.

        Returns:
            False if the emission was dropped by the re-entrancy limit.
        """
        if self._depth > self.max_reentrant:
            _logger.warning(
                "Dropping change notification for %s: handlers re-entered %d levels deep",
                self.name,
                self._depth,
            )
            return False

        self._depth += 1
        try:
            # Snapshot so handlers may (un)subscribe while being called.
            for handler in list(self._handlers):
                handler(payload)
        finally:
            self._depth -= 1
        return True

    @property
    def emitting(self) -> bool:
        return self._depth > 0

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"ChangeChannel({self.name!r}, handlers={len(self._handlers)})"
