"""
Exception types for proptree.

Only one kind of failure is raised during normal use: addressing a key that
is not part of the default tree. Malformed secret declarations are rejected
once, when the tree is built.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base class for all proptree errors."""


class InvalidPropertyError(ConfigError):
    """Raised when a write (or an explicit get) targets an unknown key."""

    def __init__(
        self,
        key: str,
        path: tuple[str, ...] = (),
        reason: str = "not a valid config property",
    ) -> None:
        self.key = key
        self.path = path
        where = ".".join(path + (str(key),))
        super().__init__(f"{where} {reason}")


class UndefinedPropertyError(InvalidPropertyError, AttributeError):
    """
    Raised by strict attribute reads of a key that is not in the defaults.

    Being an AttributeError, ``hasattr(view, name)`` and ``getattr(view,
    name, default)`` treat it as a missing attribute.
    """


class ConfigMetaError(ConfigError):
    """Raised when secret declarations in the default tree are malformed."""

    def __init__(self, path: tuple[str, ...], message: str) -> None:
        self.path = path
        where = ".".join(path) if path else "<root>"
        super().__init__(f"Invalid config metadata at {where}: {message}")
