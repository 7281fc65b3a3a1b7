"""
Override sources for config properties.

A source maps a key, under its current scope, to an override value. Every
source can derive a child scoped to one more path segment, so a node at any
depth resolves its keys the same way without knowing the source's naming
convention:

- ArgsSource: flat flag mapping, ``mongoose-options-pass``
- EnvSource: flat variable mapping, ``MONGOOSE_OPTIONS_PASS``
- ObjSource: nested mapping, ``obj["mongoose"]["options"]["pass"]``

Sources hold their backing mapping by reference and never modify it.
"""

from __future__ import annotations

import abc as _abc
import collections.abc as _collections_abc
import typing as _typing

_EMPTY: _collections_abc.Mapping[str, _typing.Any] = {}


class PropSource(_abc.ABC):
    """
    A read-only override lookup that can be narrowed to a child scope.

    Subclasses implement ``create_child_source`` and ``view``. The view is a
    Mapping over the keys visible in the current scope; ``resolve`` is a
    shortcut for ``view.get(key)``.
    """

    @_abc.abstractmethod
    def create_child_source(self, key: str) -> PropSource:
        """Return a new source scoped to ``key``. Must not modify ``self``."""

    @property
    @_abc.abstractmethod
    def view(self) -> _collections_abc.Mapping[str, _typing.Any]:
        """Read-only lookup over this scope."""

    def resolve(self, key: str) -> _typing.Any:
        """Return the override for ``key`` in this scope, or None if unset."""
        return self.view.get(key)


class ScopedView(_collections_abc.Mapping[str, _typing.Any]):
    """
    Read-only view of a flat mapping through a key-naming function.

    ``view[key]`` looks up ``scoped_name(key)`` in the backing mapping.
    Iteration yields the remainder of every backing key that falls under
    the scope prefix and that a lookup could reach, so every iterated key
    is also ``in`` the view.

    Example:
        >>> view = ScopedView({"db-host": "x"}, prefix="db", separator="-",
        ...                   transform=str.lower)
        >>> view["HOST"]
        'x'
        >>> list(view)
        ['host']
    """

    __slots__ = ("_data", "_prefix", "_separator", "_transform")

    def __init__(
        self,
        data: _collections_abc.Mapping[str, _typing.Any],
        prefix: str,
        separator: str,
        transform: _typing.Callable[[str], str],
    ) -> None:
        self._data = data
        self._prefix = prefix
        self._separator = separator
        self._transform = transform

    def scoped_name(self, key: str) -> str:
        """Return the backing name for ``key`` under this scope."""
        name = self._transform(key)
        return f"{self._prefix}{self._separator}{name}" if self._prefix else name

    def __getitem__(self, key: str) -> _typing.Any:
        if not isinstance(key, str):
            raise KeyError(key)
        return self._data[self.scoped_name(key)]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return self.scoped_name(key) in self._data

    def __iter__(self) -> _typing.Iterator[str]:
        lead = f"{self._prefix}{self._separator}" if self._prefix else ""
        for name in self._data:
            if lead and not name.startswith(lead):
                continue
            remainder = name[len(lead):]
            # Names the transform can never produce are unreachable by lookup.
            if remainder and self.scoped_name(remainder) == name:
                yield remainder

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"ScopedView(prefix={self._prefix!r}, keys={list(self)!r})"


class _NestedView(_collections_abc.Mapping[str, _typing.Any]):
    """Read-only view over one level of a nested mapping."""

    __slots__ = ("_data",)

    def __init__(self, data: _collections_abc.Mapping[str, _typing.Any]) -> None:
        self._data = data

    def __getitem__(self, key: str) -> _typing.Any:
        return self._data[key]

    def __iter__(self) -> _typing.Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"_NestedView({dict(self._data)!r})"


class ArgsSource(PropSource):
    """
    Command-line style source.

    Backed by already-parsed flag names (without leading dashes). Keys are
    lower-cased and joined with ``-`` below the root scope.

    Example:
        >>> src = ArgsSource({"mongoose-options-pass": "s3cret"})
        >>> src.create_child_source("mongoose").create_child_source(
        ...     "options").resolve("pass")
        's3cret'
    """

    separator = "-"

    def __init__(
        self,
        args: _collections_abc.Mapping[str, _typing.Any] | None = None,
        prefix: str = "",
    ) -> None:
        self._args = args if args is not None else _EMPTY
        self.prefix = prefix
        self._view = ScopedView(self._args, prefix, self.separator, str.lower)

    def create_child_source(self, key: str) -> ArgsSource:
        return ArgsSource(self._args, self._view.scoped_name(key))

    @property
    def view(self) -> ScopedView:
        return self._view

    def __repr__(self) -> str:
        return f"ArgsSource(prefix={self.prefix!r})"


class EnvSource(PropSource):
    """
    Environment-variable style source.

    Backed by a flat name → value mapping (typically a copy of
    ``os.environ``, supplied by the caller). Keys are upper-cased and
    joined with ``_`` below the root scope.
    """

    separator = "_"

    def __init__(
        self,
        env: _collections_abc.Mapping[str, _typing.Any] | None = None,
        prefix: str = "",
    ) -> None:
        self._env = env if env is not None else _EMPTY
        self.prefix = prefix
        self._view = ScopedView(self._env, prefix, self.separator, str.upper)

    def create_child_source(self, key: str) -> EnvSource:
        return EnvSource(self._env, self._view.scoped_name(key))

    @property
    def view(self) -> ScopedView:
        return self._view

    def __repr__(self) -> str:
        return f"EnvSource(prefix={self.prefix!r})"


class ObjSource(PropSource):
    """
    Nested-mapping source mirroring the config tree.

    Child scoping descends one level with no renaming. A missing or
    non-mapping child yields an empty source rather than an error.
    """

    def __init__(
        self,
        obj: _collections_abc.Mapping[str, _typing.Any] | None = None,
    ) -> None:
        self._obj = obj if obj is not None else _EMPTY
        self._view = _NestedView(self._obj)

    def create_child_source(self, key: str) -> ObjSource:
        child = self._obj.get(key)
        if not isinstance(child, _collections_abc.Mapping):
            return ObjSource()
        return ObjSource(child)

    @property
    def view(self) -> _collections_abc.Mapping[str, _typing.Any]:
        return self._view

    def __repr__(self) -> str:
        return f"ObjSource({dict(self._obj)!r})"
