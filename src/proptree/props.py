"""
Leaf properties.

A leaf resolves to one value with fixed precedence:

1. the dynamic value, if one was assigned and it is not None
2. the first source whose lookup of the key is truthy
3. the default

Step 2 treats falsy overrides (``0``, ``""``, ``False``) as absent, so a
source cannot override a default with a falsy value. Assigning the value
directly does not have this limitation.
"""

from __future__ import annotations

import abc as _abc
import typing as _typing

if _typing.TYPE_CHECKING:
    import proptree.secrets as secrets
    import proptree.sources as prop_sources


class Prop(_abc.ABC):
    """Common interface of leaves and nested nodes."""

    @property
    @_abc.abstractmethod
    def value(self) -> _typing.Any:
        """The resolved value."""
        ...

    @_abc.abstractmethod
    def set_value(self, value: _typing.Any, propagate: bool = False) -> bool:
        """Assign ``value``; returns True on success."""
        ...


class PrimitiveProp(Prop):
    """
    A plain leaf.

    ``sources`` is the owning node's list itself, not a copy, so sources
    added to that node later are seen here too.
    """

    __slots__ = ("key", "default", "_sources", "_dynamic_value")

    def __init__(
        self,
        default: _typing.Any,
        key: str,
        sources: list[prop_sources.PropSource] | None = None,
    ) -> None:
        self.key = key
        self.default = default
        self._sources = sources if sources is not None else []
        self._dynamic_value: _typing.Any = None

    @property
    def dynamic_value(self) -> _typing.Any:
        return self._dynamic_value

    def set_value(self, value: _typing.Any, propagate: bool = False) -> bool:
        # Notification is the owning node's job.
        self._dynamic_value = value
        return True

    @property
    def raw_value(self) -> _typing.Any:
        """Precedence-resolved value before any secret lookup."""
        if self._dynamic_value is not None:
            return self._dynamic_value

        for source in self._sources:
            found = source.resolve(self.key)
            if found:
                return found

        return self.default

    @property
    def value(self) -> _typing.Any:
        return self.raw_value

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r})"


class SecretProp(PrimitiveProp):
    """
    A leaf whose resolved value is a secret name.

    Reads pass the name through ``secret_resolver``. Without a resolver the
    name is returned unchanged.
    """

    __slots__ = ("secret_resolver",)

    def __init__(
        self,
        default: _typing.Any,
        key: str,
        sources: list[prop_sources.PropSource] | None = None,
        secret_resolver: secrets.SecretResolver | None = None,
    ) -> None:
        super().__init__(default, key, sources)
        self.secret_resolver = secret_resolver

    @property
    def value(self) -> _typing.Any:
        raw = self.raw_value
        if self.secret_resolver is None:
            return raw
        return self.secret_resolver.get_secret(raw)
