"""
Secret resolution capability.

A secret leaf stores an opaque secret name; on read, the name is handed to a
SecretResolver and the resolver's answer is returned instead. The resolver
back-end (vault, keyring, cloud secret store) is supplied by the caller;
this module only defines the contract and two small adapters.
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing


@_typing.runtime_checkable
class SecretResolver(_typing.Protocol):
    """Anything with ``get_secret(name) -> value``."""

    def get_secret(self, name: str) -> _typing.Any: ...


class _MissingType:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"


MISSING = _MissingType()


class MappingSecretResolver:
    """
    Resolve secret names from an in-memory mapping.

    Unknown names return ``default`` when one is given, otherwise the name
    itself is passed through.

    Example:
        >>> resolver = MappingSecretResolver({"pwd": "hunter2"})
        >>> resolver.get_secret("pwd")
        'hunter2'
        >>> resolver.get_secret("other")
        'other'
    """

    def __init__(
        self,
        secrets: _abc.Mapping[str, _typing.Any],
        default: _typing.Any = MISSING,
    ) -> None:
        self._secrets = secrets
        self._default = default

    def get_secret(self, name: str) -> _typing.Any:
        if name in self._secrets:
            return self._secrets[name]
        if self._default is MISSING:
            return name
        return self._default

    def __repr__(self) -> str:
        # Never show the values.
        return f"MappingSecretResolver(names={sorted(self._secrets)!r})"


class CallableSecretResolver:
    """Adapt a plain ``name -> value`` function to the resolver protocol."""

    def __init__(self, func: _typing.Callable[[str], _typing.Any]) -> None:
        self._func = func

    def get_secret(self, name: str) -> _typing.Any:
        return self._func(name)
