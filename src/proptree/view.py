"""
ConfigView: attribute and item access over a ConfigNode.

The view is what application code holds. Reads resolve through the node,
writes go to ``ConfigNode.set``:

    >>> cfg = Config({"mongoose": {"uri": "mongodb://localhost/app"}})
    >>> settings = cfg.value
    >>> settings.mongoose.uri
    'mongodb://localhost/app'
    >>> settings["mongoose"]["uri"] = "mongodb://db/app"
    >>> settings.extra = 1
    Traceback (most recent call last):
    proptree.errors.InvalidPropertyError: extra not a valid config property

Reads and writes are deliberately asymmetric: reading a key that is not in
the defaults returns None (so exploratory reads do not blow up), while writing
one raises InvalidPropertyError.

``view.on_change(handler)`` registers a change handler unless the defaults
themselves define an ``on_change`` key, which then takes precedence. Names
that clash with Mapping methods (``keys``, ``items``, ``get``, ...) or with
``to_dict`` are reachable with item access.

``copy.copy(view)`` returns the view itself. ``copy.deepcopy`` and pickling
produce a plain-dict snapshot of the resolved values.
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import proptree.errors as errors

if _typing.TYPE_CHECKING:
    import proptree.node as node_mod

ON_CHANGE = "on_change"


class ConfigView(_abc.Mapping[str, _typing.Any]):
    """
    Mapping view of one config level.

    Equality compares resolved content against any Mapping, recursing into
    nested views. Iteration follows the order of the defaults.
    """

    __slots__ = ("_node",)

    def __init__(self, node: node_mod.ConfigNode) -> None:
        object.__setattr__(self, "_node", node)

    # Reads

    def _read(
        self,
        key: str,
        error: type[errors.InvalidPropertyError] = errors.InvalidPropertyError,
    ) -> _typing.Any:
        node = self._node
        if key in node:
            return node.get(key)
        if key == ON_CHANGE:
            return node.on_change
        if node.settings.strict_reads:
            raise error(key, node.path, reason="is not defined in the config defaults")
        return None

    def __getattr__(self, name: str) -> _typing.Any:
        # Only reached when normal lookup fails.
        if name.startswith("_"):
            raise AttributeError(name)
        return self._read(name, errors.UndefinedPropertyError)

    def __getitem__(self, key: str) -> _typing.Any:
        return self._read(key)

    def get(self, key: str, default: _typing.Any = None) -> _typing.Any:
        if key in self._node:
            return self._node.get(key)
        return default

    def __contains__(self, key: object) -> bool:
        return key in self._node

    def __iter__(self) -> _typing.Iterator[str]:
        return iter(self._node.keys())

    def __len__(self) -> int:
        return len(self._node.keys())

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._node.keys()))

    def to_dict(self, *, reveal_secrets: bool = True) -> dict[str, _typing.Any]:
        """Snapshot of this level as plain dicts; see ``ConfigNode.to_dict``."""
        return self._node.to_dict(reveal_secrets=reveal_secrets)

    # Copying

    def __copy__(self) -> ConfigView:
        # A view is bound to its node; a shallow copy is the same view.
        return self

    def __deepcopy__(self, memo: dict[int, _typing.Any]) -> dict[str, _typing.Any]:
        """Deep copies detach from the tree as a ``to_dict()`` snapshot."""
        return self._node.to_dict()

    def __reduce__(self) -> tuple[_typing.Any, ...]:
        # Pickles as a plain dict snapshot; nodes themselves are not picklable.
        return (dict, (self._node.to_dict(),))

    # Writes

    def __setattr__(self, name: str, value: _typing.Any) -> None:
        self._node.set(name, value)

    def __setitem__(self, key: str, value: _typing.Any) -> None:
        self._node.set(key, value)

    def __delattr__(self, name: str) -> None:
        raise TypeError(f"cannot delete config property {name!r}")

    def __delitem__(self, key: str) -> None:
        raise TypeError(f"cannot delete config property {key!r}")

    # Misc

    def __repr__(self) -> str:
        content = self._node.to_dict(reveal_secrets=False)
        return f"ConfigView({content!r}, path={self._node.dotted_path!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, _abc.Mapping):
            return dict(self.items()) == dict(other.items())
        return NotImplemented

    def __hash__(self) -> int:
        raise TypeError(f"unhashable type: '{type(self).__name__}'")


def node_of(config_view: ConfigView) -> node_mod.ConfigNode:
    """Return the ConfigNode behind a view."""
    return object.__getattribute__(config_view, "_node")
