"""
Shape of a default tree, decided once at construction.

Every key of the default tree is tagged as one of:

- BRANCH: the default is a nested mapping (becomes a ConfigNode)
- SECRET: a leaf declared secret at its own level (becomes a SecretProp)
- LEAF: any other value (becomes a PrimitiveProp)

Secret declarations come from the reserved ``__config_meta__`` key at any
level, or from dotted paths passed to ``build_schema``. Declarations are
per level: a ``__config_meta__`` only names siblings, never keys of nested
mappings.
"""

from __future__ import annotations

import collections.abc as _abc
import dataclasses as _dataclasses
import enum as _enum
import typing as _typing

import pydantic as _pydantic

import proptree.errors as errors

META_KEY = "__config_meta__"


class NodeKind(_enum.Enum):
    """What a key of the default tree materializes into."""

    BRANCH = "branch"
    LEAF = "leaf"
    SECRET = "secret"


class ConfigMeta(_pydantic.BaseModel):
    """
    Contents of a ``__config_meta__`` entry.

    YAML/dict form: ``{"secrets": ["pass", "token"]}``
    """

    model_config = _pydantic.ConfigDict(extra="forbid", frozen=True)

    secrets: tuple[str, ...] = ()
    """Sibling keys whose values are secret names."""


@_dataclasses.dataclass(frozen=True)
class SchemaNode:
    """One level of the default tree with every key's kind resolved."""

    path: tuple[str, ...]
    defaults: _abc.Mapping[str, _typing.Any]
    kinds: dict[str, NodeKind]
    children: dict[str, SchemaNode]

    def __contains__(self, key: object) -> bool:
        return key in self.kinds

    def __iter__(self) -> _typing.Iterator[str]:
        return iter(self.kinds)

    def __len__(self) -> int:
        return len(self.kinds)

    def kind_of(self, key: str) -> NodeKind | None:
        return self.kinds.get(key)

    def default(self, key: str) -> _typing.Any:
        return self.defaults[key]

    def check_assignment(self, key: str, value: _typing.Any) -> None:
        """
        Validate a write of ``value`` to ``key`` without applying it.

        Raises:
            InvalidPropertyError: If ``key`` (or any key of a nested
                mapping assigned to a branch) is not in the defaults, or a
                non-mapping is assigned to a branch.
        """
        kind = self.kinds.get(key)
        if kind is None:
            raise errors.InvalidPropertyError(key, self.path)
        if kind is not NodeKind.BRANCH:
            return
        if not isinstance(value, _abc.Mapping):
            raise errors.InvalidPropertyError(
                key,
                self.path,
                reason=f"is a section; expected a mapping, got {type(value).__name__}",
            )
        self.children[key].check_bag(value)

    def check_bag(self, bag: _abc.Mapping[str, _typing.Any]) -> None:
        """Validate every entry of a partial-object assignment."""
        for key, value in bag.items():
            self.check_assignment(key, value)


def _split_paths(
    paths: _typing.Iterable[str],
) -> dict[tuple[str, ...], set[str]]:
    """Group dotted secret paths by the level they belong to."""
    by_level: dict[tuple[str, ...], set[str]] = {}
    for dotted in paths:
        parts = tuple(dotted.split("."))
        if not all(parts):
            raise errors.ConfigMetaError((), f"malformed secret path {dotted!r}")
        by_level.setdefault(parts[:-1], set()).add(parts[-1])
    return by_level


def _read_meta(
    defaults: _abc.Mapping[str, _typing.Any],
    path: tuple[str, ...],
) -> ConfigMeta:
    raw = defaults.get(META_KEY)
    if raw is None:
        return ConfigMeta()
    try:
        return ConfigMeta.model_validate(raw)
    except _pydantic.ValidationError as e:
        raise errors.ConfigMetaError(path, str(e)) from e


def _build_level(
    defaults: _abc.Mapping[str, _typing.Any],
    path: tuple[str, ...],
    declared: dict[tuple[str, ...], set[str]],
) -> SchemaNode:
    meta = _read_meta(defaults, path)
    secret_names = set(meta.secrets) | declared.pop(path, set())

    kinds: dict[str, NodeKind] = {}
    children: dict[str, SchemaNode] = {}
    for key, value in defaults.items():
        if key == META_KEY:
            continue
        if isinstance(value, _abc.Mapping):
            if key in secret_names:
                raise errors.ConfigMetaError(
                    path, f"{key!r} is a section and cannot be declared secret"
                )
            kinds[key] = NodeKind.BRANCH
            children[key] = _build_level(value, path + (key,), declared)
        elif key in secret_names:
            kinds[key] = NodeKind.SECRET
        else:
            kinds[key] = NodeKind.LEAF

    unknown = secret_names - kinds.keys()
    if unknown:
        raise errors.ConfigMetaError(
            path, f"secrets name unknown keys: {', '.join(sorted(unknown))}"
        )

    return SchemaNode(path=path, defaults=defaults, kinds=kinds, children=children)


def build_schema(
    defaults: _abc.Mapping[str, _typing.Any],
    secrets: _typing.Iterable[str] = (),
) -> SchemaNode:
    """
    Tag every key of ``defaults`` and return the root SchemaNode.

    Args:
        defaults: The nested default tree. It is not modified.
        secrets: Dotted paths of additional secret leaves, e.g.
            ``"mongoose.options.pass"``.

    Raises:
        ConfigMetaError: If a ``__config_meta__`` entry is malformed, a
            secret names a missing key or a section, or a secret path
            points outside the tree.
    """
    declared = _split_paths(secrets)
    root = _build_level(defaults, (), declared)
    if declared:
        # Levels that never existed in the tree.
        stray = sorted(
            ".".join(level + (name,))
            for level, names in declared.items()
            for name in names
        )
        raise errors.ConfigMetaError(
            (), f"secret paths not in defaults: {', '.join(stray)}"
        )
    return root
