"""
Config nodes: the recursive container of the property tree.

A ConfigNode mirrors one level of the default tree. Children are built on
first access and cached:

- nested mapping → child ConfigNode, with every source narrowed to the key
- key declared secret → SecretProp
- anything else → PrimitiveProp

Sources are kept most-recently-added first. A child node copies its parent's
(narrowed) source list when it is materialized, so sources added to an
ancestor afterwards only reach children that do not exist yet. Leaf props
share their own node's list and do see later additions.

Example:
    >>> cfg = Config({"db": {"host": "localhost", "port": 5432}})
    >>> _ = cfg.add_source(prop_sources.EnvSource({"DB_HOST": "db.internal"}))
    >>> cfg.value.db.host
    'db.internal'
    >>> cfg.value.db.port = 6432
    >>> cfg.to_dict()
    {'db': {'host': 'db.internal', 'port': 6432}}
"""

from __future__ import annotations

import collections.abc as _abc
import copy as _copy
import logging as _logging
import typing as _typing
import weakref as _weakref

import proptree.errors as errors
import proptree.notify as notify
import proptree.props as props
import proptree.schema as schema
import proptree.settings as settings_mod
import proptree.sources as prop_sources
import proptree.view as view

if _typing.TYPE_CHECKING:
    import proptree.secrets as prop_secrets

_logger = _logging.getLogger(__name__)

SECRET_MASK = "***"


class ConfigNode(props.Prop):
    """
    One level of the config tree.

    The explicit accessors ``get``/``set``/``set_value`` are the core API;
    ``value`` returns a ConfigView that maps attribute and item access onto
    them.

    Thread safety: none. Writers must be serialized by the caller.
    """

    def __init__(
        self,
        node_schema: schema.SchemaNode,
        *,
        settings: settings_mod.Settings,
        sources: _typing.Iterable[prop_sources.PropSource] = (),
        secret_resolver: prop_secrets.SecretResolver | None = None,
        parent: ConfigNode | None = None,
    ) -> None:
        self._schema = node_schema
        self._settings = settings
        self._props: dict[str, props.Prop] = {}
        self._sources: list[prop_sources.PropSource] = list(sources)
        self._secret_resolver = secret_resolver
        # Only used to walk notifications upward.
        self._parent_ref = _weakref.ref(parent) if parent is not None else None
        self._channel = notify.ChangeChannel(
            self.dotted_path, max_reentrant=settings.max_reentrant_emits
        )
        self._view = view.ConfigView(self)

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def path(self) -> tuple[str, ...]:
        """Keys leading from the root to this node."""
        return self._schema.path

    @property
    def dotted_path(self) -> str:
        return ".".join(self._schema.path) if self._schema.path else "<root>"

    @property
    def parent(self) -> ConfigNode | None:
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def settings(self) -> settings_mod.Settings:
        return self._settings

    @property
    def sources(self) -> tuple[prop_sources.PropSource, ...]:
        """Current sources in resolution order (first wins)."""
        return tuple(self._sources)

    @property
    def secret_resolver(self) -> prop_secrets.SecretResolver | None:
        return self._secret_resolver

    @property
    def materialized(self) -> tuple[str, ...]:
        """Keys whose child has been built so far."""
        return tuple(self._props)

    def keys(self) -> list[str]:
        """Keys of the default tree at this level, in definition order."""
        return list(self._schema)

    def kind_of(self, key: str) -> schema.NodeKind | None:
        return self._schema.kind_of(key)

    def __contains__(self, key: object) -> bool:
        return key in self._schema

    def __repr__(self) -> str:
        return f"ConfigNode(path={self.dotted_path!r}, keys={self.keys()!r})"

    # =========================================================================
    # Source and secret registration
    # =========================================================================

    def add_source(self, source: prop_sources.PropSource) -> ConfigNode:
        """
        Register ``source`` ahead of all existing ones (most recent wins).

        Child nodes that were already materialized keep the source list they
        were created with.
        """
        self._sources.insert(0, source)
        _logger.debug("Added source %r at %s", source, self.dotted_path)
        return self

    def set_secret_resolver(
        self,
        resolver: prop_secrets.SecretResolver | None,
    ) -> ConfigNode:
        """Attach or replace the resolver here and on all built descendants."""
        self._secret_resolver = resolver
        for child in self._props.values():
            if isinstance(child, ConfigNode):
                child.set_secret_resolver(resolver)
            elif isinstance(child, props.SecretProp):
                child.secret_resolver = resolver
        _logger.debug("Secret resolver set at %s", self.dotted_path)
        return self

    # =========================================================================
    # Children
    # =========================================================================

    def get_child(self, key: str) -> props.Prop:
        """
        Return the child for ``key``, building it on first access.

        Raises:
            InvalidPropertyError: If ``key`` is not in the defaults.
        """
        child = self._props.get(key)
        if child is None:
            child = self._materialize(key)
        return child

    def _materialize(self, key: str) -> props.Prop:
        kind = self._schema.kind_of(key)
        if kind is None:
            raise errors.InvalidPropertyError(key, self.path)

        child: props.Prop
        if kind is schema.NodeKind.BRANCH:
            child = ConfigNode(
                self._schema.children[key],
                settings=self._settings,
                sources=[s.create_child_source(key) for s in self._sources],
                secret_resolver=self._secret_resolver,
                parent=self,
            )
        elif kind is schema.NodeKind.SECRET:
            child = props.SecretProp(
                self._schema.default(key),
                key,
                self._sources,
                self._secret_resolver,
            )
        else:
            child = props.PrimitiveProp(self._schema.default(key), key, self._sources)

        _logger.debug(
            "Materialized %s at %s as %s", key, self.dotted_path, kind.value
        )
        self._props[key] = child
        return child

    # =========================================================================
    # Reads
    # =========================================================================

    def get(self, key: str) -> _typing.Any:
        """
        Resolved value of ``key``.

        Nested sections resolve to their ConfigView, which is the same object
        on every access.

        Raises:
            InvalidPropertyError: If ``key`` is not in the defaults.
        """
        return self.get_child(key).value

    def resolve(self, key: str) -> _typing.Any:
        """First truthy override for ``key`` among this node's sources, or None."""
        for source in self._sources:
            found = source.resolve(key)
            if found:
                return found
        return None

    @property
    def value(self) -> view.ConfigView:
        return self._view

    def to_dict(self, *, reveal_secrets: bool = True) -> dict[str, _typing.Any]:
        """
        Snapshot of the resolved tree as plain dicts.

        Args:
            reveal_secrets: If False, secret leaves are replaced by a mask.
        """
        result: dict[str, _typing.Any] = {}
        for key in self._schema:
            child = self.get_child(key)
            if isinstance(child, ConfigNode):
                result[key] = child.to_dict(reveal_secrets=reveal_secrets)
            elif isinstance(child, props.SecretProp) and not reveal_secrets:
                result[key] = SECRET_MASK
            else:
                result[key] = _copy.deepcopy(child.value)
        return result

    # =========================================================================
    # Writes
    # =========================================================================

    def set(self, key: str, value: _typing.Any) -> bool:
        """
        Assign ``value`` to ``key`` and notify this node and its ancestors.

        Assigning a mapping to a section updates only the keys it names.
        Assigning None to a leaf clears its dynamic value. The write is
        validated in full before anything changes.

        Raises:
            InvalidPropertyError: If ``key`` (or a nested key of a mapping
                assigned to a section) is not in the defaults, or a
                non-mapping is assigned to a section.
        """
        self._schema.check_assignment(key, value)
        _logger.debug("Setting %s at %s", key, self.dotted_path)
        result = self.get_child(key).set_value(value, propagate=False)
        self._emit(propagate=True)
        return result

    def set_value(
        self,
        value: _abc.Mapping[str, _typing.Any],
        propagate: bool = True,
    ) -> bool:
        """
        Apply a partial-object assignment, then notify once.

        Args:
            value: Mapping of keys at this level to new values.
            propagate: Also notify ancestors.

        Raises:
            TypeError: If ``value`` is not a mapping.
            InvalidPropertyError: If any key is not in the defaults. Nothing
                is applied in that case.
        """
        if not isinstance(value, _abc.Mapping):
            raise TypeError(
                f"{self.dotted_path} expects a mapping, got {type(value).__name__}"
            )
        self._schema.check_bag(value)
        for key, item in value.items():
            self.get_child(key).set_value(item, propagate=False)
        self._emit(propagate=propagate)
        return True

    # =========================================================================
    # Notifications
    # =========================================================================

    def on_change(
        self,
        handler: notify.ChangeHandler,
    ) -> _typing.Callable[[], None]:
        """
        Call ``handler(view)`` whenever this node or a descendant changes.

        Returns:
            A callable that unregisters the handler.
        """
        return self._channel.subscribe(handler)

    def remove_change_handler(self, handler: notify.ChangeHandler) -> None:
        self._channel.unsubscribe(handler)

    def _emit(self, propagate: bool) -> None:
        self._channel.emit(self._view)
        if propagate:
            parent = self.parent
            if parent is not None:
                parent._emit(propagate=True)


class Config(ConfigNode):
    """
    Root of a config tree.

    Args:
        defaults: Nested default values. Not modified; may carry
            ``__config_meta__`` entries declaring secret siblings.
        secrets: Extra secret leaves as dotted paths.
        sources: Initial sources, highest precedence first.
        secret_resolver: Resolver for secret leaves.
        settings: Library settings; read from the environment if omitted.

    Raises:
        ConfigMetaError: If secret declarations are malformed.
    """

    def __init__(
        self,
        defaults: _abc.Mapping[str, _typing.Any],
        *,
        secrets: _typing.Iterable[str] = (),
        sources: _typing.Iterable[prop_sources.PropSource] = (),
        secret_resolver: prop_secrets.SecretResolver | None = None,
        settings: settings_mod.Settings | None = None,
    ) -> None:
        super().__init__(
            schema.build_schema(defaults, secrets),
            settings=settings if settings is not None else settings_mod.Settings(),
            sources=sources,
            secret_resolver=secret_resolver,
        )
