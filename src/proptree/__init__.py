"""
proptree - layered, observable configuration trees.

Wrap a nested dict of defaults, add override sources (command-line style,
environment style, nested objects), resolve selected leaves through a secret
resolver, and get notified when values change.

Example:
    >>> import proptree
    >>> cfg = proptree.Config(
    ...     {"db": {"host": "localhost", "password": "db-password"}},
    ...     secrets=["db.password"],
    ... )
    >>> _ = cfg.add_source(proptree.EnvSource({"DB_HOST": "db.internal"}))
    >>> _ = cfg.set_secret_resolver(
    ...     proptree.MappingSecretResolver({"db-password": "hunter2"})
    ... )
    >>> cfg.value.db.host, cfg.value.db.password
    ('db.internal', 'hunter2')
"""

from proptree.errors import (
    ConfigError,
    ConfigMetaError,
    InvalidPropertyError,
    UndefinedPropertyError,
)
from proptree.node import Config, ConfigNode
from proptree.props import PrimitiveProp, Prop, SecretProp
from proptree.schema import META_KEY, NodeKind
from proptree.secrets import CallableSecretResolver, MappingSecretResolver, SecretResolver
from proptree.serialize import to_dict, to_json, to_yaml
from proptree.settings import Settings
from proptree.sources import ArgsSource, EnvSource, ObjSource, PropSource
from proptree.view import ConfigView, node_of

__all__ = [
    "META_KEY",
    "ArgsSource",
    "CallableSecretResolver",
    "Config",
    "ConfigError",
    "ConfigMetaError",
    "ConfigNode",
    "ConfigView",
    "EnvSource",
    "InvalidPropertyError",
    "MappingSecretResolver",
    "NodeKind",
    "ObjSource",
    "PrimitiveProp",
    "Prop",
    "PropSource",
    "SecretProp",
    "SecretResolver",
    "Settings",
    "UndefinedPropertyError",
    "node_of",
    "to_dict",
    "to_json",
    "to_yaml",
]
