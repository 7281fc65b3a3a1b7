"""
Snapshots of a resolved config tree.

All helpers accept a ConfigNode or a ConfigView and resolve every leaf
(sources, dynamic values, secrets) at call time. With no overrides and no
secrets, ``to_dict(Config(defaults))`` equals ``defaults`` without its
``__config_meta__`` entries.
"""

from __future__ import annotations

import json as _json
import typing as _typing

import yaml as _yaml

import proptree.node as node_mod
import proptree.view as view


def _as_node(config: node_mod.ConfigNode | view.ConfigView) -> node_mod.ConfigNode:
    if isinstance(config, view.ConfigView):
        return view.node_of(config)
    return config


def to_dict(
    config: node_mod.ConfigNode | view.ConfigView,
    *,
    reveal_secrets: bool = True,
) -> dict[str, _typing.Any]:
    """Return plain nested dicts of resolved values."""
    return _as_node(config).to_dict(reveal_secrets=reveal_secrets)


def to_yaml(
    config: node_mod.ConfigNode | view.ConfigView,
    *,
    reveal_secrets: bool = True,
) -> str:
    """
    Dump the resolved tree as YAML, keeping definition order.

    Args:
        config: Node or view to dump.
        reveal_secrets: If False, secret leaves are masked.

    Returns:
        YAML document as a string.
    """
    return _yaml.safe_dump(
        to_dict(config, reveal_secrets=reveal_secrets),
        sort_keys=False,
        default_flow_style=False,
    )


def to_json(
    config: node_mod.ConfigNode | view.ConfigView,
    *,
    reveal_secrets: bool = True,
    **kwargs: _typing.Any,
) -> str:
    """Dump the resolved tree as JSON. Extra kwargs go to ``json.dumps``."""
    return _json.dumps(to_dict(config, reveal_secrets=reveal_secrets), **kwargs)
