"""
Shared pytest fixtures for proptree tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import copy as _copy
import typing as _typing

import pytest as _pytest

import proptree

# Environment keys that would change Settings defaults
ENV_KEYS_TO_CLEAR = [
    "PROPTREE_MAX_REENTRANT_EMITS",
    "PROPTREE_STRICT_READS",
]

NOMETA_DEFAULTS: dict[str, _typing.Any] = {
    "node": {
        "env": "development",
    },
    "mongoose": {
        "uri": "mongodb://localhost/family",
        "options": {
            "user": "someuser",
            "pass": "somepass",
        },
    },
}


@_pytest.fixture(autouse=True)
def clean_env(monkeypatch: _pytest.MonkeyPatch) -> None:
    """Keep PROPTREE_* variables from the host out of every test."""
    for key in ENV_KEYS_TO_CLEAR:
        monkeypatch.delenv(key, raising=False)


@_pytest.fixture
def defaults() -> dict[str, _typing.Any]:
    """Fresh deep copy of the reference default tree."""
    return _copy.deepcopy(NOMETA_DEFAULTS)


@_pytest.fixture
def secret_defaults() -> dict[str, _typing.Any]:
    """Reference tree with mongoose.options.pass declared secret via metadata."""
    data = _copy.deepcopy(NOMETA_DEFAULTS)
    data["mongoose"]["options"]["pass"] = "pwd"
    data["mongoose"]["options"]["__config_meta__"] = {"secrets": ["pass"]}
    return data


@_pytest.fixture
def settings() -> proptree.Settings:
    """Settings built without reading the environment."""
    return proptree.Settings(max_reentrant_emits=1, strict_reads=False)


@_pytest.fixture
def config(
    defaults: dict[str, _typing.Any],
    settings: proptree.Settings,
) -> proptree.Config:
    """Root node over the reference tree with no sources."""
    return proptree.Config(defaults, settings=settings)


@_pytest.fixture
def resolver() -> proptree.MappingSecretResolver:
    """Resolver knowing the two secret names used across tests."""
    return proptree.MappingSecretResolver(
        {"pwd": "somepass", "dynamo": "dynamosecret"},
        default="UNKNOWN",
    )
