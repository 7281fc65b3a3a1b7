"""Tests for ConfigView attribute and item access."""

import copy as _copy
import pickle as _pickle
import typing as _typing

import pytest as _pytest

import proptree
import proptree.node as node
import proptree.view as view


class TestViewReads:
    """Read behavior of the view facade."""

    def test_attribute_and_item_access_agree(self, config: node.Config) -> None:
        """view.key and view['key'] return the same value."""
        v = config.value

        assert v.mongoose.uri == v["mongoose"]["uri"]

    def test_unknown_read_returns_none(self, config: node.Config) -> None:
        """Reading a foreign key is not an error."""
        assert config.value.nonexistent is None
        assert config.value["nonexistent"] is None
        assert config.value.mongoose.options.whatever is None

    def test_private_names_raise_attribute_error(self, config: node.Config) -> None:
        """Underscore names follow normal attribute rules."""
        with _pytest.raises(AttributeError):
            _ = config.value._missing
        assert not hasattr(config.value, "__array_interface__")

    def test_strict_reads(self, defaults: dict[str, _typing.Any]) -> None:
        """strict_reads turns foreign reads into errors."""
        cfg = node.Config(defaults, settings=proptree.Settings(strict_reads=True))

        with _pytest.raises(proptree.InvalidPropertyError, match="nonexistent"):
            _ = cfg.value.nonexistent

    def test_strict_attribute_reads_are_attribute_errors(
        self,
        defaults: dict[str, _typing.Any],
    ) -> None:
        """hasattr and getattr with a default see undefined keys as missing."""
        cfg = node.Config(defaults, settings=proptree.Settings(strict_reads=True))

        assert hasattr(cfg.value, "nonexistent") is False
        assert getattr(cfg.value.mongoose, "nonexistent", "fallback") == "fallback"
        assert hasattr(cfg.value, "mongoose") is True
        with _pytest.raises(proptree.UndefinedPropertyError) as exc_info:
            _ = cfg.value.mongoose.nonexistent
        assert exc_info.value.path == ("mongoose",)

    def test_strict_item_reads_are_not_attribute_errors(
        self,
        defaults: dict[str, _typing.Any],
    ) -> None:
        """Item access keeps raising the plain InvalidPropertyError."""
        cfg = node.Config(defaults, settings=proptree.Settings(strict_reads=True))

        with _pytest.raises(proptree.InvalidPropertyError) as exc_info:
            _ = cfg.value["nonexistent"]
        assert not isinstance(exc_info.value, AttributeError)

    def test_get_with_default(self, config: node.Config) -> None:
        """Mapping.get honors its default for foreign keys."""
        assert config.value.get("nonexistent", 5) == 5
        assert config.value.node.get("env") == "development"

    def test_mapping_protocol(self, config: node.Config) -> None:
        """Iteration, len and containment follow the defaults."""
        v = config.value

        assert list(v) == ["node", "mongoose"]
        assert len(v.mongoose) == 2
        assert "uri" in v.mongoose
        assert "nonexistent" not in v
        assert dict(v.node) == {"env": "development"}

    def test_meta_key_never_visible(
        self,
        secret_defaults: dict[str, _typing.Any],
        settings: proptree.Settings,
    ) -> None:
        """__config_meta__ is absent from iteration and reads."""
        options = node.Config(secret_defaults, settings=settings).value.mongoose.options

        assert list(options) == ["user", "pass"]
        assert proptree.META_KEY not in options
        assert options[proptree.META_KEY] is None

    def test_dir_lists_config_keys(self, config: node.Config) -> None:
        """dir() includes config keys for interactive use."""
        assert "mongoose" in dir(config.value)

    def test_unhashable(self, config: node.Config) -> None:
        """Views are mutable, hence unhashable."""
        with _pytest.raises(TypeError):
            hash(config.value)

    def test_not_equal_to_non_mapping(self, config: node.Config) -> None:
        """Comparison with non-mappings is False."""
        assert config.value != 42

    def test_repr_shows_content_and_path(self, config: node.Config) -> None:
        """repr includes resolved values and the path."""
        text = repr(config.value.mongoose)

        assert "mongodb://localhost/family" in text
        assert "path='mongoose'" in text

    def test_node_of(self, config: node.Config) -> None:
        """node_of returns the backing node."""
        assert view.node_of(config.value) is config


class TestOnChangePseudoProperty:
    """The on_change entry point on views."""

    def test_on_change_is_registration_function(self, config: node.Config) -> None:
        """view.on_change registers a handler on that node."""
        calls: list[_typing.Any] = []

        remove = config.value.node.on_change(calls.append)
        config.value.node.env = "x"
        remove()
        config.value.node.env = "y"

        assert len(calls) == 1

    def test_config_key_shadows_on_change(self, settings: proptree.Settings) -> None:
        """A default named on_change is a plain config value."""
        cfg = node.Config({"on_change": "restart"}, settings=settings)

        assert cfg.value.on_change == "restart"

    def test_on_change_not_iterated(self, config: node.Config) -> None:
        """The pseudo-property is not a key."""
        assert "on_change" not in config.value


class TestViewWrites:
    """Write behavior of the view facade."""

    def test_attribute_write(self, config: node.Config) -> None:
        """Attribute assignment sets the value."""
        config.value.node.env = "production"

        assert config.value.node.env == "production"

    def test_item_write(self, config: node.Config) -> None:
        """Item assignment works for keyword-named keys."""
        config.value.mongoose.options["pass"] = "x"

        assert config.value.mongoose.options["pass"] == "x"

    def test_unknown_write_raises(self, config: node.Config) -> None:
        """Writing a foreign key raises and names it."""
        with _pytest.raises(proptree.InvalidPropertyError) as exc_info:
            config.value["extra"] = "EXTRA"

        assert exc_info.value.key == "extra"
        assert "extra" in str(exc_info.value)

    def test_delete_not_supported(self, config: node.Config) -> None:
        """Keys cannot be removed."""
        with _pytest.raises(TypeError):
            del config.value.node.env
        with _pytest.raises(TypeError):
            del config.value["node"]

    def test_view_equals_updated_dict(
        self,
        config: node.Config,
        defaults: dict[str, _typing.Any],
    ) -> None:
        """Equality reflects writes."""
        expected = _copy.deepcopy(defaults)
        expected["node"]["env"] = "test"

        config.value.node.env = "test"

        assert config.value == expected
        assert config.value != defaults


class TestViewSnapshots:
    """to_dict, copying and pickling of views."""

    def test_to_dict_matches_node(
        self,
        config: node.Config,
        defaults: dict[str, _typing.Any],
    ) -> None:
        """view.to_dict() is the node's snapshot."""
        config.value.node.env = "test"

        snapshot = config.value.to_dict()

        assert snapshot == config.to_dict()
        assert type(snapshot) is dict
        assert type(snapshot["mongoose"]) is dict
        assert config.value.mongoose.to_dict() == defaults["mongoose"]

    def test_to_dict_masks_secrets(
        self,
        secret_defaults: dict[str, _typing.Any],
        settings: proptree.Settings,
        resolver: proptree.MappingSecretResolver,
    ) -> None:
        """reveal_secrets=False hides secret leaves only."""
        cfg = node.Config(secret_defaults, settings=settings, secret_resolver=resolver)

        options = cfg.value.mongoose.options

        assert options.to_dict() == {"user": "someuser", "pass": "somepass"}
        assert options.to_dict(reveal_secrets=False) == {
            "user": "someuser",
            "pass": node.SECRET_MASK,
        }

    def test_to_dict_key_needs_item_access(self, settings: proptree.Settings) -> None:
        """A config key named to_dict is read with item access."""
        cfg = node.Config({"to_dict": "yes"}, settings=settings)

        assert cfg.value["to_dict"] == "yes"
        assert cfg.value.to_dict() == {"to_dict": "yes"}

    def test_shallow_copy_is_same_view(self, config: node.Config) -> None:
        """copy.copy keeps the live view."""
        v = config.value.mongoose

        assert _copy.copy(v) is v

    def test_deepcopy_is_detached_dict(
        self,
        config: node.Config,
        defaults: dict[str, _typing.Any],
    ) -> None:
        """copy.deepcopy yields a plain dict unaffected by later writes."""
        snapshot = _copy.deepcopy(config.value)

        config.value.node.env = "production"

        assert type(snapshot) is dict
        assert snapshot == defaults
        assert config.value.node.env == "production"

    def test_deepcopy_inside_container(self, config: node.Config) -> None:
        """Views nested in other structures deep-copy as snapshots too."""
        copied = _copy.deepcopy({"cfg": config.value.node})

        assert copied == {"cfg": {"env": "development"}}
        assert type(copied["cfg"]) is dict

    def test_pickle_round_trip_gives_snapshot(
        self,
        config: node.Config,
        defaults: dict[str, _typing.Any],
    ) -> None:
        """Pickling a view stores its resolved values as a dict."""
        restored = _pickle.loads(_pickle.dumps(config.value))

        assert type(restored) is dict
        assert restored == defaults
