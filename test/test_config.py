"""
Tests for layered configuration.
"""

import json

import pytest

from strategyconditions.config import DEFAULTS, Config, ConfigError


def test_defaults_loaded_from_bundled_file():
    """The bundled defaults file provides the shortcut table and precedence."""
    assert DEFAULTS["shortcuts"]["e"] == "iff"
    assert DEFAULTS["operator_precedence"][0] == "iff"
    assert DEFAULTS["true_literal_on_empty"] is True


def test_get_returns_default_without_override():
    config = Config()
    assert config.get("debug") is False
    assert config["propositions_path"] == ""
    assert config.get("missing_key") is None
    assert config.get("missing_key", 5) == 5


def test_override_wins():
    config = Config({"propositions_path": "props.txt"})
    assert config.get("propositions_path") == "props.txt"


@pytest.mark.parametrize("raw, expected", [
    ("yes", True),
    ("off", False),
    (1, True),
    (0, False),
    ("maybe", False),
])
def test_bool_coercion(raw, expected):
    assert Config({"debug": raw}).get("debug") is expected


def test_set_and_delete():
    config = Config()
    config["debug"] = True
    assert config.get("debug") is True
    config.delete("debug")
    assert config.get("debug") is False


def test_from_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"shortcuts": {"&": "and"}, "debug": "true"}), encoding="utf-8")
    config = Config.from_file(path)
    assert config.get("shortcuts") == {"&": "and"}
    assert config.get("debug") is True


def test_from_file_missing(tmp_path):
    with pytest.raises(ConfigError, match="Failed to read"):
        Config.from_file(tmp_path / "nope.json")


def test_from_file_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid JSON"):
        Config.from_file(path)


def test_from_file_not_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigError, match="not a JSON object"):
        Config.from_file(path)
