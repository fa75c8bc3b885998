"""
Configuration management for the condition editor.

Defaults come from the bundled ``data/config_defaults.json``; a host can
layer overrides on top, either as a dict or from a JSON file.  Nothing is
persisted by this module.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from . import package_logger
from .paths import data_path

logger = package_logger(__name__)

DEFAULTS_FILE_NAME = "config_defaults.json"

# Fallback defaults used if the bundled defaults file cannot be read.
_FALLBACK_DEFAULTS = {
    "shortcuts": {
        "a": "and",
        "o": "or",
        "n": "not",
        "i": "implies",
        "x": "xor",
        "e": "iff",
    },
    # Binary operators, loosest binding first.
    "operator_precedence": ["iff", "implies", "or", "xor", "and"],
    "propositions_path": "",
    # Show the "true" sentinel when the editor loses focus while empty.
    "true_literal_on_empty": True,
    "debug": False,
}


def _load_defaults_from_file() -> Dict[str, Any]:
    defaults = dict(_FALLBACK_DEFAULTS)
    defaults_path = data_path(DEFAULTS_FILE_NAME)
    try:
        raw = defaults_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(
            "Could not read defaults file '%s': %s; using built-in defaults",
            defaults_path,
            e,
        )
        return defaults

    try:
        loaded = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(
            "Failed parsing defaults file '%s': %s; using built-in defaults",
            defaults_path,
            e,
        )
        return defaults

    if not isinstance(loaded, dict):
        logger.warning(
            "Defaults file '%s' is not a JSON object; using built-in defaults",
            defaults_path,
        )
        return defaults

    for key, value in loaded.items():
        if isinstance(key, str):
            defaults[key] = value
    return defaults


# Defaults for all configuration keys. Loaded from config_defaults.json.
DEFAULTS = _load_defaults_from_file()


class ConfigError(Exception):
    """Raised when an overrides file cannot be loaded."""
    pass


class Config:
    """
    Layered configuration: explicit overrides on top of DEFAULTS.

    Values whose default is a scalar are coerced to the default's type on
    read, so an override file may spell ``"debug": "yes"`` or a port as a
    string.
    """

    def __init__(self, overrides: Optional[Dict[str, Any]] = None):
        self._values: Dict[str, Any] = dict(overrides or {})

    @classmethod
    def from_file(cls, path: Path) -> "Config":
        """
        Load overrides from a JSON object file.

        Raises:
            ConfigError: If the file is missing or not a JSON object
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigError(f"Failed to read config file: {e}")
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Config file '{path}' is not a JSON object")
        logger.info(f"Loaded {len(data)} config overrides from {path}")
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Args:
            key: Configuration key name.
            default: Default value if key not found (uses DEFAULTS if not provided).

        Returns:
            Configuration value, or default.
        """
        if default is None:
            default = DEFAULTS.get(key)

        if key not in self._values:
            return default

        value = self._values[key]
        if key in DEFAULTS:
            return _coerce(value, DEFAULTS[key], key)
        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value."""
        self._values[key] = value
        logger.debug(f"Configuration '{key}' set to {value!r}")

    def delete(self, key: str) -> None:
        """Drop an override so the default applies again."""
        if self._values.pop(key, None) is not None:
            logger.debug(f"Configuration '{key}' deleted")

    def __getitem__(self, key: str) -> Any:
        """Allow dictionary-style access."""
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        """Allow dictionary-style assignment."""
        self.set(key, value)


_TRUE_LITERALS = {"1", "true", "yes", "on", "y", "t"}
_FALSE_LITERALS = {"0", "false", "no", "off", "n", "f", ""}


def _coerce(value: Any, default: Any, key: str) -> Any:
    """Convert *value* to the type of *default* where that is meaningful."""
    expected_type = type(default)
    if isinstance(value, expected_type):
        return value

    if expected_type is bool and isinstance(value, (str, int, float)):
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in _TRUE_LITERALS:
                return True
            if normalized in _FALSE_LITERALS:
                return False
        else:
            return value != 0
    elif expected_type is str and isinstance(value, (int, float)):
        return str(value)
    elif expected_type in (dict, list):
        # Structured values are used as given; callers validate them.
        return value

    logger.warning(f"Config key '{key}' has unexpected value {value!r}; using default")
    return default
