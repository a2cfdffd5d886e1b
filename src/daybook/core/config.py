"""
Layered configuration for daybook.

Sources, lowest to highest precedence:
    1. Built-in defaults (derived from the data directory)
    2. Config file (YAML or JSON)
    3. Environment variables: DAYBOOK_SECTION__KEY=value

The data directory is resolved first, from the same sources, so setting only
``paths.data_dir`` moves the cache, log and local sync folders along with it.

Usage:
    config = Config(config_file="~/.daybook/config.yaml")

    config.get("sync.backend")          # dot-notation access
    config.get("paths.cache_dir")
    config.validated().sync.timeout_seconds
"""

from __future__ import annotations

import copy
import json
import os
from typing import TYPE_CHECKING, Any

import yaml

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .config_schema import DaybookConfig

ENV_PREFIX = "DAYBOOK_"
DEFAULT_DATA_DIR = os.path.join("~", ".daybook-data")


def default_config(data_dir: str) -> dict[str, Any]:
    """Built-in settings for a diary whose files live under *data_dir*."""
    data_dir = os.path.expanduser(data_dir)
    return {
        "paths": {
            "data_dir": data_dir,
            "cache_dir": os.path.join(data_dir, "cache"),
            "log_dir": os.path.join(data_dir, "logs"),
        },
        "sync": {
            "backend": "none",
            "folder": os.path.join(data_dir, "remote"),
            "service_account_key": "",
            "entries_key": "diary_entries.json",
            "settings_key": "diary_settings.json",
            "debounce_seconds": 1.0,
            "timeout_seconds": 10.0,
        },
        "search": {
            "fuzzy": True,
        },
        "journal": {
            "default_field_titles": ["Field 1", "Field 2", "Field 3"],
        },
    }


def read_config_file(path: str) -> dict[str, Any]:
    """Parse a YAML (.yaml/.yml) or JSON (.json) file; other extensions yield {}.

    Raises:
        ConfigurationError: If the file cannot be parsed or is not a mapping.
    """
    ext = os.path.splitext(path)[1].lower()
    try:
        with open(path, encoding="utf-8") as f:
            if ext in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            elif ext == ".json":
                data = json.load(f)
            else:
                return {}
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot parse config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def deep_merge(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *source* into *target* (in place) and return it."""
    for key, value in source.items():
        if isinstance(target.get(key), dict) and isinstance(value, dict):
            deep_merge(target[key], value)
        else:
            target[key] = value
    return target


def env_overrides(prefix: str, environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Nested dict from PREFIX_SECTION__KEY variables (keys lowercased, values left as strings)."""
    overrides: dict[str, Any] = {}
    if not prefix:
        return overrides
    for name, value in (os.environ if environ is None else environ).items():
        if not name.startswith(prefix):
            continue
        *parents, leaf = name[len(prefix) :].lower().split("__")
        node = overrides
        for part in parents:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]
        node[leaf] = value
    return overrides


class Config:
    """
    Central configuration manager.

    Args:
        config_file: Path to a YAML or JSON file. Missing files are skipped.
        env_prefix: Prefix for environment overrides ("" disables them).
        data_dir: Default data directory when neither file nor env sets one.
        defaults: Extra defaults merged over the built-ins (below file and env).
    """

    def __init__(
        self,
        config_file: str | None = None,
        env_prefix: str = ENV_PREFIX,
        data_dir: str | None = None,
        defaults: dict[str, Any] | None = None,
    ):
        self.config_file = os.path.expanduser(config_file) if config_file else None
        self.env_prefix = env_prefix or ""
        self._data_dir = data_dir or DEFAULT_DATA_DIR
        self._extra_defaults = defaults or {}
        self.config_data: dict[str, Any] = {}
        self.reload()

    def reload(self) -> None:
        """Re-read the config file and environment."""
        overrides: dict[str, Any] = {}
        if self.config_file and os.path.exists(self.config_file):
            deep_merge(overrides, read_config_file(self.config_file))
        deep_merge(overrides, env_overrides(self.env_prefix))

        data_dir = overrides.get("paths", {}).get("data_dir") or self._data_dir
        data = default_config(str(data_dir))
        deep_merge(data, copy.deepcopy(self._extra_defaults))
        self.config_data = deep_merge(data, overrides)

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a config value by dot-notation path.

        Args:
            key_path: e.g. "paths.cache_dir", "sync.backend"
            default: Returned when the key is not found.
        """
        node: Any = self.config_data
        for part in key_path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key_path: str, value: Any) -> None:
        """Set a value by dot-notation path, creating intermediate sections."""
        *parents, leaf = key_path.split(".")
        node = self.config_data
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value

    def validated(self) -> DaybookConfig:
        """Return the configuration as a validated, typed ``DaybookConfig``.

        Raises:
            ConfigurationError: If any section fails validation.
        """
        from pydantic import ValidationError as PydanticValidationError

        from .config_schema import DaybookConfig

        try:
            return DaybookConfig.model_validate(self.config_data)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def get_data_dir(self) -> str:
        return os.path.expanduser(self.get("paths.data_dir", self._data_dir))

    def ensure_directories(self) -> None:
        """Create every directory under ``paths``."""
        for value in self.get("paths", {}).values():
            if isinstance(value, str) and value:
                os.makedirs(os.path.expanduser(value), exist_ok=True)


_config_instance: Config | None = None


def get_config(
    config_file: str | None = None,
    env_prefix: str = ENV_PREFIX,
    data_dir: str | None = None,
) -> Config:
    """Get or create the process-wide Config."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config(config_file=config_file, env_prefix=env_prefix, data_dir=data_dir)
    return _config_instance


def reset_config() -> None:
    """Forget the process-wide Config (for tests)."""
    global _config_instance
    _config_instance = None
