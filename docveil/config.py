"""Loading plugin defaults from YAML or JSON files."""

from __future__ import annotations

import yaml
from pathlib import Path
from typing import Optional

from .models import PluginDefaults
from .plugin import HiddenFieldsPlugin


class DefaultsLoader:
    """
    Loads library-level defaults from a YAML file.

    Usage:
        loader = DefaultsLoader("hidden.yaml")
        plugin = loader.plugin()
        schema.plugin(plugin)

    The file holds the same keys as the defaults mapping, e.g.

        autoHideJSON: false
        defaultHidden:
          _id: true
          password: true
    """

    def __init__(self, config_path: str | Path):
        self.config_path = Path(config_path)
        self._defaults: Optional[PluginDefaults] = None

    @property
    def defaults(self) -> PluginDefaults:
        """Load and cache the defaults from file."""
        if self._defaults is None:
            self._defaults = PluginDefaults.from_dict(self._load_config())
        return self._defaults

    def _load_config(self) -> dict:
        """Load the mapping from a YAML or JSON file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            content = f.read()

        # JSON is valid YAML
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse config file: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Config file must contain a mapping, got {type(data).__name__}"
            )
        return data

    def plugin(self) -> HiddenFieldsPlugin:
        """Create a plugin using the loaded defaults."""
        return HiddenFieldsPlugin(self.defaults)


def load_defaults(config_path: str | Path) -> PluginDefaults:
    """Read plugin defaults from a YAML or JSON file."""
    return DefaultsLoader(config_path).defaults


def load_plugin(config_path: str | Path) -> HiddenFieldsPlugin:
    """Create a plugin whose defaults are read from a YAML or JSON file."""
    return DefaultsLoader(config_path).plugin()
