"""
Configuration handling for lsx.

This module provides functionality for loading and managing configuration.
"""

import copy
import os
import sys
from pathlib import Path

import yaml

from lsx.options import Options, SortBy


class ConfigValidationError(ValueError):
    """Raised when a configuration value is invalid."""


# Boolean listing defaults that can be set in the config file or environment
BOOLEAN_DEFAULTS = [
    "long_format",
    "all_files",
    "human_readable",
    "recursive",
    "reverse",
    "expand_patterns",
]

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


class Config:
    """Configuration manager for lsx."""

    # Default configuration
    DEFAULT_CONFIG = {
        "defaults": {
            "long_format": False,
            "all_files": False,
            "human_readable": False,
            "recursive": False,
            "reverse": False,
            "sort_by": "name",  # name, time (newest first) or size (largest first)
            "expand_patterns": True,
            "max_depth": None,  # No limit on recursion depth
        }
    }

    def __init__(self, config_path=None):
        """Initialize configuration.

        Args:
            config_path: Optional path to configuration file.
                If not provided, will look in default locations.
        """
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        self.config_file_found = False

        # Load configuration from file
        config_file = self._find_config_file(config_path)
        if config_file:
            self.config_file_found = self._load_config_file(config_file)

        # Apply environment variable overrides
        self._apply_env_overrides()

    @staticmethod
    def default_config_path():
        """Return the path written by ``create_default_config``."""
        return Path.home() / ".lsx" / "config.yml"

    def _find_config_file(self, config_path=None):
        """Find configuration file.

        Args:
            config_path: Optional explicit path to configuration file.

        Returns:
            Path object to configuration file, or None if not found.
        """
        if config_path:
            path = Path(config_path)
            if path.exists():
                return path
            return None

        # 1. ~/.lsx/config.yml
        home_config = self.default_config_path()
        if home_config.exists():
            return home_config

        # 2. ~/.config/lsx/config.yml
        xdg_config = Path.home() / ".config" / "lsx" / "config.yml"
        if xdg_config.exists():
            return xdg_config

        return None

    def _load_config_file(self, config_file):
        """Load configuration from file.

        Args:
            config_file: Path to configuration file.

        Returns:
            bool: True if the file was read and merged.
        """
        try:
            with open(config_file, "r") as f:
                file_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            print(f"Error loading configuration file: {e}", file=sys.stderr)
            return False

        if file_config:
            if not isinstance(file_config, dict):
                raise ConfigValidationError(
                    f"Configuration file {config_file} must contain a mapping"
                )
            defaults = file_config.get("defaults", {})
            if not isinstance(defaults, dict):
                raise ConfigValidationError(
                    f"defaults in {config_file} must be a mapping, got {defaults!r}"
                )
            self._update_config(self.config, file_config)
        return True

    def _update_config(self, base_config, new_config):
        """Recursively update configuration.

        Args:
            base_config: Base configuration to update.
            new_config: New configuration values.
        """
        for key, value in new_config.items():
            if isinstance(value, dict) and key in base_config and isinstance(base_config[key], dict):
                # Recursively update nested dictionaries
                self._update_config(base_config[key], value)
            else:
                base_config[key] = value

    def _apply_env_overrides(self):
        """Apply environment variable overrides to configuration."""
        defaults = self.config["defaults"]

        for key in BOOLEAN_DEFAULTS:
            env_var_name = f"LSX_{key.upper()}"
            if env_var_name in os.environ:
                defaults[key] = _parse_bool(env_var_name, os.environ[env_var_name])

        if "LSX_SORT_BY" in os.environ:
            defaults["sort_by"] = os.environ["LSX_SORT_BY"].strip().lower()

        if "LSX_MAX_DEPTH" in os.environ:
            value = os.environ["LSX_MAX_DEPTH"].strip()
            try:
                defaults["max_depth"] = int(value) if value else None
            except ValueError:
                raise ConfigValidationError(f"LSX_MAX_DEPTH must be an integer, got {value!r}")

    def get_defaults(self):
        """Get configured listing defaults.

        Returns:
            dict: Listing defaults keyed by option name.
        """
        return self.config["defaults"]

    def to_options(self, **overrides):
        """Build validated listing options.

        Args:
            **overrides: Option values that take precedence over the
                configured defaults. ``None`` values are ignored.

        Returns:
            Options: Immutable listing options.

        Raises:
            ConfigValidationError: If a value is invalid.
        """
        values = dict(self.get_defaults())
        values.update({key: value for key, value in overrides.items() if value is not None})

        unknown = set(values) - set(Options._fields)
        if unknown:
            raise ConfigValidationError(f"Unknown option(s): {', '.join(sorted(unknown))}")

        for key in BOOLEAN_DEFAULTS:
            if not isinstance(values[key], bool):
                raise ConfigValidationError(f"{key} must be true or false, got {values[key]!r}")

        sort_by = values["sort_by"]
        if isinstance(sort_by, str):
            sort_by = sort_by.strip().lower()
        try:
            values["sort_by"] = SortBy(sort_by)
        except ValueError:
            choices = ", ".join(s.value for s in SortBy)
            raise ConfigValidationError(
                f"sort_by must be one of {choices}, got {values['sort_by']!r}"
            )

        max_depth = values["max_depth"]
        if max_depth is not None and (
            isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0
        ):
            raise ConfigValidationError(
                f"max_depth must be a non-negative integer, got {max_depth!r}"
            )

        return Options(**values)

    @classmethod
    def create_default_config(cls, path=None):
        """Write the default configuration file.

        Args:
            path: Optional destination. Defaults to ``~/.lsx/config.yml``.

        Returns:
            Path: The written file, or None if a file already exists there.
        """
        path = Path(path) if path else cls.default_config_path()
        if path.exists():
            print(f"Configuration file already exists: {path}", file=sys.stderr)
            return None

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(cls.DEFAULT_CONFIG, f, default_flow_style=False, sort_keys=False)

        print(f"Created configuration file: {path}")
        return path


def _parse_bool(name, value):
    """Parse a boolean environment value."""
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise ConfigValidationError(f"{name} must be a boolean, got {value!r}")
