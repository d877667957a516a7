"""Configuration loading for Taskboard.

Settings come from an optional ``taskboard.yaml`` file, then ``TASKBOARD_*``
environment variables override individual keys.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILE_NAME = "taskboard.yaml"
ENV_PREFIX = "TASKBOARD_"


class ConfigError(Exception):
    """Raised when configuration is invalid."""


@dataclass
class TaskboardConfig:
    """Taskboard client and server settings."""

    api_url: str = "http://localhost:5000/api"
    request_timeout: float = 10.0
    db_path: str = "taskboard.db"
    host: str = "127.0.0.1"
    port: int = 5000
    log_dir: str = "logs"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskboardConfig:
        """Create config from dictionary.

        Args:
            data: Configuration dictionary (from YAML or environment).

        Returns:
            Parsed configuration object.

        Raises:
            ConfigError: If a key is unknown or a value has the wrong type.
        """
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        values: dict[str, Any] = {}
        for key, raw in data.items():
            default = known[key].default
            # No setting is a boolean or a collection; YAML's true/yes must not become 1
            if isinstance(raw, (bool, list, dict)):
                raise ConfigError(f"Invalid value for '{key}': {raw!r}")
            try:
                values[key] = type(default)(raw)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid value for '{key}': {raw!r}") from e

        config = cls(**values)
        if config.request_timeout <= 0:
            raise ConfigError("request_timeout must be positive")
        return config


def _env_overrides(environ: Mapping[str, str]) -> dict[str, str]:
    overrides = {}
    for f in fields(TaskboardConfig):
        value = environ.get(ENV_PREFIX + f.name.upper())
        if value is not None:
            overrides[f.name] = value
    return overrides


def find_config(start_path: Path | str | None = None) -> Path | None:
    """Find taskboard.yaml by walking up the directory tree.

    Args:
        start_path: Starting directory. Defaults to current directory.

    Returns:
        Path to the config file, or None if there is none.
    """
    current = Path.cwd() if start_path is None else Path(start_path)
    current = current.resolve()

    for directory in (current, *current.parents):
        config_path = directory / CONFIG_FILE_NAME
        if config_path.exists():
            return config_path
    return None


def load_config(
    config_path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> TaskboardConfig:
    """Load Taskboard configuration.

    Args:
        config_path: Path to a YAML file. Auto-detected when not given; a
            missing auto-detected file just means defaults.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        Parsed configuration object.

    Raises:
        ConfigError: If an explicit file doesn't exist or any file/value is invalid.
    """
    if config_path is None:
        config_path = find_config()
    elif not Path(config_path).exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    data: dict[str, Any] = {}
    if config_path is not None:
        try:
            with open(config_path) as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        if loaded is not None:
            if not isinstance(loaded, dict):
                raise ConfigError(
                    f"Configuration must be a YAML mapping, got {type(loaded).__name__}"
                )
            data.update(loaded)

    data.update(_env_overrides(os.environ if environ is None else environ))
    return TaskboardConfig.from_dict(data)
