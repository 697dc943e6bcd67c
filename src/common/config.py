"""Configuration file loading for the developer portal.

Handles loading of ``app-config.yaml`` style YAML files. Several files can
be layered (e.g. ``app-config.yaml`` then ``app-config.production.yaml``),
later files overriding earlier ones key by key.
"""

import os
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping

import yaml


DEFAULT_CONFIG_PATH = "/app/app-config.yaml"


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
        TypeError: If the document root is not a mapping
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_file.open("r") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise TypeError(
            f"Configuration root must be a mapping, got {type(config).__name__}"
        )

    # Expand environment variables
    config = _expand_env_vars(config)

    return config


def load_configs(config_paths: Iterable[str]) -> Dict[str, Any]:
    """Load and merge several configuration files in order.

    Args:
        config_paths: Paths to configuration files, lowest precedence first

    Returns:
        Merged configuration dictionary
    """
    merged: Dict[str, Any] = {}
    for config_path in config_paths:
        merged = merge_configs(merged, load_config(config_path))
    return merged


def merge_configs(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Deep-merge two config mappings. Lists and scalars are replaced, not merged."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in configuration.

    Args:
        obj: Configuration object (dict, list, str, etc.)

    Returns:
        Configuration with expanded environment variables
    """
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return os.path.expandvars(obj)
    else:
        return obj
