"""
Configuration loader for YAML files and environment overrides.
"""

import logging
import os
from dataclasses import fields, replace
from pathlib import Path
from typing import Optional

import yaml

from .game_config import GameConfig, default_config

logger = logging.getLogger(__name__)

# Environment variable -> (config field, converter)
ENV_OVERRIDES = {
    "PORT": ("port", int),
    "CORS_ALLOWED_ORIGINS": ("cors_allowed_origins", str),
}


def load_config_from_yaml(config_path: str) -> GameConfig:
    """
    Load game configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        GameConfig instance with values from YAML file

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the YAML file is invalid
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, 'r') as f:
        config_dict = yaml.safe_load(f)

    if config_dict is None:
        return replace(default_config)

    known = {f.name for f in fields(GameConfig)}
    values = {}
    for key, value in config_dict.items():
        if key in known:
            values[key] = value
        else:
            # Warn about unknown keys but don't fail
            logger.warning("Unknown config key '%s' in %s", key, config_path)

    return GameConfig(**values)


def apply_env_overrides(config: GameConfig) -> GameConfig:
    """Return a copy of config with values taken from the environment."""
    overrides = {}
    for env_name, (field_name, convert) in ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if raw:
            overrides[field_name] = convert(raw)
    return replace(config, **overrides)


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load configuration from YAML file or return a copy of the default.

    Environment overrides (PORT, CORS_ALLOWED_ORIGINS) are applied on top.
    """
    if config_path is None:
        config = replace(default_config)
    else:
        config = load_config_from_yaml(config_path)

    return apply_env_overrides(config)
