#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

from .errors import ConfigError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("portfolio")

CONFIG_DIR_NAME = '.portfolio'
TOKEN_ENV_VARS = ('PORTFOLIO_GITHUB_TOKEN', 'GITHUB_TOKEN')


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. PORTFOLIO_CONFIG environment variable
    2. ~/.portfolio/config.{json,toml,yaml,yml}
    """
    if 'PORTFOLIO_CONFIG' in os.environ:
        path = Path(os.environ['PORTFOLIO_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / CONFIG_DIR_NAME
    for filename in ['config.json', 'config.toml', 'config.yaml', 'config.yml']:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def _read_config_file(config_path):
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ['.yaml', '.yml']:
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config(strict=False):
    """
    Load configuration from file.

    Args:
        strict: Raise ConfigError for an unreadable file instead of
            logging it and falling back to the defaults
    """
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    if config_path.exists():
        try:
            file_config = _read_config_file(config_path)
            if not isinstance(file_config, dict):
                raise ValueError("top level must be a mapping")
            config = merge_configs(config, file_config)
        except (OSError, ValueError, tomllib.TOMLDecodeError, yaml.YAMLError) as e:
            if strict:
                raise ConfigError(f"Error loading config from {config_path}: {e}") from e
            logger.error(f"Error loading config from {config_path}: {e}")

    config = apply_env_overrides(config)

    if not config['github'].get('token'):
        for var in TOKEN_ENV_VARS:
            if os.environ.get(var):
                config['github']['token'] = os.environ[var]
                break

    return config


def save_config(config):
    """
    Save configuration to file.

    TOML files are read-only for the standard library, so a TOML config
    path is saved as JSON next to it.

    Returns:
        Path the configuration was written to
    """
    config_path = get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        if config_path.suffix.lower() == '.toml':
            logger.warning("TOML config is read-only. Saving as JSON instead.")
            config_path = config_path.with_suffix('.json')

        if config_path.suffix.lower() in ['.yaml', '.yml']:
            with open(config_path, 'w') as f:
                yaml.safe_dump(config, f, default_flow_style=False)
        else:
            with open(config_path, 'w') as f:
                json.dump(config, f, indent=2)
    except OSError as e:
        raise ConfigError(f"Error saving config to {config_path}: {e}") from e

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def get_default_config():
    """Get default configuration."""
    return {
        "github": {
            "username": "microsoft",
            "token": "",
            "api_url": "https://api.github.com",
            "timeout_seconds": 30
        },
        "feed": {
            "limit": 12,
            "fork_min_stars": 5,
            "starred_min_stars": 50,
            "debounce_ms": 300
        },
        "theme": {
            "storage_path": "~/.portfolio/storage.json",
            "storage_key": "portfolio-theme",
            "system_preference": ""
        },
        "site": {
            "title": "Portfolio",
            "output_dir": "site",
            "projects_file": ""
        },
        "logging": {
            "level": "INFO"
        }
    }


def configure_logging(config=None, verbose=False):
    """Set the package log level from the config, or DEBUG when verbose."""
    if verbose:
        level = logging.DEBUG
    else:
        name = str(((config or {}).get('logging') or {}).get('level', 'INFO')).upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            logger.warning(f"Unknown log level {name!r}, using INFO")
            level = logging.INFO
    logger.setLevel(level)
    return level


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: PORTFOLIO_SECTION_KEY
    For example: PORTFOLIO_FEED_DEBOUNCE_MS=150
    """
    env_prefix = "PORTFOLIO_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == 'PORTFOLIO_CONFIG':
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        # Convert value
        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts_from_key = config_key.split('_')
                if key_parts[i : i + len(config_key_parts_from_key)] == config_key_parts_from_key:
                    if len(config_key_parts_from_key) > best_match_len:
                        best_match_len = len(config_key_parts_from_key)
                        matched_key = config_key

            if matched_key:
                # If we are at the end of the env var, we have found the key to set
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = typed_value
                    break

                # Otherwise, we descend into the dictionary
                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    # Path conflict, e.g., env var is longer but we found a non-dict value
                    break
            else:
                # No match found
                break

    return config
