#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # stdout is reserved for JSON results
    ]
)
logger = logging.getLogger("gitresource")

ENV_PREFIX = "GITRESOURCE_"


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. GITRESOURCE_CONFIG environment variable
    2. ~/.gitresource/ directory
    """
    if 'GITRESOURCE_CONFIG' in os.environ:
        path = Path(os.environ['GITRESOURCE_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.gitresource'
    for filename in ['config.json', 'config.toml', 'config.yaml', 'config.yml']:
        path = config_dir / filename
        if path.exists() and path.stat().st_size > 0:
            return path

    return config_dir / 'config.json'


def get_default_config():
    """Return the default configuration."""
    return {
        "git": {
            "default_branch": "master",
            "remote": "origin",
            # Seconds; 0 disables the timeout and leaves it to git itself
            "timeout": 300,
        },
        "ssh": {
            "dir": str(Path.home() / '.ssh'),
        },
        "cache": {
            "dir": str(Path.home() / '.cache' / 'gitresource'),
        },
        "logging": {
            "level": "INFO",
        },
    }


def load_config():
    """Load configuration from file, then apply environment overrides."""
    config_path = get_config_path()

    config = get_default_config()

    if config_path.exists():
        try:
            if config_path.suffix.lower() == '.toml':
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            config = merge_configs(config, file_config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    config = apply_env_overrides(config)

    return config


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
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def _typed(value):
    """Convert an environment string to int/bool where it looks like one."""
    if value.isdigit():
        return int(value)
    if value.lower() in ('true', 'yes', 'on'):
        return True
    if value.lower() in ('false', 'no', 'off'):
        return False
    return value


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.

    Environment variables follow the pattern GITRESOURCE_SECTION_KEY,
    for example GITRESOURCE_GIT_DEFAULT_BRANCH=main or GITRESOURCE_SSH_DIR=/root/.ssh.
    Unknown sections or keys are ignored.
    """
    for env_key, value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX) or env_key == 'GITRESOURCE_CONFIG':
            continue

        remainder = env_key[len(ENV_PREFIX):].lower()
        section, _, key = remainder.partition('_')
        if section not in config or not isinstance(config[section], dict):
            continue
        if key not in config[section]:
            logger.debug(f"Ignoring unknown config override {env_key}")
            continue

        config[section][key] = _typed(value)

    return config


def configure_logging(config, verbose=False):
    """Set the package log level from config, or DEBUG when verbose."""
    level_name = "DEBUG" if verbose else str(config.get("logging", {}).get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    logger.setLevel(level)
