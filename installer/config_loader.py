# installer/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the installer.

Handles loading settings from Pydantic model defaults, environment
variables, a YAML file and command-line overrides, applying this order of
precedence (later wins):
1. Pydantic Model Defaults
2. Environment Variables (BAXOO_*, loaded by BaseSettings)
3. YAML Configuration File
4. Command-Line Overrides
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError
from pydantic_settings import SettingsError

from .config_models import AppSettings

module_logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "baxoo.yaml"


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively update `source` with the values from `overrides`.

    Nested dictionaries are merged key by key. A None override never
    replaces an existing value.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
        elif key not in source:
            source[key] = value
    return source


def load_yaml_config(
    config_path: Path,
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Read a YAML mapping from `config_path`.

    Returns an empty dict when the file is missing, unreadable, not valid
    YAML, or not a mapping; each case is logged.
    """
    logger_to_use = current_logger if current_logger else module_logger

    if not config_path.is_file():
        logger_to_use.debug(
            f"Configuration file '{config_path}' not found. Using defaults and environment variables."
        )
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML config file '{config_path}': {e}. Using defaults and environment variables."
        )
        return {}
    except OSError as e:
        logger_to_use.warning(
            f"Could not read config file '{config_path}': {e}. Using defaults and environment variables."
        )
        return {}

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Config file '{config_path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}
    logger_to_use.debug(f"Loaded configuration from {config_path}")
    return yaml_data


def load_app_settings(
    config_file_path: Optional[Union[str, Path]] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Build the effective AppSettings.

    Args:
        config_file_path: YAML file to read. Defaults to baxoo.yaml in the
            current working directory.
        cli_overrides: Values given on the command line; None values are
            ignored.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.

    Raises:
        SystemExit: If the merged configuration fails validation or an
            environment variable cannot be parsed.
    """
    logger_to_use = current_logger if current_logger else module_logger

    try:
        current_values_dict = AppSettings().model_dump(exclude_defaults=False)
    except (ValidationError, SettingsError) as e:
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    yaml_path = Path(config_file_path) if config_file_path else Path.cwd() / DEFAULT_CONFIG_FILE
    current_values_dict = _deep_update(
        current_values_dict, load_yaml_config(yaml_path, logger_to_use)
    )

    if cli_overrides:
        current_values_dict = _deep_update(current_values_dict, cli_overrides)

    try:
        final_settings = AppSettings(**current_values_dict)
    except (ValidationError, SettingsError) as e:
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    logger_to_use.debug("Successfully loaded and validated installer settings")
    return final_settings
