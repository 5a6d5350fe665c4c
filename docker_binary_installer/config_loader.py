# docker_binary_installer/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the installer.

Handles loading settings from Pydantic model defaults, environment variables,
a YAML file, and command-line arguments, applying this order of precedence:
1. Pydantic Model Defaults
2. Environment Variables (DOCKER_INSTALL_*, via BaseSettings)
3. YAML Configuration File
4. Command-Line Arguments

The host architecture is detected last, only if none of the above set it.
"""

import argparse
import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from docker_binary_installer.common.command_utils import run_command
from docker_binary_installer.config_models import InstallerSettings
from docker_binary_installer.exceptions import ConfigurationError

module_logger = logging.getLogger(__name__)

CONFIG_FILE_DEFAULT = "docker-install.yaml"

# argparse dest -> settings field
CLI_FIELD_MAP: Dict[str, str] = {
    "docker_version": "version",
    "mirror": "mirror",
    "arch": "arch",
    "work_dir": "work_dir",
}


def _deep_update(source: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively update ``source`` in place with ``overrides``.

    Nested dictionaries are merged key by key; None values in ``overrides``
    never replace an existing value.
    """
    for key, value in overrides.items():
        if isinstance(value, dict) and key in source and isinstance(source[key], dict):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
        elif key not in source:
            source[key] = value
    return source


def load_yaml_config(
    config_file_path: Path,
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Read a YAML mapping from disk.

    A missing, unreadable or malformed file is logged and treated as empty.
    """
    logger_to_use = current_logger if current_logger else module_logger

    if not (config_file_path.exists() and config_file_path.is_file()):
        logger_to_use.debug(f"Configuration file '{config_file_path}' not found. Using defaults.")
        return {}

    try:
        with open(config_file_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(f"Could not parse YAML config file '{config_file_path}': {e}. Ignoring it.")
        return {}
    except IOError as e:
        logger_to_use.warning(f"Could not read config file '{config_file_path}': {e}. Ignoring it.")
        return {}

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Config file '{config_file_path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}

    logger_to_use.info(f"Loaded configuration from {config_file_path}")
    return yaml_data


def detect_architecture(
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """Host machine architecture as reported by `uname -m` (e.g. x86_64, aarch64)."""
    logger_to_use = current_logger if current_logger else module_logger
    result = run_command(
        ["uname", "-m"],
        None,
        capture_output=True,
        check=True,
        current_logger=logger_to_use,
    )
    arch = (result.stdout or "").strip()
    if not arch:
        raise ConfigurationError("uname -m returned an empty architecture; set it with --arch")
    return arch


def load_installer_settings(
    cli_args: Optional[argparse.Namespace] = None,
    config_file_path: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
) -> InstallerSettings:
    """
    Build the frozen InstallerSettings for this run.

    Args:
        cli_args: Parsed command-line arguments (from argparse).
        config_file_path: Path to the YAML configuration file. Defaults to
            ``docker-install.yaml`` in the working directory.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        Fully resolved settings, with ``arch`` always set.

    Raises:
        pydantic.ValidationError: If the merged values are invalid.
        subprocess.CalledProcessError: If architecture detection fails.
        ConfigurationError: If the detected architecture is empty.
    """
    logger_to_use = current_logger if current_logger else module_logger

    # Defaults < environment
    current_values_dict = InstallerSettings().model_dump(exclude_defaults=False)

    # < YAML file
    yaml_path = Path(config_file_path) if config_file_path else Path.cwd() / CONFIG_FILE_DEFAULT
    current_values_dict = _deep_update(current_values_dict, load_yaml_config(yaml_path, logger_to_use))

    # < CLI
    if cli_args is not None:
        mapped_cli_values: Dict[str, Any] = {}
        for cli_key, field_name in CLI_FIELD_MAP.items():
            cli_value = getattr(cli_args, cli_key, None)
            if cli_value is not None:
                mapped_cli_values[field_name] = cli_value
        current_values_dict = _deep_update(current_values_dict, mapped_cli_values)

    if not current_values_dict.get("arch"):
        try:
            current_values_dict["arch"] = detect_architecture(logger_to_use)
        except subprocess.CalledProcessError:
            logger_to_use.error("Could not detect host architecture; set it with --arch.")
            raise

    settings = InstallerSettings(**current_values_dict)
    logger_to_use.debug("Successfully loaded and validated installer settings")
    return settings
