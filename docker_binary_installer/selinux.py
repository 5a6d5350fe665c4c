# docker_binary_installer/selinux.py
# -*- coding: utf-8 -*-
"""
Turns SELinux off on hosts that ship it.

The running system is switched to permissive with `setenforce 0` and the
persistent configuration is rewritten so the change survives a reboot.
"""

import logging
import re
from pathlib import Path
from typing import Optional

from docker_binary_installer.common.command_utils import (
    get_symbols,
    log_message,
    run_command,
    run_elevated_command,
)
from docker_binary_installer.common.file_utils import backup_file, write_file
from docker_binary_installer.config_models import InstallerSettings

module_logger = logging.getLogger(__name__)

SELINUX_LINE_RE = re.compile(r"^SELINUX=.*$", re.MULTILINE)
DISABLED_LINE = "SELINUX=disabled"


def read_configured_mode(config_text: str) -> Optional[str]:
    """Value of the SELINUX= line, lower-cased, or None if absent."""
    match = SELINUX_LINE_RE.search(config_text)
    if not match:
        return None
    return match.group(0).split("=", 1)[1].strip().strip('"').lower()


def patch_config_text(config_text: str) -> str:
    """Return config text with the SELINUX= line set to disabled (appended if missing)."""
    if SELINUX_LINE_RE.search(config_text):
        return SELINUX_LINE_RE.sub(DISABLED_LINE, config_text, count=1)
    if config_text and not config_text.endswith("\n"):
        config_text += "\n"
    return config_text + DISABLED_LINE + "\n"


def get_runtime_mode(
    settings: Optional[InstallerSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Optional[str]:
    """Current mode from `getenforce` (enforcing/permissive/disabled), or None if unavailable."""
    logger_to_use = current_logger if current_logger else module_logger
    try:
        result = run_command(
            ["getenforce"],
            settings,
            check=False,
            capture_output=True,
            current_logger=logger_to_use,
        )
    except FileNotFoundError:
        return None
    if result.returncode != 0:
        return None
    return (result.stdout or "").strip().lower() or None


def disable_selinux(
    settings: InstallerSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Disable SELinux if its configuration file exists and it is not already off.

    Returns:
        True if anything was changed, False if there was nothing to do.

    Raises:
        subprocess.CalledProcessError: If setenforce or the file write fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(settings)
    config_path = Path(settings.selinux_config_path)

    if not config_path.is_file():
        log_message(
            f"{symbols.get('info', 'ℹ️')} {config_path} not present; SELinux not installed.",
            "info",
            logger_to_use,
            settings,
        )
        return False

    config_text = config_path.read_text(encoding="utf-8")
    runtime_mode = get_runtime_mode(settings, logger_to_use)
    mode = runtime_mode or read_configured_mode(config_text)
    if mode == "disabled":
        log_message(
            f"{symbols.get('info', 'ℹ️')} SELinux already disabled.",
            "info",
            logger_to_use,
            settings,
        )
        return False

    log_message(
        f"{symbols.get('step', '➡️')} SELinux is {mode or 'unknown'}; switching to permissive and disabling at boot...",
        "info",
        logger_to_use,
        settings,
    )
    # setenforce only exists alongside getenforce
    if runtime_mode is not None:
        run_elevated_command(["setenforce", "0"], settings, current_logger=logger_to_use)

    backup_file(config_path, settings, current_logger=logger_to_use)
    write_file(config_path, patch_config_text(config_text), settings, current_logger=logger_to_use)
    return True
