# docker_binary_installer/common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing host commands and logging their output.
"""

import logging
import os
import shutil
import subprocess
from typing import Dict, List, Optional

from docker_binary_installer.config_models import (
    SYMBOLS_DEFAULT,
    InstallerSettings,
)

module_logger = logging.getLogger(__name__)


def get_symbols(settings: Optional[InstallerSettings]) -> Dict[str, str]:
    """Return the log symbols from settings, falling back to the defaults."""
    if settings is not None and settings.symbols:
        return settings.symbols
    return SYMBOLS_DEFAULT


def log_message(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    settings: Optional[InstallerSettings] = None,
) -> None:
    """
    Logs a message at the named level.

    "success" is not a logging level of its own; it is recorded as info so
    that its symbol is the only thing distinguishing it in the output.

    Args:
        message (str): The log message to be recorded.
        level (str): One of "debug", "info", "success", "warning", "error"
            or "critical". Unknown names are logged as info.
        current_logger (Optional[logging.Logger]): Logger to use. Defaults to
            the module logger.
        settings (Optional[InstallerSettings]): Installer settings. Accepted
            for symmetry with the other helpers.
    """
    effective_logger = current_logger if current_logger else module_logger

    if level == "warning":
        effective_logger.warning(message)
    elif level == "error":
        effective_logger.error(message)
    elif level == "critical":
        effective_logger.critical(message)
    elif level == "debug":
        effective_logger.debug(message)
    else:
        effective_logger.info(message)


def _get_elevated_command_prefix() -> List[str]:
    """
    Returns ["sudo"] when the process is not running as root, otherwise an
    empty list.
    """
    return [] if os.geteuid() == 0 else ["sudo"]


def run_command(
    command: List[str],
    settings: Optional[InstallerSettings],
    check: bool = True,
    capture_output: bool = False,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
) -> subprocess.CompletedProcess:
    """
    Executes a host command, logging the command line and, when captured,
    its output.

    Args:
        command (List[str]): The program and its arguments.
        settings (Optional[InstallerSettings]): Installer settings, used for
            log symbols.
        check (bool): Raise CalledProcessError on a non-zero exit code.
        capture_output (bool): Capture stdout and stderr as text.
        cmd_input (Optional[str]): Data passed on stdin.
        current_logger (Optional[logging.Logger]): Logger to use.

    Returns:
        subprocess.CompletedProcess: The completed process.

    Raises:
        subprocess.CalledProcessError: If check is True and the command fails.
        FileNotFoundError: If the executable is not found.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = get_symbols(settings)

    log_message(
        f"{symbols.get('gear', '⚙️')} Executing: {subprocess.list2cmdline(command)}",
        "info",
        effective_logger,
        settings,
    )
    try:
        result = subprocess.run(
            command,
            check=check,
            capture_output=capture_output,
            text=True,
            input=cmd_input,
        )
        if capture_output:
            if result.stdout and result.stdout.strip():
                log_message(
                    f"   stdout: {result.stdout.strip()}",
                    "debug",
                    effective_logger,
                    settings,
                )
            if result.stderr and result.stderr.strip() and (not check or result.returncode == 0):
                log_message(
                    f"   stderr: {result.stderr.strip()}",
                    "debug",
                    effective_logger,
                    settings,
                )
        return result
    except subprocess.CalledProcessError as e:
        log_message(
            f"{symbols.get('error', '❌')} Command `{subprocess.list2cmdline(e.cmd)}` failed (rc {e.returncode}).",
            "error",
            effective_logger,
            settings,
        )
        if e.stdout and e.stdout.strip():
            log_message(f"   stdout: {e.stdout.strip()}", "error", effective_logger, settings)
        if e.stderr and e.stderr.strip():
            log_message(f"   stderr: {e.stderr.strip()}", "error", effective_logger, settings)
        raise
    except FileNotFoundError as e:
        log_message(
            f"{symbols.get('error', '❌')} Command not found: {e.filename}. Ensure it's installed and in PATH.",
            "error",
            effective_logger,
            settings,
        )
        raise


def run_elevated_command(
    command: List[str],
    settings: Optional[InstallerSettings],
    check: bool = True,
    capture_output: bool = False,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
) -> subprocess.CompletedProcess:
    """
    Executes a command with root privileges, prefixing it with sudo when the
    process is not already root. Arguments are as for run_command.
    """
    elevated_command_list = _get_elevated_command_prefix() + list(command)
    return run_command(
        elevated_command_list,
        settings,
        check=check,
        capture_output=capture_output,
        cmd_input=cmd_input,
        current_logger=current_logger,
    )


def command_exists(command_name: str) -> bool:
    """
    Check if a command exists in the system's PATH.

    Parameters:
        command_name (str): The name of the command to check for existence.

    Returns:
        bool: True if the command is found in the system's PATH, False otherwise.
    """
    return shutil.which(command_name) is not None


def describe_command_error(error: Exception) -> str:
    """Short one-line description of a failed command, for error messages."""
    if isinstance(error, subprocess.CalledProcessError):
        cmd = subprocess.list2cmdline(error.cmd) if isinstance(error.cmd, list) else str(error.cmd)
        return f"`{cmd}` exited with status {error.returncode}"
    if isinstance(error, FileNotFoundError) and error.filename:
        return f"command not found: {error.filename}"
    return str(error)
