# docker_binary_installer/common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system helpers for writing root-owned files and backing them up.
"""

import datetime
import logging
from pathlib import Path
from typing import Optional, Union

from docker_binary_installer.config_models import InstallerSettings

from .command_utils import get_symbols, log_message, run_elevated_command

module_logger = logging.getLogger(__name__)


def ensure_directory(
    directory_path: Union[str, Path],
    settings: Optional[InstallerSettings],
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Create a directory (and parents) as root if it does not already exist."""
    logger_to_use = current_logger if current_logger else module_logger
    if Path(directory_path).is_dir():
        log_message(
            f"Directory {directory_path} already exists.",
            "debug",
            logger_to_use,
            settings,
        )
        return
    run_elevated_command(
        ["mkdir", "-p", str(directory_path)],
        settings,
        current_logger=logger_to_use,
    )


def write_file(
    file_path: Union[str, Path],
    content: str,
    settings: Optional[InstallerSettings],
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Write content to a root-owned file by piping it through an elevated tee.

    The file is truncated and replaced. Raises CalledProcessError if tee
    fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(settings)
    run_elevated_command(
        ["tee", str(file_path)],
        settings,
        cmd_input=content,
        capture_output=True,
        current_logger=logger_to_use,
    )
    log_message(
        f"{symbols.get('success', '✅')} Wrote {file_path}",
        "success",
        logger_to_use,
        settings,
    )


def backup_file(
    file_path: Union[str, Path],
    settings: Optional[InstallerSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Optional[Path]:
    """
    Copy a file to a timestamped sibling (``<name>.bak.<YYYYmmdd-HHMMSS>``).

    Returns:
        The backup path, or None when the source is not a regular file.

    Raises:
        subprocess.CalledProcessError: If the copy fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(settings)
    source = Path(file_path)
    if not source.is_file():
        log_message(
            f"{symbols.get('info', 'ℹ️')} File {source} does not exist or is not a regular file. No backup needed.",
            "info",
            logger_to_use,
            settings,
        )
        return None

    timestamp = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
    backup_path = source.with_name(f"{source.name}.bak.{timestamp}")
    run_elevated_command(
        ["cp", "-a", str(source), str(backup_path)],
        settings,
        current_logger=logger_to_use,
    )
    log_message(
        f"{symbols.get('success', '✅')} Backed up {source} to {backup_path}",
        "success",
        logger_to_use,
        settings,
    )
    return backup_path
