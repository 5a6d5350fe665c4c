# docker_binary_installer/downloader.py
# -*- coding: utf-8 -*-
"""
Release archive download through an external program.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Protocol

from docker_binary_installer.common.command_utils import (
    command_exists,
    get_symbols,
    log_message,
    run_command,
)
from docker_binary_installer.config_models import InstallerSettings
from docker_binary_installer.exceptions import DownloadError

module_logger = logging.getLogger(__name__)

PREFERRED_DOWNLOADERS = ("wget", "curl")
PARTIAL_SUFFIX = ".part"


class Downloader(Protocol):
    """Fetches a URL to a local file, raising DownloadError on failure."""

    def fetch(self, url: str, destination: Path) -> None:
        ...


class CommandDownloader:
    """
    Downloads with wget, or curl when wget is not installed.

    Both write to <destination>.part, resuming it if present, and retry a
    bounded number of times (settings.download_retries). The destination
    only appears once a download completes with a non-empty file.
    """

    def __init__(
        self,
        settings: InstallerSettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.settings = settings
        self.logger = logger or module_logger

    def select_program(self) -> str:
        for program in PREFERRED_DOWNLOADERS:
            if command_exists(program):
                return program
        raise DownloadError(
            "",
            f"none of {', '.join(PREFERRED_DOWNLOADERS)} is installed",
        )

    def build_command(self, program: str, url: str, destination: Path) -> List[str]:
        retries = str(self.settings.download_retries)
        if program == "wget":
            return ["wget", "-c", f"--tries={retries}", "-O", str(destination), url]
        if program == "curl":
            return ["curl", "-fL", "-C", "-", "--retry", retries, "-o", str(destination), url]
        raise ValueError(f"Unsupported downloader '{program}'")

    @staticmethod
    def partial_path(destination: Path) -> Path:
        return destination.with_name(destination.name + PARTIAL_SUFFIX)

    def fetch(self, url: str, destination: Path) -> None:
        symbols = get_symbols(self.settings)
        try:
            program = self.select_program()
        except DownloadError as e:
            raise DownloadError(url, e.reason) from e

        partial = self.partial_path(destination)
        log_message(
            f"{symbols.get('package', '📦')} Downloading {url} with {program}...",
            "info",
            self.logger,
            self.settings,
        )
        try:
            run_command(
                self.build_command(program, url, partial),
                self.settings,
                current_logger=self.logger,
            )
        except subprocess.CalledProcessError as e:
            self._discard_empty(partial)
            raise DownloadError(url, f"{program} exited with status {e.returncode}") from e
        except FileNotFoundError as e:
            self._discard_empty(partial)
            raise DownloadError(url, f"{program} could not be executed") from e

        if not partial.is_file() or partial.stat().st_size == 0:
            self._discard_empty(partial)
            raise DownloadError(url, f"{program} produced no data")

        partial.replace(destination)
        log_message(
            f"{symbols.get('success', '✅')} Downloaded {destination}",
            "success",
            self.logger,
            self.settings,
        )

    def _discard_empty(self, partial: Path) -> None:
        # a non-empty partial file is kept so the next attempt resumes it
        if partial.is_file() and partial.stat().st_size == 0:
            partial.unlink()
