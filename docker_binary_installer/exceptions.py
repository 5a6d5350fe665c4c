# docker_binary_installer/exceptions.py
# -*- coding: utf-8 -*-
"""
Exception types raised by the installer.

Every failure is fatal to the run; the CLI maps any InstallerError to exit
status 1.
"""

from pathlib import Path
from typing import Union


class InstallerError(Exception):
    """Base class for all installer failures."""


class DownloadError(InstallerError):
    """The external downloader could not fetch the release archive."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to download {url}: {reason}")


class MissingArchiveError(InstallerError):
    """The release archive is absent even after a fetch attempt."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"Archive {self.path} not found after download")


class UsageError(InstallerError):
    """No action, an unknown flag, or more than one action was given."""


class StepFailure(InstallerError):
    """An install step reported failure."""

    def __init__(self, step: str, message: str):
        self.step = step
        self.message = message
        super().__init__(f"Install step '{step}' failed: {message}")


class ConfigurationError(InstallerError):
    """Settings could not be resolved (e.g. the host architecture is unknown)."""
