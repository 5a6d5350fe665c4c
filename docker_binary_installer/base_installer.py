# docker_binary_installer/base_installer.py
# -*- coding: utf-8 -*-
"""
Base installer class.

Defines the interface the CLI dispatches to: fetching the release artifact,
installing it, and checking whether it is installed.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from docker_binary_installer.config_models import InstallerSettings


class BaseInstaller(ABC):
    """
    Base class for installers.

    Subclasses raise an InstallerError subclass on failure rather than
    returning a status flag.
    """

    def __init__(
        self,
        settings: InstallerSettings,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the installer.

        Args:
            settings: The installer settings.
            logger: Optional logger instance. If not provided, a new logger will be created.
        """
        self.settings = settings
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def fetch(self) -> Path:
        """
        Make sure the release artifact is available locally.

        Returns:
            Path to the local artifact.
        """

    @abstractmethod
    def install(self) -> None:
        """Install the component and leave its service running."""

    @abstractmethod
    def is_installed(self) -> bool:
        """
        Check if the component is installed.

        Returns:
            True if the component is installed, False otherwise.
        """
