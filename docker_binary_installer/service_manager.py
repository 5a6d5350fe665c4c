# docker_binary_installer/service_manager.py
# -*- coding: utf-8 -*-
"""
Service manager control (systemd).
"""

import logging
from typing import Optional, Protocol

from docker_binary_installer.common.command_utils import (
    get_symbols,
    log_message,
    run_command,
    run_elevated_command,
)
from docker_binary_installer.config_models import InstallerSettings

module_logger = logging.getLogger(__name__)


class ServiceManager(Protocol):
    """The subset of service-manager operations the installer needs."""

    def is_active(self, service: str) -> bool:
        ...

    def enable(self, service: str) -> None:
        ...

    def daemon_reload(self) -> None:
        ...

    def restart(self, service: str) -> None:
        ...


class SystemctlServiceManager:
    """ServiceManager backed by systemctl. Mutating calls raise CalledProcessError."""

    def __init__(
        self,
        settings: Optional[InstallerSettings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.settings = settings
        self.logger = logger or module_logger

    def is_active(self, service: str) -> bool:
        """True when `systemctl is-active` reports the unit as active."""
        try:
            result = run_command(
                ["systemctl", "is-active", service],
                self.settings,
                check=False,
                capture_output=True,
                current_logger=self.logger,
            )
        except FileNotFoundError:
            symbols = get_symbols(self.settings)
            log_message(
                f"{symbols.get('warning', '!')} systemctl not found. Cannot query {service} state.",
                "warning",
                self.logger,
                self.settings,
            )
            return False
        return result.returncode == 0 and (result.stdout or "").strip() == "active"

    def enable(self, service: str) -> None:
        run_elevated_command(
            ["systemctl", "enable", f"{service}.service"],
            self.settings,
            current_logger=self.logger,
        )

    def daemon_reload(self) -> None:
        run_elevated_command(
            ["systemctl", "daemon-reload"],
            self.settings,
            current_logger=self.logger,
        )

    def restart(self, service: str) -> None:
        run_elevated_command(
            ["systemctl", "restart", f"{service}.service"],
            self.settings,
            current_logger=self.logger,
        )
