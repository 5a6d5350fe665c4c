# docker_binary_installer/installer.py
# -*- coding: utf-8 -*-
"""
Docker static binary installer.

Fetches the release tarball, places the binaries, writes the systemd unit
and daemon.json, disables SELinux where present, and starts the service.
"""

import logging
import subprocess
import time
from pathlib import Path
from typing import List, Optional

from docker_binary_installer.base_installer import BaseInstaller
from docker_binary_installer.common.command_utils import (
    describe_command_error,
    get_symbols,
    log_message,
    run_command,
    run_elevated_command,
)
from docker_binary_installer.common.file_utils import ensure_directory, write_file
from docker_binary_installer.config_models import InstallerSettings
from docker_binary_installer.downloader import CommandDownloader, Downloader
from docker_binary_installer.exceptions import MissingArchiveError, StepFailure
from docker_binary_installer.selinux import disable_selinux
from docker_binary_installer.service_manager import ServiceManager, SystemctlServiceManager
from docker_binary_installer.templates import (
    build_daemon_config,
    build_unit_file,
    cgroup_driver_for_version,
    render_daemon_config,
    render_unit_file,
)
from docker_binary_installer.urls import archive_filename, resolve_download_url

EXTRACTED_DIR_NAME = "docker"
# UnicodeDecodeError covers a non-UTF-8 /etc/selinux/config
STEP_ERRORS = (subprocess.CalledProcessError, OSError, UnicodeDecodeError)


class DockerBinaryInstaller(BaseInstaller):
    """
    Installer for the Docker Engine static binaries.

    The archive in the work directory is the only cache: if it exists it is
    used as-is. A service that is already active is left untouched.
    """

    def __init__(
        self,
        settings: InstallerSettings,
        downloader: Optional[Downloader] = None,
        service_manager: Optional[ServiceManager] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the installer.

        Args:
            settings: Resolved installer settings; ``arch`` must be set.
            downloader: Fetches the archive. Defaults to wget/curl.
            service_manager: Controls the service. Defaults to systemctl.
            logger: Optional logger instance.
        """
        super().__init__(settings, logger)
        if not settings.arch:
            raise ValueError("settings.arch must be resolved before constructing the installer")
        self.downloader = downloader or CommandDownloader(settings, logger=self.logger)
        self.service_manager = service_manager or SystemctlServiceManager(settings, logger=self.logger)
        self.symbols = get_symbols(settings)

    @property
    def archive_path(self) -> Path:
        return Path(self.settings.work_dir) / archive_filename(self.settings.version)

    @property
    def download_url(self) -> str:
        return resolve_download_url(self.settings.mirror, self.settings.arch, self.settings.version)

    def fetch(self) -> Path:
        """
        Download the release archive unless it is already in the work directory.

        Raises:
            DownloadError: If the downloader fails.
        """
        archive = self.archive_path
        if archive.is_file():
            log_message(
                f"{self.symbols.get('info', 'ℹ️')} {archive} already exists, skipping download.",
                "info",
                self.logger,
                self.settings,
            )
            return archive

        self.downloader.fetch(self.download_url, archive)
        return archive

    def install(self) -> None:
        """
        Run the full installation.

        Raises:
            DownloadError: If the archive cannot be downloaded.
            MissingArchiveError: If the archive is still absent after fetching.
            StepFailure: If any later step fails.
        """
        log_message(
            f"{self.symbols.get('rocket', '🚀')} Installing Docker {self.settings.version} "
            f"({self.settings.arch}, mirror={self.settings.mirror.value})...",
            "info",
            self.logger,
            self.settings,
        )
        archive = self._ensure_archive()
        self._place_binaries(archive)

        if self.service_manager.is_active(self.settings.service_name):
            log_message(
                f"{self.symbols.get('warning', '⚠️')} {self.settings.service_name} is already running; "
                "leaving its configuration untouched.",
                "warning",
                self.logger,
                self.settings,
            )
            return

        self._write_unit_file()
        self._write_daemon_config()
        self._disable_selinux()
        self._activate_service()

        log_message(
            f"{self.symbols.get('success', '✅')} Docker {self.settings.version} installed.",
            "success",
            self.logger,
            self.settings,
        )

    def is_installed(self) -> bool:
        return (Path(self.settings.bin_dir) / "dockerd").is_file() and Path(self.settings.unit_file_path).is_file()

    def _ensure_archive(self) -> Path:
        archive = self.archive_path
        if not archive.is_file():
            self.fetch()
        if not archive.is_file():
            raise MissingArchiveError(archive)
        return archive

    def _extracted_binaries(self) -> List[Path]:
        extracted = Path(self.settings.work_dir) / EXTRACTED_DIR_NAME
        if not extracted.is_dir():
            return []
        return sorted(p for p in extracted.iterdir() if p.is_file())

    def _place_binaries(self, archive: Path) -> None:
        step = "extract"
        log_message(
            f"{self.symbols.get('step', '➡️')} Extracting {archive.name} into {self.settings.bin_dir}...",
            "info",
            self.logger,
            self.settings,
        )
        try:
            run_command(
                ["tar", "-xzf", str(archive), "-C", str(self.settings.work_dir)],
                self.settings,
                current_logger=self.logger,
            )
            binaries = self._extracted_binaries()
            if not binaries:
                raise StepFailure(step, f"no binaries found under {Path(self.settings.work_dir) / EXTRACTED_DIR_NAME}")
            ensure_directory(self.settings.bin_dir, self.settings, current_logger=self.logger)
            run_elevated_command(
                ["cp", "-f", *[str(p) for p in binaries], str(self.settings.bin_dir)],
                self.settings,
                current_logger=self.logger,
            )
        except STEP_ERRORS as e:
            raise StepFailure(step, describe_command_error(e)) from e

        log_message(
            f"{self.symbols.get('success', '✅')} Installed {', '.join(p.name for p in binaries)}.",
            "success",
            self.logger,
            self.settings,
        )

    def _write_unit_file(self) -> None:
        content = render_unit_file(build_unit_file(self.settings))
        try:
            ensure_directory(Path(self.settings.unit_file_path).parent, self.settings, current_logger=self.logger)
            write_file(self.settings.unit_file_path, content, self.settings, current_logger=self.logger)
        except STEP_ERRORS as e:
            raise StepFailure("unit-file", describe_command_error(e)) from e

    def _write_daemon_config(self) -> None:
        log_message(
            f"{self.symbols.get('gear', '⚙️')} Using cgroup driver "
            f"{cgroup_driver_for_version(self.settings.version)} for Docker {self.settings.version}.",
            "info",
            self.logger,
            self.settings,
        )
        content = render_daemon_config(build_daemon_config(self.settings))
        try:
            ensure_directory(self.settings.config_dir, self.settings, current_logger=self.logger)
            write_file(self.settings.daemon_config_path, content, self.settings, current_logger=self.logger)
        except STEP_ERRORS as e:
            raise StepFailure("daemon-config", describe_command_error(e)) from e

    def _disable_selinux(self) -> None:
        try:
            disable_selinux(self.settings, current_logger=self.logger)
        except STEP_ERRORS as e:
            raise StepFailure("selinux", describe_command_error(e)) from e

    def _activate_service(self) -> None:
        service = self.settings.service_name
        log_message(
            f"{self.symbols.get('step', '➡️')} Activating {service} systemd service...",
            "info",
            self.logger,
            self.settings,
        )
        try:
            self.service_manager.enable(service)
            self.service_manager.daemon_reload()
            self.service_manager.restart(service)
        except STEP_ERRORS as e:
            raise StepFailure("start-service", describe_command_error(e)) from e

        time.sleep(self.settings.settle_seconds)

        if self.service_manager.is_active(service):
            log_message(
                f"{self.symbols.get('success', '✅')} {service} service is active.",
                "success",
                self.logger,
                self.settings,
            )
        else:
            log_message(
                f"{self.symbols.get('warning', '⚠️')} {service} not yet reported active after "
                f"{self.settings.settle_seconds:g}s; check `systemctl status {service}`.",
                "warning",
                self.logger,
                self.settings,
            )
