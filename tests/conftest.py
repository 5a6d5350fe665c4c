# tests/conftest.py
import logging
from pathlib import Path
from typing import List, Tuple
from unittest.mock import MagicMock

import pytest

from docker_binary_installer.config_models import InstallerSettings, Mirror
from docker_binary_installer.exceptions import DownloadError


class FakeDownloader:
    """Records fetches; creates the destination file unless told to fail."""

    def __init__(self, fail: bool = False, create_file: bool = True):
        self.fail = fail
        self.create_file = create_file
        self.calls: List[Tuple[str, Path]] = []

    def fetch(self, url: str, destination: Path) -> None:
        self.calls.append((url, destination))
        if self.fail:
            raise DownloadError(url, "wget exited with status 8")
        if self.create_file:
            destination.write_bytes(b"fake tarball")


class FakeServiceManager:
    """In-memory service manager; becomes active once restarted."""

    def __init__(self, active: bool = False):
        self.active = active
        self.calls: List[Tuple[str, ...]] = []

    def is_active(self, service: str) -> bool:
        self.calls.append(("is_active", service))
        return self.active

    def enable(self, service: str) -> None:
        self.calls.append(("enable", service))

    def daemon_reload(self) -> None:
        self.calls.append(("daemon_reload",))

    def restart(self, service: str) -> None:
        self.calls.append(("restart", service))
        self.active = True


@pytest.fixture
def settings(tmp_path):
    """Settings with every host path redirected into tmp_path."""
    return InstallerSettings(
        version="24.0.5",
        mirror=Mirror.REGIONAL,
        arch="x86_64",
        work_dir=tmp_path / "work",
        bin_dir=tmp_path / "bin",
        unit_file_path=tmp_path / "systemd" / "docker.service",
        config_dir=tmp_path / "etc-docker",
        daemon_config_path=tmp_path / "etc-docker" / "daemon.json",
        selinux_config_path=tmp_path / "selinux" / "config",
        settle_seconds=0,
    )


@pytest.fixture(autouse=True)
def work_dir(settings):
    settings.work_dir.mkdir(parents=True, exist_ok=True)
    return settings.work_dir


@pytest.fixture
def fake_downloader():
    return FakeDownloader()


@pytest.fixture
def fake_service_manager():
    return FakeServiceManager()


@pytest.fixture
def mock_logger():
    return MagicMock(spec=logging.Logger)
