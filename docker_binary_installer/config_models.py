# docker_binary_installer/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for installer configuration.

This module defines the structured settings for the installer, including
defaults, type annotations, and descriptions. Settings are frozen: they are
built once at start-up and passed to every operation.
"""

from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
DOCKER_VERSION_DEFAULT: str = "24.0.5"
SERVICE_NAME_DEFAULT: str = "docker"
DOWNLOAD_RETRIES_DEFAULT: int = 3
SETTLE_SECONDS_DEFAULT: float = 3.0

BIN_DIR_DEFAULT: str = "/usr/bin"
UNIT_FILE_PATH_DEFAULT: str = "/etc/systemd/system/docker.service"
CONFIG_DIR_DEFAULT: str = "/etc/docker"
DAEMON_CONFIG_PATH_DEFAULT: str = "/etc/docker/daemon.json"
SELINUX_CONFIG_PATH_DEFAULT: str = "/etc/selinux/config"

REGISTRY_MIRRORS_DEFAULT: List[str] = [
    "https://docker.mirrors.ustc.edu.cn",
    "https://hub-mirror.c.163.com",
    "https://mirror.baidubce.com",
]
INSECURE_REGISTRIES_DEFAULT: List[str] = ["127.0.0.1"]
MAX_CONCURRENT_DOWNLOADS_DEFAULT: int = 10
LOG_DRIVER_DEFAULT: str = "json-file"
LOG_LEVEL_DEFAULT: str = "warn"
LOG_OPTS_DEFAULT: Dict[str, str] = {"max-size": "10m", "max-file": "3"}
DATA_ROOT_DEFAULT: str = "/var/lib/docker"

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "critical": "🔥",
    "debug": "🐛",
}


class Mirror(str, Enum):
    """Where the release tarball is downloaded from."""

    REGIONAL = "regional"
    DEFAULT = "default"


class Action(str, Enum):
    """The single action performed per invocation."""

    DOWNLOAD = "download"
    INSTALL = "install"


class DaemonSettings(BaseModel):
    """Values written to daemon.json (the cgroup driver is derived from the version)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    registry_mirrors: List[str] = Field(
        default_factory=lambda: list(REGISTRY_MIRRORS_DEFAULT),
        description="Registry mirror URLs for image pulls.",
    )
    insecure_registries: List[str] = Field(
        default_factory=lambda: list(INSECURE_REGISTRIES_DEFAULT),
        description="Registries allowed over plain HTTP.",
    )
    max_concurrent_downloads: int = Field(
        default=MAX_CONCURRENT_DOWNLOADS_DEFAULT,
        description="Maximum concurrent layer downloads per pull.",
    )
    log_driver: str = Field(default=LOG_DRIVER_DEFAULT, description="Container log driver.")
    log_level: str = Field(default=LOG_LEVEL_DEFAULT, description="dockerd log level.")
    log_opts: Dict[str, str] = Field(
        default_factory=lambda: dict(LOG_OPTS_DEFAULT),
        description="Log rotation options (max-size, max-file).",
    )
    data_root: str = Field(default=DATA_ROOT_DEFAULT, description="dockerd storage root.")


class InstallerSettings(BaseSettings):
    """Main installer settings."""

    model_config = SettingsConfigDict(
        env_prefix="DOCKER_INSTALL_",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    version: str = Field(default=DOCKER_VERSION_DEFAULT, description="Docker release version, e.g. 24.0.5.")
    mirror: Mirror = Field(default=Mirror.DEFAULT, description="Download source: 'regional' or 'default'.")
    arch: Optional[str] = Field(
        default=None,
        description="Host architecture as used in release URLs (e.g. x86_64). Detected when unset.",
    )

    work_dir: Path = Field(default_factory=Path.cwd, description="Directory holding the downloaded archive.")
    bin_dir: Path = Field(default=Path(BIN_DIR_DEFAULT), description="Where the Docker binaries are installed.")
    unit_file_path: Path = Field(default=Path(UNIT_FILE_PATH_DEFAULT), description="systemd unit file path.")
    config_dir: Path = Field(default=Path(CONFIG_DIR_DEFAULT), description="Docker configuration directory.")
    daemon_config_path: Path = Field(default=Path(DAEMON_CONFIG_PATH_DEFAULT), description="daemon.json path.")
    selinux_config_path: Path = Field(
        default=Path(SELINUX_CONFIG_PATH_DEFAULT), description="SELinux persistent configuration file."
    )

    service_name: str = Field(default=SERVICE_NAME_DEFAULT, description="systemd service name.")
    download_retries: int = Field(default=DOWNLOAD_RETRIES_DEFAULT, ge=0, description="Retries passed to wget/curl.")
    settle_seconds: float = Field(
        default=SETTLE_SECONDS_DEFAULT, ge=0, description="Wait after restarting the service."
    )

    daemon: DaemonSettings = Field(default_factory=DaemonSettings)

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))

    @field_validator("version")
    @classmethod
    def _version_has_numeric_major(cls, value: str) -> str:
        value = value.strip()
        major = value.split(".", 1)[0]
        if not major.isdigit():
            raise ValueError(f"version '{value}' must start with a numeric major component")
        return value

    @property
    def major_version(self) -> int:
        return int(self.version.split(".", 1)[0])
