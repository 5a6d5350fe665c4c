# docker_binary_installer/templates.py
# -*- coding: utf-8 -*-
"""
Rendering of the generated configuration files.

Everything here is pure: functions take settings or records and return
structured data or text, so file contents can be checked without touching
the file system.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from docker_binary_installer.config_models import InstallerSettings

CGROUP_DRIVER_SYSTEMD = "systemd"
CGROUP_DRIVER_CGROUPFS = "cgroupfs"
SYSTEMD_DRIVER_MIN_MAJOR = 20


@dataclass(frozen=True)
class UnitFile:
    """Fields of the dockerd systemd service unit."""

    exec_start: str
    description: str = "Docker Application Container Engine"
    documentation: str = "https://docs.docker.com"
    after: Tuple[str, ...] = ("network-online.target", "firewalld.service")
    wants: Tuple[str, ...] = ("network-online.target",)
    service_type: str = "notify"
    environment_path: str = "/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin"
    exec_start_post: str = "/sbin/iptables -I FORWARD -s 0.0.0.0/0 -j ACCEPT"
    exec_reload: str = "/bin/kill -s HUP $MAINPID"
    restart: str = "on-failure"
    restart_sec: int = 5
    limits: Dict[str, str] = field(
        default_factory=lambda: {
            "LimitNOFILE": "infinity",
            "LimitNPROC": "infinity",
            "LimitCORE": "infinity",
        }
    )
    delegate: bool = True
    kill_mode: str = "process"
    wanted_by: str = "multi-user.target"


def build_unit_file(settings: InstallerSettings) -> UnitFile:
    """Unit record for a dockerd installed into the configured bin directory."""
    return UnitFile(exec_start=str(settings.bin_dir / "dockerd"))


def render_unit_file(unit: UnitFile) -> str:
    """Serialize a UnitFile as systemd INI text."""
    lines: List[str] = [
        "[Unit]",
        f"Description={unit.description}",
        f"Documentation={unit.documentation}",
        f"After={' '.join(unit.after)}",
        f"Wants={' '.join(unit.wants)}",
        "",
        "[Service]",
        f"Type={unit.service_type}",
        f'Environment="PATH={unit.environment_path}"',
        f"ExecStart={unit.exec_start}",
        f"ExecStartPost={unit.exec_start_post}",
        f"ExecReload={unit.exec_reload}",
        f"Restart={unit.restart}",
        f"RestartSec={unit.restart_sec}",
    ]
    lines.extend(f"{key}={value}" for key, value in unit.limits.items())
    lines.extend(
        [
            f"Delegate={'yes' if unit.delegate else 'no'}",
            f"KillMode={unit.kill_mode}",
            "",
            "[Install]",
            f"WantedBy={unit.wanted_by}",
            "",
        ]
    )
    return "\n".join(lines)


def cgroup_driver_for_version(version: str) -> str:
    """systemd for Docker 20 and later, cgroupfs before that."""
    major = int(version.strip().split(".", 1)[0])
    if major >= SYSTEMD_DRIVER_MIN_MAJOR:
        return CGROUP_DRIVER_SYSTEMD
    return CGROUP_DRIVER_CGROUPFS


def build_daemon_config(settings: InstallerSettings) -> Dict[str, Any]:
    """daemon.json contents as an ordered mapping."""
    daemon = settings.daemon
    return {
        "exec-opts": [f"native.cgroupdriver={cgroup_driver_for_version(settings.version)}"],
        "registry-mirrors": list(daemon.registry_mirrors),
        "insecure-registries": list(daemon.insecure_registries),
        "max-concurrent-downloads": daemon.max_concurrent_downloads,
        "log-driver": daemon.log_driver,
        "log-level": daemon.log_level,
        "log-opts": dict(daemon.log_opts),
        "data-root": daemon.data_root,
    }


def render_daemon_config(config: Dict[str, Any]) -> str:
    """
    Serialize daemon.json with one top-level key per line.

    Values stay on a single line (``"exec-opts": ["native.cgroupdriver=systemd"]``)
    unlike ``json.dumps(indent=...)``, which would split every list.
    """
    if not config:
        return "{}\n"
    body = ",\n".join(f"  {json.dumps(key)}: {json.dumps(value)}" for key, value in config.items())
    return "{\n" + body + "\n}\n"
