import json

import pytest

from docker_binary_installer.config_models import DaemonSettings, InstallerSettings
from docker_binary_installer.templates import (
    UnitFile,
    build_daemon_config,
    build_unit_file,
    cgroup_driver_for_version,
    render_daemon_config,
    render_unit_file,
)


@pytest.mark.parametrize(
    "version, driver",
    [
        ("19.03.8", "cgroupfs"),
        ("20.10.0", "systemd"),
        ("24.0.5", "systemd"),
        ("18.09.9", "cgroupfs"),
    ],
)
def test_cgroup_driver_for_version(version, driver):
    assert cgroup_driver_for_version(version) == driver


def test_daemon_config_contains_verbatim_lines(settings):
    text = render_daemon_config(build_daemon_config(settings))

    assert '"exec-opts": ["native.cgroupdriver=systemd"]' in text
    assert '"max-concurrent-downloads": 10' in text


def test_daemon_config_is_valid_json_with_expected_keys(settings):
    text = render_daemon_config(build_daemon_config(settings))
    parsed = json.loads(text)

    assert list(parsed) == [
        "exec-opts",
        "registry-mirrors",
        "insecure-registries",
        "max-concurrent-downloads",
        "log-driver",
        "log-level",
        "log-opts",
        "data-root",
    ]
    assert parsed["insecure-registries"] == ["127.0.0.1"]
    assert parsed["log-opts"] == {"max-size": "10m", "max-file": "3"}
    assert parsed["data-root"] == "/var/lib/docker"
    assert parsed["log-driver"] == "json-file"


def test_daemon_config_uses_cgroupfs_for_old_versions(settings):
    old = settings.model_copy(update={"version": "19.03.8"})
    config = build_daemon_config(old)
    assert config["exec-opts"] == ["native.cgroupdriver=cgroupfs"]


def test_daemon_config_honours_overrides():
    custom = InstallerSettings(
        arch="x86_64",
        daemon=DaemonSettings(registry_mirrors=["https://mirror.example"], data_root="/srv/docker"),
    )
    config = build_daemon_config(custom)
    assert config["registry-mirrors"] == ["https://mirror.example"]
    assert config["data-root"] == "/srv/docker"


def test_render_empty_daemon_config():
    assert render_daemon_config({}) == "{}\n"


def test_unit_file_points_at_configured_bin_dir(settings):
    unit = build_unit_file(settings)
    assert unit.exec_start == str(settings.bin_dir / "dockerd")


def test_render_unit_file_sections_and_directives():
    text = render_unit_file(UnitFile(exec_start="/usr/bin/dockerd"))
    lines = text.splitlines()

    assert lines[0] == "[Unit]"
    assert "[Service]" in lines
    assert "[Install]" in lines
    for expected in [
        "Description=Docker Application Container Engine",
        "Documentation=https://docs.docker.com",
        'Environment="PATH=/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin"',
        "ExecStart=/usr/bin/dockerd",
        "ExecStartPost=/sbin/iptables -I FORWARD -s 0.0.0.0/0 -j ACCEPT",
        "ExecReload=/bin/kill -s HUP $MAINPID",
        "Restart=on-failure",
        "RestartSec=5",
        "LimitNOFILE=infinity",
        "LimitNPROC=infinity",
        "LimitCORE=infinity",
        "Delegate=yes",
        "KillMode=process",
        "WantedBy=multi-user.target",
    ]:
        assert expected in lines
    assert text.endswith("\n")
