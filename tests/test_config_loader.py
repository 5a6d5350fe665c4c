import argparse
import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from docker_binary_installer.config_loader import (
    _deep_update,
    detect_architecture,
    load_installer_settings,
    load_yaml_config,
)
from docker_binary_installer.config_models import InstallerSettings, Mirror
from docker_binary_installer.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ["VERSION", "MIRROR", "ARCH", "SETTLE_SECONDS"]:
        monkeypatch.delenv(f"DOCKER_INSTALL_{name}", raising=False)


def cli_namespace(**overrides):
    values = {"docker_version": None, "mirror": None, "arch": None, "work_dir": None}
    values.update(overrides)
    return argparse.Namespace(**values)


def test_deep_update_merges_nested_and_skips_none():
    source = {"a": 1, "nested": {"x": 1, "y": 2}}
    result = _deep_update(source, {"a": None, "nested": {"y": 3}, "b": 4})
    assert result == {"a": 1, "nested": {"x": 1, "y": 3}, "b": 4}


def test_defaults(tmp_path):
    settings = load_installer_settings(
        cli_namespace(arch="x86_64"), config_file_path=str(tmp_path / "missing.yaml")
    )
    assert settings.version == "24.0.5"
    assert settings.mirror is Mirror.DEFAULT
    assert settings.arch == "x86_64"
    assert settings.daemon.max_concurrent_downloads == 10


def test_precedence_env_yaml_cli(tmp_path, monkeypatch):
    monkeypatch.setenv("DOCKER_INSTALL_VERSION", "20.10.0")
    monkeypatch.setenv("DOCKER_INSTALL_SETTLE_SECONDS", "7")
    config_file = tmp_path / "docker-install.yaml"
    config_file.write_text(
        "version: 23.0.1\nmirror: regional\ndaemon:\n  data_root: /srv/docker\n"
    )

    settings = load_installer_settings(
        cli_namespace(docker_version="24.0.5", arch="aarch64"),
        config_file_path=str(config_file),
    )

    assert settings.version == "24.0.5"
    assert settings.mirror is Mirror.REGIONAL
    assert settings.settle_seconds == 7
    assert settings.daemon.data_root == "/srv/docker"
    assert settings.daemon.log_level == "warn"
    assert settings.arch == "aarch64"


def test_architecture_detected_when_unset(mocker, tmp_path):
    detect = mocker.patch(
        "docker_binary_installer.config_loader.detect_architecture", return_value="x86_64"
    )
    settings = load_installer_settings(cli_namespace(), config_file_path=str(tmp_path / "none.yaml"))
    assert settings.arch == "x86_64"
    detect.assert_called_once()


def test_invalid_version_rejected(tmp_path):
    with pytest.raises(ValidationError):
        load_installer_settings(
            cli_namespace(docker_version="latest", arch="x86_64"),
            config_file_path=str(tmp_path / "none.yaml"),
        )


def test_settings_are_frozen():
    settings = InstallerSettings(arch="x86_64")
    with pytest.raises(ValidationError):
        settings.version = "20.10.0"


def test_major_version():
    assert InstallerSettings(version="19.03.8").major_version == 19


def test_load_yaml_config_ignores_bad_files(tmp_path, mock_logger):
    not_a_mapping = tmp_path / "list.yaml"
    not_a_mapping.write_text("- a\n- b\n")
    malformed = tmp_path / "bad.yaml"
    malformed.write_text("version: [unclosed\n")

    assert load_yaml_config(not_a_mapping, mock_logger) == {}
    assert load_yaml_config(malformed, mock_logger) == {}
    assert load_yaml_config(Path(tmp_path / "absent.yaml"), mock_logger) == {}
    assert mock_logger.warning.call_count == 2


def test_detect_architecture(mocker):
    run_command_mock = mocker.patch(
        "docker_binary_installer.config_loader.run_command",
        return_value=MagicMock(stdout="x86_64\n"),
    )
    assert detect_architecture() == "x86_64"
    assert run_command_mock.call_args.args[0] == ["uname", "-m"]


def test_detect_architecture_failure_propagates(mocker):
    mocker.patch(
        "docker_binary_installer.config_loader.run_command",
        side_effect=subprocess.CalledProcessError(returncode=1, cmd=["uname", "-m"]),
    )
    with pytest.raises(subprocess.CalledProcessError):
        detect_architecture()


def test_detect_architecture_empty_output(mocker):
    mocker.patch(
        "docker_binary_installer.config_loader.run_command",
        return_value=MagicMock(stdout="\n"),
    )
    with pytest.raises(ConfigurationError, match="empty architecture"):
        detect_architecture()
