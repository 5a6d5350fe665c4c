from unittest.mock import MagicMock

from docker_binary_installer.service_manager import SystemctlServiceManager


def test_is_active_true_for_active_state(mocker):
    run_command_mock = mocker.patch(
        "docker_binary_installer.service_manager.run_command",
        return_value=MagicMock(returncode=0, stdout="active\n"),
    )

    assert SystemctlServiceManager().is_active("docker") is True
    assert run_command_mock.call_args.args[0] == ["systemctl", "is-active", "docker"]


def test_is_active_false_for_inactive_state(mocker):
    mocker.patch(
        "docker_binary_installer.service_manager.run_command",
        return_value=MagicMock(returncode=3, stdout="inactive\n"),
    )

    assert SystemctlServiceManager().is_active("docker") is False


def test_is_active_false_without_systemctl(mocker, mock_logger):
    mocker.patch(
        "docker_binary_installer.service_manager.run_command",
        side_effect=FileNotFoundError("systemctl"),
    )

    assert SystemctlServiceManager(logger=mock_logger).is_active("docker") is False
    mock_logger.warning.assert_called_once()


def test_mutating_calls_are_elevated(mocker):
    elevated = mocker.patch("docker_binary_installer.service_manager.run_elevated_command")
    manager = SystemctlServiceManager()

    manager.enable("docker")
    manager.daemon_reload()
    manager.restart("docker")

    assert [c.args[0] for c in elevated.call_args_list] == [
        ["systemctl", "enable", "docker.service"],
        ["systemctl", "daemon-reload"],
        ["systemctl", "restart", "docker.service"],
    ]
