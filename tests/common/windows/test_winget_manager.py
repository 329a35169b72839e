import subprocess

import pytest

from common.windows.winget_manager import WingetManager
from provisioner.errors import PackageInstallError
from provisioner.models import PackageDescriptor


@pytest.fixture
def manager(app_settings, mock_logger):
    return WingetManager(app_settings, mock_logger)


def test_build_install_command_pins_version(manager):
    descriptor = PackageDescriptor(
        identifier="Git.Git", display_name="Git", version="2.45.0"
    )

    cmd = manager.build_install_command(descriptor)

    assert cmd[:4] == ["winget", "install", "--id", "Git.Git"]
    assert "--silent" in cmd
    assert "--accept-package-agreements" in cmd
    assert cmd[-2:] == ["--version", "2.45.0"]


def test_build_install_command_without_version(manager):
    cmd = manager.build_install_command(
        PackageDescriptor(identifier="Git.Git", display_name="Git")
    )

    assert "--version" not in cmd


def test_install_returns_exit_code(mocker, manager, app_settings):
    run_mock = mocker.patch(
        "common.windows.winget_manager.run_command",
        return_value=subprocess.CompletedProcess([], 0x8A15002B),
    )

    code = manager.install(PackageDescriptor(identifier="A", display_name="A"))

    assert code == 0x8A15002B
    kwargs = run_mock.call_args[1]
    assert kwargs["check"] is False
    assert kwargs["timeout"] == app_settings.install_timeout


@pytest.mark.parametrize(
    "error",
    [FileNotFoundError("winget"), subprocess.TimeoutExpired(["winget"], 10)],
)
def test_install_wraps_launch_failures(mocker, manager, error):
    mocker.patch("common.windows.winget_manager.run_command", side_effect=error)

    with pytest.raises(PackageInstallError):
        manager.install(PackageDescriptor(identifier="A", display_name="A"))


def test_update_sources(mocker, manager):
    run_mock = mocker.patch("common.windows.winget_manager.run_command")

    assert manager.update_sources() is True
    assert run_mock.call_args[0][0] == ["winget", "source", "update"]

    run_mock.side_effect = subprocess.CalledProcessError(1, ["winget"])
    assert manager.update_sources() is False
