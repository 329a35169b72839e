import pytest

from common.windows.machine_environment import MachineEnvironment


@pytest.fixture
def environment(mocker, mock_logger):
    env = MachineEnvironment(mock_logger)
    mocker.patch.object(env, "set_path")
    return env


def test_append_to_path_adds_separator(mocker, environment):
    mocker.patch.object(environment, "get_path", return_value=r"C:\Windows")

    assert environment.append_to_path(r"C:\Tools\ninja") is True

    environment.set_path.assert_called_once_with(r"C:\Windows;C:\Tools\ninja")


def test_append_to_path_trailing_separator(mocker, environment):
    mocker.patch.object(environment, "get_path", return_value="C:\\Windows;")

    environment.append_to_path(r"C:\Tools\ninja")

    environment.set_path.assert_called_once_with(r"C:\Windows;C:\Tools\ninja")


def test_append_to_path_empty_path(mocker, environment):
    mocker.patch.object(environment, "get_path", return_value="")

    environment.append_to_path(r"C:\Tools\ninja")

    environment.set_path.assert_called_once_with(r"C:\Tools\ninja")


def test_append_to_path_is_case_insensitive_noop(mocker, environment):
    mocker.patch.object(
        environment, "get_path", return_value=r"C:\Windows;c:\tools\NINJA"
    )

    assert environment.append_to_path(r"C:\Tools\ninja") is False

    environment.set_path.assert_not_called()
