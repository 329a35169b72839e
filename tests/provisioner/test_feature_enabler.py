from unittest.mock import MagicMock

import pytest

from common.windows.optional_features import OptionalFeatures, WslStatus
from provisioner.errors import FeatureEnableError, NetworkError
from provisioner.feature_enabler import FeatureEnabler
from provisioner.models import FeatureState


@pytest.fixture
def features():
    mock = MagicMock(spec=OptionalFeatures)
    mock.query_wsl_status.return_value = WslStatus(
        installed=False, default_version_is_two=False
    )
    mock.enable_feature.return_value = False
    mock.install_msi.return_value = False
    return mock


def _downloader(url, path, timeout=None, current_logger=None):
    path.write_bytes(b"msi")
    return path


def _failing_downloader(url, path, timeout=None, current_logger=None):
    raise NetworkError(url, "HTTP error 404")


def test_already_enabled_skips_everything(app_settings, report, mock_logger, features):
    features.query_wsl_status.return_value = WslStatus(
        installed=True, default_version_is_two=True
    )
    downloader = MagicMock()

    state = FeatureEnabler(
        app_settings, report, mock_logger, features, downloader
    ).enable()

    assert state == FeatureState.ALREADY_ENABLED
    features.enable_feature.assert_not_called()
    downloader.assert_not_called()
    assert report.restart_required is False


def test_just_enabled_marks_restart(app_settings, report, mock_logger, features):
    features.enable_feature.side_effect = [True, False]

    enabler = FeatureEnabler(app_settings, report, mock_logger, features, _downloader)
    state = enabler.enable()

    assert state == FeatureState.JUST_ENABLED
    assert enabler.state == FeatureState.JUST_ENABLED
    assert [c[0][0] for c in features.enable_feature.call_args_list] == [
        "Microsoft-Windows-Subsystem-Linux",
        "VirtualMachinePlatform",
    ]
    features.install_msi.assert_called_once()
    features.set_default_wsl_version.assert_called_once_with(2)
    assert report.restart_required is True
    # the kernel MSI is not left behind
    assert list(app_settings.download_dir.iterdir()) == []


def test_installed_but_version_one_still_runs(app_settings, report, mock_logger, features):
    features.query_wsl_status.return_value = WslStatus(
        installed=True, default_version_is_two=False
    )

    state = FeatureEnabler(
        app_settings, report, mock_logger, features, _downloader
    ).enable()

    assert state == FeatureState.JUST_ENABLED
    assert report.restart_required is False


def test_download_failure_is_not_fatal(app_settings, report, mock_logger, features):
    state = FeatureEnabler(
        app_settings, report, mock_logger, features, _failing_downloader
    ).enable()

    assert state == FeatureState.ENABLE_FAILED
    features.install_msi.assert_not_called()
    mock_logger.warning.assert_called()


def test_restart_flag_survives_later_failure(app_settings, report, mock_logger, features):
    features.enable_feature.side_effect = [True, FeatureEnableError("dism")]

    state = FeatureEnabler(
        app_settings, report, mock_logger, features, _downloader
    ).enable()

    assert state == FeatureState.ENABLE_FAILED
    assert report.restart_required is True


def test_disabled_in_configuration(app_settings, report, mock_logger, features):
    app_settings.features.enabled = False

    state = FeatureEnabler(app_settings, report, mock_logger, features).enable()

    assert state == FeatureState.UNKNOWN
    features.query_wsl_status.assert_not_called()
