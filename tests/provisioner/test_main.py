from unittest.mock import MagicMock

import pytest

from common.windows.winget_manager import WingetManager
from provisioner import main as main_module
from provisioner.bootstrapper import PackageManagerBootstrapper
from provisioner.errors import NetworkError, PackageInstallError, PrivilegeError
from provisioner.main import EXIT_CONFIG, EXIT_FATAL, EXIT_OK, main, run_provisioning


@pytest.fixture
def elevated(mocker):
    return mocker.patch("provisioner.main.ensure_elevated")


@pytest.fixture
def captured_reports(mocker):
    reports = []
    real = main_module.report_summary

    def capture(report, app_settings=None, current_logger=None):
        reports.append(report)
        return real(report, app_settings, current_logger)

    mocker.patch("provisioner.main.report_summary", side_effect=capture)
    return reports


def _manager_present(mocker, present):
    mocker.patch(
        "provisioner.main.PackageManagerGate.is_manager_available",
        return_value=present,
    )


def test_partial_catalog_failure_still_exits_zero(
    mocker, app_settings, mock_logger, elevated, captured_reports
):
    app_settings.features.enabled = False
    app_settings.archive_tool.enabled = False
    app_settings.ide_packages = []
    _manager_present(mocker, True)
    mocker.patch.object(WingetManager, "update_sources", return_value=True)
    install = mocker.patch.object(
        WingetManager,
        "install",
        side_effect=[0, PackageInstallError("could not start"), 0],
    )

    code = run_provisioning(app_settings, mock_logger)

    assert code == EXIT_OK
    assert install.call_count == 3
    report = captured_reports[0]
    assert report.failure_count == 1
    assert [d.identifier for d in report.failed_items] == ["Vendor.B"]
    assert report.success_count == 2


def test_bootstrap_failure_exits_one_without_catalog(
    mocker, app_settings, mock_logger, elevated, capsys
):
    _manager_present(mocker, False)
    mocker.patch("provisioner.bootstrapper.run_powershell")
    mocker.patch("provisioner.bootstrapper.run_command")

    def failing_dependency(url, path, timeout=None, current_logger=None):
        if "UI.Xaml" in url:
            raise NetworkError(url, "connection refused")
        path.write_bytes(b"x")
        return path

    mocker.patch(
        "provisioner.main.PackageManagerBootstrapper",
        side_effect=lambda settings, logger: PackageManagerBootstrapper(
            settings, logger, failing_dependency
        ),
    )
    catalog = mocker.patch("provisioner.main.CatalogInstaller")
    features = mocker.patch("provisioner.main.FeatureEnabler")

    code = run_provisioning(app_settings, mock_logger)

    assert code == EXIT_FATAL
    catalog.assert_not_called()
    features.assert_not_called()
    out = capsys.readouterr().out
    assert "Microsoft.UI.Xaml 2.8" in out
    assert app_settings.bootstrap.manual_install_url in out


def test_successful_bootstrap_halts_run(
    mocker, app_settings, mock_logger, elevated, captured_reports, capsys
):
    _manager_present(mocker, False)
    bootstrapper = MagicMock()
    mocker.patch("provisioner.main.PackageManagerBootstrapper", return_value=bootstrapper)
    catalog = mocker.patch("provisioner.main.CatalogInstaller")

    code = run_provisioning(app_settings, mock_logger)

    assert code == EXIT_OK
    bootstrapper.bootstrap.assert_called_once()
    catalog.assert_not_called()
    assert captured_reports[0].success_count == 1
    assert "winget has been installed." in capsys.readouterr().out


def test_not_elevated_exits_one(mocker, app_settings, mock_logger):
    mocker.patch(
        "provisioner.main.ensure_elevated", side_effect=PrivilegeError("not admin")
    )
    gate = mocker.patch("provisioner.main.PackageManagerGate")

    assert run_provisioning(app_settings, mock_logger) == EXIT_FATAL
    gate.assert_not_called()


def test_feature_failure_does_not_stop_catalog(
    mocker, app_settings, mock_logger, elevated
):
    _manager_present(mocker, True)
    mocker.patch(
        "provisioner.main.FeatureEnabler", side_effect=RuntimeError("unexpected")
    )
    catalog = mocker.patch("provisioner.main.CatalogInstaller")

    assert run_provisioning(app_settings, mock_logger) == EXIT_OK
    catalog.return_value.run.assert_called_once()


def test_main_list_catalog(tmp_path, capsys):
    config = tmp_path / "config.yaml"
    config.write_text(
        "catalog:\n  - identifier: Git.Git\n    display_name: Git\n", encoding="utf-8"
    )

    assert main(["--config", str(config), "--list-catalog"]) == EXIT_OK

    out = capsys.readouterr().out
    assert "Git.Git" in out
    assert "Microsoft.VisualStudio.2022.Community" in out


def test_main_view_config(tmp_path, capsys):
    assert main(["--config", str(tmp_path / "none.yaml"), "--view-config"]) == EXIT_OK

    assert "manager_command: winget" in capsys.readouterr().out


def test_main_configuration_error(tmp_path, capsys):
    config = tmp_path / "config.yaml"
    config.write_text("install_timeout: forever\n", encoding="utf-8")

    assert main(["--config", str(config)]) == EXIT_CONFIG
    assert "Configuration error" in capsys.readouterr().err


def test_main_runs_provisioning(mocker, tmp_path):
    run = mocker.patch("provisioner.main.run_provisioning", return_value=EXIT_OK)

    assert main(["--config", str(tmp_path / "none.yaml"), "--skip-features"]) == EXIT_OK

    settings = run.call_args[0][0]
    assert settings.features.enabled is False
