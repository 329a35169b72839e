# provisioner/main.py
# -*- coding: utf-8 -*-
"""
Main entry point for the workstation provisioner.

Handles argument parsing, logging setup and the sequence of provisioning
stages:

1. Privilege check (fatal).
2. Package manager gate; bootstrap the manager when it is missing (fatal).
   A successful bootstrap ends the run, the operator starts a second run
   from a new shell.
3. WSL enablement (non-fatal).
4. Software catalog installation (non-fatal, per-item bookkeeping).
5. Summary.

Exit codes: 0 when the run completes, even if some packages failed; 1 when
the privilege check or the bootstrap fails; 2 on configuration errors.
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

import yaml

from common.logging_config import setup_logging
from common.orchestrator import Orchestrator
from common.system_utils import ensure_elevated
from provisioner.bootstrapper import PackageManagerBootstrapper
from provisioner.catalog_installer import CatalogInstaller, build_ide_suite_descriptor
from provisioner.config_loader import CONFIG_FILE_DEFAULT, load_app_settings
from provisioner.config_models import AppSettings
from provisioner.errors import FatalBootstrapError, PrivilegeError
from provisioner.feature_enabler import FeatureEnabler
from provisioner.gate import PackageManagerGate
from provisioner.models import (
    AggregateReport,
    InstallOutcome,
    OutcomeStatus,
    PackageDescriptor,
)
from provisioner.reporter import (
    render_bootstrap_complete,
    render_bootstrap_failed,
    report_summary,
)

SERVICE_NAME = "provisioner"

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_CONFIG = 2


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Unattended Windows workstation provisioner: installs winget if needed, "
        "enables WSL 2 and installs the software catalog.",
        epilog="Run from an elevated shell. Example: python provision.py --config config.yaml -v",
    )
    parser.add_argument(
        "--config",
        default=CONFIG_FILE_DEFAULT,
        help="Path to the YAML configuration file. (default: %(default)s)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    parser.add_argument(
        "--log-file", default=None, help="Also write JSON log records to this file."
    )

    overrides = parser.add_argument_group("Configuration Overrides")
    overrides.add_argument(
        "--download-dir", default=None, help="Directory for transient downloads."
    )
    overrides.add_argument(
        "--download-timeout", type=int, default=None, help="Network timeout in seconds."
    )
    overrides.add_argument(
        "--install-timeout", type=int, default=None, help="Per-installer timeout in seconds."
    )
    overrides.add_argument(
        "--skip-features", action="store_true", help="Do not enable WSL."
    )
    overrides.add_argument(
        "--skip-archive-tool", action="store_true", help="Do not install the archive-based tool."
    )

    info = parser.add_argument_group("Information")
    info.add_argument(
        "--view-config", action="store_true", help="Print the resolved configuration and exit."
    )
    info.add_argument(
        "--list-catalog", action="store_true", help="Print the install plan and exit."
    )
    return parser.parse_args(args)


def describe_plan(app_settings: AppSettings) -> str:
    suite = build_ide_suite_descriptor(app_settings)
    tool = app_settings.archive_tool

    lines = ["Software catalog:"]
    lines += [f"  {d.identifier:<40} {d.display_name}" for d in app_settings.catalog]
    lines.append("IDE suite:")
    lines.append(f"  {suite.identifier:<40} {suite.display_name}")
    if tool.enabled:
        lines.append("Archive tool:")
        lines.append(f"  {tool.display_name} {tool.version} -> {tool.install_dir}")
    lines.append("IDE packages:")
    lines += [f"  {d.identifier:<40} {d.display_name}" for d in app_settings.ide_packages]
    return "\n".join(lines)


def bootstrap_manager_task(
    report: AggregateReport,
    logger: logging.Logger,
    context: Dict[str, Any],
    app_settings: AppSettings,
) -> bool:
    """
    Installs the package manager when the gate does not find it.

    Returns True if a bootstrap was performed. In that case the run is
    halted: the manager only becomes resolvable in a new shell.
    """
    if PackageManagerGate(app_settings, logger).is_manager_available():
        return False

    PackageManagerBootstrapper(app_settings, logger).bootstrap()
    report.record(
        InstallOutcome(
            descriptor=PackageDescriptor(
                identifier="Microsoft.DesktopAppInstaller",
                display_name=app_settings.manager_command,
            ),
            status=OutcomeStatus.SUCCEEDED,
        )
    )
    context[Orchestrator.HALT_KEY] = True
    return True


def enable_features_task(
    report: AggregateReport,
    logger: logging.Logger,
    context: Dict[str, Any],
    app_settings: AppSettings,
):
    return FeatureEnabler(app_settings, report, logger).enable()


def install_catalog_task(
    report: AggregateReport,
    logger: logging.Logger,
    context: Dict[str, Any],
    app_settings: AppSettings,
):
    return CatalogInstaller(app_settings, report, logger).run()


def run_provisioning(
    app_settings: AppSettings, logger: logging.Logger
) -> int:
    """Runs the provisioning stages and returns the process exit code."""
    try:
        ensure_elevated(app_settings, logger)
    except PrivilegeError as e:
        print(str(e), file=sys.stderr)
        return EXIT_FATAL

    report = AggregateReport()
    orchestrator = Orchestrator(app_settings, logger)
    stage_args = [report, logger]
    orchestrator.add_task(
        "Package Manager", bootstrap_manager_task, list(stage_args), fatal=True
    )
    orchestrator.add_task(
        "Virtualization Features", enable_features_task, list(stage_args), fatal=False
    )
    orchestrator.add_task(
        "Software Catalog", install_catalog_task, list(stage_args), fatal=False
    )

    try:
        completed = orchestrator.run()
    except FatalBootstrapError as e:
        print(render_bootstrap_failed(e, app_settings))
        return EXIT_FATAL

    report_summary(report, app_settings, logger)
    if not completed:
        print(render_bootstrap_complete(app_settings))
    return EXIT_OK


def main(args: Optional[List[str]] = None) -> int:
    parsed_args = parse_args(args)
    logger = setup_logging(
        SERVICE_NAME,
        log_level="DEBUG" if parsed_args.verbose else None,
        enable_file=bool(parsed_args.log_file),
        log_file_path=parsed_args.log_file,
    )

    try:
        app_settings = load_app_settings(parsed_args, parsed_args.config, logger)
    except SystemExit as e:
        print(str(e), file=sys.stderr)
        return EXIT_CONFIG

    if app_settings.log_prefix:
        logger = setup_logging(
            SERVICE_NAME,
            log_level="DEBUG" if parsed_args.verbose else None,
            enable_file=bool(parsed_args.log_file),
            log_file_path=parsed_args.log_file,
            log_prefix=app_settings.log_prefix,
        )

    if parsed_args.view_config:
        print(yaml.safe_dump(app_settings.model_dump(mode="json"), sort_keys=False))
        return EXIT_OK
    if parsed_args.list_catalog:
        print(describe_plan(app_settings))
        return EXIT_OK

    return run_provisioning(app_settings, logger)


if __name__ == "__main__":
    sys.exit(main())
