# provisioner/reporter.py
# -*- coding: utf-8 -*-
"""
Renders the end-of-run summary.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols
from provisioner.config_models import AppSettings
from provisioner.errors import FatalBootstrapError
from provisioner.models import AggregateReport

module_logger = logging.getLogger(__name__)

RULE = "=" * 64


def render_summary(
    report: AggregateReport, app_settings: Optional[AppSettings] = None
) -> str:
    symbols = get_symbols(app_settings)
    lines = [
        RULE,
        "Provisioning summary",
        RULE,
        f"{symbols.get('success', '✅')} Succeeded: {report.success_count}"
        + (
            f" ({report.warning_count} with warnings)"
            if report.warning_count
            else ""
        ),
        f"{symbols.get('error', '❌')} Failed:    {report.failure_count}",
    ]
    for descriptor in report.failed_items:
        lines.append(f"     - {descriptor.display_name}")

    if report.restart_required:
        lines += [
            "",
            "!" * 64,
            f"{symbols.get('restart', '🔁')} RESTART REQUIRED",
            "Windows features were enabled that only take effect after a reboot.",
            "Restart this computer before using WSL or Docker Desktop.",
            "!" * 64,
        ]
    lines.append(RULE)
    return "\n".join(lines)


def render_bootstrap_complete(app_settings: AppSettings) -> str:
    command = app_settings.manager_command
    return "\n".join(
        [
            RULE,
            f"{command} has been installed.",
            "Close this shell, open a new elevated shell and run the provisioner",
            f"again to install the software catalog ({command} is not visible to",
            "this session yet).",
            RULE,
        ]
    )


def render_bootstrap_failed(
    error: FatalBootstrapError, app_settings: AppSettings
) -> str:
    return "\n".join(
        [
            RULE,
            f"Could not install {app_settings.manager_command}: {error}",
            "Install 'App Installer' manually from the Microsoft Store or from",
            f"{app_settings.bootstrap.manual_install_url}, then run the provisioner again.",
            RULE,
        ]
    )


def report_summary(
    report: AggregateReport,
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    logger_to_use = current_logger if current_logger else module_logger
    summary = render_summary(report, app_settings)
    for line in summary.splitlines():
        logger_to_use.info(line)
    if report.restart_required:
        logger_to_use.warning("A restart is required before the new Windows features can be used.")
    return summary
