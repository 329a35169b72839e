# provisioner/catalog_installer.py
# -*- coding: utf-8 -*-
"""
Installs the software catalog.

Order of work: refresh package sources, the main catalog, the IDE suite, the
archive-based tool and finally the IDE package sub-catalog. Every install
attempt records exactly one outcome on the report and a failure never stops
the remaining entries.

winget's exit code is only trusted in one direction: zero is a success, but a
non-zero code is recorded as SUCCEEDED_WITH_WARNINGS because winget also
returns non-zero for "already installed" and "no newer version". Only an
install that could not be started (or timed out) counts as FAILED.
"""

import logging
from typing import Callable, Iterable, List, Optional

from common.command_utils import get_symbols, log_message
from common.file_utils import (
    cleanup_temp_file,
    ensure_directory,
    extract_archive,
    make_transient_path,
)
from common.network_utils import download_file
from common.windows.machine_environment import MachineEnvironment
from common.windows.winget_manager import WingetManager
from provisioner.config_models import AppSettings
from provisioner.errors import PackageInstallError
from provisioner.models import (
    AggregateReport,
    InstallOutcome,
    OutcomeStatus,
    PackageDescriptor,
)

module_logger = logging.getLogger(__name__)


def build_ide_suite_descriptor(app_settings: AppSettings) -> PackageDescriptor:
    """The IDE suite entry, with the substitute release applied."""
    suite = app_settings.ide_suite
    return PackageDescriptor(
        identifier=suite.identifier_template.format(
            release=suite.substitute_release
        ),
        display_name=f"{suite.display_name} {suite.substitute_release}",
        version=suite.version,
    )


class CatalogInstaller:
    def __init__(
        self,
        app_settings: AppSettings,
        report: AggregateReport,
        logger: Optional[logging.Logger] = None,
        manager: Optional[WingetManager] = None,
        environment: Optional[MachineEnvironment] = None,
        downloader: Callable = download_file,
    ):
        self.app_settings = app_settings
        self.report = report
        self.logger = logger or module_logger
        self.manager = manager or WingetManager(app_settings, self.logger)
        self.environment = environment or MachineEnvironment(self.logger)
        self.downloader = downloader
        self.symbols = get_symbols(app_settings)

    def run(self) -> AggregateReport:
        if not self.manager.update_sources():
            log_message(
                f"{self.symbols.get('warning', '⚠️')} Continuing with possibly stale package sources.",
                "warning",
                self.logger,
                self.app_settings,
            )

        self.install_catalog(self.app_settings.catalog, "software catalog")
        self.install_ide_suite()
        if self.app_settings.archive_tool.enabled:
            self.install_archive_tool()
        self.install_catalog(self.app_settings.ide_packages, "IDE packages")
        return self.report

    def install_catalog(
        self, descriptors: Iterable[PackageDescriptor], label: str = "catalog"
    ) -> List[InstallOutcome]:
        descriptors = list(descriptors)
        log_message(
            f"{self.symbols.get('step', '➡️')} Installing {label} ({len(descriptors)} packages)...",
            "info",
            self.logger,
            self.app_settings,
        )
        return [self.install_package(descriptor) for descriptor in descriptors]

    def install_package(self, descriptor: PackageDescriptor) -> InstallOutcome:
        try:
            exit_code = self.manager.install(descriptor)
        except PackageInstallError as e:
            log_message(
                f"{self.symbols.get('error', '❌')} {descriptor.display_name} failed: {e}",
                "error",
                self.logger,
                self.app_settings,
            )
            return self.report.record(
                InstallOutcome(
                    descriptor=descriptor,
                    status=OutcomeStatus.FAILED,
                    detail=str(e),
                )
            )
        except Exception as e:
            log_message(
                f"{self.symbols.get('error', '❌')} {descriptor.display_name} failed unexpectedly: {e}",
                "error",
                self.logger,
                self.app_settings,
                exc_info=self.logger.isEnabledFor(logging.DEBUG),
            )
            return self.report.record(
                InstallOutcome(
                    descriptor=descriptor,
                    status=OutcomeStatus.FAILED,
                    detail=f"{type(e).__name__}: {e}",
                )
            )

        if exit_code == 0:
            log_message(
                f"{self.symbols.get('success', '✅')} {descriptor.display_name} installed.",
                "info",
                self.logger,
                self.app_settings,
            )
            status = OutcomeStatus.SUCCEEDED
            detail = ""
        else:
            detail = f"{self.manager.command} exited with code {exit_code} ({exit_code & 0xFFFFFFFF:#010x})"
            log_message(
                f"{self.symbols.get('warning', '⚠️')} {descriptor.display_name}: {detail}. "
                "It may already be installed.",
                "warning",
                self.logger,
                self.app_settings,
            )
            status = OutcomeStatus.SUCCEEDED_WITH_WARNINGS
        return self.report.record(
            InstallOutcome(descriptor=descriptor, status=status, detail=detail)
        )

    def install_ide_suite(self) -> InstallOutcome:
        suite = self.app_settings.ide_suite
        if suite.requested_release != suite.substitute_release:
            log_message(
                f"{self.symbols.get('info', 'ℹ️')} {suite.display_name} {suite.requested_release} "
                f"is not available yet; installing {suite.substitute_release} instead.",
                "info",
                self.logger,
                self.app_settings,
            )
        return self.install_package(build_ide_suite_descriptor(self.app_settings))

    def install_archive_tool(self) -> InstallOutcome:
        """
        Installs the archive-based tool: download, extract into the install
        directory (overwriting) and add that directory to the machine PATH.
        """
        tool = self.app_settings.archive_tool
        descriptor = PackageDescriptor(
            identifier=tool.url,
            display_name=f"{tool.display_name} {tool.version}",
        )
        log_message(
            f"{self.symbols.get('package', '📦')} Installing {descriptor.display_name} to {tool.install_dir}...",
            "info",
            self.logger,
            self.app_settings,
        )
        archive_path = make_transient_path(
            self.app_settings.download_dir, tool.url.rsplit("/", 1)[-1]
        )
        try:
            ensure_directory(self.app_settings.download_dir, self.logger)
            ensure_directory(tool.install_dir, self.logger)
            self.downloader(
                tool.url,
                archive_path,
                timeout=self.app_settings.download_timeout,
                current_logger=self.logger,
            )
            extract_archive(archive_path, tool.install_dir, self.logger)
            self.environment.append_to_path(str(tool.install_dir))
        except Exception as e:
            log_message(
                f"{self.symbols.get('error', '❌')} {descriptor.display_name} failed: {e}",
                "error",
                self.logger,
                self.app_settings,
                exc_info=self.logger.isEnabledFor(logging.DEBUG),
            )
            return self.report.record(
                InstallOutcome(
                    descriptor=descriptor,
                    status=OutcomeStatus.FAILED,
                    detail=str(e),
                )
            )
        finally:
            cleanup_temp_file(archive_path, self.logger)

        log_message(
            f"{self.symbols.get('success', '✅')} {descriptor.display_name} installed.",
            "info",
            self.logger,
            self.app_settings,
        )
        return self.report.record(
            InstallOutcome(descriptor=descriptor, status=OutcomeStatus.SUCCEEDED)
        )
