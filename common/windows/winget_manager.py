# common/windows/winget_manager.py
# -*- coding: utf-8 -*-
"""
Windows Package Manager (winget) command wrapper.
"""

import logging
import subprocess
from typing import List, Optional

from common.command_utils import run_command
from provisioner.config_models import AppSettings
from provisioner.errors import PackageInstallError
from provisioner.models import PackageDescriptor


class WingetManager:
    """
    A thin wrapper around the Windows Package Manager (winget) command line.

    Only the parts of the command contract the provisioner relies on are
    exposed: silent install by exact id and source refresh. Presence is
    checked by the provisioner's package manager gate.
    """

    SILENT_INSTALL_FLAGS = [
        "--exact",
        "--silent",
        "--accept-source-agreements",
        "--accept-package-agreements",
        "--disable-interactivity",
    ]

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.command = app_settings.manager_command
        self.logger = logger or logging.getLogger(__name__)

    def build_install_command(self, descriptor: PackageDescriptor) -> List[str]:
        cmd = [self.command, "install", "--id", descriptor.identifier]
        cmd += self.SILENT_INSTALL_FLAGS
        if descriptor.version:
            cmd += ["--version", descriptor.version]
        return cmd

    def install(self, descriptor: PackageDescriptor) -> int:
        """
        Installs a single package silently and returns winget's exit code.

        A non-zero exit code is returned, not raised: winget uses non-zero
        codes both for real failures and for "already installed" / "no
        applicable upgrade".

        Raises:
            PackageInstallError: winget could not be started or did not exit
                                 within the install timeout.
        """
        self.logger.info(f"Installing {descriptor} via {self.command}...")
        try:
            result = run_command(
                self.build_install_command(descriptor),
                self.app_settings,
                check=False,
                capture_output=True,
                current_logger=self.logger,
                timeout=self.app_settings.install_timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise PackageInstallError(
                f"Could not run {self.command} for {descriptor.identifier}: {e}"
            ) from e
        return result.returncode

    def update_sources(self) -> bool:
        """
        Refreshes the package sources using 'winget source update'.

        Returns:
            True if successful, False otherwise.
        """
        self.logger.info(f"Updating {self.command} sources...")
        try:
            run_command(
                [self.command, "source", "update"],
                self.app_settings,
                capture_output=True,
                current_logger=self.logger,
                timeout=self.app_settings.download_timeout,
            )
            self.logger.info("Package sources updated successfully.")
            return True
        except (OSError, subprocess.SubprocessError) as e:
            self.logger.warning(f"Failed to update package sources: {e}")
            return False
