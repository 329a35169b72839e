# common/windows/optional_features.py
# -*- coding: utf-8 -*-
"""
Windows optional features (DISM) and the WSL command line.
"""

import logging
import os
import re
import subprocess
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict

from common.command_utils import run_command
from provisioner.config_models import AppSettings
from provisioner.errors import FeatureEnableError

# DISM / msiexec exit codes that mean "done, reboot to finish".
RESTART_EXIT_CODES = frozenset({3010, 1641})

DEFAULT_VERSION_PATTERN = re.compile(r"Default Version:\s*(\d+)", re.IGNORECASE)


class WslStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    installed: bool
    default_version_is_two: bool


def _clean_wsl_output(output: Optional[str]) -> str:
    # wsl.exe writes UTF-16 unless WSL_UTF8 is honoured; decoding that as
    # UTF-8 leaves NUL characters between every letter.
    return (output or "").replace("\x00", "")


class OptionalFeatures:
    """Enables optional Windows features and drives wsl.exe."""

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.logger = logger or logging.getLogger(__name__)

    def _wsl_env(self):
        env = dict(os.environ)
        env["WSL_UTF8"] = "1"
        return env

    def query_wsl_status(self) -> WslStatus:
        """
        Reports whether WSL is installed and defaults to version 2.

        A missing wsl.exe or a failing 'wsl --status' means not installed.
        """
        try:
            result = run_command(
                ["wsl.exe", "--status"],
                self.app_settings,
                check=False,
                capture_output=True,
                current_logger=self.logger,
                env=self._wsl_env(),
                timeout=60,
            )
        except (OSError, subprocess.SubprocessError) as e:
            self.logger.info(f"WSL status unavailable: {e}")
            return WslStatus(installed=False, default_version_is_two=False)

        if result.returncode != 0:
            return WslStatus(installed=False, default_version_is_two=False)

        match = DEFAULT_VERSION_PATTERN.search(_clean_wsl_output(result.stdout))
        return WslStatus(
            installed=True,
            default_version_is_two=bool(match and match.group(1) == "2"),
        )

    def enable_feature(self, feature_name: str) -> bool:
        """
        Enables an optional feature (and its parent features) without
        rebooting.

        Returns:
            True if Windows needs a restart to finish enabling the feature.

        Raises:
            FeatureEnableError: DISM reported a failure.
        """
        result = run_command(
            [
                "dism.exe",
                "/online",
                "/enable-feature",
                f"/featurename:{feature_name}",
                "/all",
                "/norestart",
            ],
            self.app_settings,
            check=False,
            capture_output=True,
            current_logger=self.logger,
            timeout=self.app_settings.install_timeout,
        )
        if result.returncode in RESTART_EXIT_CODES:
            return True
        if result.returncode != 0:
            raise FeatureEnableError(
                f"DISM could not enable '{feature_name}' (exit code {result.returncode})."
            )
        return False

    def install_msi(self, msi_path: Path) -> bool:
        """
        Installs an MSI package silently and waits for it to finish.

        Returns:
            True if the installer asked for a restart.

        Raises:
            FeatureEnableError: msiexec reported a failure.
        """
        result = run_command(
            ["msiexec.exe", "/i", str(msi_path), "/quiet", "/norestart"],
            self.app_settings,
            check=False,
            current_logger=self.logger,
            timeout=self.app_settings.install_timeout,
        )
        if result.returncode in RESTART_EXIT_CODES:
            return True
        if result.returncode != 0:
            raise FeatureEnableError(
                f"msiexec failed for '{msi_path.name}' (exit code {result.returncode})."
            )
        return False

    def set_default_wsl_version(self, version: int) -> None:
        run_command(
            ["wsl.exe", "--set-default-version", str(version)],
            self.app_settings,
            capture_output=True,
            current_logger=self.logger,
            env=self._wsl_env(),
            timeout=300,
        )
