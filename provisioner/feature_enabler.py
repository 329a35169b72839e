# provisioner/feature_enabler.py
# -*- coding: utf-8 -*-
"""
Enables the Windows Subsystem for Linux (WSL 2).

Steps, stopping at the first failure:

1. Query 'wsl --status'. Installed and defaulting to version 2: nothing to do.
2. Enable the optional features (WSL, Virtual Machine Platform). Each one
   may ask for a restart, which is recorded on the report.
3. Download the WSL2 kernel update MSI.
4. Install it silently, set the default WSL version, delete the MSI.

Failures are never fatal to the run: they are logged as warnings and the
enabler reports ENABLE_FAILED. Nothing is retried.
"""

import logging
from typing import Callable, Optional

from common.command_utils import get_symbols, log_message
from common.file_utils import cleanup_temp_file, ensure_directory, make_transient_path
from common.network_utils import download_file
from common.windows.optional_features import OptionalFeatures
from provisioner.config_models import AppSettings
from provisioner.errors import NetworkError
from provisioner.models import AggregateReport, FeatureState

module_logger = logging.getLogger(__name__)


class FeatureEnabler:
    def __init__(
        self,
        app_settings: AppSettings,
        report: AggregateReport,
        logger: Optional[logging.Logger] = None,
        features: Optional[OptionalFeatures] = None,
        downloader: Callable = download_file,
    ):
        self.app_settings = app_settings
        self.settings = app_settings.features
        self.report = report
        self.logger = logger or module_logger
        self.features = features or OptionalFeatures(app_settings, self.logger)
        self.downloader = downloader
        self.symbols = get_symbols(app_settings)
        self.state = FeatureState.UNKNOWN

    def enable(self) -> FeatureState:
        if not self.settings.enabled:
            log_message(
                f"{self.symbols.get('info', 'ℹ️')} WSL enablement is disabled in the configuration. Skipping.",
                "info",
                self.logger,
                self.app_settings,
            )
            return self.state

        try:
            self.state = self._enable()
        except NetworkError as e:
            log_message(
                f"{self.symbols.get('warning', '⚠️')} Could not download the WSL kernel update: {e}",
                "warning",
                self.logger,
                self.app_settings,
            )
            self.state = FeatureState.ENABLE_FAILED
        except Exception as e:
            log_message(
                f"{self.symbols.get('warning', '⚠️')} Enabling WSL failed: {e}. Continuing without it.",
                "warning",
                self.logger,
                self.app_settings,
                exc_info=self.logger.isEnabledFor(logging.DEBUG),
            )
            self.state = FeatureState.ENABLE_FAILED
        return self.state

    def _enable(self) -> FeatureState:
        status = self.features.query_wsl_status()
        if status.installed and status.default_version_is_two:
            log_message(
                f"{self.symbols.get('success', '✅')} WSL is already installed with version 2 as default.",
                "info",
                self.logger,
                self.app_settings,
            )
            return FeatureState.ALREADY_ENABLED

        for feature_name in self.settings.optional_features:
            log_message(
                f"{self.symbols.get('gear', '⚙️')} Enabling optional feature '{feature_name}'...",
                "info",
                self.logger,
                self.app_settings,
            )
            if self.features.enable_feature(feature_name):
                self.logger.info(f"'{feature_name}' requires a restart to finish.")
                self.report.mark_restart_required()

        ensure_directory(self.app_settings.download_dir, self.logger)
        msi_path = make_transient_path(
            self.app_settings.download_dir, "wsl_update_x64.msi"
        )
        try:
            self.downloader(
                self.settings.kernel_update_url,
                msi_path,
                timeout=self.app_settings.download_timeout,
                current_logger=self.logger,
            )
            log_message(
                f"{self.symbols.get('package', '📦')} Installing the WSL2 kernel update...",
                "info",
                self.logger,
                self.app_settings,
            )
            if self.features.install_msi(msi_path):
                self.report.mark_restart_required()
            self.features.set_default_wsl_version(self.settings.default_version)
        finally:
            cleanup_temp_file(msi_path, self.logger)

        log_message(
            f"{self.symbols.get('success', '✅')} WSL enabled, default version {self.settings.default_version}.",
            "info",
            self.logger,
            self.app_settings,
        )
        return FeatureState.JUST_ENABLED
