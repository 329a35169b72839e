# provisioner/bootstrapper.py
# -*- coding: utf-8 -*-
"""
Installs the package manager itself when it is missing.

winget ships as an App Installer package that cannot register until its
runtime (VCLibs), its UI dependency (UI.Xaml) and the Windows App Runtime are
present, so the artifacts are always processed in kind order:
RUNTIME, then DEPENDENCY, then MAIN_PACKAGE. Any failure is fatal because no
later stage can run without the manager.

The manager is not re-detected afterwards: a freshly registered App
Installer is only resolvable from a new shell session, so the caller ends the
run and asks the operator to start the program again.
"""

import logging
import subprocess
from typing import Callable, List, Optional

from common.command_utils import get_symbols, log_message, run_command, run_powershell
from common.file_utils import cleanup_temp_file, ensure_directory, make_transient_path
from common.network_utils import download_file
from provisioner.config_models import AppSettings
from provisioner.errors import FatalBootstrapError, NetworkError
from provisioner.models import ArtifactInstallMethod, BootstrapArtifact

module_logger = logging.getLogger(__name__)


def _quote_powershell(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


class PackageManagerBootstrapper:
    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
        downloader: Callable = download_file,
    ):
        self.app_settings = app_settings
        self.logger = logger or module_logger
        self.downloader = downloader
        self.symbols = get_symbols(app_settings)

    def ordered_artifacts(self) -> List[BootstrapArtifact]:
        """Configured artifacts, stably sorted into install order."""
        return sorted(
            self.app_settings.bootstrap.artifacts,
            key=lambda artifact: artifact.kind.rank,
        )

    def bootstrap(self) -> None:
        """
        Downloads and installs every bootstrap artifact in order.

        Raises:
            FatalBootstrapError: Any download or installation failed. Later
                                 artifacts are not attempted.
        """
        artifacts = self.ordered_artifacts()
        log_message(
            f"{self.symbols.get('rocket', '🚀')} Bootstrapping {self.app_settings.manager_command} "
            f"({len(artifacts)} artifacts)...",
            "info",
            self.logger,
            self.app_settings,
        )
        ensure_directory(self.app_settings.download_dir, self.logger)

        for index, artifact in enumerate(artifacts, start=1):
            log_message(
                f"{self.symbols.get('step', '➡️')} [{index}/{len(artifacts)}] "
                f"{artifact.kind.value}: {artifact.name}",
                "info",
                self.logger,
                self.app_settings,
            )
            self._process_artifact(artifact)

        log_message(
            f"{self.symbols.get('success', '✅')} {self.app_settings.manager_command} installed.",
            "info",
            self.logger,
            self.app_settings,
        )

    def _process_artifact(self, artifact: BootstrapArtifact) -> None:
        local_path = make_transient_path(
            self.app_settings.download_dir, artifact.target_file_name
        )
        try:
            artifact.local_path = self.downloader(
                artifact.url,
                local_path,
                timeout=self.app_settings.download_timeout,
                current_logger=self.logger,
            )
            self._install_artifact(artifact)
        except NetworkError as e:
            raise FatalBootstrapError(artifact.name, str(e)) from e
        except subprocess.CalledProcessError as e:
            raise FatalBootstrapError(
                artifact.name, f"installer exited with code {e.returncode}"
            ) from e
        except (OSError, subprocess.SubprocessError) as e:
            raise FatalBootstrapError(artifact.name, str(e)) from e
        finally:
            cleanup_temp_file(local_path, self.logger)

    def _install_artifact(self, artifact: BootstrapArtifact) -> None:
        path = str(artifact.local_path)
        if artifact.method == ArtifactInstallMethod.EXECUTABLE:
            run_command(
                [path] + list(artifact.arguments),
                self.app_settings,
                current_logger=self.logger,
                timeout=self.app_settings.install_timeout,
            )
        else:
            run_powershell(
                f"Add-AppxPackage -Path {_quote_powershell(path)}",
                self.app_settings,
                current_logger=self.logger,
                timeout=self.app_settings.install_timeout,
            )
