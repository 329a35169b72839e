# provisioner/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for provisioner configuration.

This module defines the structured settings for the provisioner, including
the default software catalog, the package manager bootstrap artifacts and
the virtualization feature settings. Values can be overridden by a YAML file,
environment variables or command-line arguments (see config_loader).
"""

import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from provisioner.models import (
    ArtifactInstallMethod,
    ArtifactKind,
    BootstrapArtifact,
    PackageDescriptor,
)

# --- Default Static Values (can be overridden by config file/env/cli) ---
MANAGER_COMMAND_DEFAULT: str = "winget"
MANAGER_MANUAL_INSTALL_URL_DEFAULT: str = "https://aka.ms/getwinget"
DOWNLOAD_DIR_DEFAULT: Path = Path(tempfile.gettempdir()) / "provisioner"
DOWNLOAD_TIMEOUT_DEFAULT: int = 300
INSTALL_TIMEOUT_DEFAULT: int = 3600
LOG_PREFIX_DEFAULT: str = "[PROVISION]"

WSL_KERNEL_UPDATE_URL_DEFAULT: str = (
    "https://wslstorestorage.blob.core.windows.net/wslblob/wsl_update_x64.msi"
)

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅", "error": "❌", "warning": "⚠️", "info": "ℹ️",
    "step": "➡️", "gear": "⚙️", "package": "📦", "rocket": "🚀",
    "sparkles": "✨", "critical": "🔥", "debug": "🐛", "restart": "🔁",
}


def _default_artifacts() -> List[BootstrapArtifact]:
    return [
        BootstrapArtifact(
            name="Microsoft.VCLibs Desktop runtime",
            url="https://aka.ms/Microsoft.VCLibs.x64.14.00.Desktop.appx",
            kind=ArtifactKind.RUNTIME,
            method=ArtifactInstallMethod.APPX,
        ),
        BootstrapArtifact(
            name="Microsoft.UI.Xaml 2.8",
            url="https://github.com/microsoft/microsoft-ui-xaml/releases/download/v2.8.6/Microsoft.UI.Xaml.2.8.x64.appx",
            kind=ArtifactKind.DEPENDENCY,
            method=ArtifactInstallMethod.APPX,
        ),
        BootstrapArtifact(
            name="Windows App Runtime installer",
            url="https://aka.ms/windowsappsdk/1.6/latest/windowsappruntimeinstall-x64.exe",
            kind=ArtifactKind.DEPENDENCY,
            method=ArtifactInstallMethod.EXECUTABLE,
            arguments=["--quiet"],
        ),
        BootstrapArtifact(
            name="Microsoft.DesktopAppInstaller (winget)",
            url="https://aka.ms/getwinget",
            kind=ArtifactKind.MAIN_PACKAGE,
            method=ArtifactInstallMethod.APPX,
            file_name="Microsoft.DesktopAppInstaller.msixbundle",
        ),
    ]


def _default_catalog() -> List[PackageDescriptor]:
    entries = [
        ("Git.Git", "Git"),
        ("Microsoft.PowerShell", "PowerShell 7"),
        ("Microsoft.WindowsTerminal", "Windows Terminal"),
        ("Microsoft.VisualStudioCode", "Visual Studio Code"),
        ("Python.Python.3.12", "Python 3.12"),
        ("OpenJS.NodeJS.LTS", "Node.js LTS"),
        ("Docker.DockerDesktop", "Docker Desktop"),
        ("7zip.7zip", "7-Zip"),
        ("GitHub.cli", "GitHub CLI"),
    ]
    return [PackageDescriptor(identifier=i, display_name=n) for i, n in entries]


def _default_ide_packages() -> List[PackageDescriptor]:
    entries = [
        ("Kitware.CMake", "CMake"),
        ("LLVM.LLVM", "LLVM / Clang"),
        ("Microsoft.DotNet.SDK.8", ".NET 8 SDK"),
        ("JetBrains.Toolbox", "JetBrains Toolbox"),
    ]
    return [PackageDescriptor(identifier=i, display_name=n) for i, n in entries]


class BootstrapSettings(BaseSettings):
    """Package manager bootstrap settings."""
    model_config = SettingsConfigDict(
        env_prefix="PROVISION_BOOTSTRAP_",
        extra="ignore",
    )

    artifacts: List[BootstrapArtifact] = Field(
        default_factory=_default_artifacts,
        description="Artifacts required to install the package manager. Installed in kind order: runtime, dependency, main package.",
    )
    manual_install_url: str = Field(
        default=MANAGER_MANUAL_INSTALL_URL_DEFAULT,
        description="URL shown to the operator when the bootstrap fails.",
    )


class FeatureSettings(BaseSettings):
    """Virtualization subsystem (WSL) settings."""
    model_config = SettingsConfigDict(
        env_prefix="PROVISION_FEATURES_",
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Enable WSL and install its kernel update.")
    optional_features: List[str] = Field(
        default_factory=lambda: ["Microsoft-Windows-Subsystem-Linux", "VirtualMachinePlatform"],
        description="Optional Windows features to enable.",
    )
    kernel_update_url: str = Field(
        default=WSL_KERNEL_UPDATE_URL_DEFAULT,
        description="URL of the WSL2 kernel update MSI.",
    )
    default_version: int = Field(default=2, description="Default WSL version to set.")


class IdeSuiteSettings(BaseSettings):
    """The main IDE suite, installed after the catalog with a release override."""
    model_config = SettingsConfigDict(
        env_prefix="PROVISION_IDE_SUITE_",
        extra="ignore",
    )

    display_name: str = Field(default="Visual Studio Community")
    requested_release: str = Field(
        default="2026",
        description="Release the catalog asks for.",
    )
    substitute_release: str = Field(
        default="2022",
        description="Release actually installed while the requested one is unavailable.",
    )
    identifier_template: str = Field(
        default="Microsoft.VisualStudio.{release}.Community",
        description="Package identifier with a {release} placeholder.",
    )
    version: Optional[str] = Field(default=None, description="Optional exact version pin.")


class ArchiveToolSettings(BaseSettings):
    """Archive-based tool installed outside the package manager."""
    model_config = SettingsConfigDict(
        env_prefix="PROVISION_ARCHIVE_TOOL_",
        extra="ignore",
    )

    enabled: bool = Field(default=True)
    display_name: str = Field(default="Ninja build")
    version: str = Field(default="1.12.1")
    url_template: str = Field(
        default="https://github.com/ninja-build/ninja/releases/download/v{version}/ninja-win.zip",
        description="Archive URL with a {version} placeholder.",
    )
    install_dir: Path = Field(
        default=Path("C:/Tools/ninja"),
        description="Destination directory, appended to the machine PATH.",
    )

    @property
    def url(self) -> str:
        return self.url_template.format(version=self.version)


class AppSettings(BaseSettings):
    """Main provisioner settings."""
    model_config = SettingsConfigDict(
        env_prefix="PROVISION_",
        extra="ignore",
    )

    manager_command: str = Field(
        default=MANAGER_COMMAND_DEFAULT,
        description="Package manager command name.",
    )
    download_dir: Path = Field(
        default=DOWNLOAD_DIR_DEFAULT,
        description="Directory for transient downloads.",
    )
    download_timeout: int = Field(
        default=DOWNLOAD_TIMEOUT_DEFAULT,
        description="Per-request network timeout in seconds.",
    )
    install_timeout: int = Field(
        default=INSTALL_TIMEOUT_DEFAULT,
        description="Per-installer process timeout in seconds.",
    )
    log_prefix: str = Field(default=LOG_PREFIX_DEFAULT)

    catalog: List[PackageDescriptor] = Field(default_factory=_default_catalog)
    ide_packages: List[PackageDescriptor] = Field(default_factory=_default_ide_packages)

    bootstrap: BootstrapSettings = Field(default_factory=BootstrapSettings)
    features: FeatureSettings = Field(default_factory=FeatureSettings)
    ide_suite: IdeSuiteSettings = Field(default_factory=IdeSuiteSettings)
    archive_tool: ArchiveToolSettings = Field(default_factory=ArchiveToolSettings)

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))
