# provisioner/errors.py
# -*- coding: utf-8 -*-
"""
Exceptions raised by the provisioning stages.

Only FatalBootstrapError and PrivilegeError end a run. The others are caught
where the individual operation runs and turned into an install outcome or a
feature state.
"""


class ProvisioningError(Exception):
    """Base class for provisioner errors."""


class PrivilegeError(ProvisioningError):
    """The process is not running with administrative privileges."""


class NetworkError(ProvisioningError):
    """A download failed at the transport or HTTP level."""

    def __init__(self, url: str, message: str):
        super().__init__(f"Download of {url} failed: {message}")
        self.url = url


class FatalBootstrapError(ProvisioningError):
    """The package manager could not be installed."""

    def __init__(self, artifact_name: str, message: str):
        super().__init__(f"Bootstrap step '{artifact_name}' failed: {message}")
        self.artifact_name = artifact_name


class FeatureEnableError(ProvisioningError):
    """An optional OS feature could not be enabled."""


class PackageInstallError(ProvisioningError):
    """A single package could not be installed."""
