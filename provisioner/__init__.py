"""
Unattended Windows workstation provisioner.

This package bootstraps the Windows Package Manager when it is missing,
enables WSL 2 and installs a configured software catalog.
"""
