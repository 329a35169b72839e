# provisioner/gate.py
# -*- coding: utf-8 -*-
"""
Detects whether the package manager can be resolved on this host.
"""

import logging
from typing import Optional

from common.command_utils import command_exists
from provisioner.config_models import AppSettings

module_logger = logging.getLogger(__name__)


class PackageManagerGate:
    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.logger = logger or module_logger

    def is_manager_available(self) -> bool:
        """True if the manager command resolves. Never raises."""
        command = self.app_settings.manager_command
        try:
            available = command_exists(command)
        except Exception as e:
            self.logger.debug(f"Lookup of '{command}' failed: {e}")
            return False
        self.logger.info(
            f"Package manager '{command}' is {'available' if available else 'not available'}."
        )
        return available
