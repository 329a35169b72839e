# common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions for the provisioner.

This module includes the administrative privilege check that gates every
other provisioning stage.
"""

import ctypes
import logging
import os
import sys
from typing import Optional

from common.command_utils import get_symbols, log_message
from provisioner.config_models import AppSettings
from provisioner.errors import PrivilegeError

module_logger = logging.getLogger(__name__)


def is_elevated() -> bool:
    """
    Returns True when the process has administrative privileges.

    On Windows this asks the shell whether the token is an administrator
    token; elsewhere it checks for an effective user id of 0. Lookup failures
    are reported as not elevated.
    """
    try:
        if sys.platform == "win32":
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        return os.geteuid() == 0
    except (AttributeError, OSError):
        return False


def ensure_elevated(
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Raises PrivilegeError unless the process is elevated.

    Raises:
        PrivilegeError: The process lacks administrative privileges.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    if is_elevated():
        log_message(
            f"{symbols.get('success', '✅')} Running with administrative privileges.",
            "debug",
            logger_to_use,
            app_settings,
        )
        return
    log_message(
        f"{symbols.get('critical', '🔥')} This program must be run from an elevated (Administrator) shell.",
        "critical",
        logger_to_use,
        app_settings,
    )
    raise PrivilegeError(
        "Administrative privileges are required. Re-run from an elevated shell."
    )
