# common/windows/machine_environment.py
# -*- coding: utf-8 -*-
"""
Access to the persisted, machine-wide environment variables.

Values written here are visible to processes started after the change, not
to the current process or its parent shell.
"""

import ctypes
import logging
from typing import Optional

ENVIRONMENT_KEY = r"SYSTEM\CurrentControlSet\Control\Session Manager\Environment"
PATH_VALUE_NAME = "Path"

HWND_BROADCAST = 0xFFFF
WM_SETTINGCHANGE = 0x001A
SMTO_ABORTIFHUNG = 0x0002


class MachineEnvironment:
    """Reads and writes the machine-wide PATH stored in the registry."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def get_path(self) -> str:
        import winreg

        with winreg.OpenKey(
            winreg.HKEY_LOCAL_MACHINE, ENVIRONMENT_KEY, 0, winreg.KEY_READ
        ) as key:
            try:
                value, _ = winreg.QueryValueEx(key, PATH_VALUE_NAME)
            except FileNotFoundError:
                return ""
        return value

    def set_path(self, value: str) -> None:
        import winreg

        with winreg.OpenKey(
            winreg.HKEY_LOCAL_MACHINE, ENVIRONMENT_KEY, 0, winreg.KEY_SET_VALUE
        ) as key:
            winreg.SetValueEx(
                key, PATH_VALUE_NAME, 0, winreg.REG_EXPAND_SZ, value
            )
        self._broadcast_change()

    def _broadcast_change(self) -> None:
        """Tells running applications (Explorer) to reload the environment."""
        try:
            result = ctypes.c_ulong()
            ctypes.windll.user32.SendMessageTimeoutW(
                HWND_BROADCAST,
                WM_SETTINGCHANGE,
                0,
                "Environment",
                SMTO_ABORTIFHUNG,
                5000,
                ctypes.byref(result),
            )
        except (AttributeError, OSError) as e:
            self.logger.debug(f"Could not broadcast environment change: {e}")

    def append_to_path(self, directory: str) -> bool:
        """
        Appends directory to the machine PATH unless the PATH already
        contains it (case-insensitive substring match).

        The read-check-write sequence is not atomic; this process must be the
        only writer while it runs.

        Returns:
            True if PATH was modified, False if the entry was already present.
        """
        current = self.get_path()
        if directory.lower() in current.lower():
            self.logger.info(f"'{directory}' is already on the machine PATH.")
            return False

        separator = "" if not current or current.endswith(";") else ";"
        self.set_path(f"{current}{separator}{directory}")
        self.logger.info(f"Appended '{directory}' to the machine PATH.")
        return True
